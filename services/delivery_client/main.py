"""
Delivery Client.

Posts the resolved summary, with repository, commit and branch metadata, to
the collector's ``/generate-content`` endpoint and hands back whatever the
collector answered, whatever the status code.
"""

import json
import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlsplit

import httpx

from config.settings import DeliverySettings, mask_secret
from shared.http_client import post_with_deadline
from shared.models import CommitRecord, RemoteResponse
from shared.results import ErrorKind, Failure, Result

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"https": 443, "http": 80}
UNKNOWN = "unknown"

# host[:port][:/]owner/name[.git][/] at the end of an scp-style or URL remote
REMOTE_PATTERN = re.compile(
    r"[\w-]+(?:\.[\w-]+)+(?::\d+)?[:/](?P<owner>[^/:\s]+)/(?P<name>[^/\s]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True)
class DeliveryEndpoint:
    """Where a delivery request goes, with the port always explicit."""

    scheme: str
    host: str
    port: int
    path: str

    @property
    def url(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.scheme}://{host}:{self.port}{self.path}"


def normalize_delivery_url(target_url: str, suffix: str = "/generate-content") -> str:
    """
    Make sure the path of ``target_url`` ends with ``suffix``.

    Trailing slashes are dropped before the check, the query string is kept
    and the fragment discarded. Normalizing twice gives the same URL.
    """
    parts = urlsplit(target_url.strip())
    if parts.scheme not in DEFAULT_PORTS:
        raise ValueError(f"Unsupported delivery URL scheme: {parts.scheme or '<none>'}")
    if not parts.hostname:
        raise ValueError(f"Delivery URL has no host: {target_url}")

    path = parts.path.rstrip("/")
    if not path.endswith(suffix):
        path = f"{path}{suffix}"
    if parts.query:
        path = f"{path}?{parts.query}"
    return f"{parts.scheme}://{parts.netloc}{path}"


def resolve_endpoint(target_url: str, suffix: str = "/generate-content") -> DeliveryEndpoint:
    """Normalize ``target_url`` and pick transport and port from its scheme."""
    parts = urlsplit(normalize_delivery_url(target_url, suffix))
    path = f"{parts.path}?{parts.query}" if parts.query else parts.path
    return DeliveryEndpoint(
        scheme=parts.scheme,
        host=parts.hostname,
        port=parts.port or DEFAULT_PORTS[parts.scheme],
        path=path,
    )


def extract_repository(remote_url: Optional[str]) -> Optional[str]:
    """``owner/name`` from a remote such as ``git@github.com:owner/repo.git``."""
    if not remote_url:
        return None
    match = REMOTE_PATTERN.search(remote_url.strip())
    if not match:
        return None
    return f"{match.group('owner')}/{match.group('name')}"


def resolve_branch(commit: Optional[CommitRecord], ref_name: str = "") -> str:
    if commit and commit.branch:
        return commit.branch
    return ref_name or UNKNOWN


def iso_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_delivery_payload(
    summary: str,
    repository: str,
    commit: Optional[CommitRecord],
    ref_name: str,
    timestamp: datetime,
) -> Dict[str, Any]:
    return {
        "repository": repository,
        "commit_sha": commit.full_hash if commit else UNKNOWN,
        "branch": resolve_branch(commit, ref_name),
        "summary": summary,
        "timestamp": iso_timestamp(timestamp),
    }


class DeliveryClient:
    """Client for the delivery backend."""

    def __init__(
        self,
        settings: Optional[DeliverySettings] = None,
        remote_url_reader: Optional[Callable[[], Optional[str]]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ):
        self.settings = settings or DeliverySettings()
        self.remote_url_reader = remote_url_reader
        self.transport = transport
        self.clock = clock

    def resolve_repository(self, repository: str = "") -> str:
        """Host-supplied ``owner/name`` first, then the origin remote, then a sentinel."""
        if repository:
            return repository
        remote_url = self.remote_url_reader() if self.remote_url_reader else None
        logger.info(f"Repository not supplied; origin remote is {remote_url or 'not set'}")
        resolved = extract_repository(remote_url)
        if resolved:
            return resolved
        logger.warning(
            f"Could not determine repository, using '{self.settings.unknown_repository}'"
        )
        return self.settings.unknown_repository

    def build_headers(self, content: bytes, api_key: str) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(content)),
            "User-Agent": self.settings.user_agent,
        }
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    async def deliver(
        self,
        summary: str,
        target_url: str,
        api_key: str = "",
        commit: Optional[CommitRecord] = None,
        repository: str = "",
        ref_name: str = "",
    ) -> Result[RemoteResponse]:
        """
        Send ``summary`` to ``target_url``.

        A non-2xx answer is still a ``Success``; only an unusable URL, a
        transport error or the deadline produce a ``Failure``.
        """
        try:
            endpoint = resolve_endpoint(target_url, self.settings.endpoint_suffix)
        except ValueError as e:
            logger.error(f"Invalid delivery URL: {e}")
            return Failure(
                kind=ErrorKind.CONFIGURATION,
                operation="deliver",
                message=f"Invalid delivery URL: {e}",
            )

        payload = build_delivery_payload(
            summary,
            self.resolve_repository(repository),
            commit,
            ref_name,
            self.clock(),
        )
        logger.info(
            f"Delivering summary for {payload['repository']}@{payload['commit_sha']} "
            f"(branch {payload['branch']}, key {mask_secret(api_key)}) "
            f"over {endpoint.scheme.upper()} to {endpoint.host}:{endpoint.port}"
        )
        content = json.dumps(payload).encode("utf-8")

        return await post_with_deadline(
            endpoint.url,
            content,
            self.build_headers(content, api_key),
            timeout=self.settings.timeout,
            operation="deliver",
            timeout_kind=ErrorKind.DELIVERY_TIMEOUT,
            transport_kind=ErrorKind.DELIVERY_TRANSPORT,
            transport=self.transport,
        )
