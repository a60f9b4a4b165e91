"""
Outbound HTTP with a hard deadline.

Both backends are reached through ``post_with_deadline``: one POST, the whole
body read, and the connection torn down when the deadline passes. Timeouts
and transport errors come back as distinct ``Failure`` kinds chosen by the
caller.
"""

import asyncio
import logging
from typing import Dict, Optional

import httpx

from shared.models import RemoteResponse
from shared.results import ErrorKind, Failure, Result, Success

logger = logging.getLogger(__name__)


def redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy of ``headers`` safe to log: bearer tokens keep only a short prefix."""
    redacted = {}
    for name, value in headers.items():
        if name.lower() == "authorization":
            scheme, _, token = value.partition(" ")
            value = f"{scheme} {token[:8]}..." if token else "***"
        redacted[name] = value
    return redacted


async def post_with_deadline(
    url: str,
    content: bytes,
    headers: Dict[str, str],
    timeout: float,
    operation: str,
    timeout_kind: ErrorKind,
    transport_kind: ErrorKind,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Result[RemoteResponse]:
    """
    POST ``content`` to ``url`` and return the full response.

    ``timeout`` bounds both socket inactivity and the call as a whole. When
    it fires the request task is cancelled, and leaving the client context
    closes the connection instead of waiting for a graceful shutdown.
    """
    logger.info(f"{operation}: POST {url} ({len(content)} bytes)")
    logger.debug(f"{operation}: request headers {redact_headers(headers)}")

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await asyncio.wait_for(
                client.post(url, content=content, headers=headers), timeout=timeout
            )
    except (asyncio.TimeoutError, httpx.TimeoutException) as e:
        logger.error(f"{operation}: request timed out after {timeout:g}s")
        return Failure(
            kind=timeout_kind,
            operation=operation,
            message=f"Request timed out after {timeout:g} seconds",
            detail=str(e) or None,
        )
    except httpx.RequestError as e:
        logger.error(f"{operation}: request failed: {e!r}")
        return Failure(
            kind=transport_kind,
            operation=operation,
            message=f"Request failed: {e or type(e).__name__}",
        )
    except (httpx.HTTPError, httpx.InvalidURL, UnicodeError, ValueError) as e:
        # The exception text can quote header values, so only its type is reported.
        logger.error(f"{operation}: could not send request ({type(e).__name__})")
        return Failure(
            kind=transport_kind,
            operation=operation,
            message=f"Could not send request: {type(e).__name__} (check URL and credentials)",
        )

    remote = RemoteResponse.from_httpx(response)
    logger.info(
        f"{operation}: response {remote.status_code} {response.reason_phrase} "
        f"({len(remote.body)} chars)"
    )
    return Success(remote)
