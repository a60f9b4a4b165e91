"""
Summary Generator.

Asks the chat-completions backend for a short, bullet-point summary of a
commit and extracts the generated text from the response.
"""

import json
import logging
from typing import Any, Dict, Optional

import httpx

from config.settings import SummarizerSettings, mask_secret
from shared.http_client import post_with_deadline
from shared.models import CommitRecord
from shared.results import ErrorKind, Failure, Result, Success, truncate

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a technical writer creating concise commit summaries for development teams."
)

PROMPT_TEMPLATE = """Analyze this git commit and provide a concise, professional summary focusing on:
- What changed (key functionality, files, features)
- Why the change was made (purpose, problem solved)
- Impact on users or system

Commit Details:
- Hash: {short_hash}
- Message: {message}
- Files: {files}

Provide a clear, structured summary in 2-4 bullet points."""


def build_prompt(commit: CommitRecord) -> str:
    return PROMPT_TEMPLATE.format(
        short_hash=commit.short_hash,
        message=commit.message,
        files=commit.changed_files,
    )


def build_request_payload(
    commit: CommitRecord, model: str, settings: SummarizerSettings
) -> Dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": build_prompt(commit)},
        ],
        "temperature": settings.temperature,
        "max_tokens": settings.max_tokens,
    }


def _shape_failure(message: str, body: str, body_limit: int) -> Failure:
    logger.error(f"Invalid response from summarization backend: {message}")
    logger.error(f"Raw response: {truncate(body, body_limit)}")
    return Failure(
        kind=ErrorKind.SUMMARIZATION_SHAPE,
        operation="generate_summary",
        message=f"Invalid response format: {message}",
        detail=truncate(body, body_limit),
    )


def parse_summary_response(body: str, body_limit: int = 2000) -> Result[str]:
    """
    Pull ``choices[0].message.content`` out of a completions response.

    Each way the body can be malformed yields a ``SUMMARIZATION_SHAPE``
    failure naming what was missing. The content is returned stripped.
    """
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as e:
        return _shape_failure(f"response is not valid JSON ({e})", body, body_limit)

    if not isinstance(parsed, dict):
        return _shape_failure("response is not a JSON object", body, body_limit)

    choices = parsed.get("choices")
    if not isinstance(choices, list) or not choices:
        return _shape_failure("missing 'choices'", body, body_limit)

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        return _shape_failure("missing 'choices[0].message'", body, body_limit)

    content = message.get("content")
    if not isinstance(content, str):
        return _shape_failure("missing 'choices[0].message.content'", body, body_limit)

    return Success(content.strip())


class SummaryGenerator:
    """Client for the summarization backend."""

    def __init__(
        self,
        settings: Optional[SummarizerSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        body_limit: int = 2000,
    ):
        self.settings = settings or SummarizerSettings()
        self.transport = transport
        self.body_limit = body_limit

    def build_headers(self, content: bytes, api_key: str) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Content-Length": str(len(content)),
            "Authorization": f"Bearer {api_key}",
            "User-Agent": self.settings.user_agent,
        }

    async def generate_summary(self, commit: CommitRecord, api_key: str, model: str) -> Result[str]:
        """Request a summary of ``commit``. Exactly one POST, never retried."""
        payload = build_request_payload(commit, model, self.settings)
        content = json.dumps(payload).encode("utf-8")
        logger.info(
            f"Generating summary for {commit.short_hash} with model '{model}' "
            f"(key {mask_secret(api_key)})"
        )

        result = await post_with_deadline(
            self.settings.completions_url,
            content,
            self.build_headers(content, api_key),
            timeout=self.settings.timeout,
            operation="generate_summary",
            timeout_kind=ErrorKind.SUMMARIZATION_TIMEOUT,
            transport_kind=ErrorKind.SUMMARIZATION_TRANSPORT,
            transport=self.transport,
        )
        if not result.ok:
            return result

        response = result.value
        if not response.is_success:
            logger.warning(f"Summarization backend returned status {response.status_code}")

        summary = parse_summary_response(response.body, self.body_limit)
        if summary.ok:
            logger.info(f"Extracted summary ({len(summary.value)} chars)")
        return summary
