"""
Result types and error taxonomy shared by every pipeline component.

Components return ``Success`` or ``Failure`` instead of raising, and the
orchestrator decides which failures end the run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")


class ErrorKind(Enum):
    """Failure categories. All of them are fatal to a run."""
    CONFIGURATION = "configuration"
    EXTRACTION = "extraction"
    SUMMARIZATION_TRANSPORT = "summarization_transport"
    SUMMARIZATION_TIMEOUT = "summarization_timeout"
    SUMMARIZATION_SHAPE = "summarization_shape"
    DELIVERY_TRANSPORT = "delivery_transport"
    DELIVERY_TIMEOUT = "delivery_timeout"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Failure:
    """A classified failure with enough context to diagnose it."""

    kind: ErrorKind
    operation: str
    message: str
    detail: Optional[str] = None
    ok: bool = field(default=False, init=False)

    def describe(self) -> str:
        return f"{self.operation}: {self.message}"


Result = Union[Success[T], Failure]


def truncate(text: str, limit: int) -> str:
    """Shorten a remote body for logs and failure details."""
    if limit <= 0 or len(text) <= limit:
        return text
    return f"{text[:limit]}... ({len(text) - limit} more chars)"
