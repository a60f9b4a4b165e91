"""
Data models for the commit summary pipeline.

This module provides the values that flow through a single run:
- The commit record read from the local repository
- The response returned by either remote backend
- The run configuration frozen at process start
- The summary source resolved before summarization and delivery
- The pipeline states and the final run result
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SecretStr, computed_field

from shared.results import Failure


SHORT_HASH_LENGTH = 8


class CommitRecord(BaseModel):
    """Snapshot of the most recent commit."""

    model_config = ConfigDict(frozen=True)

    message: str = Field(..., description="Subject line of the commit")
    full_hash: str = Field(..., min_length=1, description="Full commit hash")
    changed_files: str = Field(default="", description="Name-status lines, one per file")
    touched_paths: str = Field(default="", description="Paths touched by the commit, one per line")
    branch: str = Field(default="", description="Current branch, empty when detached")

    @computed_field
    @property
    def short_hash(self) -> str:
        return self.full_hash[:SHORT_HASH_LENGTH]

    @property
    def changed_file_count(self) -> int:
        return len([line for line in self.changed_files.splitlines() if line.strip()])


class RemoteResponse(BaseModel):
    """Response from a remote backend. Set for every status code, not only 2xx."""

    model_config = ConfigDict(frozen=True)

    status_code: int
    headers: Dict[str, Union[str, List[str]]] = Field(default_factory=dict)
    body: str = ""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @classmethod
    def from_httpx(cls, response) -> "RemoteResponse":
        """Build from an ``httpx.Response``; repeated headers collapse into lists."""
        headers: Dict[str, Union[str, List[str]]] = {}
        for name in response.headers.keys():
            values = response.headers.get_list(name)
            headers[name.lower()] = values[0] if len(values) == 1 else values
        return cls(status_code=response.status_code, headers=headers, body=response.text)


class RunConfiguration(BaseModel):
    """Configuration for one run, built once from host inputs and the environment."""

    model_config = ConfigDict(frozen=True)

    supplied_summary: str = ""
    summary_api_key: SecretStr = SecretStr("")
    delivery_api_key: SecretStr = SecretStr("")
    delivery_url: str = ""
    model: str = "blackboxai"
    repository: str = ""
    ref_name: str = ""
    repo_path: str = "."

    @property
    def delivery_configured(self) -> bool:
        # Only the URL is required; the api key merely adds an Authorization header.
        return bool(self.delivery_url)


class SuppliedSummary(BaseModel):
    """Summary passed in by the caller, used verbatim."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["supplied"] = "supplied"
    text: str


class DerivedSummary(BaseModel):
    """Summary still to be generated from a commit record."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["derived"] = "derived"
    commit: CommitRecord


SummarySource = Union[SuppliedSummary, DerivedSummary]


class PipelineState(Enum):
    """Orchestrator states."""
    INIT = "init"
    CONFIG_VALIDATED = "config_validated"
    SUMMARY_RESOLVED = "summary_resolved"
    DELIVERED = "delivered"
    DELIVERY_SKIPPED = "delivery_skipped"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class PipelineResult:
    """Outcome of a run."""

    state: PipelineState
    history: List[PipelineState] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)
    failure: Optional[Failure] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.state is PipelineState.DONE

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1
