"""
Pipeline Orchestrator.

Drives one run through its states:

    INIT -> CONFIG_VALIDATED -> SUMMARY_RESOLVED -> DELIVERED | DELIVERY_SKIPPED -> DONE

with ``FAILED`` reachable from every non-terminal state. Components report
failures as ``Failure`` values; the orchestrator is the only place that
decides whether a run ends. A non-2xx delivery response is a soft failure:
it is logged as a warning and the run still reaches ``DONE``.
"""

import logging
from functools import partial
from typing import Callable, Dict, List, Optional

from config.settings import Settings, get_settings, mask_secret
from services.delivery_client.main import DeliveryClient
from services.repository_inspector.main import RepositoryInspector, read_origin_url
from services.summary_generator.main import SummaryGenerator
from shared.models import (
    CommitRecord,
    DerivedSummary,
    PipelineResult,
    PipelineState,
    RemoteResponse,
    RunConfiguration,
    SummarySource,
    SuppliedSummary,
)
from shared.results import ErrorKind, Failure, Result, Success, truncate

logger = logging.getLogger(__name__)

OutputSink = Callable[[str, str], None]

SUMMARY_OUTPUT = "summary"
RESPONSE_OUTPUT = "response"
STATUS_OUTPUT = "status"


class SummaryPipeline:
    """Runs extraction, summarization and delivery once for a configuration."""

    def __init__(
        self,
        config: RunConfiguration,
        settings: Optional[Settings] = None,
        inspector: Optional[RepositoryInspector] = None,
        generator: Optional[SummaryGenerator] = None,
        delivery: Optional[DeliveryClient] = None,
        output_sink: Optional[OutputSink] = None,
    ):
        self.config = config
        self.settings = settings or get_settings()
        body_limit = self.settings.monitoring.log_body_limit
        self.inspector = inspector or RepositoryInspector(config.repo_path)
        self.generator = generator or SummaryGenerator(
            self.settings.summarizer, body_limit=body_limit
        )
        self.delivery = delivery or DeliveryClient(
            self.settings.delivery,
            remote_url_reader=partial(read_origin_url, config.repo_path),
        )
        self.output_sink = output_sink

        self.state = PipelineState.INIT
        self.history: List[PipelineState] = [PipelineState.INIT]
        self.outputs: Dict[str, str] = {}
        self.warnings: List[str] = []

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline state {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def _publish(self, name: str, value: str) -> None:
        self.outputs[name] = value
        if self.output_sink:
            self.output_sink(name, value)

    def _result(self, failure: Optional[Failure] = None) -> PipelineResult:
        return PipelineResult(
            state=self.state,
            history=list(self.history),
            outputs=dict(self.outputs),
            failure=failure,
            warnings=list(self.warnings),
        )

    def _fail(self, failure: Failure) -> PipelineResult:
        logger.error(f"Run failed ({failure.kind.value}) in {failure.describe()}")
        self._transition(PipelineState.FAILED)
        return self._result(failure)

    def validate_config(self) -> Optional[Failure]:
        config = self.config
        logger.info("Input parameters:")
        logger.info(f"  changes: {'provided' if config.supplied_summary else 'not provided'}")
        logger.info(f"  blackbox-api-key: {mask_secret(config.summary_api_key)}")
        logger.info(f"  api-key: {mask_secret(config.delivery_api_key)}")
        logger.info(f"  api-url: {config.delivery_url or 'not provided'}")
        logger.info(f"  model: {config.model}")

        if not config.summary_api_key.get_secret_value():
            return Failure(
                kind=ErrorKind.CONFIGURATION,
                operation="validate_config",
                message="BlackBox API key is required",
            )
        if not config.delivery_configured:
            logger.info(
                "No API configuration provided - summary will be generated but not sent"
            )
        return None

    def resolve_source(self) -> Result[SummarySource]:
        """Supplied summary if there is one, otherwise the commit to summarize."""
        if self.config.supplied_summary:
            logger.info("Using provided changes data")
            return Success(SuppliedSummary(text=self.config.supplied_summary))

        logger.info("Getting commit changes from git...")
        extracted = self.inspector.extract_commit()
        if not extracted.ok:
            return Failure(
                kind=extracted.kind,
                operation=extracted.operation,
                message=f"{extracted.message}; no changes provided",
                detail=extracted.detail,
            )
        return Success(DerivedSummary(commit=extracted.value))

    async def resolve_summary(self, source: SummarySource) -> Result[str]:
        if isinstance(source, SuppliedSummary):
            return Success(source.text)
        return await self.generator.generate_summary(
            source.commit,
            self.config.summary_api_key.get_secret_value(),
            self.config.model,
        )

    async def deliver(
        self, summary: str, commit: Optional[CommitRecord]
    ) -> Result[RemoteResponse]:
        if not self.config.delivery_configured:
            logger.info("Summary generated successfully (no API call made)")
            self._transition(PipelineState.DELIVERY_SKIPPED)
            return Success(
                RemoteResponse(status_code=200, body=self.settings.delivery.placeholder_response)
            )

        logger.info(f"Sending summary to API: {self.config.delivery_url}")
        delivered = await self.delivery.deliver(
            summary,
            self.config.delivery_url,
            api_key=self.config.delivery_api_key.get_secret_value(),
            commit=commit,
            repository=self.config.repository,
            ref_name=self.config.ref_name,
        )
        if not delivered.ok:
            return delivered

        response = delivered.value
        body_limit = self.settings.monitoring.log_body_limit
        if response.is_success:
            logger.info(f"Successfully sent summary to API (Status: {response.status_code})")
            logger.info(f"Response: {truncate(response.body, body_limit)}")
        else:
            warning = f"API returned non-success status: {response.status_code}"
            logger.warning(warning)
            logger.warning(f"Response: {truncate(response.body, body_limit)}")
            self.warnings.append(warning)
        self._transition(PipelineState.DELIVERED)
        return delivered

    async def run(self) -> PipelineResult:
        """Run every stage once and report where the run ended."""
        failure = self.validate_config()
        if failure:
            return self._fail(failure)
        self._transition(PipelineState.CONFIG_VALIDATED)

        source = self.resolve_source()
        if not source.ok:
            return self._fail(source)
        commit = source.value.commit if isinstance(source.value, DerivedSummary) else None

        summary = await self.resolve_summary(source.value)
        if not summary.ok:
            return self._fail(summary)
        self._transition(PipelineState.SUMMARY_RESOLVED)
        self._publish(SUMMARY_OUTPUT, summary.value)
        logger.info(f"Generated summary: {summary.value}")

        response = await self.deliver(summary.value, commit)
        if not response.ok:
            return self._fail(response)

        self._publish(RESPONSE_OUTPUT, response.value.body)
        self._publish(STATUS_OUTPUT, str(response.value.status_code))
        self._transition(PipelineState.DONE)
        return self._result()
