import threading
from collections.abc import Callable, Sequence
from concurrent import futures
from datetime import datetime, timezone
from pathlib import Path

from doctransform.config.settings import Settings
from doctransform.database.models import JobRecord
from doctransform.database.repositories.base import BaseJobLedger
from doctransform.database.repositories.documents_repository import DocumentsRepository
from doctransform.encoding.encoder import FormatEncoderFactory
from doctransform.extraction.factory import TextExtractorFactory
from doctransform.logging.logger import Log
from doctransform.processor.exceptions import (
    JobCancelledError,
    JobFailedError,
    StepTimeoutError,
)
from doctransform.processor.models import JobStatus
from doctransform.processor.pipeline import PipelineContext, PipelineStep
from doctransform.processor.steps import (
    ClassifyScanStep,
    EncodeStep,
    ExtractTextStep,
    LoadDocumentStep,
    PublishStep,
    TranslateStep,
)
from doctransform.storage.artifact_store import LocalArtifactStore
from doctransform.storage.file_loader import FileLoader
from doctransform.storage.publisher import ArtifactPublisher
from doctransform.translation.factory import TranslatorFactory

OPTIONS_STAGE = "options"
COMPLETE_STAGE = "complete"


def describe_failure(stage: str, exc: BaseException) -> str:
    """Format the error message stored on a failed job."""
    return f"{stage}: {type(exc).__name__}: {exc}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Processor:
    """Runs one claimed job through the pipeline and records its terminal status.

    Pipeline: load -> classify -> extract -> translate -> encode -> publish.
    Steps run strictly in order. The first failure stops the run, marks the
    job failed with the step name in the message, and raises JobFailedError.
    """

    def __init__(
        self,
        steps: Sequence[PipelineStep],
        ledger: BaseJobLedger,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._steps = list(steps)
        self._ledger = ledger
        self._clock = clock

    def process(
        self,
        job: JobRecord,
        cancel_event: threading.Event | None = None,
    ) -> JobRecord:
        """Run the pipeline for a job already in ``processing`` status.

        Returns:
            The completed job record.

        Raises:
            JobFailedError: if any step fails, times out, or the job is cancelled.
        """
        Log.info(f"Processing document {job.document_id} for job {job.id}")
        stage = OPTIONS_STAGE
        context: PipelineContext | None = None
        try:
            context = PipelineContext(job=job, options=job.options.to_options())
            for step in self._steps:
                stage = step.name
                self._check_cancelled(job.id, cancel_event, stage)
                context = self._run_step(step, context)
            stage = COMPLETE_STAGE
            self._check_cancelled(job.id, cancel_event, stage)
        except Exception as exc:
            raise self._fail(job, stage, exc, context) from exc

        return self._complete(job, context)

    def _run_step(self, step: PipelineStep, context: PipelineContext) -> PipelineContext:
        Log.debug(f"Job {context.job.id}: step '{step.name}' started")
        if step.timeout_seconds is None:
            return step.run(context)
        executor = futures.ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"step-{step.name}")
        try:
            future = executor.submit(step.run, context)
            return future.result(timeout=step.timeout_seconds)
        except futures.TimeoutError as exc:
            raise StepTimeoutError(
                f"step '{step.name}' exceeded {step.timeout_seconds:g}s"
            ) from exc
        finally:
            # A timed-out call keeps running in its thread; its result is discarded.
            executor.shutdown(wait=False, cancel_futures=True)

    @staticmethod
    def _check_cancelled(job_id: int, cancel_event: threading.Event | None, stage: str) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise JobCancelledError(f"job {job_id} cancelled before {stage}")

    def _fail(
        self,
        job: JobRecord,
        stage: str,
        exc: Exception,
        context: PipelineContext | None,
    ) -> JobFailedError:
        message = describe_failure(stage, exc)
        if context is not None and context.artifact is not None:
            Log.warning(f"Job {job.id}: artifact {context.artifact.key} left unreferenced")
        self._ledger.set_status(job.id, JobStatus.FAILED, error_message=message)
        Log.error(f"Job {job.id} marked as failed: {message}")
        return JobFailedError(job.id, message, exc)

    def _complete(self, job: JobRecord, context: PipelineContext | None) -> JobRecord:
        if context is None or context.artifact is None:
            raise RuntimeError(f"Job {job.id}: pipeline finished without publishing an artifact")
        self._ledger.set_status(
            job.id,
            JobStatus.COMPLETED,
            artifact_key=context.artifact.key,
            artifact_url=context.artifact.url,
            result_text=context.result_text,
            completed_at=self._clock(),
        )
        Log.info(f"Job {job.id} completed: {context.artifact.key}")
        return self._ledger.get_job(job.id)


def build_processor(
    settings: Settings,
    ledger: BaseJobLedger,
    files_root: Path | None = None,
) -> Processor:
    """Build a Processor with all required adapters."""
    doc_repo = DocumentsRepository()
    file_loader = FileLoader(
        files_root=files_root if files_root is not None else Path(settings.files_root)
    )
    publisher = ArtifactPublisher(
        LocalArtifactStore(Path(settings.artifacts_root), settings.artifacts_base_url)
    )
    steps: list[PipelineStep] = [
        LoadDocumentStep(file_loader, doc_repo, settings.fetch_timeout_seconds),
        ClassifyScanStep(settings.extract_timeout_seconds),
        ExtractTextStep(
            TextExtractorFactory.create(settings),
            doc_repo,
            settings.extract_timeout_seconds,
        ),
        TranslateStep(TranslatorFactory.create(settings), settings.translate_timeout_seconds),
        EncodeStep(FormatEncoderFactory.create(settings), settings.encode_timeout_seconds),
        PublishStep(publisher, settings.publish_timeout_seconds),
    ]
    return Processor(steps=steps, ledger=ledger)
