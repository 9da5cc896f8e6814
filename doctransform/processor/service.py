import threading
from pathlib import Path

from doctransform.config.settings import Settings
from doctransform.database.models import JobRecord, OptionsSnapshot
from doctransform.database.repositories.base import BaseJobLedger
from doctransform.database.repositories.documents_repository import DocumentsRepository
from doctransform.logging.logger import Log
from doctransform.notification.notifier import BaseNotifier, create_notifier, notify_safely
from doctransform.processor.exceptions import (
    DocumentNotFoundError,
    InvalidTransitionError,
    JobFailedError,
    ProcessingError,
)
from doctransform.processor.models import (
    DEFAULT_OCR_LANGUAGES,
    NO_LANGUAGE,
    JobStatus,
    Language,
    OutputFormat,
    ProcessingOptions,
)
from doctransform.processor.processor import OPTIONS_STAGE, Processor, build_processor, describe_failure


def _raw_value(value: object, default: str = "") -> str:
    """Text form of a rejected option, as stored on the audit row."""
    if value is None:
        return default
    return str(getattr(value, "value", value))


class JobService:
    """Submission, execution, cancellation and history of processing jobs."""

    def __init__(
        self,
        ledger: BaseJobLedger,
        doc_repo: DocumentsRepository,
        processor: Processor,
        notifier: BaseNotifier,
    ) -> None:
        self._ledger = ledger
        self._doc_repo = doc_repo
        self._processor = processor
        self._notifier = notifier
        self._running: dict[int, threading.Event] = {}
        self._running_lock = threading.Lock()

    def submit(
        self,
        document_id: int,
        user_id: int,
        *,
        output_format: str | OutputFormat,
        translate_from: str | Language | None = NO_LANGUAGE,
        translate_to: str | Language | None = NO_LANGUAGE,
        ocr_languages: str | list[str] | None = DEFAULT_OCR_LANGUAGES,
        preserve_structure: bool = True,
    ) -> int:
        """Validate options and create a pending job.

        Invalid options still leave an audit row: the job is created,
        claimed and failed at once.

        Raises:
            DocumentNotFoundError: if the document is missing or owned by someone else.
            JobFailedError: if the options are invalid.
        """
        document = self._doc_repo.find_by_id(document_id)
        if document.user_id != user_id:
            raise DocumentNotFoundError(f"Document {document_id} not found")

        if isinstance(ocr_languages, list):
            ocr_languages = ",".join(ocr_languages)
        try:
            options = ProcessingOptions.parse(
                output_format=output_format,
                translate_from=translate_from,
                translate_to=translate_to,
                ocr_languages=ocr_languages,
                preserve_structure=preserve_structure,
            )
        except ProcessingError as exc:
            raw = OptionsSnapshot(
                output_format=_raw_value(output_format),
                translate_from=_raw_value(translate_from, NO_LANGUAGE),
                translate_to=_raw_value(translate_to, NO_LANGUAGE),
                ocr_languages=_raw_value(ocr_languages, ""),
                preserve_structure=preserve_structure,
            )
            raise self._reject(document_id, user_id, raw, exc) from exc

        job_id = self._ledger.create_job(document_id, user_id, OptionsSnapshot.from_options(options))
        Log.info(f"Job {job_id} created for document {document_id}")
        return job_id

    def run(self, job_id: int) -> JobRecord:
        """Claim a pending job and process it in the calling thread.

        Raises:
            InvalidTransitionError: if the job was not pending (another worker holds it).
            JobFailedError: if processing fails.
        """
        if not self._ledger.claim_job(job_id):
            current = self._ledger.get_job(job_id)
            raise InvalidTransitionError(
                f"Job {job_id} is '{current.status.value}', not pending"
            )
        return self.execute(self._ledger.get_job(job_id))

    def execute(self, job: JobRecord) -> JobRecord:
        """Process a job that the caller has already claimed."""
        cancel_event = threading.Event()
        with self._running_lock:
            self._running[job.id] = cancel_event
        try:
            notify_safely(
                self._notifier,
                "Document Processing Started",
                f"Processing document {job.document_id} (job {job.id})",
            )
            return self._processor.process(job, cancel_event)
        finally:
            with self._running_lock:
                self._running.pop(job.id, None)

    def cancel(self, job_id: int) -> bool:
        """Signal a running job to stop. Returns False if it is not running here."""
        with self._running_lock:
            event = self._running.get(job_id)
        if event is None:
            return False
        event.set()
        Log.warning(f"Cancellation requested for job {job_id}")
        return True

    def get_job(self, job_id: int) -> JobRecord:
        return self._ledger.get_job(job_id)

    def history(self, document_id: int) -> list[JobRecord]:
        return self._ledger.list_jobs_for_document(document_id)

    def _reject(
        self,
        document_id: int,
        user_id: int,
        raw: OptionsSnapshot,
        exc: ProcessingError,
    ) -> JobFailedError:
        job_id = self._ledger.create_job(document_id, user_id, raw)
        self._ledger.claim_job(job_id)
        message = describe_failure(OPTIONS_STAGE, exc)
        self._ledger.set_status(job_id, JobStatus.FAILED, error_message=message)
        Log.error(f"Job {job_id} rejected: {message}")
        return JobFailedError(job_id, message, exc)


def build_job_service(
    settings: Settings,
    ledger: BaseJobLedger,
    files_root: Path | None = None,
) -> JobService:
    return JobService(
        ledger=ledger,
        doc_repo=DocumentsRepository(),
        processor=build_processor(settings, ledger, files_root=files_root),
        notifier=create_notifier(settings),
    )
