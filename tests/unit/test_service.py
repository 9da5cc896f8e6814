import threading
from unittest.mock import MagicMock

import pytest

from doctransform.database.repositories.documents_repository import DocumentsRepository
from doctransform.database.repositories.memory_job_repository import InMemoryJobRepository
from doctransform.notification.notifier import BaseNotifier
from doctransform.processor.exceptions import (
    DocumentNotFoundError,
    InvalidTransitionError,
    JobFailedError,
    UnsupportedFormatError,
    UnsupportedLanguageError,
)
from doctransform.processor.models import Document, FileType, JobStatus, OutputFormat
from doctransform.processor.processor import Processor
from doctransform.processor.service import JobService


def _make_document(user_id: int = 10) -> Document:
    return Document(
        id=1,
        user_id=user_id,
        original_file_name="report.docx",
        storage_key="uploads/abc/report.docx",
        file_type=FileType.DOCX,
        file_size=512,
    )


def _make_service() -> tuple[JobService, InMemoryJobRepository, MagicMock, MagicMock]:
    """Create a JobService over an in-memory ledger with a mocked processor."""
    ledger = InMemoryJobRepository()
    doc_repo = MagicMock(spec=DocumentsRepository)
    doc_repo.find_by_id.return_value = _make_document()
    mock_processor = MagicMock(spec=Processor)
    mock_processor.process.side_effect = lambda job, cancel_event: job
    notifier = MagicMock(spec=BaseNotifier)
    service = JobService(ledger, doc_repo, mock_processor, notifier)
    return service, ledger, mock_processor, notifier


class TestSubmit:
    def test_creates_pending_job_with_normalized_options(self) -> None:
        service, ledger, _processor, _notifier = _make_service()

        job_id = service.submit(
            1,
            10,
            output_format="PDF",
            translate_from="ENG",
            translate_to="rus",
            ocr_languages=["rus", "eng", "rus"],
        )

        job = ledger.get_job(job_id)
        assert job.status is JobStatus.PENDING
        assert job.document_id == 1
        assert job.user_id == 10
        assert job.options.output_format == "pdf"
        assert job.options.translate_from == "eng"
        assert job.options.translate_to == "rus"
        assert job.options.ocr_languages == "rus,eng"
        assert job.artifact_key is None

    def test_accepts_output_format_enum(self) -> None:
        service, ledger, _processor, _notifier = _make_service()

        job_id = service.submit(1, 10, output_format=OutputFormat.XLSX)

        assert ledger.get_job(job_id).options.output_format == "xlsx"

    def test_resubmission_creates_independent_job(self) -> None:
        service, ledger, _processor, _notifier = _make_service()

        first = service.submit(1, 10, output_format="pdf")
        second = service.submit(1, 10, output_format="docx")

        assert first != second
        assert [job.options.output_format for job in ledger.list_jobs_for_document(1)] == [
            "pdf",
            "docx",
        ]

    def test_rejects_foreign_document(self) -> None:
        service, ledger, _processor, _notifier = _make_service()

        with pytest.raises(DocumentNotFoundError):
            service.submit(1, 99, output_format="pdf")

        assert ledger.list_jobs_for_document(1) == []

    def test_invalid_output_format_leaves_failed_job(self) -> None:
        service, ledger, mock_processor, _notifier = _make_service()

        with pytest.raises(JobFailedError) as exc_info:
            service.submit(1, 10, output_format="txt")

        assert isinstance(exc_info.value.cause, UnsupportedFormatError)
        assert exc_info.value.retryable is False
        job = ledger.get_job(exc_info.value.job_id)
        assert job.status is JobStatus.FAILED
        assert job.options.output_format == "txt"
        assert job.artifact_key is None
        assert job.error_message is not None
        assert job.error_message.startswith("options: UnsupportedFormatError")
        mock_processor.process.assert_not_called()

    def test_invalid_language_leaves_failed_job(self) -> None:
        service, ledger, _processor, _notifier = _make_service()

        with pytest.raises(JobFailedError) as exc_info:
            service.submit(1, 10, output_format="pdf", translate_from="deu", translate_to="eng")

        assert isinstance(exc_info.value.cause, UnsupportedLanguageError)
        assert ledger.get_job(exc_info.value.job_id).status is JobStatus.FAILED

    def test_missing_languages_create_untranslated_job(self) -> None:
        service, ledger, _processor, _notifier = _make_service()

        job_id = service.submit(1, 10, output_format="pdf", translate_from=None, translate_to=None)

        job = ledger.get_job(job_id)
        assert job.status is JobStatus.PENDING
        assert job.options.translate_from == "none"
        assert job.options.translate_to == "none"

    def test_rejected_job_stores_text_options(self) -> None:
        service, ledger, _processor, _notifier = _make_service()

        with pytest.raises(JobFailedError) as exc_info:
            service.submit(1, 10, output_format="txt", translate_from=None, ocr_languages=None)

        job = ledger.get_job(exc_info.value.job_id)
        assert job.status is JobStatus.FAILED
        assert job.options.output_format == "txt"
        assert job.options.translate_from == "none"
        assert job.options.ocr_languages == ""


class TestRun:
    def test_claims_and_processes(self) -> None:
        service, ledger, mock_processor, notifier = _make_service()
        job_id = service.submit(1, 10, output_format="pdf")

        service.run(job_id)

        processed_job = mock_processor.process.call_args.args[0]
        assert processed_job.id == job_id
        assert processed_job.status is JobStatus.PROCESSING
        notifier.notify.assert_called_once()

    def test_refuses_job_that_is_not_pending(self) -> None:
        service, ledger, mock_processor, _notifier = _make_service()
        job_id = service.submit(1, 10, output_format="pdf")
        ledger.claim_job(job_id)

        with pytest.raises(InvalidTransitionError, match="not pending"):
            service.run(job_id)

        mock_processor.process.assert_not_called()

    def test_notification_failure_does_not_fail_job(self) -> None:
        service, _ledger, mock_processor, notifier = _make_service()
        notifier.notify.side_effect = ConnectionError("webhook down")
        job_id = service.submit(1, 10, output_format="pdf")

        service.run(job_id)

        mock_processor.process.assert_called_once()

    def test_propagates_job_failure(self) -> None:
        service, _ledger, mock_processor, _notifier = _make_service()
        mock_processor.process.side_effect = JobFailedError(1, "extract: boom")
        job_id = service.submit(1, 10, output_format="pdf")

        with pytest.raises(JobFailedError, match="extract: boom"):
            service.run(job_id)


class TestCancel:
    def test_returns_false_for_job_not_running(self) -> None:
        service, _ledger, _processor, _notifier = _make_service()
        job_id = service.submit(1, 10, output_format="pdf")

        assert service.cancel(job_id) is False

    def test_signals_running_job(self) -> None:
        service, _ledger, mock_processor, _notifier = _make_service()
        started = threading.Event()
        seen: list[bool] = []

        def process(job, cancel_event: threading.Event):
            started.set()
            seen.append(cancel_event.wait(5))
            return job

        mock_processor.process.side_effect = process
        job_id = service.submit(1, 10, output_format="pdf")
        runner = threading.Thread(target=service.run, args=(job_id,))
        runner.start()
        assert started.wait(5)

        assert service.cancel(job_id) is True
        runner.join(5)

        assert seen == [True]
        assert service.cancel(job_id) is False


class TestQueries:
    def test_get_job_and_history(self) -> None:
        service, _ledger, _processor, _notifier = _make_service()
        first = service.submit(1, 10, output_format="pdf")
        second = service.submit(1, 10, output_format="xlsx")

        assert service.get_job(first).id == first
        assert [job.id for job in service.history(1)] == [first, second]
        assert service.history(2) == []
