from unittest.mock import MagicMock

from doctransform.database.models import JobRecord, OptionsSnapshot
from doctransform.processor.exceptions import ExtractionError, JobFailedError, UnsupportedFormatError
from doctransform.processor.models import JobStatus
from doctransform.worker.job_runner import JobRunner


def _make_runner() -> tuple[JobRunner, MagicMock]:
    """Create a JobRunner with a mocked service."""
    mock_service = MagicMock()
    runner = JobRunner(mock_service)
    return runner, mock_service


def _make_job() -> JobRecord:
    return JobRecord(
        id=1,
        document_id=10,
        user_id=5,
        options=OptionsSnapshot(output_format="pdf"),
        status=JobStatus.PROCESSING,
    )


class TestSuccessfulProcessing:
    def test_executes_claimed_job(self) -> None:
        runner, mock_service = _make_runner()
        job = _make_job()

        runner.run(job)

        mock_service.execute.assert_called_once_with(job)


class TestFailedProcessing:
    def test_swallows_job_failure(self) -> None:
        runner, mock_service = _make_runner()
        mock_service.execute.side_effect = JobFailedError(
            1, "extract: ExtractionError: corrupt", ExtractionError("corrupt")
        )

        runner.run(_make_job())  # Should not raise

        mock_service.execute.assert_called_once()

    def test_does_not_retry_permanent_failure(self) -> None:
        runner, mock_service = _make_runner()
        mock_service.execute.side_effect = JobFailedError(
            1, "options: UnsupportedFormatError: txt", UnsupportedFormatError("txt")
        )

        runner.run(_make_job())

        assert mock_service.execute.call_count == 1

    def test_survives_ledger_error(self) -> None:
        runner, mock_service = _make_runner()
        mock_service.execute.side_effect = ConnectionError("db down")

        runner.run(_make_job())  # Should not raise
