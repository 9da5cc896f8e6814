import threading
from datetime import datetime, timezone

import pytest

from doctransform.database.models import OptionsSnapshot
from doctransform.database.repositories.memory_job_repository import InMemoryJobRepository
from doctransform.processor.exceptions import InvalidTransitionError, JobNotFoundError
from doctransform.processor.models import JobStatus

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def _make_ledger_with_job() -> tuple[InMemoryJobRepository, int]:
    ledger = InMemoryJobRepository()
    job_id = ledger.create_job(1, 10, OptionsSnapshot(output_format="pdf"))
    return ledger, job_id


def _complete(ledger: InMemoryJobRepository, job_id: int) -> None:
    ledger.set_status(
        job_id,
        JobStatus.COMPLETED,
        artifact_key="processed/k/result.pdf",
        artifact_url="http://x/processed/k/result.pdf",
        result_text="text",
        completed_at=NOW,
    )


class TestCreateAndRead:
    def test_new_job_is_pending(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        job = ledger.get_job(job_id)
        assert job.status is JobStatus.PENDING
        assert job.artifact_key is None
        assert job.completed_at is None
        assert job.created_at is not None

    def test_get_missing_job_raises(self) -> None:
        with pytest.raises(JobNotFoundError):
            InMemoryJobRepository().get_job(42)

    def test_lists_jobs_oldest_first(self) -> None:
        ledger = InMemoryJobRepository()
        first = ledger.create_job(1, 10, OptionsSnapshot(output_format="pdf"))
        ledger.create_job(2, 10, OptionsSnapshot(output_format="pdf"))
        second = ledger.create_job(1, 10, OptionsSnapshot(output_format="docx"))

        jobs = ledger.list_jobs_for_document(1)

        assert [j.id for j in jobs] == [first, second]


class TestClaim:
    def test_first_claim_wins(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        assert ledger.claim_job(job_id) is True
        assert ledger.claim_job(job_id) is False
        assert ledger.get_job(job_id).status is JobStatus.PROCESSING

    def test_set_status_processing_is_a_claim(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        assert ledger.set_status(job_id, JobStatus.PROCESSING) is True
        assert ledger.set_status(job_id, JobStatus.PROCESSING) is False

    def test_concurrent_claims_have_one_winner(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        barrier = threading.Barrier(16)
        results: list[bool] = []
        results_lock = threading.Lock()

        def attempt() -> None:
            barrier.wait()
            won = ledger.claim_job(job_id)
            with results_lock:
                results.append(won)

        threads = [threading.Thread(target=attempt) for _ in range(16)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count(True) == 1

    def test_claim_next_job_takes_oldest_pending(self) -> None:
        ledger = InMemoryJobRepository()
        first = ledger.create_job(1, 10, OptionsSnapshot(output_format="pdf"))
        ledger.create_job(1, 10, OptionsSnapshot(output_format="pdf"))

        job = ledger.claim_next_job()

        assert job is not None
        assert job.id == first
        assert job.status is JobStatus.PROCESSING

    def test_claim_next_job_none_when_empty(self) -> None:
        assert InMemoryJobRepository().claim_next_job() is None

    def test_claim_missing_job_raises(self) -> None:
        with pytest.raises(JobNotFoundError):
            InMemoryJobRepository().claim_job(7)


class TestTerminalTransitions:
    def test_complete_records_payload(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        ledger.claim_job(job_id)

        _complete(ledger, job_id)

        job = ledger.get_job(job_id)
        assert job.status is JobStatus.COMPLETED
        assert job.artifact_key == "processed/k/result.pdf"
        assert job.completed_at == NOW

    def test_cannot_complete_pending_job(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        with pytest.raises(InvalidTransitionError, match="pending"):
            _complete(ledger, job_id)

    def test_terminal_job_is_immutable(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        ledger.claim_job(job_id)
        ledger.set_status(job_id, JobStatus.FAILED, error_message="boom")

        with pytest.raises(InvalidTransitionError):
            _complete(ledger, job_id)
        assert ledger.claim_job(job_id) is False
        assert ledger.get_job(job_id).error_message == "boom"

    def test_completed_requires_artifact_and_timestamp(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        ledger.claim_job(job_id)
        with pytest.raises(InvalidTransitionError, match="artifact_key"):
            ledger.set_status(job_id, JobStatus.COMPLETED, result_text="text")

    def test_failed_cannot_reference_artifact(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        ledger.claim_job(job_id)
        with pytest.raises(InvalidTransitionError, match="artifact"):
            ledger.set_status(
                job_id, JobStatus.FAILED, artifact_key="k", error_message="boom"
            )

    def test_pending_is_not_a_valid_target(self) -> None:
        ledger, job_id = _make_ledger_with_job()
        with pytest.raises(InvalidTransitionError, match="not terminal"):
            ledger.set_status(job_id, JobStatus.PENDING)
