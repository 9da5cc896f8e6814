from abc import ABC, abstractmethod
from datetime import datetime

from doctransform.database.models import JobRecord, OptionsSnapshot
from doctransform.processor.exceptions import InvalidTransitionError
from doctransform.processor.models import JobStatus


class BaseJobLedger(ABC):
    """Contract for the durable record of processing attempts.

    Status moves only forward: pending -> processing -> completed | failed.
    Terminal rows are never modified again.
    """

    @abstractmethod
    def create_job(self, document_id: int, user_id: int, options: OptionsSnapshot) -> int:
        """Insert a new job in ``pending`` status and return its id."""

    @abstractmethod
    def claim_job(self, job_id: int) -> bool:
        """Atomically move a job from pending to processing.

        Returns:
            True if this caller won the claim, False if the job was not pending.

        Raises:
            JobNotFoundError: if no job with this id exists.
        """

    @abstractmethod
    def claim_next_job(self) -> JobRecord | None:
        """Claim the oldest pending job, or return None when there is none."""

    @abstractmethod
    def set_status(
        self,
        job_id: int,
        status: JobStatus,
        *,
        artifact_key: str | None = None,
        artifact_url: str | None = None,
        result_text: str | None = None,
        error_message: str | None = None,
        completed_at: datetime | None = None,
    ) -> bool:
        """Record a status transition.

        ``processing`` delegates to :meth:`claim_job`. Terminal statuses are
        applied only to a job currently in ``processing``.

        Raises:
            InvalidTransitionError: if the transition is not allowed.
            JobNotFoundError: if no job with this id exists.
        """

    @abstractmethod
    def get_job(self, job_id: int) -> JobRecord:
        """Fetch one job. Raises JobNotFoundError if missing."""

    @abstractmethod
    def list_jobs_for_document(self, document_id: int) -> list[JobRecord]:
        """Return every job for a document, oldest first."""


def check_terminal_payload(
    job_id: int,
    status: JobStatus,
    artifact_key: str | None,
    artifact_url: str | None,
    completed_at: datetime | None,
) -> None:
    """Reject terminal payloads that break the completed/failed invariants."""
    if not status.is_terminal:
        raise InvalidTransitionError(f"Job {job_id}: '{status.value}' is not terminal")
    if status is JobStatus.COMPLETED and not (artifact_key and artifact_url and completed_at):
        raise InvalidTransitionError(
            f"Job {job_id}: completed requires artifact_key, artifact_url and completed_at"
        )
    if status is JobStatus.FAILED and (artifact_key or artifact_url):
        raise InvalidTransitionError(f"Job {job_id}: failed job cannot reference an artifact")
