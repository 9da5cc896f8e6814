import itertools
import threading
from dataclasses import replace
from datetime import datetime, timezone

from doctransform.database.models import JobRecord, OptionsSnapshot
from doctransform.database.repositories.base import BaseJobLedger, check_terminal_payload
from doctransform.processor.exceptions import InvalidTransitionError, JobNotFoundError
from doctransform.processor.models import JobStatus


class InMemoryJobRepository(BaseJobLedger):
    """Process-local job ledger guarded by a single lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._jobs: dict[int, JobRecord] = {}
        self._ids = itertools.count(1)

    def create_job(self, document_id: int, user_id: int, options: OptionsSnapshot) -> int:
        with self._lock:
            job_id = next(self._ids)
            self._jobs[job_id] = JobRecord(
                id=job_id,
                document_id=document_id,
                user_id=user_id,
                options=options,
                status=JobStatus.PENDING,
                created_at=datetime.now(timezone.utc),
            )
        return job_id

    def claim_job(self, job_id: int) -> bool:
        with self._lock:
            job = self._require(job_id)
            if job.status is not JobStatus.PENDING:
                return False
            self._jobs[job_id] = replace(job, status=JobStatus.PROCESSING)
        return True

    def claim_next_job(self) -> JobRecord | None:
        with self._lock:
            pending = [j for j in self._jobs.values() if j.status is JobStatus.PENDING]
            if not pending:
                return None
            job = replace(min(pending, key=lambda j: j.id), status=JobStatus.PROCESSING)
            self._jobs[job.id] = job
        return job

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
        if status is JobStatus.PROCESSING:
            return self.claim_job(job_id)
        check_terminal_payload(job_id, status, artifact_key, artifact_url, completed_at)
        with self._lock:
            job = self._require(job_id)
            if job.status is not JobStatus.PROCESSING:
                raise InvalidTransitionError(
                    f"Job {job_id}: cannot move from '{job.status.value}' to '{status.value}'"
                )
            self._jobs[job_id] = replace(
                job,
                status=status,
                artifact_key=artifact_key,
                artifact_url=artifact_url,
                result_text=result_text,
                error_message=error_message,
                completed_at=completed_at,
            )
        return True

    def get_job(self, job_id: int) -> JobRecord:
        with self._lock:
            return self._require(job_id)

    def list_jobs_for_document(self, document_id: int) -> list[JobRecord]:
        with self._lock:
            jobs = [j for j in self._jobs.values() if j.document_id == document_id]
        return sorted(jobs, key=lambda j: j.id)

    def _require(self, job_id: int) -> JobRecord:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFoundError(f"Job {job_id} not found")
        return job
