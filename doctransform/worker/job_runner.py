from doctransform.database.models import JobRecord
from doctransform.logging.logger import Log
from doctransform.processor.exceptions import JobFailedError
from doctransform.processor.service import JobService


class JobRunner:
    """Run one claimed job and log its outcome. Failed jobs are not retried."""

    def __init__(self, service: JobService) -> None:
        self._service = service

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling."""
        Log.info(f"Running job {job.id} for document {job.document_id}")
        try:
            self._service.execute(job)
            Log.info(f"Job {job.id} completed successfully")
        except JobFailedError as exc:
            kind = "retryable" if exc.retryable else "permanent"
            Log.error(f"Job {job.id} failed ({kind}): {exc.message}")
        except Exception:
            # The ledger could not record the outcome; keep the worker alive.
            Log.exception(f"Job {job.id} could not be finalized")
