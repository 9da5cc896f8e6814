import time

from doctransform.config.settings import Settings
from doctransform.database.models import JobRecord
from doctransform.database.repositories.base import BaseJobLedger
from doctransform.logging.logger import Log
from doctransform.worker.job_runner import JobRunner


class Worker:
    """Poll loop: sleep -> claim -> dispatch."""

    def __init__(
        self,
        ledger: BaseJobLedger,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._ledger = ledger
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> None:
        """Main poll loop. Runs forever until interrupted.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker started, polling for jobs")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                job = self._try_claim_job()
                if job:
                    self._job_runner.run(job)
                    jobs_done += 1
                else:
                    Log.debug("No jobs available, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")

    def _try_claim_job(self) -> JobRecord | None:
        """Attempt to claim the next pending job. Gracefully handle ledger errors."""
        try:
            return self._ledger.claim_next_job()
        except Exception as exc:
            Log.warning(f"Ledger error, will retry: {exc}")
            return None
