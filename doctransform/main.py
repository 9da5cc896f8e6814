from doctransform.config.settings import Settings
from doctransform.database.connection import close_pool, init_pool
from doctransform.database.factory import JobLedgerFactory
from doctransform.logging.logger import Log
from doctransform.processor.service import build_job_service
from doctransform.worker.job_runner import JobRunner
from doctransform.worker.worker import Worker


def main() -> None:
    """Entry point: initialize pool -> build dependencies -> start worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        ledger = JobLedgerFactory.create(settings)
        service = build_job_service(settings, ledger)
        worker = Worker(ledger, JobRunner(service), settings)
        worker.run()
    finally:
        close_pool()


if __name__ == "__main__":
    main()
