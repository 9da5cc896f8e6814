from typing import ClassVar

from doctransform.config.settings import Settings
from doctransform.database.repositories.base import BaseJobLedger
from doctransform.database.repositories.job_repository import JobRepository
from doctransform.database.repositories.memory_job_repository import InMemoryJobRepository


class JobLedgerFactory:
    """Creates the job ledger backend named in settings."""

    BACKENDS: ClassVar[dict[str, type[BaseJobLedger]]] = {
        "postgres": JobRepository,
        "memory": InMemoryJobRepository,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseJobLedger:
        backend = settings.ledger_backend.lower()
        ledger_cls = cls.BACKENDS.get(backend)
        if ledger_cls is None:
            raise ValueError(
                f"Unknown ledger backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        return ledger_cls()
