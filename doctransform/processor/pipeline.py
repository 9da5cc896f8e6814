from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from doctransform.database.models import JobRecord
from doctransform.processor.models import Artifact, Document, ProcessingOptions


@dataclass(slots=True)
class PipelineContext:
    job: JobRecord
    options: ProcessingOptions
    document: Document | None = None
    raw_bytes: bytes = b""
    is_scan: bool = False
    extracted_text: str = ""
    result_text: str = ""
    encoded: bytes = b""
    artifact: Artifact | None = None


class PipelineStep(ABC):
    """One stage of a job run.

    ``timeout_seconds`` bounds the step's wall time; None means unbounded.
    """

    name: ClassVar[str]

    def __init__(self, timeout_seconds: float | None = None) -> None:
        self.timeout_seconds = timeout_seconds

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
