from typing import ClassVar


class ProcessingError(Exception):
    """Base exception for all pipeline errors.

    ``retryable`` tells the submitter whether resubmitting the same options
    as a new job can succeed.
    """

    retryable: ClassVar[bool] = False


class UnsupportedFormatError(ProcessingError):
    """Raised for an unrecognized input file type or output format."""


class ExtractionError(ProcessingError):
    """Raised when text extraction or OCR fails."""

    retryable = True


class UnsupportedLanguageError(ProcessingError):
    """Raised for a language code outside the supported set."""


class UnsupportedLanguagePairError(UnsupportedLanguageError):
    """Raised when no translation route exists for a language pair."""


class TranslationBackendError(ProcessingError):
    """Raised when the translation provider call fails."""

    retryable = True


class StorageUnavailableError(ProcessingError):
    """Raised when the document source or artifact store cannot be reached."""

    retryable = True


class StepTimeoutError(ProcessingError):
    """Raised when a pipeline step exceeds its time bound."""

    retryable = True


class JobCancelledError(ProcessingError):
    """Raised when a job is cancelled while processing."""


class DocumentNotFoundError(ProcessingError):
    """Raised when a document cannot be found in the database."""


class JobNotFoundError(ProcessingError):
    """Raised when a processing job cannot be found in the ledger."""


class InvalidTransitionError(ProcessingError):
    """Raised when the ledger refuses a job status change."""


class JobFailedError(Exception):
    """Single failure surfaced to the submitter of a processing request.

    The stored message keeps the failing step's name; ``cause`` keeps the
    original error so callers can inspect its kind.
    """

    def __init__(self, job_id: int, message: str, cause: BaseException | None = None) -> None:
        super().__init__(f"Job {job_id} failed: {message}")
        self.job_id = job_id
        self.message = message
        self.cause = cause

    @property
    def retryable(self) -> bool:
        return isinstance(self.cause, ProcessingError) and self.cause.retryable


class EncodingError(ProcessingError):
    """Raised when the output container cannot be produced."""
