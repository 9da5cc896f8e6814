from dataclasses import dataclass
from datetime import datetime

from doctransform.processor.models import (
    DEFAULT_OCR_LANGUAGES,
    NO_LANGUAGE,
    JobStatus,
    ProcessingOptions,
    encode_ocr_languages,
)


@dataclass(frozen=True)
class OptionsSnapshot:
    """Options as persisted on a processing_jobs row."""

    output_format: str
    translate_from: str = NO_LANGUAGE
    translate_to: str = NO_LANGUAGE
    ocr_languages: str = DEFAULT_OCR_LANGUAGES
    preserve_structure: bool = True

    @classmethod
    def from_options(cls, options: ProcessingOptions) -> "OptionsSnapshot":
        return cls(
            output_format=options.output_format.value,
            translate_from=options.translate_from_code,
            translate_to=options.translate_to_code,
            ocr_languages=encode_ocr_languages(options.ocr_languages),
            preserve_structure=options.preserve_structure,
        )

    def to_options(self) -> ProcessingOptions:
        return ProcessingOptions.parse(
            output_format=self.output_format,
            translate_from=self.translate_from,
            translate_to=self.translate_to,
            ocr_languages=self.ocr_languages,
            preserve_structure=self.preserve_structure,
        )


@dataclass(frozen=True)
class JobRecord:
    """Represents a row from the processing_jobs table."""

    id: int
    document_id: int
    user_id: int
    options: OptionsSnapshot
    status: JobStatus
    artifact_key: str | None = None
    artifact_url: str | None = None
    result_text: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    completed_at: datetime | None = None
