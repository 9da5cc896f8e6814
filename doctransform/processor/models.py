from dataclasses import dataclass
from enum import Enum

from doctransform.processor.exceptions import (
    UnsupportedFormatError,
    UnsupportedLanguageError,
)

NO_LANGUAGE = "none"
DEFAULT_OCR_LANGUAGES = "eng,rus,uzb"


class FileType(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    XLSX = "xlsx"
    DOC = "doc"
    XLS = "xls"


class OutputFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"
    XLSX = "xlsx"


class Language(str, Enum):
    ENGLISH = "eng"
    RUSSIAN = "rus"
    UZBEK = "uzb"


class JobStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


MIME_TYPES: dict[OutputFormat, str] = {
    OutputFormat.PDF: "application/pdf",
    OutputFormat.DOCX: (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    ),
    OutputFormat.XLSX: (
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ),
}


def parse_file_type(value: str) -> FileType:
    try:
        return FileType(value.strip().lower())
    except ValueError as exc:
        raise UnsupportedFormatError(f"Unsupported file type '{value}'") from exc


def parse_output_format(value: str | OutputFormat) -> OutputFormat:
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat(str(value).strip().lower())
    except ValueError as exc:
        supported = [f.value for f in OutputFormat]
        raise UnsupportedFormatError(
            f"Unsupported output format '{value}'. Choose from: {supported}"
        ) from exc


def parse_language(value: str | Language | None) -> Language | None:
    """Parse a language code; None and the "none" sentinel map to None."""
    if value is None or isinstance(value, Language):
        return value
    if not isinstance(value, str):
        raise UnsupportedLanguageError(f"Unsupported language {value!r}")
    code = value.strip().lower()
    if code == NO_LANGUAGE:
        return None
    try:
        return Language(code)
    except ValueError as exc:
        raise UnsupportedLanguageError(f"Unsupported language '{value}'") from exc


def encode_ocr_languages(languages: tuple[Language, ...]) -> str:
    return ",".join(lang.value for lang in languages)


def decode_ocr_languages(raw: str | None) -> tuple[Language, ...]:
    """Parse a comma-separated hint list, keeping first-seen order."""
    seen: list[Language] = []
    for part in (raw or "").split(","):
        if not part.strip():
            continue
        lang = parse_language(part)
        if lang is not None and lang not in seen:
            seen.append(lang)
    return tuple(seen)


@dataclass(frozen=True)
class Document:
    """Domain model for an uploaded source document."""

    id: int
    user_id: int
    original_file_name: str
    storage_key: str
    file_type: FileType
    file_size: int
    is_scan: bool | None = None
    extracted_text: str | None = None

    def __post_init__(self) -> None:
        # Only pdf documents can be scans.
        if self.file_type is not FileType.PDF and self.is_scan:
            object.__setattr__(self, "is_scan", False)

    @property
    def base_name(self) -> str:
        stem, dot, _ext = self.original_file_name.rpartition(".")
        return stem if dot and stem else self.original_file_name


@dataclass(frozen=True)
class ProcessingOptions:
    """Validated snapshot of one requested transformation."""

    output_format: OutputFormat
    translate_from: Language | None = None
    translate_to: Language | None = None
    ocr_languages: tuple[Language, ...] = (
        Language.ENGLISH,
        Language.RUSSIAN,
        Language.UZBEK,
    )
    preserve_structure: bool = True

    @classmethod
    def parse(
        cls,
        *,
        output_format: str | OutputFormat,
        translate_from: str | Language | None = NO_LANGUAGE,
        translate_to: str | Language | None = NO_LANGUAGE,
        ocr_languages: str | list[str] | None = DEFAULT_OCR_LANGUAGES,
        preserve_structure: bool = True,
    ) -> "ProcessingOptions":
        """Validate raw option values.

        Raises:
            UnsupportedFormatError: output format outside pdf/docx/xlsx.
            UnsupportedLanguageError: unknown language code.
        """
        if isinstance(ocr_languages, list):
            ocr_languages = ",".join(ocr_languages)
        return cls(
            output_format=parse_output_format(output_format),
            translate_from=parse_language(translate_from),
            translate_to=parse_language(translate_to),
            ocr_languages=decode_ocr_languages(ocr_languages),
            preserve_structure=bool(preserve_structure),
        )

    @property
    def translate_from_code(self) -> str:
        return self.translate_from.value if self.translate_from else NO_LANGUAGE

    @property
    def translate_to_code(self) -> str:
        return self.translate_to.value if self.translate_to else NO_LANGUAGE

    @property
    def wants_translation(self) -> bool:
        return (
            self.translate_from is not None
            and self.translate_to is not None
            and self.translate_from is not self.translate_to
        )


@dataclass(frozen=True)
class Artifact:
    """Encoded output placed in the artifact store."""

    key: str
    url: str
    mime_type: str
    size_bytes: int
