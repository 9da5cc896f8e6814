from doctransform.database.repositories.documents_repository import DocumentsRepository
from doctransform.encoding.encoder import FormatEncoder
from doctransform.extraction.scan_classifier import is_scanned_document
from doctransform.extraction.text_extractor import TextExtractor
from doctransform.logging.logger import Log
from doctransform.processor.pipeline import PipelineContext, PipelineStep
from doctransform.storage.file_loader import FileLoader
from doctransform.storage.publisher import ArtifactPublisher
from doctransform.translation.translator import Translator


class LoadDocumentStep(PipelineStep):
    name = "load"

    def __init__(
        self,
        file_loader: FileLoader,
        doc_repo: DocumentsRepository,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(timeout_seconds)
        self._file_loader = file_loader
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        document = self._doc_repo.find_by_id(context.job.document_id)
        context.document = document
        context.raw_bytes = self._file_loader.load(document.storage_key)
        Log.info(f"Loaded {len(context.raw_bytes)} bytes for document {document.id}")
        return context


class ClassifyScanStep(PipelineStep):
    """Uses the stored scan flag, classifying the bytes only when it is unknown."""

    name = "classify"

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before classification")
        if context.document.is_scan is not None:
            context.is_scan = context.document.is_scan
            return context
        context.is_scan = is_scanned_document(context.raw_bytes, context.document.file_type)
        Log.info(f"Document {context.document.id} classified as scan={context.is_scan}")
        return context


class ExtractTextStep(PipelineStep):
    name = "extract"

    def __init__(
        self,
        text_extractor: TextExtractor,
        doc_repo: DocumentsRepository,
        timeout_seconds: float | None = None,
    ) -> None:
        super().__init__(timeout_seconds)
        self._text_extractor = text_extractor
        self._doc_repo = doc_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.document is None:
            raise ValueError("PipelineContext.document must be set before extraction")
        context.extracted_text = self._text_extractor.extract(
            context.raw_bytes,
            context.document.file_type,
            context.is_scan,
            context.options.ocr_languages,
        )
        Log.info(
            f"Extracted {len(context.extracted_text)} chars from document "
            f"{context.document.id} (ocr={context.is_scan})"
        )
        self._cache_extracted_text(context.document.id, context.extracted_text)
        return context

    def _cache_extracted_text(self, document_id: int, text: str) -> None:
        # The cache is optional; a failed write never fails the job.
        try:
            self._doc_repo.update_extracted_text(document_id, text)
        except Exception as exc:
            Log.warning(f"Could not cache extracted text for document {document_id}: {exc}")


class TranslateStep(PipelineStep):
    name = "translate"

    def __init__(self, translator: Translator, timeout_seconds: float | None = None) -> None:
        super().__init__(timeout_seconds)
        self._translator = translator

    def run(self, context: PipelineContext) -> PipelineContext:
        options = context.options
        if Translator.is_passthrough(options.translate_from, options.translate_to):
            Log.info(
                f"Job {context.job.id}: translation skipped "
                f"({options.translate_from_code}->{options.translate_to_code})"
            )
            context.result_text = context.extracted_text
            return context
        context.result_text = self._translator.translate(
            context.extracted_text,
            options.translate_from,
            options.translate_to,
        )
        return context


class EncodeStep(PipelineStep):
    name = "encode"

    def __init__(self, encoder: FormatEncoder, timeout_seconds: float | None = None) -> None:
        super().__init__(timeout_seconds)
        self._encoder = encoder

    def run(self, context: PipelineContext) -> PipelineContext:
        context.encoded = self._encoder.encode(
            context.result_text,
            context.options.output_format,
            context.options.preserve_structure,
        )
        Log.info(
            f"Encoded job {context.job.id} as {context.options.output_format.value} "
            f"({len(context.encoded)} bytes)"
        )
        return context


class PublishStep(PipelineStep):
    name = "publish"

    def __init__(self, publisher: ArtifactPublisher, timeout_seconds: float | None = None) -> None:
        super().__init__(timeout_seconds)
        self._publisher = publisher

    def run(self, context: PipelineContext) -> PipelineContext:
        base_name = context.document.base_name if context.document else "result"
        context.artifact = self._publisher.publish(
            context.encoded,
            context.options.output_format,
            base_name,
        )
        return context
