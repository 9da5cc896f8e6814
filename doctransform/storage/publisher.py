import re
import uuid

from doctransform.logging.logger import Log
from doctransform.processor.models import MIME_TYPES, Artifact, OutputFormat
from doctransform.storage.artifact_store import BaseArtifactStore

DEFAULT_BASE_NAME = "result"
_UNSAFE_NAME_RE = re.compile(r"[^\w.\-]+")


def artifact_key(base_name: str, output_format: OutputFormat) -> str:
    """Build a fresh key: processed/<random hex>/<base name>.<format>."""
    safe_name = _UNSAFE_NAME_RE.sub("_", base_name).strip("._") or DEFAULT_BASE_NAME
    return f"processed/{uuid.uuid4().hex}/{safe_name}.{output_format.value}"


class ArtifactPublisher:
    """Places encoded output in the artifact store under a new key per call.

    A retry after a failed publish gets a different key; only the key of
    the successful call may be recorded on the job.
    """

    def __init__(self, store: BaseArtifactStore) -> None:
        self._store = store

    def publish(
        self,
        content: bytes,
        output_format: OutputFormat,
        base_name: str = DEFAULT_BASE_NAME,
    ) -> Artifact:
        key = artifact_key(base_name, output_format)
        mime_type = MIME_TYPES[output_format]
        url = self._store.put(key, content, mime_type)
        Log.info(f"Published artifact {key} ({len(content)} bytes, {mime_type})")
        return Artifact(key=key, url=url, mime_type=mime_type, size_bytes=len(content))
