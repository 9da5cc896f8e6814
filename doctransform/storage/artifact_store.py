import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

from doctransform.processor.exceptions import StorageUnavailableError
from doctransform.storage.file_loader import resolve_under


class BaseArtifactStore(ABC):
    """Contract for durable artifact storage."""

    @abstractmethod
    def put(self, key: str, content: bytes, mime_type: str) -> str:
        """Store bytes under ``key`` and return their retrieval URL.

        Raises:
            StorageUnavailableError: if the store cannot be written.
        """


class LocalArtifactStore(BaseArtifactStore):
    """Stores artifacts on a local (or mounted) filesystem."""

    def __init__(self, root: Path, base_url: str) -> None:
        self._root = root
        self._base_url = base_url.rstrip("/")

    def put(self, key: str, content: bytes, mime_type: str) -> str:
        _ = mime_type  # served by the download surface from the file extension
        path = resolve_under(self._root, key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as fh:
                    fh.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot store artifact '{key}': {exc}") from exc
        return f"{self._base_url}/{quote(key)}"
