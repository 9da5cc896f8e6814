from pathlib import Path

from doctransform.processor.exceptions import StorageUnavailableError


def resolve_under(root: Path, key: str) -> Path:
    """Resolve a storage key below ``root``, refusing keys that escape it."""
    base = root.resolve()
    path = (base / key).resolve()
    if not path.is_relative_to(base):
        raise StorageUnavailableError(f"Storage key '{key}' escapes {base}")
    return path


class FileLoader:
    """Read-only source of original uploaded bytes, keyed by storage key."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def load(self, storage_key: str) -> bytes:
        """Read document bytes from disk.

        Raises:
            StorageUnavailableError: if the file cannot be read.
        """
        path = resolve_under(self._files_root, storage_key)
        try:
            return path.read_bytes()
        except OSError as exc:
            raise StorageUnavailableError(f"Cannot read document '{storage_key}': {exc}") from exc
