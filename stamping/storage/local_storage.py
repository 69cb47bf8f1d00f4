# stamping/storage/local_storage.py
from __future__ import annotations

import logging
from pathlib import Path

from stamping.errors import InvalidRequestError
from stamping.settings import get_settings

logger = logging.getLogger(__name__)


class LocalStorage:
    """
    Filesystem access for the path-based endpoints.
    Relative paths resolve under `root` when one is configured.
    """

    def __init__(self, root: str | Path | None = None):
        self.root = Path(root) if root else None

    def resolve(self, path: str) -> Path:
        if not path or not path.strip():
            raise InvalidRequestError("File path is required")
        p = Path(path.strip()).expanduser()
        if self.root is not None and not p.is_absolute():
            p = self.root / p
        return p

    def download_bytes(self, path: str) -> bytes:
        p = self.resolve(path)
        if not p.is_file():
            raise InvalidRequestError(f"Input file not found: {path}")
        try:
            return p.read_bytes()
        except OSError as e:
            raise InvalidRequestError(f"Cannot read input file: {path}", cause=e) from e

    def upload_pdf_bytes(self, path: str, data: bytes) -> Path:
        p = self.resolve(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), p)
        return p


_storage_singleton: LocalStorage | None = None


def get_storage() -> LocalStorage:
    global _storage_singleton
    if _storage_singleton is None:
        _storage_singleton = LocalStorage(get_settings().output_root)
    return _storage_singleton
