"""
Local filesystem blob storage for screenshots.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from app.scraping.errors import BlobStorageError
from app.scraping.storage.base import BlobStorage


def _safe_relative_path(path: str) -> Path:
    relative = PurePosixPath(path.lstrip("/"))
    if not relative.parts or ".." in relative.parts:
        raise BlobStorageError(f"Invalid blob path: {path!r}")
    return Path(*relative.parts)


class LocalBlobStorage(BlobStorage):
    """
    Writes blobs below a root directory. Re-uploading a path overwrites it.
    """

    def __init__(self, root_dir: str | Path = "data/screenshots", public_base_url: str | None = None) -> None:
        self._root_dir = Path(root_dir)
        self._public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def upload(self, *, path: str, content: bytes, content_type: str = "image/png") -> str | None:
        relative_path = _safe_relative_path(path)
        absolute_path = self._root_dir / relative_path
        tmp_path = absolute_path.with_suffix(f"{absolute_path.suffix}.tmp")
        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            with tmp_path.open("wb") as handle:
                handle.write(content)
            tmp_path.replace(absolute_path)
        except OSError as exc:
            raise BlobStorageError(f"Failed to upload screenshot: {exc}") from exc
        finally:
            if tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

        if self._public_base_url is None:
            return None
        return f"{self._public_base_url}/{relative_path.as_posix()}"
