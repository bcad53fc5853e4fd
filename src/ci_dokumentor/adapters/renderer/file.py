"""Renderer that writes the merged document to disk atomically."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

from ci_dokumentor.domain.docs.errors import WriteFailure

from .base import BufferedRenderer


class FileRenderer(BufferedRenderer):
    """Replaces the destination through a sibling temp file and ``os.replace``."""

    def _emit(self, destination: Path, original: str, rendered: str, *, existed: bool) -> Optional[str]:
        if rendered == original and (existed or not rendered):
            return None
        try:
            ensure_directory(destination)
            _atomic_write(destination, rendered)
        except OSError as exc:
            raise WriteFailure(destination.as_posix(), exc) from exc
        return None


NEW_FILE_MODE = 0o666


def ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _atomic_write(path: Path, data: str) -> None:
    fd, tmp_path = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data.encode("utf-8", errors="surrogatepass"))
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o777)
        else:
            os.chmod(tmp_path, NEW_FILE_MODE & ~_current_umask())
        os.replace(tmp_path, path)
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask
