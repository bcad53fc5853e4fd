"""Dry-run renderer producing a unified diff instead of writing."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import List, Optional

from .base import BufferedRenderer

NO_NEWLINE = "\\ No newline at end of file\n"


class DiffRenderer(BufferedRenderer):
    """Never touches the filesystem after :meth:`initialize` reads the destination."""

    def _emit(self, destination: Path, original: str, rendered: str, *, existed: bool) -> Optional[str]:
        return unified_diff(destination, original, rendered)


def unified_diff(destination: Path, original: str, rendered: str) -> str:
    if original == rendered:
        return ""
    name = destination.as_posix()
    lines = difflib.unified_diff(
        original.splitlines(keepends=True),
        rendered.splitlines(keepends=True),
        fromfile=f"a/{name}",
        tofile=f"b/{name}",
    )
    output: List[str] = []
    for line in lines:
        output.append(line)
        if not line.endswith("\n"):
            output.append("\n" + NO_NEWLINE)
    return "".join(output)
