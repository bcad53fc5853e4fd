"""Renderer strategies: write to disk, or compute a diff for dry runs."""

from __future__ import annotations

from .base import BufferedRenderer
from .diff import DiffRenderer
from .file import FileRenderer


def renderer_for(dry_run: bool) -> BufferedRenderer:
    return DiffRenderer() if dry_run else FileRenderer()


__all__ = ["BufferedRenderer", "DiffRenderer", "FileRenderer", "renderer_for"]
