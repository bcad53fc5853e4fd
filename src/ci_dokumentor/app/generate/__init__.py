"""Documentation generation application service."""

from __future__ import annotations

from .service import GenerationResult, GeneratorService

__all__ = ["GenerationResult", "GeneratorService"]
