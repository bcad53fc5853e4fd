"""Migration application service."""

from __future__ import annotations

from .service import MigrationResult, MigrationService

__all__ = ["MigrationResult", "MigrationService"]
