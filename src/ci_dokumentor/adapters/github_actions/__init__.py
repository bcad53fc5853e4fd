"""GitHub Actions platform support."""

from __future__ import annotations

from .generator import GitHubActionsGenerator
from .parser import GitHubAction, GitHubActionsParser, GitHubWorkflow
from .sections import default_generators

__all__ = [
    "GitHubAction",
    "GitHubActionsGenerator",
    "GitHubActionsParser",
    "GitHubWorkflow",
    "default_generators",
]
