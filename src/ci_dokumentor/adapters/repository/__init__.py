"""Repository metadata providers."""

from __future__ import annotations

from .git import GitRepositoryProvider, detect_license, parse_remote_url
from .github import GitHubRepositoryProvider

__all__ = ["GitHubRepositoryProvider", "GitRepositoryProvider", "detect_license", "parse_remote_url"]
