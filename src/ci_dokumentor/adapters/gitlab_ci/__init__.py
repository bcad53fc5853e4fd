"""GitLab CI platform support."""

from __future__ import annotations

from .generator import GitLabCIGenerator
from .parser import GitLabCIParser, GitLabComponent, GitLabPipeline
from .sections import default_generators

__all__ = [
    "GitLabCIGenerator",
    "GitLabCIParser",
    "GitLabComponent",
    "GitLabPipeline",
    "default_generators",
]
