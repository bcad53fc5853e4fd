"""Repository metadata read from git and the working tree."""

from __future__ import annotations

import os
import re
import subprocess
from pathlib import Path
from typing import Optional, Tuple

from ci_dokumentor.ports.repository import LicenseInfo, Repository, RepositoryProvider

GIT_TIMEOUT_SECONDS = 10
LICENSE_FILES = ("LICENSE", "LICENSE.md", "LICENSE.txt", "LICENCE", "LICENCE.md", "COPYING")
# GitHub looks for community health files in these directories, in this order.
COMMUNITY_DIRS = ("", ".github", "docs")
CONTRIBUTING_FILES = ("CONTRIBUTING.md", "CONTRIBUTING")
SECURITY_FILES = ("SECURITY.md", "SECURITY")

_REMOTE_PATTERN = re.compile(r"(?:[:/])(?P<owner>[^/:]+)/(?P<name>[^/]+?)(?:\.git)?/?$")

# (spdx id, display name, markers that must all appear in the licence text)
_KNOWN_LICENSES = (
    ("MIT", "MIT License", ("mit license",)),
    ("Apache-2.0", "Apache License 2.0", ("apache license", "version 2.0")),
    ("GPL-3.0", "GNU General Public License v3.0", ("gnu general public license", "version 3")),
    ("MPL-2.0", "Mozilla Public License 2.0", ("mozilla public license", "2.0")),
    ("ISC", "ISC License", ("isc license",)),
    ("BSD-3-Clause", "BSD 3-Clause License", ("redistribution and use", "neither the name")),
)


def parse_remote_url(url: str) -> Optional[Tuple[str, str]]:
    """Extract ``(owner, name)`` from an https or scp-style git remote."""

    match = _REMOTE_PATTERN.search(url.strip())
    if match is None:
        return None
    return match.group("owner"), match.group("name")


def detect_license(root: Path) -> Optional[LicenseInfo]:
    for filename in LICENSE_FILES:
        candidate = root / filename
        if not candidate.is_file():
            continue
        text = candidate.read_text(encoding="utf-8", errors="replace")
        lowered = text.lower()
        for spdx_id, name, markers in _KNOWN_LICENSES:
            if all(marker in lowered for marker in markers):
                return LicenseInfo(name=name, spdx_id=spdx_id, url=filename)
        first_line = next((line.strip() for line in text.splitlines() if line.strip()), filename)
        return LicenseInfo(name=first_line, url=filename)
    return None


def find_community_file(root: Path, filenames: Tuple[str, ...]) -> Optional[str]:
    """Return the repository-relative POSIX path of the first matching file."""

    for directory in COMMUNITY_DIRS:
        for filename in filenames:
            relative = Path(directory) / filename if directory else Path(filename)
            if (root / relative).is_file():
                return relative.as_posix()
    return None


def document_link(web_url: Optional[str], relative: Optional[str]) -> Optional[str]:
    if relative is None:
        return None
    if web_url:
        return f"{web_url}/blob/HEAD/{relative}"
    return relative


class GitRepositoryProvider(RepositoryProvider):
    """Resolves owner/name from ``GITHUB_REPOSITORY`` or the ``origin`` remote."""

    def get_repository(self, root: Path) -> Repository:
        start = Path(root).resolve()
        top_level = self._git(start, "rev-parse", "--show-toplevel")
        repo_root = Path(top_level) if top_level else start
        url = self._git(start, "remote", "get-url", "origin")

        owner_name = None
        env_repository = os.getenv("GITHUB_REPOSITORY", "")
        if "/" in env_repository:
            owner, name = env_repository.split("/", 1)
            owner_name = (owner, name)
        elif url:
            owner_name = parse_remote_url(url)
        if owner_name is None:
            owner_name = ("local", repo_root.name)

        web_url = _web_url(url) if url else None
        return Repository(
            owner=owner_name[0],
            name=owner_name[1],
            root=repo_root,
            url=web_url,
            license=detect_license(repo_root),
            contributing=document_link(web_url, find_community_file(repo_root, CONTRIBUTING_FILES)),
            security=document_link(web_url, find_community_file(repo_root, SECURITY_FILES)),
        )

    @staticmethod
    def _git(cwd: Path, *args: str) -> Optional[str]:
        try:
            result = subprocess.run(
                ["git", *args],
                cwd=cwd if cwd.is_dir() else cwd.parent,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
                text=True,
                timeout=GIT_TIMEOUT_SECONDS,
            )
        except (subprocess.CalledProcessError, subprocess.TimeoutExpired, FileNotFoundError, NotADirectoryError):
            return None
        value = result.stdout.strip()
        return value or None


def _web_url(remote: str) -> str:
    parsed = parse_remote_url(remote)
    if remote.startswith(("http://", "https://")) or parsed is None:
        return re.sub(r"\.git/?$", "", remote)
    host_match = re.match(r"^(?:ssh://)?(?:[^@]+@)?(?P<host>[^:/]+)", remote)
    host = host_match.group("host") if host_match else "github.com"
    return f"https://{host}/{parsed[0]}/{parsed[1]}"
