"""Repository metadata enriched from the GitHub REST API."""

from __future__ import annotations

import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import requests

from ci_dokumentor.domain.docs.errors import RepositoryLookupError
from ci_dokumentor.ports.repository import LicenseInfo, Repository, RepositoryProvider

from .git import GitRepositoryProvider

API_ROOT = "https://api.github.com"
REQUEST_TIMEOUT_SECONDS = 30


class GitHubRepositoryProvider(RepositoryProvider):
    """Adds licence and homepage data from ``GET /repos/{owner}/{repo}``.

    Local git metadata is resolved first; the API is only used for
    repositories that have an owner. ``GITHUB_TOKEN`` is sent when set.
    """

    def __init__(
        self,
        local: Optional[RepositoryProvider] = None,
        session: requests.Session | None = None,
        *,
        token_env: str = "GITHUB_TOKEN",
    ) -> None:
        self._local = local or GitRepositoryProvider()
        self._session = session or requests.Session()
        self._token_env = token_env

    def get_repository(self, root: Path) -> Repository:
        repository = self._local.get_repository(root)
        if repository.owner == "local":
            return repository
        payload = self._fetch(repository)
        license_info = repository.license or _license_from_payload(payload)
        url = repository.url or payload.get("html_url")
        return replace(repository, license=license_info, url=url)

    def _fetch(self, repository: Repository) -> Dict[str, Any]:
        headers = {"Accept": "application/vnd.github+json"}
        token = os.environ.get(self._token_env)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{API_ROOT}/repos/{repository.owner}/{repository.name}"
        try:
            response = self._session.get(url, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
        except requests.RequestException as exc:
            raise RepositoryLookupError(f"GitHub API request failed for {repository.full_name}: {exc}") from exc
        if response.status_code >= 400:
            raise RepositoryLookupError(
                f"GitHub API request failed for {repository.full_name}: {response.status_code} {response.text}"
            )
        payload = response.json()
        if not isinstance(payload, dict):
            raise RepositoryLookupError(f"Unexpected GitHub API payload for {repository.full_name}")
        return payload


def _license_from_payload(payload: Dict[str, Any]) -> Optional[LicenseInfo]:
    data = payload.get("license")
    if not isinstance(data, dict) or not data.get("name"):
        return None
    spdx_id = data.get("spdx_id")
    if spdx_id == "NOASSERTION":
        spdx_id = None
    return LicenseInfo(name=str(data["name"]), spdx_id=spdx_id)
