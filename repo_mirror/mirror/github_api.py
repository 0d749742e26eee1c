"""
GitHub API — Pre-flight check of the target repository.

Confirms the target exists and the token may push to it before any
cloning starts. Only used when CHECK_TARGET is enabled.
"""

from __future__ import annotations

import logging
from typing import Dict

import httpx

from ..validation import MirrorError

logger = logging.getLogger(__name__)

API_ROOT = "https://api.github.com"
TIMEOUT_SECONDS = 15


class TargetCheckError(MirrorError):
    """Raised when the target repository is unreachable or not writable."""


def _get_headers(token: str) -> Dict[str, str]:
    """Get GitHub API headers."""
    return {
        "Accept": "application/vnd.github+json",
        "Authorization": f"Bearer {token}",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def check_target(token: str, repo: str) -> None:
    """
    Verify repo (owner/name) is visible to token and accepts pushes.

    Raises:
        TargetCheckError: On 404, other non-200 responses, missing push
            permission, or transport failure
    """
    url = f"{API_ROOT}/repos/{repo}"
    try:
        resp = httpx.get(url, headers=_get_headers(token), timeout=TIMEOUT_SECONDS)
    except httpx.HTTPError as e:
        raise TargetCheckError(f"Could not reach GitHub API for {repo}: {e}") from e

    if resp.status_code == 404:
        raise TargetCheckError(
            f"Target repository '{repo}' not found or not visible to the token"
        )
    if resp.status_code != 200:
        raise TargetCheckError(
            f"GitHub API returned {resp.status_code} for target repository '{repo}'"
        )

    try:
        permissions = resp.json().get("permissions") or {}
        can_push = permissions.get("push")
    except (ValueError, AttributeError) as e:
        raise TargetCheckError(f"Unexpected response from GitHub API for '{repo}'") from e

    if can_push is False:
        raise TargetCheckError(f"Token cannot push to target repository '{repo}'")

    logger.info(f"Target repository {repo} is reachable")
