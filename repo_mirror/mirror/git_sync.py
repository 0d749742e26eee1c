"""
Git Sync — The git steps of a mirror run.

Each helper runs exactly one git command through ``run_command`` and
raises on failure; none of them retries.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Mapping, Optional

from ..process import run_command

logger = logging.getLogger(__name__)

# Directory the mirror clone is created in, relative to the work dir
CLONE_DIR = "source"


def clone_mirror(source_url: str, work_dir: Path) -> Path:
    """
    Clone every ref of source_url into work_dir/source.

    Output is streamed to the console. Returns the clone path.
    """
    run_command("git", ["clone", "--mirror", source_url, CLONE_DIR], cwd=str(work_dir))
    return work_dir / CLONE_DIR


def list_branches(clone_path: Path) -> str:
    """Return the raw ``git branch -a`` listing of the clone."""
    result = run_command("git", ["branch", "-a"], silent=True, cwd=str(clone_path))
    return result.stdout


def branch_exists(listing: str, branch: str) -> bool:
    """
    True if branch appears in a ``git branch -a`` listing.

    Matching is by substring, on either the bare name or its
    ``remotes/origin/`` form.
    """
    return branch in listing or f"remotes/origin/{branch}" in listing


def push_mirror(
    clone_path: Path,
    push_url: str,
    env: Optional[Mapping[str, str]] = None,
    secrets: Iterable[str] = (),
) -> None:
    """Force-push every ref of the clone to push_url."""
    run_command(
        "git",
        ["push", "--mirror", push_url, "--force"],
        cwd=str(clone_path),
        env=env,
        secrets=secrets,
    )
