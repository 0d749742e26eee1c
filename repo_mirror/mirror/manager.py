"""
Mirror Manager — Runs one mirror from start to finish.

Steps, each depending on the previous one:

    1. (optional) check the target over the GitHub API
    2. create a temporary work directory
    3. git clone --mirror <source> source
    4. git branch -a, and confirm the branch is listed
    5. git push --mirror <target> --force   (skipped on dry run)
    6. remove the work directory

Any failure aborts the run. The work directory is removed on every path.

## Usage

    from repo_mirror.mirror.config import MirrorConfig
    from repo_mirror.mirror.manager import MirrorManager

    result = MirrorManager(MirrorConfig.from_env()).run()
"""

from __future__ import annotations

import logging
import shutil
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..validation import MirrorError
from . import git_sync
from . import github_api
from .config import MirrorConfig

logger = logging.getLogger(__name__)

TEMP_PREFIX = "repo-mirror-"


class BranchNotFoundError(MirrorError):
    """Raised when the requested branch is missing from the source."""

    def __init__(self, branch: str):
        self.branch = branch
        super().__init__(f"Branch '{branch}' not found in source repository")


@dataclass
class MirrorResult:
    """Summary of a completed run."""

    source_url: str
    target_url: str
    branch: str
    pushed: bool
    duration_seconds: float


class MirrorManager:
    """Orchestrates a single mirror run for one config."""

    def __init__(self, config: MirrorConfig):
        self.config = config
        self.work_dir: Optional[Path] = None

    def run(self) -> MirrorResult:
        """
        Execute every step in order.

        Raises:
            MirrorError: Any step failed; the work directory is already removed
        """
        config = self.config
        started = time.monotonic()

        logger.info("🚀 Starting mirror process...")
        logger.info(f"Source: {config.source_url}")
        logger.info(f"Target: {config.target_url}")
        logger.info(f"Branch: {config.branch}")

        if config.check_target:
            github_api.check_target(config.token, config.target_repo)

        self.work_dir = Path(tempfile.mkdtemp(prefix=TEMP_PREFIX))
        logger.info(
            f"📁 Created temporary directory: {self.work_dir}", extra={"step": "tempdir"}
        )

        try:
            pushed = self._mirror(self.work_dir)
        finally:
            self._cleanup()

        return MirrorResult(
            source_url=config.source_url,
            target_url=config.target_url,
            branch=config.branch,
            pushed=pushed,
            duration_seconds=round(time.monotonic() - started, 3),
        )

    def _mirror(self, work_dir: Path) -> bool:
        config = self.config

        logger.info("📥 Cloning source repository...", extra={"step": "clone"})
        clone_path = git_sync.clone_mirror(config.source_url, work_dir)

        logger.info(f"🔍 Verifying branch: {config.branch}", extra={"step": "verify"})
        listing = git_sync.list_branches(clone_path)
        if not git_sync.branch_exists(listing, config.branch):
            raise BranchNotFoundError(config.branch)

        if config.dry_run:
            logger.info("Dry run — skipping push", extra={"step": "push"})
            return False

        logger.info("📤 Pushing to target repository...", extra={"step": "push"})
        git_sync.push_mirror(
            clone_path,
            config.push_url,
            env=config.push_env(),
            secrets=config.secrets,
        )
        logger.info("✅ Successfully mirrored repository", extra={"step": "push"})
        return True

    def _cleanup(self) -> None:
        work_dir, self.work_dir = self.work_dir, None
        if work_dir is None:
            return
        try:
            shutil.rmtree(work_dir)
        except OSError as e:
            logger.warning(
                f"Could not remove temporary directory {work_dir}: {e}",
                extra={"step": "cleanup"},
            )
            return
        logger.info("🧹 Cleaned up temporary directory", extra={"step": "cleanup"})
