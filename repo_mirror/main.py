"""
repo-mirror — CLI Entry Point

Usage:
    python -m repo_mirror                       # same as `run`
    python -m repo_mirror run [--dry-run] [--auth-mode url|header] [--check-target]
    python -m repo_mirror check-config [--json]
"""

from __future__ import annotations

import dataclasses
import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, NoReturn, Optional

import click
from dotenv import load_dotenv

from .logging_config import register_secret, setup_logging
from .mirror.config import AUTH_MODES, DEFAULT_ACTOR, MirrorConfig
from .mirror.manager import MirrorManager
from .validation import MirrorError

logger = logging.getLogger("repo_mirror")


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """Current UTC time as ``YYYY-MM-DD HH:MM:SS``."""
    now = now or datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%d %H:%M:%S")


def _load_env_file() -> None:
    """Load .env from the working directory; real env vars win."""
    env_file = Path.cwd() / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)


def _error_reaches_stderr() -> bool:
    """True when an ERROR record from this module would be emitted."""
    if not logger.isEnabledFor(logging.ERROR):
        return False
    return any(h.level <= logging.ERROR for h in logging.getLogger().handlers)


def _fail(error: Exception) -> NoReturn:
    message = f"❌ Error: {error}"
    if _error_reaches_stderr():
        logger.error(message)
    else:
        # Log level is above ERROR; the reason must still be printed
        click.echo(message, err=True)
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option("--log-level", default=None, help="DEBUG, INFO, WARNING, ERROR (default: $LOG_LEVEL or INFO)")
@click.option("--log-format", type=click.Choice(["text", "json", "github"]), default=None, help="Log output format")
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], log_format: Optional[str]) -> None:
    """Mirror a git repository onto a GitHub repository."""
    _load_env_file()
    setup_logging(level=log_level, format_type=log_format)
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.option("--dry-run", is_flag=True, help="Clone and verify, but don't push")
@click.option("--auth-mode", type=click.Choice(list(AUTH_MODES)), default=None, help="How the token reaches git")
@click.option("--check-target", is_flag=True, help="Check the target over the GitHub API first")
def run(dry_run: bool, auth_mode: Optional[str], check_target: bool) -> None:
    """Mirror SOURCE_REPO to TARGET_REPO (all refs, forced)."""
    _print_banner()

    try:
        config = MirrorConfig.from_env()
    except MirrorError as e:
        _fail(e)

    overrides: Dict[str, object] = {}
    if dry_run:
        overrides["dry_run"] = True
    if check_target:
        overrides["check_target"] = True
    if auth_mode:
        overrides["auth_mode"] = auth_mode
    if overrides:
        config = dataclasses.replace(config, **overrides)

    for secret in config.secrets:
        register_secret(secret)

    try:
        result = MirrorManager(config).run()
    except MirrorError as e:
        _fail(e)

    logger.debug(f"Mirror finished in {result.duration_seconds}s (pushed={result.pushed})")


@cli.command("check-config")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def check_config(as_json: bool) -> None:
    """Resolve and validate configuration without running git."""
    try:
        config = MirrorConfig.from_env()
    except MirrorError as e:
        _fail(e)

    data = config.to_dict()
    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    click.echo("\n📋 Mirror Configuration\n")
    click.echo(f"  Source:       {data['source_url']}")
    click.echo(f"  Target:       {data['target_url']}")
    click.echo(f"  Branch:       {data['branch']}")
    click.echo(f"  Token:        {data['token']}")
    click.echo(f"  Auth mode:    {data['auth_mode']}")
    click.echo(f"  Check target: {'Yes' if data['check_target'] else 'No'}")
    click.echo(f"  Dry run:      {'Yes' if data['dry_run'] else 'No'}")
    click.echo()
    click.secho("✓ Configuration is valid", fg="green")


def _print_banner() -> None:
    actor = os.environ.get("GITHUB_ACTOR") or DEFAULT_ACTOR
    click.echo(f"Current Date and Time (UTC): {utc_timestamp()}")
    click.echo(f"Current User's Login: {actor}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
