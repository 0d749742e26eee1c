"""
Validation — Error types and input validation for the mirror run.

## Usage

    from repo_mirror.validation import validate_repo_url, ValidationError

    try:
        url = validate_repo_url("github.com/owner/repo.git")
    except ValidationError as e:
        print(f"Validation failed: {e}")
"""

from __future__ import annotations

import unicodedata
from typing import Dict, Optional
from urllib.parse import urlsplit


class MirrorError(Exception):
    """Base class for every error that aborts a mirror run."""


class ValidationError(MirrorError):
    """Raised when validation fails."""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        self.message = message
        self.field = field
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


class ConfigurationError(MirrorError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


def _has_unsafe_chars(value: str) -> bool:
    """True when the value contains whitespace or control characters."""
    return any(
        ch.isspace() or unicodedata.category(ch).startswith("C")
        for ch in value
    )


def _is_parseable_url(url: str) -> bool:
    try:
        parts = urlsplit(url)
        # Accessing .port raises ValueError for a malformed port
        parts.port
    except ValueError:
        return False

    host = parts.hostname
    if not host or _has_unsafe_chars(parts.netloc):
        return False
    return True


def validate_repo_url(url: str) -> str:
    """
    Normalize and validate a repository identifier.

    - Rejects the empty string
    - Strips one trailing ``.git``
    - Prepends ``https://`` when no http(s) scheme is present
    - Requires the result to parse as an absolute URL with a host

    Returns:
        The normalized URL

    Raises:
        ValidationError: If the value is empty or not a valid URL
    """
    if not url:
        raise ValidationError("Repository URL cannot be empty", field="source_repo")

    if url.endswith(".git"):
        url = url[: -len(".git")]

    if not url.startswith("http://") and not url.startswith("https://"):
        url = f"https://{url}"

    if not _is_parseable_url(url):
        raise ValidationError(
            f"Invalid repository URL: {url}",
            field="source_repo",
            details={"url": url},
        )

    return url
