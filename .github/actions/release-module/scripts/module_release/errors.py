"""Error types shared across the module release helper package."""

from __future__ import annotations

__all__ = [
    "ConfigError",
    "ConflictError",
    "FileError",
    "FormatError",
    "GithubApiError",
    "ReleaseError",
    "UploadError",
]


class ReleaseError(RuntimeError):
    """Raised when the module release cannot continue."""


class ConfigError(ReleaseError):
    """Raised when required action inputs are missing."""


class FileError(ReleaseError):
    """Raised when the module archive is missing or is not a zip file."""


class FormatError(ReleaseError):
    """Raised when ``module.prop`` is absent or malformed."""


class ConflictError(ReleaseError):
    """Raised when a release already exists for the requested tag."""


class UploadError(ReleaseError):
    """Raised when GitHub rejects the release asset upload."""


class GithubApiError(ReleaseError):
    """Raised when a GitHub REST API call returns an unexpected status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        errors: list[object] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []
