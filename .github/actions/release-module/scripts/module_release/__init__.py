"""Helpers for publishing a module zip as a GitHub release."""

from __future__ import annotations

from .config import ReleaseConfig, is_tag, parse_config, resolve_tag
from .errors import (
    ConfigError,
    ConflictError,
    FileError,
    FormatError,
    GithubApiError,
    ReleaseError,
    UploadError,
)
from .github import GithubClient, HttpxGithubClient, Release, ReleaseAsset
from .module_prop import ModuleProps, validate_module_zip
from .output import write_github_output
from .pipeline import PublishResult, publish_module_release
from .publisher import create_release, release_body, release_exists
from .uploader import upload_asset, upload_endpoint

__all__ = [
    "ConfigError",
    "ConflictError",
    "FileError",
    "FormatError",
    "GithubApiError",
    "GithubClient",
    "HttpxGithubClient",
    "ModuleProps",
    "PublishResult",
    "Release",
    "ReleaseAsset",
    "ReleaseConfig",
    "ReleaseError",
    "UploadError",
    "create_release",
    "is_tag",
    "parse_config",
    "publish_module_release",
    "release_body",
    "release_exists",
    "resolve_tag",
    "upload_asset",
    "upload_endpoint",
    "validate_module_zip",
    "write_github_output",
]
