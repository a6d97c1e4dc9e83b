"""Create the GitHub release that receives the module archive."""

from __future__ import annotations

import errno
import logging
import typing as typ
from pathlib import Path

from .errors import ConflictError, GithubApiError
from .github import Release

if typ.TYPE_CHECKING:
    from .config import ReleaseConfig
    from .github import GithubClient

__all__ = [
    "create_release",
    "ensure_release_absent",
    "release_body",
    "release_exists",
]

logger = logging.getLogger(__name__)

_NOT_FOUND = 404


def release_exists(client: GithubClient, owner: str, repo: str, tag: str) -> bool:
    """Return whether ``owner/repo`` already has a release for ``tag``.

    Only a ``404`` answer means "no release"; authentication failures, rate
    limiting and transport errors are re-raised unchanged.
    """
    try:
        client.get_release_by_tag(owner, repo, tag)
    except GithubApiError as exc:
        if exc.status_code == _NOT_FOUND:
            return False
        raise
    return True


def ensure_release_absent(
    client: GithubClient, owner: str, repo: str, tag: str
) -> None:
    """Raise :class:`ConflictError` when a release for ``tag`` exists."""
    if release_exists(client, owner, repo, tag):
        msg = (
            f'Release for tag "{tag}" already exists. '
            "This action only supports creating new releases."
        )
        raise ConflictError(msg)


def _error_code(exc: Exception) -> str:
    if isinstance(exc, OSError) and exc.errno in errno.errorcode:
        return errno.errorcode[exc.errno]
    return type(exc).__name__


def release_body(config: ReleaseConfig) -> str | None:
    """Return the release notes, preferring the ``body_path`` file.

    A ``body_path`` that cannot be read is reported as a warning and the
    literal ``body`` input is used instead.
    """
    if config.input_body_path:
        try:
            return Path(config.input_body_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning(
                "::warning::Failed to read body_path \"%s\" (%s). "
                "Falling back to 'body' input.",
                config.input_body_path,
                _error_code(exc),
            )
    return config.input_body


def _release_payload(config: ReleaseConfig, tag: str) -> dict[str, object]:
    payload: dict[str, object] = {
        "tag_name": tag,
        "name": config.input_name or tag,
        "draft": False,
        "prerelease": config.input_prerelease,
        "generate_release_notes": config.input_generate_release_notes,
    }
    optional = {
        "body": release_body(config),
        "target_commitish": config.input_target_commitish,
        "make_latest": config.input_make_latest,
    }
    payload |= {key: value for key, value in optional.items() if value is not None}
    return payload


def create_release(client: GithubClient, config: ReleaseConfig, tag: str) -> Release:
    """Create a published (non-draft) release for ``tag``.

    Parameters
    ----------
    client
        GitHub API client.
    config
        Resolved configuration supplying the release name, notes and flags.
    tag
        Tag the release is attached to.

    Returns
    -------
    Release
        The created release, including its ``upload_url`` template.
    """
    logger.info("Creating release for tag: %s", tag)
    payload = _release_payload(config, tag)
    release = Release.from_payload(
        client.create_release(config.owner, config.repo, payload)
    )
    logger.info("Release created: %s", release.html_url)
    return release
