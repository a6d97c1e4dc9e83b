"""Resolve action inputs into an immutable release configuration.

GitHub exposes action inputs as ``INPUT_*`` environment variables and the
workflow context as ``GITHUB_*`` variables. :func:`parse_config` reads both
from a plain mapping so callers can pass ``os.environ`` in production and a
literal dictionary in tests.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from .errors import ConfigError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = [
    "DEFAULT_API_URL",
    "TAG_REF_PREFIX",
    "MakeLatest",
    "ReleaseConfig",
    "is_tag",
    "parse_config",
    "resolve_tag",
]

DEFAULT_API_URL = "https://api.github.com"
TAG_REF_PREFIX = "refs/tags/"

MakeLatest: typ.TypeAlias = typ.Literal["true", "false", "legacy"]

_MAKE_LATEST_VALUES: frozenset[str] = frozenset({"true", "false", "legacy"})


@dataclasses.dataclass(slots=True, frozen=True)
class ReleaseConfig:
    """Settings for a single module release run."""

    github_token: str
    github_ref: str
    github_repository: str
    input_file: str
    input_tag_name: str | None = None
    input_name: str | None = None
    input_body: str | None = None
    input_body_path: str | None = None
    input_prerelease: bool = False
    input_target_commitish: str | None = None
    input_generate_release_notes: bool = False
    input_make_latest: MakeLatest | None = None
    api_url: str = DEFAULT_API_URL

    @property
    def owner(self) -> str:
        """Repository owner taken from ``owner/name``."""
        return self.github_repository.partition("/")[0]

    @property
    def repo(self) -> str:
        """Repository short name taken from ``owner/name``."""
        return self.github_repository.partition("/")[2]


def _input(env: cabc.Mapping[str, str], name: str) -> str | None:
    """Return the ``INPUT_`` value for ``name`` accepting dashed spellings."""
    key = f"INPUT_{name}"
    value = env.get(key)
    if value is None:
        value = env.get(key.replace("_", "-").replace("INPUT-", "INPUT_", 1))
    return value


def _parse_make_latest(value: str | None) -> MakeLatest | None:
    if value in _MAKE_LATEST_VALUES:
        return typ.cast("MakeLatest", value)
    return None


def _is_true(value: str | None) -> bool:
    """GitHub boolean inputs only count as set when spelled ``true``."""
    return value == "true"


def parse_config(env: cabc.Mapping[str, str]) -> ReleaseConfig:
    """Build a :class:`ReleaseConfig` from environment-style ``env``.

    Parameters
    ----------
    env
        Mapping of environment variable names to values, typically
        ``os.environ``.

    Returns
    -------
    ReleaseConfig
        Resolved configuration. Missing inputs become empty strings or
        ``None``; they are validated by the steps that consume them.

    Examples
    --------
    >>> config = parse_config(
    ...     {"GITHUB_REPOSITORY": "acme/mymod", "INPUT_PRERELEASE": "TRUE"}
    ... )
    >>> config.repo, config.input_prerelease
    ('mymod', False)
    """
    tag_name = _input(env, "TAG_NAME")
    return ReleaseConfig(
        github_token=env.get("GITHUB_TOKEN") or _input(env, "TOKEN") or "",
        github_ref=env.get("GITHUB_REF") or "",
        github_repository=env.get("GITHUB_REPOSITORY") or "",
        input_file=_input(env, "FILE") or "",
        input_tag_name=tag_name.strip() if tag_name is not None else None,
        input_name=_input(env, "NAME"),
        input_body=_input(env, "BODY"),
        input_body_path=_input(env, "BODY_PATH"),
        input_prerelease=_is_true(_input(env, "PRERELEASE")),
        input_target_commitish=_input(env, "TARGET_COMMITISH") or None,
        input_generate_release_notes=_is_true(_input(env, "GENERATE_RELEASE_NOTES")),
        input_make_latest=_parse_make_latest(_input(env, "MAKE_LATEST")),
        api_url=(env.get("GITHUB_API_URL") or DEFAULT_API_URL).rstrip("/"),
    )


def is_tag(ref: str) -> bool:
    """Return ``True`` when ``ref`` names a tag."""
    return ref.startswith(TAG_REF_PREFIX)


def resolve_tag(config: ReleaseConfig) -> str:
    """Return the release tag for ``config``.

    An explicit ``tag_name`` input wins; otherwise the tag is taken from a
    ``refs/tags/`` triggering ref.

    Raises
    ------
    ConfigError
        If neither source provides a tag.
    """
    if config.input_tag_name:
        return config.input_tag_name
    if is_tag(config.github_ref):
        if tag := config.github_ref.removeprefix(TAG_REF_PREFIX):
            return tag
    msg = "GitHub Releases require a tag. Set tag_name input or trigger on tag push."
    raise ConfigError(msg)
