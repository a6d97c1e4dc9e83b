"""Extract and validate the ``module.prop`` metadata of a module archive.

Every module zip must carry a ``module.prop`` file at its root. The file uses
UNIX line endings and ``key=value`` lines; ``#`` starts a comment. The ``id``
field must match the repository name so that release assets are always
published from the module's own repository.
"""

from __future__ import annotations

import dataclasses
import logging
import re
import typing as typ
import zipfile
from pathlib import Path

from .errors import FileError, FormatError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

__all__ = [
    "MODULE_PROP",
    "REQUIRED_FIELDS",
    "ModuleProps",
    "check_id_format",
    "check_id_matches_repository",
    "check_line_endings",
    "check_required_fields",
    "check_version_code",
    "parse_module_prop",
    "read_module_prop",
    "validate_module_prop",
    "validate_module_zip",
]

logger = logging.getLogger(__name__)

MODULE_PROP: typ.Final[str] = "module.prop"
REQUIRED_FIELDS: typ.Final[tuple[str, ...]] = (
    "id",
    "name",
    "version",
    "versionCode",
    "author",
    "description",
)
ID_PATTERN: typ.Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z][a-zA-Z0-9._-]+$")
VERSION_CODE_PATTERN: typ.Final[re.Pattern[str]] = re.compile(r"^\d+$")

PropCheck: typ.TypeAlias = "cabc.Callable[[dict[str, str]], FormatError | None]"


@dataclasses.dataclass(slots=True, frozen=True)
class ModuleProps:
    """Validated fields from ``module.prop``."""

    id: str
    name: str
    version: str
    version_code: str
    author: str
    description: str

    @property
    def asset_name(self) -> str:
        """Canonical release asset name ``{id}-{versionCode}-{version}.zip``."""
        return f"{self.id}-{self.version_code}-{self.version}.zip"


def read_module_prop(zip_path: Path) -> str:
    """Return the text of ``module.prop`` stored at the root of ``zip_path``.

    Raises
    ------
    FormatError
        If the archive cannot be read or has no root-level ``module.prop``.
    """
    try:
        with zipfile.ZipFile(zip_path) as archive:
            raw = archive.read(MODULE_PROP)
    except (KeyError, zipfile.BadZipFile, OSError) as exc:
        msg = f"ZIP file must contain {MODULE_PROP} at root level"
        raise FormatError(msg) from exc
    return raw.decode("utf-8-sig", errors="replace")


def check_line_endings(content: str) -> FormatError | None:
    """Return an error when ``content`` uses Windows or classic Mac newlines."""
    if "\r\n" in content:
        return FormatError(
            f"{MODULE_PROP} must use UNIX (LF) line breaks, not Windows (CR+LF)"
        )
    if "\r" in content:
        return FormatError(
            f"{MODULE_PROP} must use UNIX (LF) line breaks, not Macintosh (CR)"
        )
    return None


def parse_module_prop(content: str) -> dict[str, str]:
    """Parse ``key=value`` lines, skipping blanks and ``#`` comments.

    Only the first ``=`` separates key from value, and a later occurrence of a
    key replaces an earlier one.

    Examples
    --------
    >>> parse_module_prop("# comment\\nid=mymod\\n\\nname=A=B\\nid=other\\n")
    {'id': 'other', 'name': 'A=B'}
    """
    props: dict[str, str] = {}
    for raw_line in content.split("\n"):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep or not key:
            continue
        props[key.strip()] = value.strip()
    return props


def check_required_fields(props: dict[str, str]) -> FormatError | None:
    """Return an error naming the first missing or empty required field."""
    for field in REQUIRED_FIELDS:
        if not props.get(field):
            return FormatError(f'{MODULE_PROP} must contain "{field}" field')
    return None


def check_id_format(props: dict[str, str]) -> FormatError | None:
    """Return an error when ``id`` is not a valid module identifier."""
    module_id = props["id"]
    if ID_PATTERN.match(module_id):
        return None
    return FormatError(
        f'{MODULE_PROP} id "{module_id}" is invalid. '
        "Must match ^[a-zA-Z][a-zA-Z0-9._-]+$ "
        "(e.g., a_module, a.module, module-101)"
    )


def _id_matches(expected_id: str) -> PropCheck:
    def check(props: dict[str, str]) -> FormatError | None:
        return check_id_matches_repository(props, expected_id)

    return check


def check_id_matches_repository(
    props: dict[str, str], expected_id: str
) -> FormatError | None:
    """Return an error when ``id`` differs from the repository name."""
    module_id = props["id"]
    if module_id == expected_id:
        return None
    return FormatError(
        f'{MODULE_PROP} id "{module_id}" does not match '
        f'repository name "{expected_id}"'
    )


def check_version_code(props: dict[str, str]) -> FormatError | None:
    """Return an error when ``versionCode`` is not a non-negative integer."""
    version_code = props["versionCode"]
    if VERSION_CODE_PATTERN.match(version_code):
        return None
    return FormatError(
        f'{MODULE_PROP} versionCode "{version_code}" must be an integer'
    )


def validate_module_prop(props: dict[str, str], expected_id: str) -> ModuleProps:
    """Validate parsed ``props`` and return them as :class:`ModuleProps`.

    Checks run in order and the first failure is raised; later checks rely on
    the required fields being present.

    Parameters
    ----------
    props
        Mapping produced by :func:`parse_module_prop`.
    expected_id
        Repository short name that ``id`` must equal.

    Raises
    ------
    FormatError
        If a required field is missing, ``id`` is malformed or differs from
        ``expected_id``, or ``versionCode`` is not an integer.
    """
    checks: tuple[PropCheck, ...] = (
        check_required_fields,
        check_id_format,
        _id_matches(expected_id),
        check_version_code,
    )
    for check in checks:
        if (error := check(props)) is not None:
            raise error

    module = ModuleProps(
        id=props["id"],
        name=props["name"],
        version=props["version"],
        version_code=props["versionCode"],
        author=props["author"],
        description=props["description"],
    )
    logger.info("Validated %s:", MODULE_PROP)
    for field in REQUIRED_FIELDS:
        logger.info("  %s=%s", field, props[field])
    return module


def _require_zip_file(zip_path: Path) -> None:
    if not zip_path.exists():
        msg = f"File not found: {zip_path}"
        raise FileError(msg)
    if not zip_path.is_file():
        msg = f"{zip_path} is not a file"
        raise FileError(msg)
    if not zip_path.name.endswith(".zip"):
        msg = f"File must be a .zip file: {zip_path}"
        raise FileError(msg)


def validate_module_zip(zip_path: Path | str, expected_id: str) -> ModuleProps:
    """Check ``zip_path`` and return its validated ``module.prop`` fields.

    Raises
    ------
    FileError
        If the archive is missing, is not a regular file, or lacks a ``.zip``
        extension.
    FormatError
        If ``module.prop`` is absent, uses non-UNIX line endings, or fails
        validation.
    """
    zip_path = Path(zip_path)
    _require_zip_file(zip_path)
    content = read_module_prop(zip_path)
    if (error := check_line_endings(content)) is not None:
        raise error
    return validate_module_prop(parse_module_prop(content), expected_id)
