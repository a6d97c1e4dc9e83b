"""Write step outputs to the GitHub Actions ``GITHUB_OUTPUT`` file."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

__all__ = ["format_output", "write_github_output"]


def format_output(key: str, value: str) -> str:
    """Return a ``key=value`` line with workflow-command escaping applied."""
    escaped = value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    return f"{key}={escaped}\n"


def write_github_output(file: Path, values: cabc.Mapping[str, str]) -> None:
    """Append ``values`` to the ``GITHUB_OUTPUT`` ``file``."""
    file.parent.mkdir(parents=True, exist_ok=True)
    with file.open("a", encoding="utf-8") as handle:
        for key, value in values.items():
            handle.write(format_output(key, value))
