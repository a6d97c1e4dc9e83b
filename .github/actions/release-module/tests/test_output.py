"""Tests for :mod:`module_release.output`."""

from __future__ import annotations

import typing as typ

from module_release.output import format_output, write_github_output

if typ.TYPE_CHECKING:
    from pathlib import Path


def test_format_output_escapes_control_characters() -> None:
    """Percent signs and newlines are escaped for GitHub."""
    assert format_output("body", "50%\r\nnext") == "body=50%25%0D%0Anext\n"


def test_write_github_output_appends(tmp_path: Path) -> None:
    """Values are appended after existing content."""
    output = tmp_path / "outputs"
    output.write_text("existing=1\n", encoding="utf-8")

    write_github_output(output, {"url": "https://example.com", "id": "42"})

    assert output.read_text(encoding="utf-8") == (
        "existing=1\nurl=https://example.com\nid=42\n"
    )


def test_write_github_output_creates_parent_directory(tmp_path: Path) -> None:
    """Missing parent directories are created."""
    output = tmp_path / "nested" / "outputs"

    write_github_output(output, {"id": "1"})

    assert output.read_text(encoding="utf-8") == "id=1\n"
