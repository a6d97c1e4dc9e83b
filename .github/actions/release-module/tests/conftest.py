"""Shared fixtures for the release-module action tests."""

from __future__ import annotations

import collections.abc as cabc
import zipfile
from pathlib import Path

import pytest
from _helpers import VALID_PROPS, FakeGithubClient, render_module_prop


@pytest.fixture
def make_module_zip(tmp_path: Path) -> cabc.Callable[..., Path]:
    """Return a factory writing a module zip under ``tmp_path``."""

    def _make(
        content: str | None = None,
        *,
        name: str = "mymod.zip",
        member: str = "module.prop",
    ) -> Path:
        path = tmp_path / name
        text = render_module_prop(VALID_PROPS) if content is None else content
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr(member, text)
            archive.writestr("system/bin/tool", "#!/bin/sh\n")
        return path

    return _make


@pytest.fixture
def fake_client() -> FakeGithubClient:
    """Return a fake client with no existing release."""
    return FakeGithubClient()
