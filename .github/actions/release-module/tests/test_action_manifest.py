"""Tests covering the release-module composite action manifest."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import yaml

ACTION_PATH = Path(__file__).resolve().parents[1] / "action.yml"


def _load_action() -> dict[str, typ.Any]:
    return yaml.safe_load(ACTION_PATH.read_text(encoding="utf-8"))


def _release_step() -> dict[str, typ.Any]:
    steps = _load_action()["runs"]["steps"]
    return next(step for step in steps if step.get("id") == "release")


def test_manifest_configures_composite_action() -> None:
    """The action installs uv and runs the release script."""
    manifest = _load_action()
    assert manifest["runs"]["using"] == "composite"
    steps = manifest["runs"]["steps"]
    assert steps[0]["uses"].startswith("astral-sh/setup-uv@")

    step = _release_step()
    assert step["shell"] == "bash"
    assert 'uv run "${GITHUB_ACTION_PATH}/scripts/release_module.py"' in step["run"]


def test_every_input_is_forwarded() -> None:
    """Each declared input reaches the script as an INPUT_ variable."""
    manifest = _load_action()
    env = _release_step()["env"]
    for name in manifest["inputs"]:
        key = f"INPUT_{name.upper()}"
        assert env[key] == f"${{{{ inputs.{name} }}}}"
    assert env["GITHUB_TOKEN"] == "${{ inputs.token }}"


def test_file_input_is_required() -> None:
    """The module zip path must be supplied."""
    assert _load_action()["inputs"]["file"]["required"] is True


def test_outputs_come_from_release_step() -> None:
    """The url, id and upload_url outputs are exported from the script step."""
    outputs = _load_action()["outputs"]
    assert set(outputs) == {"url", "id", "upload_url"}
    for name, output in outputs.items():
        assert output["value"] == f"${{{{ steps.release.outputs.{name} }}}}"
