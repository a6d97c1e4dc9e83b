#!/usr/bin/env -S uv run --script
# fmt: off
# /// script
# requires-python = ">=3.12"
# dependencies = [
#   "cyclopts>=3.24,<4.0",
#   "httpx>=0.28,<0.29",
#   "syspath-hack>=0.4.0,<0.5.0",
# ]
# ///
# fmt: on

"""Publish a module zip as a new GitHub release.

The script validates the archive's ``module.prop``, derives the asset name
``{id}-{versionCode}-{version}.zip``, creates a release for the tag and uploads
the archive to it. Outputs ``url``, ``id`` and ``upload_url`` are written to
``GITHUB_OUTPUT``.

Examples
--------
Release ``dist/mymod.zip`` for tag ``v1.0.0``::

    GITHUB_TOKEN=... GITHUB_REPOSITORY=acme/mymod INPUT_TAG_NAME=v1.0.0 \
        INPUT_FILE=dist/mymod.zip uv run release_module.py
"""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

import httpx
from cyclopts import App
from syspath_hack import prepend_to_syspath

# Add script directory to path for module_release import
_SCRIPT_DIR = Path(__file__).resolve().parent
prepend_to_syspath(_SCRIPT_DIR)

from module_release import (
    HttpxGithubClient,
    ReleaseError,
    parse_config,
    publish_module_release,
    write_github_output,
)

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import contextlib

    from module_release import GithubClient

    class ClientFactory(typ.Protocol):
        """Callable returning a GitHub client usable as a context manager."""

        def __call__(
            self, token: str, *, api_url: str
        ) -> contextlib.AbstractContextManager[GithubClient]: ...


app: App = App(help="Publish a module zip as a new GitHub release.")


def _report_failure(message: str) -> None:
    print(f"::error title=Module Release Failure::{message}", file=sys.stderr)


def main(
    env: cabc.Mapping[str, str] | None = None,
    *,
    github_output: Path | None = None,
    client_factory: ClientFactory = HttpxGithubClient,
) -> int:
    """Run the module release and return the process exit code.

    Parameters
    ----------
    env
        Environment mapping to read inputs from. Defaults to ``os.environ``.
    github_output
        Output file to receive ``url``, ``id`` and ``upload_url``. Defaults to
        ``GITHUB_OUTPUT``; outputs are skipped when neither is set.
    client_factory
        Builds the GitHub client from the token and API URL.

    Returns
    -------
    int
        ``0`` when the release and upload succeed, ``1`` otherwise.
    """
    env = os.environ if env is None else env
    config = parse_config(env)
    try:
        with client_factory(config.github_token, api_url=config.api_url) as client:
            result = publish_module_release(config, client)
        output_path = github_output or (
            Path(value) if (value := env.get("GITHUB_OUTPUT")) else None
        )
        if output_path is not None:
            write_github_output(output_path, result.to_output_mapping())
    except (ReleaseError, httpx.HTTPError, OSError) as exc:
        _report_failure(str(exc) or type(exc).__name__)
        return 1
    return 0


@app.default
def cli(*, github_output: Path | None = None) -> None:
    """Validate the module zip, create the release and upload the asset."""
    raise SystemExit(main(github_output=github_output))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    app()
