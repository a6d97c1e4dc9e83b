"""Tests for :mod:`module_release.pipeline`."""

from __future__ import annotations

import logging
import typing as typ

import pytest
from _helpers import VALID_PROPS, FakeGithubClient, release_payload, render_module_prop
from module_release.config import parse_config
from module_release.errors import (
    ConfigError,
    ConflictError,
    FileError,
    FormatError,
    GithubApiError,
    UploadError,
)
from module_release.pipeline import publish_module_release

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    MakeZip = cabc.Callable[..., Path]


def _env(zip_path: Path | str, **extra: str) -> dict[str, str]:
    return {
        "GITHUB_TOKEN": "token",
        "GITHUB_REPOSITORY": "acme/mymod",
        "GITHUB_REF": "refs/tags/v1.0.0",
        "INPUT_FILE": str(zip_path),
    } | extra


class TestPublishModuleRelease:
    """Tests for the publish_module_release orchestration."""

    def test_happy_path(
        self,
        make_module_zip: MakeZip,
        fake_client: FakeGithubClient,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A valid module is released and uploaded under its canonical name."""
        caplog.set_level(logging.INFO)
        zip_path = make_module_zip()

        result = publish_module_release(parse_config(_env(zip_path)), fake_client)

        assert fake_client.lookups == [("acme", "mymod", "v1.0.0")]
        assert fake_client.creations[0]["tag_name"] == "v1.0.0"
        (upload,) = fake_client.requests
        assert upload.url.endswith("/assets?name=mymod-7-1.0.0.zip")
        assert upload.body == zip_path.read_bytes()
        assert result.module.asset_name == "mymod-7-1.0.0.zip"
        assert result.to_output_mapping() == {
            "url": "https://github.com/acme/mymod/releases/tag/v1.0.0",
            "id": "42",
            "upload_url": release_payload()["upload_url"],
        }
        assert "Release created successfully" in caplog.text
        assert "Asset uploaded: https://github.com/" in caplog.text

    @pytest.mark.parametrize(
        "env",
        [
            {"GITHUB_REF": "refs/heads/main"},
            {"GITHUB_REF": ""},
        ],
    )
    def test_missing_tag_fails_before_network(
        self,
        make_module_zip: MakeZip,
        fake_client: FakeGithubClient,
        env: dict[str, str],
    ) -> None:
        """Without a tag the run stops before any API call."""
        config = parse_config(_env(make_module_zip()) | env)

        with pytest.raises(ConfigError, match="require a tag"):
            publish_module_release(config, fake_client)

        assert fake_client.lookups == []
        assert fake_client.creations == []

    def test_missing_file_input(self, fake_client: FakeGithubClient) -> None:
        """An empty file input is rejected."""
        with pytest.raises(ConfigError, match="file input is required"):
            publish_module_release(parse_config(_env("")), fake_client)

    def test_tag_checked_before_file(self, fake_client: FakeGithubClient) -> None:
        """The tag requirement is reported first when both are missing."""
        config = parse_config(_env("", GITHUB_REF="refs/heads/main"))
        with pytest.raises(ConfigError, match="require a tag"):
            publish_module_release(config, fake_client)

    def test_invalid_archive_fails_before_network(
        self, tmp_path: Path, fake_client: FakeGithubClient
    ) -> None:
        """Archive validation precedes the release lookup."""
        config = parse_config(_env(tmp_path / "absent.zip"))

        with pytest.raises(FileError):
            publish_module_release(config, fake_client)

        assert fake_client.lookups == []

    def test_id_must_match_repository(
        self, make_module_zip: MakeZip, fake_client: FakeGithubClient
    ) -> None:
        """The repository short name is the expected module id."""
        content = render_module_prop(VALID_PROPS | {"id": "othermod"})
        config = parse_config(_env(make_module_zip(content)))

        with pytest.raises(FormatError, match='repository name "mymod"'):
            publish_module_release(config, fake_client)

    def test_existing_release_conflicts(self, make_module_zip: MakeZip) -> None:
        """An existing release aborts without creating another."""
        client = FakeGithubClient(existing_release=release_payload())

        with pytest.raises(ConflictError):
            publish_module_release(parse_config(_env(make_module_zip())), client)

        assert client.creations == []
        assert client.requests == []

    def test_lookup_failure_propagates(self, make_module_zip: MakeZip) -> None:
        """Unexpected lookup errors abort the run unchanged."""
        client = FakeGithubClient(
            existing_release=GithubApiError("Bad credentials", status_code=401)
        )

        with pytest.raises(GithubApiError, match="Bad credentials"):
            publish_module_release(parse_config(_env(make_module_zip())), client)

        assert client.creations == []

    def test_upload_failure_leaves_release(self, make_module_zip: MakeZip) -> None:
        """A failed upload raises after the release has been created."""
        client = FakeGithubClient(upload_status=422, upload_json={"message": "bad"})

        with pytest.raises(UploadError, match="Status: 422"):
            publish_module_release(parse_config(_env(make_module_zip())), client)

        assert len(client.creations) == 1
