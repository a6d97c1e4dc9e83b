"""Sequence the module release steps from inputs to uploaded asset."""

from __future__ import annotations

import dataclasses
import logging
import typing as typ

from .config import resolve_tag
from .errors import ConfigError
from .module_prop import validate_module_zip
from .publisher import create_release, ensure_release_absent
from .uploader import upload_asset

if typ.TYPE_CHECKING:
    from .config import ReleaseConfig
    from .github import GithubClient, Release, ReleaseAsset
    from .module_prop import ModuleProps

__all__ = ["PublishResult", "publish_module_release"]

logger = logging.getLogger(__name__)


@dataclasses.dataclass(slots=True, frozen=True)
class PublishResult:
    """Outcome of :func:`publish_module_release`."""

    release: Release
    asset: ReleaseAsset
    module: ModuleProps

    def to_output_mapping(self) -> dict[str, str]:
        """Return the action outputs ``url``, ``id`` and ``upload_url``."""
        return {
            "url": self.release.html_url,
            "id": str(self.release.id),
            "upload_url": self.release.upload_url,
        }


def publish_module_release(
    config: ReleaseConfig, client: GithubClient
) -> PublishResult:
    """Validate the module archive, create its release and upload it.

    Steps run strictly in order and the first failure aborts the run. A
    release created before a failed upload is left in place.

    Parameters
    ----------
    config
        Resolved action configuration.
    client
        GitHub API client used for every remote call.

    Returns
    -------
    PublishResult
        The created release, the uploaded asset and the validated metadata.

    Raises
    ------
    ConfigError
        If no tag can be resolved or the ``file`` input is empty.
    FileError, FormatError
        If the archive or its ``module.prop`` is invalid.
    ConflictError
        If a release for the tag already exists.
    UploadError
        If GitHub rejects the asset upload.
    GithubApiError
        If any other GitHub API call fails.
    """
    tag = resolve_tag(config)
    if not config.input_file:
        msg = "file input is required"
        raise ConfigError(msg)

    module = validate_module_zip(config.input_file, config.repo)
    asset_name = module.asset_name

    ensure_release_absent(client, config.owner, config.repo, tag)
    release = create_release(client, config, tag)
    asset = upload_asset(client, release.upload_url, config.input_file, asset_name)

    logger.info("Release created successfully: %s", release.html_url)
    logger.info("Asset uploaded: %s", asset.browser_download_url)
    return PublishResult(release=release, asset=asset, module=module)
