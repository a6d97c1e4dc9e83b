"""Stream the module archive to a release as a binary asset."""

from __future__ import annotations

import json
import logging
import typing as typ
from pathlib import Path

import httpx

from .errors import UploadError
from .github import ReleaseAsset, response_error_details

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .github import GithubClient

__all__ = [
    "ASSET_CONTENT_TYPE",
    "asset_upload_url",
    "upload_asset",
    "upload_endpoint",
]

logger = logging.getLogger(__name__)

ASSET_CONTENT_TYPE = "application/zip"
CHUNK_SIZE = 64 * 1024
_CREATED = 201


def upload_endpoint(upload_url: str) -> str:
    """Strip the ``{?name,label}`` URI template suffix from ``upload_url``.

    Examples
    --------
    >>> upload_endpoint("https://api.example.com/upload{?name,label}")
    'https://api.example.com/upload'
    """
    marker = upload_url.find("{")
    if marker > -1:
        return upload_url[:marker]
    return upload_url


def asset_upload_url(upload_url: str, asset_name: str) -> str:
    """Return the concrete upload URL for ``asset_name``."""
    endpoint = httpx.URL(upload_endpoint(upload_url))
    return str(endpoint.copy_add_param("name", asset_name))


def _iter_chunks(handle: typ.BinaryIO) -> cabc.Iterator[bytes]:
    while chunk := handle.read(CHUNK_SIZE):
        yield chunk


def upload_asset(
    client: GithubClient,
    upload_url: str,
    path: Path | str,
    asset_name: str,
) -> ReleaseAsset:
    """Upload ``path`` to the release identified by ``upload_url``.

    The file is streamed in chunks rather than read into memory, and the
    handle is closed whether the upload succeeds or fails.

    Raises
    ------
    UploadError
        If GitHub does not answer ``201 Created``.
    """
    path = Path(path)
    size = path.stat().st_size
    logger.info(
        "Uploading %s (%d bytes, %s)...", asset_name, size, ASSET_CONTENT_TYPE
    )
    headers = {
        "content-length": str(size),
        "content-type": ASSET_CONTENT_TYPE,
    }
    url = asset_upload_url(upload_url, asset_name)

    with path.open("rb") as handle:
        response = client.request(
            "POST", url, headers=headers, content=_iter_chunks(handle)
        )

    if response.status_code != _CREATED:
        message, errors = response_error_details(response)
        msg = (
            f"Failed to upload release asset {asset_name}. "
            f"Status: {response.status_code}\n{message}"
        )
        if errors:
            msg = f"{msg}\n{json.dumps(errors)}"
        raise UploadError(msg)

    try:
        asset = ReleaseAsset.from_payload(response.json())
    except (ValueError, KeyError, TypeError) as exc:
        msg = f"GitHub returned an unexpected upload response for {asset_name}"
        raise UploadError(msg) from exc

    logger.info("Uploaded %s", asset_name)
    return asset
