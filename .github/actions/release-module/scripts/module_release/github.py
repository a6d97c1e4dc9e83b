"""Minimal GitHub REST client used to publish module releases."""

from __future__ import annotations

import dataclasses
import typing as typ
from urllib.parse import quote

import httpx

from .config import DEFAULT_API_URL
from .errors import GithubApiError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import types

__all__ = [
    "API_VERSION",
    "GithubClient",
    "HttpxGithubClient",
    "Release",
    "ReleaseAsset",
    "response_error_details",
]

API_VERSION = "2022-11-28"
USER_AGENT = "release-module-action"
_TIMEOUT = httpx.Timeout(30.0)

JsonObject: typ.TypeAlias = dict[str, typ.Any]


@dataclasses.dataclass(slots=True, frozen=True)
class Release:
    """Release returned by the GitHub API."""

    id: int
    upload_url: str
    html_url: str
    tag_name: str
    name: str | None
    target_commitish: str
    draft: bool
    prerelease: bool
    body: str | None = None

    @classmethod
    def from_payload(cls, payload: cabc.Mapping[str, typ.Any]) -> Release:
        """Build a :class:`Release` from a GitHub JSON payload."""
        return cls(
            id=int(payload["id"]),
            upload_url=str(payload["upload_url"]),
            html_url=str(payload["html_url"]),
            tag_name=str(payload["tag_name"]),
            name=payload.get("name"),
            target_commitish=str(payload.get("target_commitish") or ""),
            draft=bool(payload.get("draft", False)),
            prerelease=bool(payload.get("prerelease", False)),
            body=payload.get("body"),
        )


@dataclasses.dataclass(slots=True, frozen=True)
class ReleaseAsset:
    """Binary asset attached to a release."""

    id: int
    name: str
    size: int
    browser_download_url: str

    @classmethod
    def from_payload(cls, payload: cabc.Mapping[str, typ.Any]) -> ReleaseAsset:
        """Build a :class:`ReleaseAsset` from a GitHub JSON payload."""
        return cls(
            id=int(payload["id"]),
            name=str(payload["name"]),
            size=int(payload["size"]),
            browser_download_url=str(payload["browser_download_url"]),
        )


class GithubClient(typ.Protocol):
    """Operations the release steps need from the GitHub API."""

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> JsonObject:
        """Return the release for ``tag`` or raise :class:`GithubApiError`."""
        ...

    def create_release(
        self, owner: str, repo: str, payload: cabc.Mapping[str, object]
    ) -> JsonObject:
        """Create a release from ``payload`` and return the API response."""
        ...

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: cabc.Mapping[str, str],
        content: cabc.Iterable[bytes],
    ) -> httpx.Response:
        """Send an authenticated request and return the raw response."""
        ...


def _segment(value: str) -> str:
    """Percent-encode ``value`` for use as a single URL path segment."""
    return quote(value, safe="")


def response_error_details(response: httpx.Response) -> tuple[str, list[object]]:
    """Return the ``message`` and ``errors`` fields of an error response."""
    try:
        payload = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase, []
    if not isinstance(payload, dict):
        return response.reason_phrase, []
    message = payload.get("message")
    errors = payload.get("errors")
    return (
        str(message) if message is not None else response.reason_phrase,
        errors if isinstance(errors, list) else [],
    )


class HttpxGithubClient:
    """:class:`GithubClient` backed by :class:`httpx.Client`.

    Use as a context manager so the underlying connection pool is closed::

        with HttpxGithubClient(token) as client:
            client.get_release_by_tag("acme", "mymod", "v1.0.0")
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
            "User-Agent": USER_AGENT,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.Client(
            base_url=api_url,
            headers=headers,
            timeout=_TIMEOUT,
            transport=transport,
        )

    def __enter__(self) -> typ.Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: types.TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> JsonObject:
        """Return the release for ``tag``.

        Raises
        ------
        GithubApiError
            If GitHub answers with a non-success status; a missing release
            carries ``status_code == 404``. A success answer always counts as
            a found release, even when its body is not a JSON object.
        """
        path = (
            f"/repos/{_segment(owner)}/{_segment(repo)}"
            f"/releases/tags/{_segment(tag)}"
        )
        response = self._client.get(path)
        self._raise_for_status(response, f"get release for tag {tag}")
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    def create_release(
        self, owner: str, repo: str, payload: cabc.Mapping[str, object]
    ) -> JsonObject:
        """Create a release and return the API response."""
        path = f"/repos/{_segment(owner)}/{_segment(repo)}/releases"
        response = self._client.post(path, json=payload)
        return self._json_or_raise(response, f"create release in {owner}/{repo}")

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: cabc.Mapping[str, str],
        content: cabc.Iterable[bytes],
    ) -> httpx.Response:
        """Send ``content`` to the absolute ``url`` with the client headers."""
        return self._client.request(method, url, headers=headers, content=content)

    @staticmethod
    def _raise_for_status(response: httpx.Response, action: str) -> None:
        if not response.is_success:
            message, errors = response_error_details(response)
            msg = (
                f"GitHub API failed to {action} "
                f"(status {response.status_code}): {message}"
            )
            raise GithubApiError(msg, status_code=response.status_code, errors=errors)

    @classmethod
    def _json_or_raise(cls, response: httpx.Response, action: str) -> JsonObject:
        cls._raise_for_status(response, action)
        try:
            payload = response.json()
        except ValueError as exc:
            msg = f"GitHub API returned invalid JSON when trying to {action}"
            raise GithubApiError(msg, status_code=response.status_code) from exc
        if not isinstance(payload, dict):
            msg = f"GitHub API returned a non-object payload when trying to {action}"
            raise GithubApiError(msg, status_code=response.status_code)
        return payload
