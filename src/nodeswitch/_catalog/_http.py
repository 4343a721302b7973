"""Download a JSON listing over HTTP, revalidating a disk-cached copy with its ETag."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import TYPE_CHECKING, Any, Final

import httpx

from nodeswitch._cache import CachedListing
from nodeswitch._errors import FetchError, InvalidIndexFormatError, NotFoundError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from nodeswitch._cache import CatalogCache

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)
_BODY_PREVIEW: Final[int] = 500


async def fetch_json(  # noqa: PLR0913
    client: httpx.AsyncClient,
    uri: str,
    cache: CatalogCache,
    *,
    what: str,
    headers: Mapping[str, str] | None = None,
    include_body: bool = False,
) -> Any:  # noqa: ANN401
    """GET *uri* and decode its JSON body.

    The ETag of a cached copy is sent as ``If-None-Match`` and its body is reused when the server answers ``304``.

    :param what: a short noun for error messages, e.g. ``index``
    :param include_body: append the response body to :class:`FetchError` messages
    :raises NotFoundError: on HTTP 404
    :raises FetchError: on any other non-200 status or a transport failure
    :raises InvalidIndexFormatError: when the body is not JSON
    """
    cached = cache.get(uri)
    request_headers = dict(headers or {})
    if cached is not None:
        request_headers["If-None-Match"] = cached.etag

    _LOGGER.info("downloading %s %s", what, uri)
    try:
        response = await client.get(uri, headers=request_headers, follow_redirects=True)
    except httpx.HTTPError as exc:
        msg = f"Failed to download {what}: {uri}"
        raise FetchError(msg) from exc

    if response.status_code == HTTPStatus.NOT_MODIFIED and cached is not None:
        _LOGGER.debug("%s %s not modified, using cached copy", what, uri)
        return cached.body
    if response.status_code == HTTPStatus.NOT_FOUND:
        msg = f"Remote {what} not found"
        raise NotFoundError(msg, uri)
    if response.status_code != HTTPStatus.OK:
        msg = f"Failed to download {what}: {uri} (HTTP response status: {response.status_code})"
        if include_body:
            msg = f"{msg}\n{response.text[:_BODY_PREVIEW]}"
        raise FetchError(msg)

    try:
        body = response.json()
    except ValueError as exc:
        msg = f"Failed to parse {what}: {uri}"
        raise InvalidIndexFormatError(msg) from exc

    if etag := response.headers.get("etag"):
        cache.put(CachedListing(uri=uri, etag=etag, body=body))
    return body


__all__ = [
    "fetch_json",
]
