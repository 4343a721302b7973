"""Aggregate the version listing of a configured remote, whichever kind of source backs it."""

from __future__ import annotations

import dataclasses
import logging
from contextlib import AsyncExitStack
from typing import TYPE_CHECKING, Final, Protocol

import httpx
from async_lru import alru_cache

from nodeswitch._cache import DiskCache
from nodeswitch._compat import host_os, is_abs_path
from nodeswitch._errors import UnknownRemoteError
from nodeswitch._ordering import sort_versions

from ._github import GitHubReleasesSource, is_releases_uri
from ._index import IndexSource
from ._network import NetworkShareSource

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from nodeswitch._cache import CatalogCache
    from nodeswitch._settings import Settings
    from nodeswitch._version import NodeVersion

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


class CatalogSource(Protocol):
    remote_name: str

    async def fetch(self) -> list[NodeVersion]: ...


def _no_local_versions(remote_name: str) -> Sequence[NodeVersion]:  # noqa: ARG001
    return ()


class RemoteCatalog:
    """Versions available from each configured remote, annotated against what is installed locally.

    Listings are fetched at most once per remote for the lifetime of the catalog; concurrent callers share the
    in-flight fetch and a failed fetch is retried by the next caller. A catalog is bound to the event loop that
    first uses it.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        local_versions: Callable[[str], Sequence[NodeVersion]] | None = None,
        client: httpx.AsyncClient | None = None,
        cache: CatalogCache | None = None,
        host_os: str | None = None,
    ) -> None:
        self._settings = settings
        self._local_versions = local_versions or _no_local_versions
        self._client = client
        self._cache = cache if cache is not None else DiskCache(settings.cache_dir)
        self._host_os = host_os
        self._fetch = alru_cache(maxsize=None)(self._fetch_uncached)

    @property
    def os(self) -> str:
        return self._host_os or host_os()

    def remote_name(self, remote_name: str | None = None) -> str:
        """Resolve ``None`` / ``default`` to the default remote and check the remote is configured."""
        if not remote_name or remote_name == "default":
            remote_name = self._settings.remotes.get("default") or "node"
        if not self._settings.remotes.get(remote_name):
            raise UnknownRemoteError(remote_name)
        return remote_name

    def source(self, remote_name: str, client: httpx.AsyncClient) -> CatalogSource:
        uri = self._settings.remotes[remote_name]
        if is_releases_uri(uri):
            return GitHubReleasesSource(
                remote_name,
                uri,
                client=client,
                cache=self._cache,
                use_msi=self._settings.use_msi,
                use_xz=self._settings.use_xz,
            )
        if is_abs_path(uri):
            return NetworkShareSource(remote_name, uri, host_os=self.os)
        return IndexSource(
            remote_name,
            uri,
            client=client,
            cache=self._cache,
            use_msi=self._settings.use_msi,
            use_xz=self._settings.use_xz,
        )

    async def fetch_remote_versions(self, remote_name: str | None = None) -> list[NodeVersion]:
        """Versions available from *remote_name* (the default remote when omitted), most recent first.

        :raises UnknownRemoteError: when the remote is not configured
        :raises NotFoundError: when the listing does not exist upstream
        :raises InvalidIndexFormatError: when the listing cannot be interpreted
        :raises InvalidTemplateError: when a network-share remote lacks its path tokens
        :raises FetchError: on transport failures
        """
        return list(await self._fetch(self.remote_name(remote_name)))

    def cache_clear(self) -> None:
        self._fetch.cache_clear()

    async def _fetch_uncached(self, remote_name: str) -> tuple[NodeVersion, ...]:
        async with AsyncExitStack() as stack:
            client = self._client
            if client is None:
                client = await stack.enter_async_context(httpx.AsyncClient())
            versions = await self.source(remote_name, client).fetch()
        return tuple(self._annotate(remote_name, versions))

    def _annotate(self, remote_name: str, versions: Sequence[NodeVersion]) -> list[NodeVersion]:
        local = self._local_versions(remote_name)
        installed = {version.semantic_version for version in local if version.remote_name == remote_name}
        # current and default are compared without their architecture
        current = {(v.remote_name, v.semantic_version) for v in local if v.current and not v.is_path}
        default = {(v.remote_name, v.semantic_version) for v in local if v.default and not v.is_path}
        annotated = []
        for version in versions:
            key = version.remote_name, version.semantic_version
            annotated.append(
                dataclasses.replace(
                    version,
                    local=version.semantic_version in installed,
                    current=key in current,
                    default=key in default,
                ),
            )
        _LOGGER.debug("annotated %d versions of %s (%d installed)", len(annotated), remote_name, len(installed))
        return sort_versions(annotated)


__all__ = [
    "CatalogSource",
    "RemoteCatalog",
]
