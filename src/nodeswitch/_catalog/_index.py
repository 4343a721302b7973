"""Catalog source reading a dist server's ``index.json`` manifest."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Final

from nodeswitch._compat import normalize_os
from nodeswitch._errors import InvalidIndexFormatError
from nodeswitch._specifier import parse_semver
from nodeswitch._version import NodeVersion, Package

from ._http import fetch_json
from ._packages import package_file_name, select_extension

if TYPE_CHECKING:
    import httpx

    from nodeswitch._cache import CatalogCache
    from nodeswitch._specifier import SemanticVersion

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

# the oldest minor of the 0.x line still listed
_MIN_LEGACY_MINOR: Final[int] = 7
_NOT_PLATFORMS: Final[frozenset[str]] = frozenset({"src", "headers"})


def is_legacy(version: SemanticVersion) -> bool:
    return version.major == 0 and version.minor < _MIN_LEGACY_MINOR


def platforms(files: list[Any]) -> list[tuple[str, str]]:
    """Distinct ``(os, arch)`` pairs named by an index entry's ``files`` list (``win-x64-7z``, ``osx-x64-tar``, ...)."""
    result: list[tuple[str, str]] = []
    for entry in files:
        if not isinstance(entry, str):
            continue
        parts = entry.split("-")
        if len(parts) < 2 or parts[0] in _NOT_PLATFORMS:  # noqa: PLR2004
            continue
        pair = normalize_os(parts[0]), parts[1]
        if pair not in result:
            result.append(pair)
    return result


class IndexSource:
    """Releases listed by ``<uri>/index.json``, one package per platform the release ships."""

    def __init__(  # noqa: PLR0913
        self,
        remote_name: str,
        uri: str,
        *,
        client: httpx.AsyncClient,
        cache: CatalogCache,
        use_msi: bool = False,
        use_xz: bool = False,
    ) -> None:
        self.remote_name = remote_name
        self.base_uri = uri if uri.endswith("/") else f"{uri}/"
        self._client = client
        self._cache = cache
        self._use_msi = use_msi
        self._use_xz = use_xz

    @property
    def index_uri(self) -> str:
        return f"{self.base_uri}index.json"

    async def fetch(self) -> list[NodeVersion]:
        body = await fetch_json(self._client, self.index_uri, self._cache, what="index")
        if not isinstance(body, list):
            msg = f"Remote index.json is not an array: {self.index_uri}"
            raise InvalidIndexFormatError(msg)
        versions = [version for item in body if (version := self._to_version(item)) is not None]
        _LOGGER.info("remote %s lists %d versions", self.remote_name, len(versions))
        return versions

    def _to_version(self, item: Any) -> NodeVersion | None:  # noqa: ANN401
        tag = item.get("version") if isinstance(item, dict) else None
        if not isinstance(tag, str) or not tag.startswith("v"):
            _LOGGER.debug("skipping index entry without a version tag: %r", item)
            return None
        parsed = parse_semver(tag)
        if parsed is None or not parsed.is_complete or is_legacy(parsed):
            _LOGGER.debug("skipping index entry %s", tag)
            return None
        semantic_version = parsed.version_str
        lts = item.get("lts")
        return NodeVersion(
            remote_name=self.remote_name,
            semantic_version=semantic_version,
            label=lts if isinstance(lts, str) and lts else None,
            packages=tuple(
                self._package(semantic_version, os, arch) for os, arch in platforms(item.get("files") or [])
            ),
        )

    def _package(self, semantic_version: str, os: str, arch: str) -> Package:
        ext = select_extension(os, semantic_version, use_msi=self._use_msi, use_xz=self._use_xz)
        release_uri = f"{self.base_uri}v{semantic_version}/"
        return Package(
            remote_name=self.remote_name,
            semantic_version=semantic_version,
            os=os,
            arch=arch,
            uri=release_uri + package_file_name(os, arch, semantic_version, ext),
            ext=ext,
            shasum_uri=f"{release_uri}SHASUMS256.txt",
        )


__all__ = [
    "IndexSource",
    "is_legacy",
    "platforms",
]
