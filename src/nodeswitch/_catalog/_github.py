"""Catalog source reading the assets of a GitHub repository's releases."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Final

from nodeswitch._compat import normalize_arch, normalize_os
from nodeswitch._errors import InvalidIndexFormatError, InvalidTemplateError
from nodeswitch._specifier import parse_semver
from nodeswitch._version import NodeVersion, Package

from ._http import fetch_json
from ._packages import preferred_extension, split_extension

if TYPE_CHECKING:
    import httpx

    from nodeswitch._cache import CatalogCache

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

RELEASES_URI_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    https?://github\.com/
    (?P<owner>[^/]+)/
    (?P<repo>[^/]+)/
    releases/?
    (?P<asset_filter>.*)    # optional regex over asset file names
    $
    """,
    re.VERBOSE | re.IGNORECASE,
)
ASSET_STEM_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    (?P<name>.+?)
    -v(?P<version>\d+\.\d+\.\d+(?:-.+?)?)
    (?:-(?P<os>win|darwin|osx|linux|aix|sunos|freebsd|openbsd))?
    -(?P<arch>[A-Za-z0-9_]+)
    $
    """,
    re.VERBOSE,
)
SHASUMS_ASSET: Final[str] = "SHASUMS256.txt"
API_ROOT: Final[str] = "https://api.github.com"


def is_releases_uri(uri: str) -> bool:
    return RELEASES_URI_PATTERN.match(uri) is not None


def parse_asset_name(file_name: str) -> tuple[str, str, str, str] | None:
    """Split ``<name>-v<ver>-<os>-<arch><ext>`` into ``(version, os, arch, ext)``; MSI names carry no os."""
    stem, ext = split_extension(file_name)
    if not ext or not (match := ASSET_STEM_PATTERN.match(stem)):
        return None
    os = match.group("os")
    if os is None:
        if ext != ".msi":
            return None
        os = "win"
    return match.group("version"), normalize_os(os), normalize_arch(match.group("arch")), ext


class GitHubReleasesSource:
    """Releases of ``github.com/<owner>/<repo>``, one package per platform found among the release assets."""

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
        if not (match := RELEASES_URI_PATTERN.match(uri)):
            msg = f"Not a GitHub releases URI: {uri}"
            raise ValueError(msg)
        self.remote_name = remote_name
        self.owner, self.repo = match.group("owner"), match.group("repo")
        asset_filter = match.group("asset_filter")
        try:
            self.asset_filter = re.compile(asset_filter) if asset_filter else None
        except re.error as exc:
            msg = f"Invalid asset filter for remote {remote_name}: {asset_filter}"
            raise InvalidTemplateError(msg) from exc
        self._client = client
        self._cache = cache
        self._use_msi = use_msi
        self._use_xz = use_xz

    @property
    def api_uri(self) -> str:
        return f"{API_ROOT}/repos/{self.owner}/{self.repo}/releases"

    async def fetch(self) -> list[NodeVersion]:
        body = await fetch_json(
            self._client,
            self.api_uri,
            self._cache,
            what="releases",
            headers={"Accept": "application/vnd.github+json"},
            include_body=True,
        )
        if not isinstance(body, list):
            msg = f"GitHub releases response is not an array: {self.api_uri}"
            raise InvalidIndexFormatError(msg)
        versions = [version for release in body if (version := self._to_version(release)) is not None]
        _LOGGER.info("remote %s lists %d releases", self.remote_name, len(versions))
        return versions

    def _to_version(self, release: Any) -> NodeVersion | None:  # noqa: ANN401
        if not isinstance(release, dict) or release.get("draft"):
            return None
        parsed = parse_semver(release.get("tag_name"))
        if parsed is None or not parsed.is_complete:
            _LOGGER.debug("skipping release with tag %r", release.get("tag_name"))
            return None
        semantic_version = parsed.version_str

        shasum_uri: str | None = None
        found: dict[tuple[str, str], dict[str, str]] = {}
        for asset in release.get("assets") or []:
            uri = asset.get("browser_download_url") if isinstance(asset, dict) else None
            if not isinstance(uri, str):
                continue
            file_name = uri.rsplit("/", 1)[-1]
            if file_name == SHASUMS_ASSET:
                shasum_uri = uri
                continue
            if self.asset_filter is not None and not self.asset_filter.search(file_name):
                continue
            if (asset_info := parse_asset_name(file_name)) is None or asset_info[0] != semantic_version:
                continue
            _, os, arch, ext = asset_info
            found.setdefault((os, arch), {})[ext] = uri

        packages = []
        for (os, arch), by_ext in found.items():
            ext = preferred_extension(os, set(by_ext), use_msi=self._use_msi, use_xz=self._use_xz)
            if ext is None:
                continue
            packages.append(
                Package(
                    remote_name=self.remote_name,
                    semantic_version=semantic_version,
                    os=os,
                    arch=arch,
                    uri=by_ext[ext],
                    ext=ext,
                    shasum_uri=shasum_uri,
                ),
            )
        if not packages:
            _LOGGER.debug("release %s has no usable assets", semantic_version)
            return None
        return NodeVersion(remote_name=self.remote_name, semantic_version=semantic_version, packages=tuple(packages))


__all__ = [
    "GitHubReleasesSource",
    "is_releases_uri",
    "parse_asset_name",
]
