"""One entry point wiring the parser, resolver, local scan and remote catalog from a settings snapshot."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Final

from ._catalog import RemoteCatalog
from ._errors import InvalidFormatError
from ._local import LocalVersions, find_version_file
from ._resolver import VersionResolver
from ._spec_parser import VersionParser
from ._version import format_versions

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

    import httpx

    from ._cache import CatalogCache
    from ._settings import Settings
    from ._version import NodeVersion, VersionSpec

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


class VersionManager:
    """Resolve and list versions, locally installed or available from the configured remotes."""

    def __init__(  # noqa: PLR0913
        self,
        settings: Settings,
        *,
        client: httpx.AsyncClient | None = None,
        cache: CatalogCache | None = None,
        env: Mapping[str, str] | None = None,
        host_os: str | None = None,
        host_arch: str | None = None,
    ) -> None:
        self.settings = settings
        self.parser = VersionParser(settings.remotes, settings.aliases, host_os=host_os)
        self.resolver = VersionResolver(host_arch=host_arch, host_os=host_os)
        self.local = LocalVersions(settings, self.parser, env=env, host_os=host_os)
        self.catalog = RemoteCatalog(
            settings,
            local_versions=self.local.get_versions,
            client=client,
            cache=cache,
            host_os=host_os,
        )

    def resolve_local(self, text: str) -> NodeVersion | None:
        """The installed version (or directory alias) *text* selects."""
        return self.resolver.find(self.parser.parse(text), self.local.get_versions())

    async def resolve_remote(self, text: str) -> NodeVersion | None:
        """The downloadable version *text* selects, with its packages."""
        spec = self.parser.parse(text)
        if spec.path is not None:
            return None
        versions = await self.catalog.fetch_remote_versions(spec.remote_name)
        return self.resolver.find(spec, versions)

    def list_local(self, text: str | None = None) -> list[str]:
        spec = self.parser.parse(text) if text else None
        return format_versions(self.resolver.filter(spec, self.local.get_versions()))

    async def list_remote(self, text: str | None = None) -> list[str]:
        spec = self.parser.parse(text) if text else None
        versions = await self.catalog.fetch_remote_versions(spec.remote_name if spec is not None else None)
        return format_versions(self.resolver.filter(spec, versions))

    async def list_outdated(self) -> list[str]:
        """Installed versions, each followed by its newest ``[~patch]`` and ``[^minor]`` update when there is one."""
        installed = [version for version in self.local.get_versions() if not version.is_path]
        remote_names = sorted({str(version.remote_name) for version in installed})
        _LOGGER.debug("checking %d installed versions against %s", len(installed), ", ".join(remote_names))
        listings = await asyncio.gather(*(self.catalog.fetch_remote_versions(name) for name in remote_names))
        available = dict(zip(remote_names, listings))
        lines = []
        for version in installed:
            patch, minor = self.resolver.find_updates(version, available[str(version.remote_name)])
            line = version.format(marks=True)
            if patch is not None:
                line += f" [~{patch.semantic_version}]"
            if minor is not None:
                line += f" [^{minor.semantic_version}]"
            lines.append(line)
        return lines

    async def find_upgrade(self, text: str) -> NodeVersion | None:
        """The newest release in the same major line as the installed version *text* selects."""
        version = self.resolve_local(text)
        if version is None or version.is_path:
            return None
        versions = await self.catalog.fetch_remote_versions(version.remote_name)
        return self.resolver.find_upgrade(version, versions)

    def auto_spec(self, cwd: Path) -> VersionSpec | None:
        """The version requested by the nearest ``.node-version`` / ``.nvmrc`` file, if any."""
        if (found := find_version_file(cwd)) is None:
            return None
        version_file, text = found
        try:
            return self.parser.parse(text)
        except InvalidFormatError as exc:
            msg = f"Failed to parse version in file: {version_file}"
            raise InvalidFormatError(msg) from exc


__all__ = [
    "VersionManager",
]
