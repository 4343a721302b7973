"""Catalog source scanning a local directory or network share laid out by a path template."""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Final

from nodeswitch._errors import InvalidTemplateError, NotFoundError
from nodeswitch._specifier import parse_semver
from nodeswitch._version import NodeVersion, Package

from ._packages import split_extension

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

VERSION_TOKEN: Final[str] = "{version}"
ARCH_TOKEN: Final[str] = "{arch}"
OS_TOKEN: Final[str] = "{os}"
PROBE_ARCHS: Final[tuple[str, ...]] = ("x86", "x64", "arm64")


class NetworkShareSource:
    """Versions found under a path template such as ``\\\\server\\share\\node\\{version}\\{arch}.msi``.

    Every directory matching ``{version}`` is a candidate; it is listed when an archive exists for at least one of
    :data:`PROBE_ARCHS`. Candidates that cannot be inspected are left out.
    """

    def __init__(self, remote_name: str, template: str, *, host_os: str) -> None:
        self.remote_name = remote_name
        self.template = template.replace("\\", os.sep).replace("/", os.sep)
        self._host_os = host_os
        if VERSION_TOKEN not in self.template or ARCH_TOKEN not in self.template:
            msg = (
                f"Invalid network path for remote: {remote_name}; "
                f"{VERSION_TOKEN} and {ARCH_TOKEN} tokens are required."
            )
            raise InvalidTemplateError(msg)

    @property
    def base_dir(self) -> Path:
        head = self.template[: self.template.index(VERSION_TOKEN)]
        # a token in the middle of a directory name excludes that whole directory
        return Path(head) if head.endswith(os.sep) else Path(head).parent

    def _version_in(self, name: str) -> str | None:
        start = self.template.index(VERSION_TOKEN)
        prefix = self.template[:start].rsplit(os.sep, 1)[-1]
        suffix = self.template[start + len(VERSION_TOKEN) :].split(os.sep, 1)[0]
        if not name.startswith(prefix) or not name.endswith(suffix) or len(name) <= len(prefix) + len(suffix):
            return None
        return name[len(prefix) : len(name) - len(suffix)]

    def version_dir(self, version: str) -> Path:
        end = self.template.index(VERSION_TOKEN) + len(VERSION_TOKEN)
        return Path(self.template[:end].replace(VERSION_TOKEN, version))

    def archive_path(self, version: str, arch: str) -> Path:
        return Path(
            self.template.replace(VERSION_TOKEN, version).replace(OS_TOKEN, self._host_os).replace(ARCH_TOKEN, arch),
        )

    async def fetch(self) -> list[NodeVersion]:
        return await asyncio.to_thread(self._scan)

    def _scan(self) -> list[NodeVersion]:
        base_dir = self.base_dir
        try:
            children = sorted(entry.name for entry in base_dir.iterdir())
        except OSError as exc:
            msg = f"Failed to access base directory for remote {self.remote_name}"
            raise NotFoundError(msg, str(base_dir)) from exc
        _LOGGER.info("scanning %d entries of %s", len(children), base_dir)
        versions = []
        for child in children:
            if (version := self._probe(child)) is not None:
                versions.append(version)
        return versions

    def _probe(self, child: str) -> NodeVersion | None:
        text = self._version_in(child)
        parsed = parse_semver(text)
        if text is None or parsed is None or not parsed.is_complete or text.startswith(("v", "V")):
            return None
        packages = []
        try:
            if not self.version_dir(text).is_dir():
                return None
            for arch in PROBE_ARCHS:
                archive = self.archive_path(text, arch)
                if archive.is_file():
                    packages.append(
                        Package(
                            remote_name=self.remote_name,
                            semantic_version=parsed.version_str,
                            os=self._host_os,
                            arch=arch,
                            uri=str(archive),
                            ext=split_extension(archive.name)[1],
                        ),
                    )
        except OSError as exc:
            _LOGGER.debug("skipping %s: %s", text, exc)
            return None
        if not packages:
            _LOGGER.debug("no archive found for %s", text)
            return None
        return NodeVersion(remote_name=self.remote_name, semantic_version=parsed.version_str, packages=tuple(packages))


__all__ = [
    "PROBE_ARCHS",
    "NetworkShareSource",
]
