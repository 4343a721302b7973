"""Versions installed under the managed home directory, and which of them is current or default."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Final

from ._catalog._packages import binary_name
from ._compat import fs_path_id, host_os, is_abs_path
from ._errors import NodeSwitchError
from ._ordering import equal, sort_versions
from ._specifier import parse_semver
from ._version import NodeVersion

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._settings import Settings
    from ._spec_parser import VersionParser

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

LINK_NAME: Final[str] = "default"
PROPERTIES_FILE: Final[str] = ".nvs"
VERSION_FILES: Final[tuple[str, ...]] = (".node-version", ".nvmrc")
_SKIP_DIRS: Final[frozenset[str]] = frozenset({"node_modules", "cache", LINK_NAME})


def _child_dirs(folder: Path) -> list[Path]:
    try:
        return sorted(entry for entry in folder.iterdir() if entry.is_dir() and not entry.is_symlink())
    except (FileNotFoundError, NotADirectoryError):
        return []


def find_version_file(start: Path) -> tuple[Path, str] | None:
    """Nearest ``.node-version`` (or ``.nvmrc``) in *start* or a parent, with its first meaningful line."""
    folder = start.resolve()
    for candidate_dir in (folder, *folder.parents):
        for name in VERSION_FILES:
            version_file = candidate_dir / name
            try:
                content = version_file.read_text(encoding="utf-8")
            except (FileNotFoundError, IsADirectoryError, NotADirectoryError):
                continue
            for line in content.splitlines():
                if (text := line.strip()) and not text.startswith("#"):
                    _LOGGER.debug("found version %s in %s", text, version_file)
                    return version_file, text
    return None


class LocalVersions:
    """Scans ``<home>/<remote>/<version>/<arch>`` for installed versions."""

    def __init__(
        self,
        settings: Settings,
        parser: VersionParser,
        env: Mapping[str, str] | None = None,
        host_os: str | None = None,
    ) -> None:
        self._settings = settings
        self._parser = parser
        self._env = os.environ if env is None else env
        self._host_os = host_os

    @property
    def home(self) -> Path:
        return self._settings.home

    @property
    def os(self) -> str:
        return self._host_os or host_os()

    def version_dir(self, version: NodeVersion) -> Path:
        if version.path is not None:
            return Path(version.path)
        return self.home / str(version.remote_name) / str(version.semantic_version) / str(version.arch)

    def version_binary(self, version: NodeVersion) -> Path | None:
        """The executable of an installed version, ``None`` when it is not installed."""
        folder = self.version_dir(version)
        names = ("node",)
        if version.semantic_version is not None:
            names = tuple(dict.fromkeys((binary_name(version.semantic_version), "node")))
        for name in names:
            binary = folder / f"{name}.exe" if self.os == "win" else folder / "bin" / name
            if binary.is_file():
                return binary
        return None

    def installed(self, remote_name: str | None = None) -> list[NodeVersion]:
        """Installed versions of *remote_name* (every remote when omitted), in directory order."""
        remotes = [self.home / remote_name] if remote_name else _child_dirs(self.home)
        result = []
        for remote_dir in remotes:
            if remote_dir.name in _SKIP_DIRS:
                continue
            for version_dir in _child_dirs(remote_dir):
                for arch_dir in _child_dirs(version_dir):
                    text = f"{remote_dir.name}/{version_dir.name}/{arch_dir.name}"
                    if (version := self._from_relative(text)) is None:
                        continue
                    if self.version_binary(version) is None:
                        _LOGGER.debug("%s has no binary, skipping", arch_dir)
                        continue
                    result.append(dataclasses.replace(version, label=self._label(arch_dir)))
        return result

    def current(self) -> NodeVersion | None:
        """The version whose directory is the first entry of ``PATH`` under the home directory."""
        home = str(self.home).rstrip(os.sep) + os.sep
        home_id = fs_path_id(home)
        for entry in self._env.get("PATH", "").split(os.pathsep):
            entry = entry.rstrip(os.sep)  # noqa: PLW2901
            if len(entry) <= len(home) or fs_path_id(entry[: len(home)]) != home_id:
                continue
            if self.os != "win":
                if not entry.endswith(f"{os.sep}bin"):
                    continue
                entry = entry[: -len(f"{os.sep}bin")]  # noqa: PLW2901
            relative = entry[len(home) :].replace(os.sep, "/")
            if relative == LINK_NAME:
                return self.linked()
            if (version := self._from_relative(relative)) is not None:
                return version
        return None

    def linked(self) -> NodeVersion | None:
        """The version the ``<home>/default`` link points at."""
        link = self.home / LINK_NAME
        if not link.is_symlink():
            return None
        target = Path(os.readlink(link))
        if not target.is_absolute():
            target = link.parent / target
        try:
            relative = target.relative_to(self.home)
        except ValueError:
            _LOGGER.debug("default link %s points outside %s", target, self.home)
            return None
        return self._from_relative(relative.as_posix().rstrip("/"))

    def get_versions(self, remote_name: str | None = None) -> list[NodeVersion]:
        """Installed versions plus directory aliases, flagged current/default, in display order."""
        versions = self.installed(remote_name)
        versions.extend(
            NodeVersion(label=name, path=target)
            for name, target in self._settings.aliases.items()
            if is_abs_path(target)
        )
        current, default = self.current(), self.linked()
        annotated = [
            dataclasses.replace(
                version,
                current=current is not None and equal(current, version),
                default=default is not None and equal(default, version),
            )
            for version in versions
        ]
        return sort_versions(annotated)

    def _from_relative(self, text: str) -> NodeVersion | None:
        try:
            spec = self._parser.parse(text, require_full=True)
        except NodeSwitchError:
            _LOGGER.debug("%s is not a version directory", text)
            return None
        parsed = parse_semver(spec.semantic_version)
        if spec.path is not None or parsed is None or not parsed.is_complete:
            return None
        return NodeVersion(
            remote_name=spec.remote_name,
            semantic_version=spec.semantic_version,
            arch=spec.arch,
            os=self.os,
        )

    @staticmethod
    def _label(version_dir: Path) -> str | None:
        try:
            properties = json.loads((version_dir / PROPERTIES_FILE).read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except ValueError:
            _LOGGER.debug("ignoring unreadable %s in %s", PROPERTIES_FILE, version_dir)
            return None
        return properties.get("label") if isinstance(properties, dict) else None


__all__ = [
    "LINK_NAME",
    "VERSION_FILES",
    "LocalVersions",
    "find_version_file",
]
