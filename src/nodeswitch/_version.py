"""The version model: filters parsed from specifier strings and resolved versions."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._compat import fs_path_id
from ._ordering import compare, equal, version_hash
from ._specifier import parse_semver

if TYPE_CHECKING:
    from collections.abc import Iterable


class SpecialLabel(str, enum.Enum):
    """Filter tokens interpreted as a selection rule rather than matched literally."""

    LATEST = "latest"
    LTS = "lts"
    CURRENT = "current"
    DEFAULT = "default"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, kw_only=True, slots=True)
class Package:
    """A downloadable build of one release for one (os, arch) combination."""

    remote_name: str
    semantic_version: str
    os: str
    arch: str
    uri: str
    ext: str
    shasum_uri: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True, eq=False)
class NodeVersion:
    """A resolved version: a managed remote/version/arch triple, or an alias pointing at a directory.

    ``local``, ``current`` and ``default`` are annotations computed per listing; use
    :func:`dataclasses.replace` to derive an annotated copy.
    """

    remote_name: str | None = None
    semantic_version: str | None = None
    arch: str | None = None
    os: str | None = None
    label: str | None = None
    path: str | None = None
    packages: tuple[Package, ...] = field(default=())
    local: bool = False
    current: bool = False
    default: bool = False

    def __post_init__(self) -> None:
        if self.path is not None and (
            self.semantic_version is not None or self.remote_name is not None or self.arch is not None
        ):
            msg = f"a path based version cannot carry a remote, version or arch: {self.path}"
            raise ValueError(msg)

    @property
    def is_path(self) -> bool:
        return self.path is not None

    def packages_for(self, os: str, arch: str) -> list[Package]:
        return [p for p in self.packages if p.os == os and p.arch == arch]

    def format(self, *, marks: bool = False, label: bool = False) -> str:
        """Format for display, optionally with ``>`` current / ``#`` default / ``*`` installed marks."""
        if self.path is not None:
            text = self.path
        else:
            text = "/".join(part for part in (self.remote_name, self.semantic_version, self.arch) if part)
        if label and self.label:
            text = f"{text} ({self.label})"
        if not marks:
            return text
        prefix = (">" if self.current else "") + ("#" if self.default else "")
        if not prefix and self.local:
            prefix = "*"
        return f"{prefix:>2}{text}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, NodeVersion):
            return NotImplemented
        return equal(self, other)

    def __hash__(self) -> int:
        return version_hash(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, NodeVersion):
            return NotImplemented
        return compare(self, other) < 0

    def __str__(self) -> str:
        return self.format()


@dataclass(frozen=True, kw_only=True, slots=True)
class VersionSpec:
    """A partially populated version used as a filter; absent fields impose no constraint.

    ``special`` set makes this a selection token (latest/lts/current/default), otherwise it is
    a plain structural filter.
    """

    str_spec: str
    remote_name: str | None = None
    semantic_version: str | None = None
    label: str | None = None
    special: SpecialLabel | None = None
    arch: str | None = None
    os: str | None = None
    path: str | None = None
    # alias name the spec was reached through, for display only
    alias: str | None = None

    @property
    def is_special(self) -> bool:
        return self.special is not None

    def match(self, version: NodeVersion) -> bool:
        """Check every present field against *version*, semantic versions by component-wise prefix."""
        if self.path is not None:
            return version.path is not None and fs_path_id(version.path) == fs_path_id(self.path)
        if self.remote_name is not None and version.remote_name != self.remote_name:
            return False
        if self.semantic_version is not None:
            wanted = parse_semver(self.semantic_version)
            candidate = parse_semver(version.semantic_version)
            if wanted is None or candidate is None or not wanted.matches_prefix(candidate):
                return False
        if self.label is not None and (version.label is None or version.label.casefold() != self.label.casefold()):
            return False
        return self.arch is None or version.arch is None or version.arch == self.arch

    def __str__(self) -> str:
        if self.path is not None:
            return self.path
        selector = self.semantic_version or (str(self.special) if self.special else None) or self.label
        return "/".join(part for part in (self.remote_name, selector, self.arch) if part)


def format_versions(versions: Iterable[NodeVersion], *, marks: bool = True, label: bool = True) -> list[str]:
    return [version.format(marks=marks, label=label) for version in versions]


__all__ = [
    "NodeVersion",
    "Package",
    "SpecialLabel",
    "VersionSpec",
    "format_versions",
]
