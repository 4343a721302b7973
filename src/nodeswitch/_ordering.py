"""Total ordering and equality over versions, and the display order used for listings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._compat import fs_path_id
from ._specifier import parse_semver

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._version import NodeVersion

_Key = tuple[object, ...]


def _semver_key(semantic_version: str | None) -> _Key:
    if semantic_version is None:
        return (0,)
    parsed = parse_semver(semantic_version)
    if parsed is None:
        # unparsable versions sort after parsable ones, by their text
        return 2, semantic_version
    return 1, parsed.sort_key


def _optional(value: str | None) -> tuple[int, str]:
    return (0, "") if value is None else (1, value)


def _key(version: NodeVersion) -> _Key:
    if version.path is not None:
        return 1, fs_path_id(version.path)
    return 0, _optional(version.remote_name), _semver_key(version.semantic_version), _optional(version.arch)


def compare(a: NodeVersion, b: NodeVersion) -> int:
    """Ascending comparison: remote, then numeric semantic version, then arch; path aliases last."""
    key_a, key_b = _key(a), _key(b)
    return (key_a > key_b) - (key_a < key_b)


def equal(a: NodeVersion, b: NodeVersion) -> bool:
    """Same installed version: remote, semantic version and arch match (path aliases compare by path)."""
    if a.path is not None or b.path is not None:
        return a.path is not None and b.path is not None and fs_path_id(a.path) == fs_path_id(b.path)
    return a.remote_name == b.remote_name and a.semantic_version == b.semantic_version and a.arch == b.arch


def version_hash(version: NodeVersion) -> int:
    if version.path is not None:
        return hash(fs_path_id(version.path))
    return hash((version.remote_name, version.semantic_version, version.arch))


class _Descending:
    __slots__ = ("key",)

    def __init__(self, key: _Key) -> None:
        self.key = key

    def __lt__(self, other: _Descending) -> bool:
        return self.key > other.key

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Descending) and self.key == other.key


def display_key(version: NodeVersion) -> _Key:
    """Listing order: remote ascending, most recent version first, arch ascending, path aliases last."""
    if version.path is not None:
        return 1, fs_path_id(version.path)
    return (
        0,
        _optional(version.remote_name),
        _Descending(_semver_key(version.semantic_version)),
        _optional(version.arch),
    )


def sort_versions(versions: Iterable[NodeVersion]) -> list[NodeVersion]:
    return sorted(versions, key=display_key)


__all__ = [
    "compare",
    "display_key",
    "equal",
    "sort_versions",
    "version_hash",
]
