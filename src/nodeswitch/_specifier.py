"""Semantic versions and node-style version ranges, using only the standard library."""

from __future__ import annotations

import contextlib
import operator
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterator

_VERSION_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    v?                  # optional leading v
    (\d+)               # major
    (?:\.(\d+))?        # optional minor
    (?:\.(\d+))?        # optional patch
    (?:-(.+))?          # optional free-form pre-release tag
    $
    """,
    re.VERBOSE | re.IGNORECASE,
)
_RANGE_RE: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    (\^|~|>=|<=|>|<|=)?  # operator, a bare version means equality
    \s*
    (.+)                 # version string
    $
    """,
    re.VERBOSE,
)
_FULL_PRECISION: Final[int] = 3


@dataclass(frozen=True, slots=True)
class SemanticVersion:
    """A ``MAJOR[.MINOR[.PATCH]][-prerelease]`` version with numeric components."""

    version_str: str
    parts: tuple[int, ...]
    prerelease: str | None

    @classmethod
    def from_string(cls, version_str: str) -> SemanticVersion:
        stripped = version_str.strip()
        if not (match := _VERSION_RE.match(stripped)):
            msg = f"Invalid version: {version_str}"
            raise ValueError(msg)
        parts = tuple(int(group) for group in match.group(1, 2, 3) if group is not None)
        prerelease = match.group(4)
        if prerelease is not None and len(parts) < _FULL_PRECISION:
            msg = f"Invalid version: {version_str}"
            raise ValueError(msg)
        text = ".".join(str(part) for part in parts)
        if prerelease is not None:
            text = f"{text}-{prerelease}"
        return cls(version_str=text, parts=parts, prerelease=prerelease)

    @property
    def major(self) -> int:
        return self.parts[0]

    @property
    def minor(self) -> int:
        return self.release[1]

    @property
    def patch(self) -> int:
        return self.release[2]

    @property
    def release(self) -> tuple[int, int, int]:
        major, minor, patch = (*self.parts, 0, 0)[:_FULL_PRECISION]
        return major, minor, patch

    @property
    def is_complete(self) -> bool:
        return len(self.parts) == _FULL_PRECISION

    @property
    def sort_key(self) -> tuple[tuple[int, int, int], int, str]:
        # a pre-release sorts before the release it qualifies
        return self.release, 0 if self.prerelease is not None else 1, self.prerelease or ""

    def matches_prefix(self, candidate: SemanticVersion) -> bool:
        """Component-wise prefix match: ``5.6`` matches ``5.6.7`` and ``5.6.7-rc1`` but not ``5.60.0``."""
        if self.prerelease is not None:
            return candidate.version_str == self.version_str
        return candidate.parts[: len(self.parts)] == self.parts

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.sort_key < other.sort_key

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.sort_key <= other.sort_key

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.sort_key > other.sort_key

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self.sort_key >= other.sort_key

    def __str__(self) -> str:
        return self.version_str

    def __repr__(self) -> str:
        return f"SemanticVersion('{self.version_str}')"


def parse_semver(version_str: str | None) -> SemanticVersion | None:
    """Parse *version_str*, returning ``None`` for missing or malformed input."""
    if not version_str:
        return None
    with contextlib.suppress(ValueError):
        return SemanticVersion.from_string(version_str)
    return None


@dataclass(frozen=True, slots=True)
class SemverRange:
    """A single node-style comparator such as ``^5.6.7``, ``~5.6``, ``>=4.0.0`` or ``6.2``."""

    range_str: str
    operator: str
    version: SemanticVersion

    @classmethod
    def from_string(cls, range_str: str) -> SemverRange:
        stripped = range_str.strip()
        if not (match := _RANGE_RE.match(stripped)):
            msg = f"Invalid range: {range_str}"
            raise ValueError(msg)
        try:
            version = SemanticVersion.from_string(match.group(2).strip())
        except ValueError as exc:
            msg = f"Invalid range: {range_str}"
            raise ValueError(msg) from exc
        return cls(range_str=stripped, operator=match.group(1) or "=", version=version)

    def contains(self, candidate: SemanticVersion | str) -> bool:
        """Check if a version satisfies this comparator."""
        if isinstance(candidate, str):
            try:
                candidate = SemanticVersion.from_string(candidate)
            except ValueError:
                return False
        if self.operator == "^":
            return candidate >= self.version and candidate.release < self._caret_upper()
        if self.operator == "~":
            return candidate >= self.version and candidate.release < self._tilde_upper()
        if self.operator == "=":
            return self.version.matches_prefix(candidate)
        cmp_ops = {
            "<": operator.lt,
            "<=": operator.le,
            ">": operator.gt,
            ">=": operator.ge,
        }
        return cmp_ops[self.operator](candidate.sort_key, self.version.sort_key)

    def _caret_upper(self) -> tuple[int, int, int]:
        major, minor, patch = self.version.release
        if major or len(self.version.parts) == 1:
            return major + 1, 0, 0
        if minor or len(self.version.parts) == 2:  # noqa: PLR2004
            return 0, minor + 1, 0
        return 0, 0, patch + 1

    def _tilde_upper(self) -> tuple[int, int, int]:
        major, minor, _ = self.version.release
        if len(self.version.parts) == 1:
            return major + 1, 0, 0
        return major, minor + 1, 0

    def __str__(self) -> str:
        return self.range_str

    def __repr__(self) -> str:
        return f"SemverRange('{self.range_str}')"


@dataclass(frozen=True, slots=True)
class SemverRangeSet:
    """A space-separated conjunction of comparators; empty or ``*`` matches everything."""

    ranges_str: str
    ranges: tuple[SemverRange, ...]

    @classmethod
    def from_string(cls, ranges_str: str = "") -> SemverRangeSet:
        stripped = ranges_str.strip()
        items = [item for item in stripped.split() if item != "*"]
        return cls(ranges_str=stripped, ranges=tuple(SemverRange.from_string(item) for item in items))

    def contains(self, candidate: SemanticVersion | str) -> bool:
        """Check if a version satisfies all comparators in the set."""
        return all(item.contains(candidate) for item in self.ranges)

    def __iter__(self) -> Iterator[SemverRange]:
        return iter(self.ranges)

    def __str__(self) -> str:
        return self.ranges_str

    def __repr__(self) -> str:
        return f"SemverRangeSet('{self.ranges_str}')"


__all__ = [
    "SemanticVersion",
    "SemverRange",
    "SemverRangeSet",
    "parse_semver",
]
