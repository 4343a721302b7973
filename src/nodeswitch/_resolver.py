"""Select one concrete version (or a filtered listing) for a filter out of a sorted candidate set."""

from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Final

from ._compat import host_arch, host_os
from ._ordering import sort_versions
from ._specifier import SemverRange, parse_semver
from ._version import NodeVersion, SpecialLabel, VersionSpec

if TYPE_CHECKING:
    from collections.abc import Sequence

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


class VersionResolver:
    """Matches filters against candidates that are already in display order (most recent first)."""

    def __init__(self, host_arch: str | None = None, host_os: str | None = None) -> None:
        self._host_arch = host_arch
        self._host_os = host_os

    @property
    def default_arch(self) -> str:
        return self._host_arch or host_arch()

    @property
    def default_os(self) -> str:
        return self._host_os or host_os()

    def find(self, spec: VersionSpec, candidates: Sequence[NodeVersion]) -> NodeVersion | None:
        """Resolve *spec* to the single best candidate, or ``None`` when nothing matches."""
        matches = self._narrow(spec, candidates)
        archs = {version.arch for version in matches if version.arch is not None}
        if len(archs) > 1:
            wanted = spec.arch or self.default_arch
            _LOGGER.debug("candidates span architectures %s, narrowing to %s", sorted(archs), wanted)
            matches = [version for version in matches if version.arch in {None, wanted}]
        if not matches:
            _LOGGER.info("no version matches %s", spec)
            return None
        winner = matches[0]
        resolved = NodeVersion(
            remote_name=winner.remote_name,
            semantic_version=winner.semantic_version,
            arch=None if winner.is_path else winner.arch or spec.arch or self.default_arch,
            os=winner.os or spec.os or self.default_os,
            label=winner.label,
            path=winner.path,
            packages=winner.packages,
            local=winner.local,
            current=winner.current,
            default=winner.default,
        )
        _LOGGER.info("resolved %s to %s", spec, resolved)
        return resolved

    def filter(self, spec: VersionSpec | None, candidates: Sequence[NodeVersion]) -> list[NodeVersion]:
        """Every candidate matching *spec*, for display; architectures are never disambiguated here."""
        if spec is None:
            return list(candidates)
        matches = self._narrow(spec, candidates)
        if spec.special is SpecialLabel.LATEST:
            return matches[:1]
        return matches

    def _narrow(self, spec: VersionSpec, candidates: Sequence[NodeVersion]) -> list[NodeVersion]:
        special = spec.special
        structural = dataclasses.replace(spec, special=None) if special is not None else spec
        matches = [version for version in candidates if structural.match(version) and self._has_package(spec, version)]
        if special is SpecialLabel.LATEST:
            matches = [version for version in matches if not version.is_path]
        elif special is SpecialLabel.LTS:
            matches = [version for version in matches if not version.is_path and version.label]
        elif special is SpecialLabel.CURRENT:
            matches = [version for version in matches if version.current]
        elif special is SpecialLabel.DEFAULT:
            matches = [version for version in matches if version.default]
        return matches

    def _has_package(self, spec: VersionSpec, version: NodeVersion) -> bool:
        # a catalog entry without an arch can only satisfy an arch it ships a package for
        if spec.arch is None or version.arch is not None or not version.packages:
            return True
        return bool(version.packages_for(spec.os or self.default_os, spec.arch))

    def find_updates(
        self,
        version: NodeVersion,
        candidates: Sequence[NodeVersion],
    ) -> tuple[NodeVersion | None, NodeVersion | None]:
        """Newest newer candidates within ``~version`` (patch) and ``^version`` (minor) of the same remote."""
        current = parse_semver(version.semantic_version)
        if current is None or version.is_path:
            return None, None
        newer = [
            candidate
            for candidate in sort_versions(candidates)
            if candidate.remote_name == version.remote_name
            and (parsed := parse_semver(candidate.semantic_version)) is not None
            and parsed > current
        ]
        patch = self._first_in(SemverRange(range_str=f"~{current}", operator="~", version=current), newer)
        minor = self._first_in(SemverRange(range_str=f"^{current}", operator="^", version=current), newer)
        if minor is not None and patch is not None and minor.semantic_version == patch.semantic_version:
            minor = None
        return patch, minor

    @staticmethod
    def _first_in(semver_range: SemverRange, candidates: Sequence[NodeVersion]) -> NodeVersion | None:
        for candidate in candidates:
            if candidate.semantic_version is not None and semver_range.contains(candidate.semantic_version):
                return candidate
        return None

    def find_upgrade(self, version: NodeVersion, candidates: Sequence[NodeVersion]) -> NodeVersion | None:
        """Newest candidate of the same remote and major version, with a build for *version*'s os and arch."""
        current = parse_semver(version.semantic_version)
        if current is None or version.is_path:
            return None
        os, arch = version.os or self.default_os, version.arch or self.default_arch
        filter_spec = VersionSpec(
            str_spec=f"{version.remote_name}/{current.major}/{arch}",
            remote_name=version.remote_name,
            semantic_version=str(current.major),
            arch=arch,
            os=os,
        )
        for candidate in sort_versions(candidates):
            if not filter_spec.match(candidate) or not candidate.packages_for(os, arch):
                continue
            parsed = parse_semver(candidate.semantic_version)
            if parsed is not None and parsed > current:
                _LOGGER.info("upgrade for %s is %s", version, candidate.semantic_version)
                return dataclasses.replace(candidate, arch=arch, os=os)
            break
        return None


__all__ = [
    "VersionResolver",
]
