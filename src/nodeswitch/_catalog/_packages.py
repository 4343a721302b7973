"""Which archive format a release ships for a platform, as an auditable table of version ranges."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from nodeswitch._specifier import SemanticVersion, SemverRangeSet


@dataclass(frozen=True, slots=True)
class ExtensionRule:
    """Releases within ``versions`` on platform family ``family`` are packaged as ``ext``."""

    family: str
    versions: SemverRangeSet
    ext: str
    reason: str

    def applies(self, family: str, version: SemanticVersion) -> bool:
        return family == self.family and self.versions.contains(version)


def _rule(family: str, versions: str, ext: str, reason: str) -> ExtensionRule:
    return ExtensionRule(family, SemverRangeSet.from_string(versions), ext, reason)


# first matching rule wins
WINDOWS_RULES: Final[tuple[ExtensionRule, ...]] = (
    _rule("win", "<4.5.0", ".msi", "no 7z archives were published before 4.5.0"),
    _rule("win", ">=5.0.0 <6.2.1", ".msi", "5.x and 6.0.0-6.2.0 were published as MSI only"),
    _rule("win", "*", ".7z", "7z archive"),
)
XZ_RULES: Final[tuple[ExtensionRule, ...]] = (
    _rule("posix", "<4.0.0", ".tar.gz", "no xz tarballs were published before 4.0.0"),
    _rule("posix", "*", ".tar.xz", "xz tarball"),
)
ARCHIVE_EXTENSIONS: Final[tuple[str, ...]] = (".tar.xz", ".tar.gz", ".7z", ".zip", ".msi")
_IOJS_MAJORS: Final[range] = range(1, 4)


def _first_match(rules: tuple[ExtensionRule, ...], family: str, version: SemanticVersion) -> str:
    for rule in rules:
        if rule.applies(family, version):
            return rule.ext
    msg = f"no packaging rule for {family} {version}"  # pragma: no cover
    raise LookupError(msg)  # pragma: no cover


def select_extension(os: str, semantic_version: str, *, use_msi: bool = False, use_xz: bool = False) -> str:
    """Pick the package extension for a release on *os*, honoring the MSI and xz settings."""
    version = SemanticVersion.from_string(semantic_version)
    if os == "win":
        return ".msi" if use_msi else _first_match(WINDOWS_RULES, "win", version)
    if not use_xz:
        return ".tar.gz"
    return _first_match(XZ_RULES, "posix", version)


def binary_name(semantic_version: str) -> str:
    """io.js releases (1.x to 3.x) ship an ``iojs`` binary, everything else ``node``."""
    return "iojs" if SemanticVersion.from_string(semantic_version).major in _IOJS_MAJORS else "node"


def package_file_name(os: str, arch: str, semantic_version: str, ext: str) -> str:
    name = binary_name(semantic_version)
    if ext == ".msi":
        return f"{name}-v{semantic_version}-{arch}.msi"
    return f"{name}-v{semantic_version}-{os}-{arch}{ext}"


def split_extension(file_name: str) -> tuple[str, str]:
    """Split a known archive extension (``.tar.gz`` counts as one) off *file_name*."""
    lowered = file_name.lower()
    for ext in ARCHIVE_EXTENSIONS:
        if lowered.endswith(ext):
            return file_name[: -len(ext)], ext
    return file_name, ""


def preferred_extension(os: str, available: set[str], *, use_msi: bool = False, use_xz: bool = False) -> str | None:
    """Among extensions actually published, the one this host should download."""
    if os == "win":
        order = (".msi", ".7z", ".zip") if use_msi else (".7z", ".zip", ".msi")
    else:
        order = (".tar.xz", ".tar.gz") if use_xz else (".tar.gz", ".tar.xz")
    return next((ext for ext in order if ext in available), None)


__all__ = [
    "ARCHIVE_EXTENSIONS",
    "WINDOWS_RULES",
    "XZ_RULES",
    "ExtensionRule",
    "binary_name",
    "package_file_name",
    "preferred_extension",
    "select_extension",
    "split_extension",
]
