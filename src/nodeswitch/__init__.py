"""Resolve node version specifiers against installed versions and remote release catalogs."""

from __future__ import annotations

from importlib.metadata import version

from ._cache import CachedListing, CatalogCache, DiskCache, NoOpCache
from ._catalog import RemoteCatalog, select_extension
from ._errors import (
    FetchError,
    InvalidFormatError,
    InvalidIndexFormatError,
    InvalidTemplateError,
    MissingArchError,
    MissingRemoteError,
    NodeSwitchError,
    NotFoundError,
    SettingsError,
    UnknownRemoteError,
)
from ._local import LocalVersions, find_version_file
from ._manager import VersionManager
from ._ordering import compare, equal, sort_versions
from ._resolver import VersionResolver
from ._settings import Settings, load_settings, save_settings
from ._spec_parser import VersionParser
from ._specifier import SemanticVersion, SemverRange, SemverRangeSet
from ._version import NodeVersion, Package, SpecialLabel, VersionSpec, format_versions

__version__ = version("nodeswitch")

__all__ = [
    "CachedListing",
    "CatalogCache",
    "DiskCache",
    "FetchError",
    "InvalidFormatError",
    "InvalidIndexFormatError",
    "InvalidTemplateError",
    "LocalVersions",
    "MissingArchError",
    "MissingRemoteError",
    "NoOpCache",
    "NodeSwitchError",
    "NodeVersion",
    "NotFoundError",
    "Package",
    "RemoteCatalog",
    "SemanticVersion",
    "SemverRange",
    "SemverRangeSet",
    "Settings",
    "SettingsError",
    "SpecialLabel",
    "UnknownRemoteError",
    "VersionManager",
    "VersionParser",
    "VersionResolver",
    "VersionSpec",
    "__version__",
    "compare",
    "equal",
    "find_version_file",
    "format_versions",
    "load_settings",
    "save_settings",
    "select_extension",
    "sort_versions",
]
