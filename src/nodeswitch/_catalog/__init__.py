"""Remote version catalogs: index.json dist servers, GitHub releases and network shares."""

from __future__ import annotations

from ._catalog import CatalogSource, RemoteCatalog
from ._github import GitHubReleasesSource
from ._index import IndexSource
from ._network import NetworkShareSource
from ._packages import ExtensionRule, binary_name, select_extension

__all__ = [
    "CatalogSource",
    "ExtensionRule",
    "GitHubReleasesSource",
    "IndexSource",
    "NetworkShareSource",
    "RemoteCatalog",
    "binary_name",
    "select_extension",
]
