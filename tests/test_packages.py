from __future__ import annotations

import pytest

from nodeswitch._catalog._packages import (
    WINDOWS_RULES,
    XZ_RULES,
    binary_name,
    package_file_name,
    preferred_extension,
    select_extension,
    split_extension,
)


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        pytest.param("0.12.18", ".msi", id="before-archives"),
        pytest.param("4.4.7", ".msi", id="4.4-msi"),
        pytest.param("4.5.0", ".7z", id="first-7z"),
        pytest.param("4.9.1", ".7z", id="late-4"),
        pytest.param("5.0.0", ".msi", id="5-msi-only"),
        pytest.param("6.2.0", ".msi", id="last-msi-only"),
        pytest.param("6.2.1", ".7z", id="6.2.1-7z"),
        pytest.param("22.11.0", ".7z", id="modern"),
    ],
)
def test_windows_extension(version: str, expected: str) -> None:
    assert select_extension("win", version) == expected


def test_windows_msi_override() -> None:
    assert select_extension("win", "22.11.0", use_msi=True) == ".msi"


@pytest.mark.parametrize(
    ("version", "use_xz", "expected"),
    [
        pytest.param("3.3.1", True, ".tar.gz", id="iojs-no-xz"),
        pytest.param("4.0.0", True, ".tar.xz", id="first-xz"),
        pytest.param("22.11.0", True, ".tar.xz", id="modern-xz"),
        pytest.param("22.11.0", False, ".tar.gz", id="xz-not-requested"),
    ],
)
def test_posix_extension(version: str, use_xz: bool, expected: str) -> None:
    assert select_extension("linux", version, use_xz=use_xz) == expected
    assert select_extension("darwin", version, use_xz=use_xz) == expected


def test_rules_are_ordered_with_catch_all_last() -> None:
    for rules in (WINDOWS_RULES, XZ_RULES):
        assert str(rules[-1].versions) == "*"
        assert all(rule.reason for rule in rules)


@pytest.mark.parametrize(
    ("version", "expected"),
    [("0.12.18", "node"), ("1.0.0", "iojs"), ("3.3.1", "iojs"), ("4.0.0", "node")],
)
def test_binary_name(version: str, expected: str) -> None:
    assert binary_name(version) == expected


def test_package_file_name() -> None:
    assert package_file_name("win", "x64", "7.8.9", ".7z") == "node-v7.8.9-win-x64.7z"
    assert package_file_name("win", "x86", "5.6.7", ".msi") == "node-v5.6.7-x86.msi"
    assert package_file_name("linux", "x64", "2.5.0", ".tar.gz") == "iojs-v2.5.0-linux-x64.tar.gz"


def test_split_extension() -> None:
    assert split_extension("node-v7.8.9-linux-x64.tar.xz") == ("node-v7.8.9-linux-x64", ".tar.xz")
    assert split_extension("node-v7.8.9-x64.MSI") == ("node-v7.8.9-x64", ".msi")
    assert split_extension("SHASUMS256.txt") == ("SHASUMS256.txt", "")


def test_preferred_extension() -> None:
    assert preferred_extension("win", {".7z", ".msi"}) == ".7z"
    assert preferred_extension("win", {".7z", ".msi"}, use_msi=True) == ".msi"
    assert preferred_extension("linux", {".tar.gz", ".tar.xz"}) == ".tar.gz"
    assert preferred_extension("linux", {".tar.gz", ".tar.xz"}, use_xz=True) == ".tar.xz"
    assert preferred_extension("linux", {".tar.xz"}) == ".tar.xz"
    assert preferred_extension("linux", {".zip"}) is None
