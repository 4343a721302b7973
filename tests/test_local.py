from __future__ import annotations

import dataclasses
import json
import os
from typing import TYPE_CHECKING

import pytest

from nodeswitch import LocalVersions, NodeVersion, VersionParser, find_version_file, format_versions

if TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture

    from nodeswitch import Settings


def _install(home: Path, relative: str, label: str | None = None, binary: str = "bin/node") -> Path:
    folder = home.joinpath(*relative.split("/"))
    executable = folder.joinpath(*binary.split("/"))
    executable.parent.mkdir(parents=True, exist_ok=True)
    executable.touch()
    if label is not None:
        (folder / ".nvs").write_text(json.dumps({"label": label}), encoding="utf-8")
    return folder


@pytest.fixture
def tree(home: Path) -> Path:
    _install(home, "test1/5.6.7/x64")
    _install(home, "test1/5.6.7/x86")
    _install(home, "test2/6.7.8/x64", label="Boron")
    _install(home, "cache/1.0.0/x64")
    _install(home, "node_modules/1.0.0/x64")
    _install(home, "test3/1.0.0/x64")
    _install(home, "test1/notes/x64")
    _install(home, "test1/5.6/x64")
    _install(home, "test1/5.6-rc1/x64")
    _install(home, "test1/5-rc1/x64")
    (home / "test1" / "5.6.8" / "x64").mkdir(parents=True)
    (home / "test1" / "5.6.9").mkdir(parents=True)
    (home / "test1" / "5.6.9" / "x64").touch()
    return home


def _local(settings: Settings, env: dict[str, str] | None = None, host_os: str = "linux") -> LocalVersions:
    parser = VersionParser(settings.remotes, settings.aliases, host_os=host_os)
    return LocalVersions(settings, parser, env=env or {}, host_os=host_os)


@pytest.mark.usefixtures("tree")
def test_installed(settings: Settings) -> None:
    versions = _local(settings).installed()
    assert [str(v) for v in versions] == ["test1/5.6.7/x64", "test1/5.6.7/x86", "test2/6.7.8/x64"]
    assert [v.label for v in versions] == [None, None, "Boron"]
    assert {v.os for v in versions} == {"linux"}
    assert not any(v.local for v in versions)


@pytest.mark.usefixtures("tree")
def test_installed_for_remote(settings: Settings) -> None:
    assert [str(v) for v in _local(settings).installed("test2")] == ["test2/6.7.8/x64"]
    assert _local(settings).installed("test4") == []


def test_installed_without_home(settings: Settings) -> None:
    assert _local(settings).get_versions() == []


def test_unreadable_properties_file(settings: Settings, home: Path) -> None:
    folder = _install(home, "test1/5.6.7/x64")
    (folder / ".nvs").write_text("{broken", encoding="utf-8")
    assert [v.label for v in _local(settings).installed()] == [None]


@pytest.mark.usefixtures("tree")
def test_current_from_path(settings: Settings, home: Path) -> None:
    env = {"PATH": os.pathsep.join(["/usr/bin", str(home / "test1" / "5.6.7" / "x86" / "bin"), "/bin"])}
    current = _local(settings, env).current()
    assert current is not None
    assert str(current) == "test1/5.6.7/x86"


@pytest.mark.parametrize(
    "entry",
    [
        pytest.param("/usr/local/bin", id="outside-home"),
        pytest.param("test1/5.6.7/x64", id="without-bin"),
        pytest.param("test1/lts/x64/bin", id="not-a-version"),
    ],
)
@pytest.mark.usefixtures("tree")
def test_current_not_found(settings: Settings, home: Path, entry: str) -> None:
    path = entry if entry.startswith("/") else str(home.joinpath(*entry.split("/")))
    assert _local(settings, {"PATH": path}).current() is None


@pytest.mark.usefixtures("tree")
def test_current_on_windows_has_no_bin(settings: Settings, home: Path) -> None:
    env = {"PATH": str(home / "test1" / "5.6.7" / "x64")}
    current = _local(settings, env, host_os="win").current()
    assert current is not None
    assert str(current) == "test1/5.6.7/x64"


@pytest.mark.usefixtures("tree")
def test_linked_absolute(settings: Settings, home: Path) -> None:
    (home / "default").symlink_to(home / "test1" / "5.6.7" / "x64", target_is_directory=True)
    linked = _local(settings).linked()
    assert linked is not None
    assert str(linked) == "test1/5.6.7/x64"


@pytest.mark.usefixtures("tree")
def test_linked_relative(settings: Settings, home: Path) -> None:
    (home / "default").symlink_to(os.path.join("test2", "6.7.8", "x64"), target_is_directory=True)  # noqa: PTH118
    linked = _local(settings).linked()
    assert linked is not None
    assert str(linked) == "test2/6.7.8/x64"


@pytest.mark.usefixtures("tree")
def test_linked_outside_home(settings: Settings, home: Path, tmp_path: Path) -> None:
    (tmp_path / "elsewhere").mkdir()
    (home / "default").symlink_to(tmp_path / "elsewhere", target_is_directory=True)
    assert _local(settings).linked() is None


@pytest.mark.usefixtures("tree")
def test_current_through_default_link(settings: Settings, home: Path) -> None:
    (home / "default").symlink_to(home / "test2" / "6.7.8" / "x64", target_is_directory=True)
    current = _local(settings, {"PATH": str(home / "default" / "bin")}).current()
    assert current is not None
    assert str(current) == "test2/6.7.8/x64"


@pytest.mark.usefixtures("tree")
def test_get_versions(settings: Settings, home: Path) -> None:
    settings = dataclasses.replace(settings, aliases={"mine": "/opt/node", "five": "test1/5.6.7"})
    (home / "default").symlink_to(home / "test1" / "5.6.7" / "x64", target_is_directory=True)
    env = {"PATH": str(home / "test1" / "5.6.7" / "x86" / "bin")}
    versions = _local(settings, env).get_versions()
    assert format_versions(versions) == [
        " #test1/5.6.7/x64",
        " >test1/5.6.7/x86",
        "  test2/6.7.8/x64 (Boron)",
        "  /opt/node (mine)",
    ]
    assert versions[-1] == NodeVersion(path="/opt/node")


def test_version_binary(settings: Settings, home: Path) -> None:
    local = _local(settings, host_os="win")
    _install(home, "test1/2.0.0/x64", binary="iojs.exe")
    _install(home, "test1/4.0.0/x64", binary="node.exe")
    iojs = NodeVersion(remote_name="test1", semantic_version="2.0.0", arch="x64")
    node = NodeVersion(remote_name="test1", semantic_version="4.0.0", arch="x64")
    missing = NodeVersion(remote_name="test1", semantic_version="5.0.0", arch="x64")
    assert local.version_binary(iojs) == home / "test1" / "2.0.0" / "x64" / "iojs.exe"
    assert local.version_binary(node) == home / "test1" / "4.0.0" / "x64" / "node.exe"
    assert local.version_binary(missing) is None


def test_version_dir_of_alias(settings: Settings) -> None:
    assert str(_local(settings).version_dir(NodeVersion(path="/opt/node"))) == "/opt/node"


def test_find_version_file_walks_parents(tmp_path: Path) -> None:
    project = tmp_path / "project"
    start = project / "sub" / "deeper"
    start.mkdir(parents=True)
    (project / ".nvmrc").write_text("# pinned\n\n  6.7 \n", encoding="utf-8")
    assert find_version_file(start) == ((project / ".nvmrc").resolve(), "6.7")


def test_find_version_file_prefers_node_version(tmp_path: Path) -> None:
    (tmp_path / ".nvmrc").write_text("lts\n", encoding="utf-8")
    (tmp_path / ".node-version").write_text("7.2\n", encoding="utf-8")
    found = find_version_file(tmp_path)
    assert found is not None
    assert found[1] == "7.2"


def test_find_version_file_skips_empty_files(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / ".node-version").write_text("# nothing\n", encoding="utf-8")
    (tmp_path / ".nvmrc").write_text("5\n", encoding="utf-8")
    found = find_version_file(tmp_path / "sub")
    assert found is not None
    assert found[1] == "5"


def test_pre_release_on_partial_version_dir_skipped(settings: Settings, home: Path) -> None:
    _install(home, "test1/5.6-rc1/x64")
    _install(home, "test1/5.6.7-rc1/x64")
    assert [str(v) for v in _local(settings).get_versions()] == ["test1/5.6.7-rc1/x64"]


@pytest.mark.parametrize(
    ("case_sensitive", "found"),
    [
        pytest.param(False, True, id="case-insensitive"),
        pytest.param(True, False, id="case-sensitive"),
    ],
)
def test_current_home_compared_like_the_filesystem(
    settings: Settings,
    tmp_path: Path,
    mocker: MockerFixture,
    case_sensitive: bool,
    found: bool,
) -> None:
    mocker.patch("nodeswitch._compat.fs_is_case_sensitive", return_value=case_sensitive)
    home = tmp_path / "Straße" / "nvs"
    _install(home, "test1/5.6.7/x64")
    settings = dataclasses.replace(settings, home=home)
    entry = os.sep.join([str(home).replace("Straße", "STRAßE"), "test1", "5.6.7", "x64", "bin"])
    current = _local(settings, {"PATH": entry}).current()
    assert (str(current) if current is not None else None) == ("test1/5.6.7/x64" if found else None)
