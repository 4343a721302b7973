"""Host platform detection and normalization utilities."""

from __future__ import annotations

import functools
import logging
import pathlib
import platform
import sys
import tempfile
from typing import Final

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

_ARCH_ALIASES: Final[dict[str, str]] = {
    "32": "x86",
    "ia32": "x86",
    "x86": "x86",
    "i386": "x86",
    "i686": "x86",
    "64": "x64",
    "amd64": "x64",
    "x64": "x64",
    "x86_64": "x64",
}
_MACHINE_ALIASES: Final[dict[str, str]] = {
    "aarch64": "arm64",
    "armv7l": "arm",
    "armv6l": "arm",
}


def normalize_arch(arch: str) -> str:
    """Canonicalize the x86/x64 aliases, every other token passes through lower-cased."""
    low = arch.lower()
    return _ARCH_ALIASES.get(low, low)


def normalize_os(os_name: str) -> str:
    low = os_name.lower()
    return {"win32": "win", "windows": "win", "osx": "darwin", "macos": "darwin"}.get(low, low)


@functools.lru_cache(maxsize=1)
def host_os() -> str:
    """The OS token of the running host (``win``, ``darwin``, ``linux``, ...)."""
    plat = sys.platform
    if plat.startswith("linux"):
        plat = "linux"
    elif plat.startswith("freebsd"):
        plat = "freebsd"
    return normalize_os(plat)


@functools.lru_cache(maxsize=1)
def host_arch() -> str:
    """The architecture token of the running host, in node naming (``x64``, ``arm64``, ...)."""
    machine = platform.machine().lower()
    if not machine:  # pragma: no cover
        machine = "x64" if sys.maxsize > 2**32 else "x86"
    result = normalize_arch(_MACHINE_ALIASES.get(machine, machine))
    _LOGGER.debug("host architecture %s (machine %s)", result, machine)
    return result


@functools.lru_cache(maxsize=1)
def fs_is_case_sensitive() -> bool:
    with tempfile.NamedTemporaryFile(prefix="TmP") as tmp_file:
        result = not pathlib.Path(tmp_file.name.lower()).exists()
    _LOGGER.debug("filesystem is %scase-sensitive", "" if result else "not ")
    return result


def is_abs_path(path: str) -> bool:
    """Absolute in either POSIX or Windows (drive or UNC) syntax, whatever the host."""
    return pathlib.PurePosixPath(path).is_absolute() or pathlib.PureWindowsPath(path).is_absolute()


def fs_path_id(path: str) -> str:
    return path.casefold() if not fs_is_case_sensitive() else path


__all__ = [
    "fs_is_case_sensitive",
    "fs_path_id",
    "host_arch",
    "host_os",
    "is_abs_path",
    "normalize_arch",
    "normalize_os",
]
