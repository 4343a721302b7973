"""Parse version specifier strings (``[remote/](semver|lts|latest|current|default)[/arch]``) into filters."""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import TYPE_CHECKING, Final

from ._compat import host_os, is_abs_path, normalize_arch
from ._errors import InvalidFormatError, MissingArchError, MissingRemoteError, UnknownRemoteError
from ._specifier import SemanticVersion
from ._version import SpecialLabel, VersionSpec

if TYPE_CHECKING:
    from collections.abc import Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

SEMVER_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    v?                      # optional leading v
    \d+                     # major
    (?:
        \.\d+               # minor
        (?:
            \.\d+           # patch
            (?:-[^/\s]+)?   # free-form pre-release tag, full versions only
        )?
    )?
    $
    """,
    re.VERBOSE | re.IGNORECASE,
)
# architectures known well enough to tell ``remote/arch`` apart from ``remote/codename``
ARCH_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    (?:
        x86|ia32|32         # 32-bit intel
      | x64|amd64|64|x86_64 # 64-bit intel
      | arm(?:64|v\d+l)?    # arm family
      | aarch64
      | ppc(?:64(?:le)?)?   # power
      | s390x?
      | mips\w*
      | riscv64
      | loong64
    )
    $
    """,
    re.VERBOSE | re.IGNORECASE,
)
ARCH_TOKEN_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z0-9_]+$")
NAME_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"""
    ^
    [A-Za-z_][\w\-.]*       # remote names, aliases and release codenames
    $
    """,
    re.VERBOSE,
)
_MAX_PARTS: Final[int] = 3
_FALLBACK_REMOTE: Final[str] = "node"


def _special(token: str) -> SpecialLabel | None:
    try:
        return SpecialLabel(token.lower())
    except ValueError:
        return None


class VersionParser:
    """Parses specifier strings against a configured remote map and alias map."""

    def __init__(
        self,
        remotes: Mapping[str, str],
        aliases: Mapping[str, str] | None = None,
        host_os: str | None = None,
    ) -> None:
        self._remotes = remotes
        self._aliases = aliases or {}
        self._host_os = host_os

    @property
    def os(self) -> str:
        return self._host_os or host_os()

    def default_remote(self) -> str:
        """The configured default remote name, raising :class:`UnknownRemoteError` if it is not configured."""
        name = self._remotes.get("default") or _FALLBACK_REMOTE
        return self._check_remote(name)

    def _check_remote(self, name: str) -> str:
        if name == "default":
            return self.default_remote()
        if not self._remotes.get(name):
            raise UnknownRemoteError(name)
        return name

    def parse(self, text: str, *, require_full: bool = False) -> VersionSpec:
        """Parse *text* into a :class:`VersionSpec`.

        :param text: the specifier, e.g. ``node/6.9.1/x64``, ``lts``, ``5.6`` or an alias name
        :param require_full: fail unless both the remote and the architecture are known
        :raises InvalidFormatError: when the text does not match the grammar
        :raises UnknownRemoteError: when the (possibly defaulted) remote is not configured
        """
        stripped = (text or "").strip()
        if not stripped:
            msg = "A version parameter is required."
            raise InvalidFormatError(msg)
        spec = self._parse(stripped, resolve_aliases=True)
        if require_full:
            if spec.remote_name is None and spec.path is None:
                msg = f"Specify a remote name: {stripped}"
                raise MissingRemoteError(msg)
            if spec.arch is None and spec.path is None:
                msg = f"Specify a processor architecture: {stripped}"
                raise MissingArchError(msg)
        _LOGGER.debug("parsed %r as %r", stripped, spec)
        return spec

    def _parse(self, text: str, *, resolve_aliases: bool) -> VersionSpec:
        parts = text.replace("\\", "/").split("/") if not is_abs_path(text) else [text]
        if len(parts) > _MAX_PARTS or not all(parts):
            raise self._invalid(text)

        if resolve_aliases and parts[0] in self._aliases and len(parts) <= 2:  # noqa: PLR2004
            return self._parse_alias(text, parts[0], parts[1] if len(parts) == 2 else None)  # noqa: PLR2004
        if is_abs_path(text):
            raise self._invalid(text)

        remote_name: str | None = None
        selector: str | None = None
        arch: str | None = None
        if len(parts) == _MAX_PARTS:
            remote_name, selector, arch = parts
        elif len(parts) == 2:  # noqa: PLR2004
            first, second = parts
            if self._is_selector(first, second):
                selector, arch = first, second
            elif ARCH_PATTERN.match(second) and not SEMVER_PATTERN.match(second):
                remote_name, arch = first, second
            else:
                remote_name, selector = first, second
        else:
            selector = parts[0]

        if arch is not None and not ARCH_PATTERN.match(arch):
            if selector is not None and _special(selector) is SpecialLabel.LTS and remote_name is None:
                if arch == "*":
                    return VersionSpec(
                        str_spec=text,
                        remote_name=self.default_remote(),
                        special=SpecialLabel.LTS,
                        os=self.os,
                    )
                # lts/<codename>
                return self._codename(text, arch, None)
            if not ARCH_TOKEN_PATTERN.match(arch):
                raise self._invalid(text)
        arch = normalize_arch(arch) if arch is not None else None

        if selector is None:
            return VersionSpec(str_spec=text, remote_name=self._check_remote(remote_name or ""), arch=arch, os=self.os)

        if SEMVER_PATTERN.match(selector):
            try:
                semantic_version = SemanticVersion.from_string(selector).version_str
            except ValueError as exc:
                raise self._invalid(text) from exc
            return VersionSpec(
                str_spec=text,
                remote_name=self._check_remote(remote_name) if remote_name else self.default_remote(),
                semantic_version=semantic_version,
                arch=arch,
                os=self.os,
            )

        if selector == "*" and remote_name is not None and _special(remote_name) is SpecialLabel.LTS:
            remote_name, selector = None, "lts"
        if not NAME_PATTERN.match(selector):
            raise self._invalid(text)

        if (special := _special(selector)) is not None:
            if remote_name is not None:
                remote_name = self._check_remote(remote_name)
            elif special in {SpecialLabel.LATEST, SpecialLabel.LTS}:
                remote_name = self.default_remote()
            return VersionSpec(str_spec=text, remote_name=remote_name, special=special, arch=arch, os=self.os)

        if remote_name is None:
            # a bare word is a remote name
            return VersionSpec(str_spec=text, remote_name=self._check_remote(selector), arch=arch, os=self.os)
        if _special(remote_name) is SpecialLabel.LTS and not self._remotes.get(remote_name):
            return self._codename(text, selector, arch)
        return VersionSpec(
            str_spec=text,
            remote_name=self._check_remote(remote_name),
            label=selector,
            arch=arch,
            os=self.os,
        )

    def _codename(self, text: str, codename: str, arch: str | None) -> VersionSpec:
        if not NAME_PATTERN.match(codename) or SEMVER_PATTERN.match(codename):
            # lts/6.7.8 names a remote called "lts"
            raise UnknownRemoteError(SpecialLabel.LTS.value)
        return VersionSpec(
            str_spec=text,
            remote_name=self.default_remote(),
            label=codename,
            arch=normalize_arch(arch) if arch is not None else None,
            os=self.os,
        )

    def _parse_alias(self, text: str, name: str, arch: str | None) -> VersionSpec:
        target = self._aliases[name]
        _LOGGER.debug("alias %s resolves to %s", name, target)
        if is_abs_path(target):
            if arch is not None:
                raise self._invalid(text)
            return VersionSpec(str_spec=text, label=name, path=target, os=self.os, alias=name)
        spec = self._parse(target, resolve_aliases=False)
        if arch is not None:
            if not ARCH_TOKEN_PATTERN.match(arch):
                raise self._invalid(text)
            spec = dataclasses.replace(spec, arch=normalize_arch(arch))
        return dataclasses.replace(spec, str_spec=text, alias=name)

    def _is_selector(self, token: str, following: str) -> bool:
        if SEMVER_PATTERN.match(token):
            return True
        special = _special(token)
        if special is None:
            return False
        # default/5.6.7 names the default remote, lts/boron names a codename
        if special is SpecialLabel.LTS and not self._remotes.get(token):
            return True
        return following == "*" or bool(ARCH_PATTERN.match(following))

    @staticmethod
    def _invalid(text: str) -> InvalidFormatError:
        return InvalidFormatError(f"Invalid version string: {text}")


__all__ = [
    "ARCH_PATTERN",
    "ARCH_TOKEN_PATTERN",
    "SEMVER_PATTERN",
    "VersionParser",
]
