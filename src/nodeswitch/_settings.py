"""Configuration: the managed home directory, the remote map and the alias map."""

from __future__ import annotations

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from filelock import FileLock
from platformdirs import user_data_path

from ._compat import is_abs_path
from ._errors import InvalidFormatError, SettingsError, UnknownRemoteError
from ._spec_parser import SEMVER_PATTERN, VersionParser

if TYPE_CHECKING:
    from collections.abc import Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)

HOME_ENV: Final[str] = "NODESWITCH_HOME"
USE_XZ_ENV: Final[str] = "NODESWITCH_USE_XZ"
SETTINGS_FILE: Final[str] = "settings.json"
DEFAULT_REMOTES: Final[Mapping[str, str]] = MappingProxyType({
    "default": "node",
    "node": "https://nodejs.org/dist/",
})
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True, kw_only=True)
class Settings:
    """Immutable settings snapshot; mutators return an updated copy."""

    home: Path
    remotes: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_REMOTES))
    aliases: Mapping[str, str] = field(default_factory=dict)
    use_msi: bool = False
    use_xz: bool = False

    @property
    def settings_file(self) -> Path:
        return self.home / SETTINGS_FILE

    @property
    def cache_dir(self) -> Path:
        return self.home / "cache"

    @property
    def remote_names(self) -> list[str]:
        return sorted(name for name, uri in self.remotes.items() if name != "default" and uri)

    def to_dict(self) -> dict[str, object]:
        return {"remotes": dict(self.remotes), "aliases": dict(self.aliases), "useMsi": self.use_msi}


def default_home(env: Mapping[str, str] | None = None) -> Path:
    env = os.environ if env is None else env
    if home := env.get(HOME_ENV):
        return Path(home).expanduser()
    return user_data_path("nodeswitch", appauthor=False)


def load_settings(env: Mapping[str, str] | None = None, home: Path | None = None) -> Settings:
    """Load ``settings.json`` from the home directory, creating it from the defaults when missing."""
    env = os.environ if env is None else env
    home = default_home(env) if home is None else home
    use_xz = env.get(USE_XZ_ENV, "").strip().lower() in _TRUTHY
    settings_file = home / SETTINGS_FILE
    try:
        data = json.loads(settings_file.read_text(encoding="utf-8"))
    except FileNotFoundError:
        _LOGGER.info("no settings at %s, writing defaults", settings_file)
        settings = Settings(home=home, use_xz=use_xz)
        save_settings(settings)
        return settings
    except (OSError, ValueError) as exc:
        msg = f"Failed to read settings file: {settings_file}"
        raise SettingsError(msg) from exc
    if not isinstance(data, dict):
        msg = f"Settings file is not a JSON object: {settings_file}"
        raise SettingsError(msg)
    _LOGGER.debug("loaded settings from %s", settings_file)
    return Settings(
        home=home,
        remotes=dict(data.get("remotes") or {}),
        aliases=dict(data.get("aliases") or {}),
        use_msi=bool(data.get("useMsi", False)),
        use_xz=use_xz,
    )


def save_settings(settings: Settings) -> None:
    settings.home.mkdir(parents=True, exist_ok=True)
    lock_path = settings.home / f"{SETTINGS_FILE}.lock"
    try:
        with FileLock(str(lock_path)):
            settings.settings_file.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    except OSError as exc:
        msg = f"Failed to write settings file: {settings.settings_file}"
        raise SettingsError(msg) from exc
    _LOGGER.debug("wrote settings to %s", settings.settings_file)


def set_alias(settings: Settings, name: str, value: str) -> Settings:
    """Point alias *name* at a semantic version (optionally remote-qualified) or an absolute directory."""
    if not name or not value:
        msg = "An alias name and value are required."
        raise SettingsError(msg)
    if not is_abs_path(value):
        parts = value.split("/")
        try:
            spec = VersionParser(settings.remotes).parse(value)
        except (InvalidFormatError, UnknownRemoteError) as exc:
            msg = f"Invalid alias target: {value}"
            raise SettingsError(msg) from exc
        if spec.semantic_version is None or len(parts) > 2 or not SEMVER_PATTERN.match(parts[-1]):  # noqa: PLR2004
            msg = "Invalid alias target. Specify a semantic version, optionally preceded by a remote name."
            raise SettingsError(msg)
        if len(parts) == 1:
            value = f"default/{value}"
    aliases = {**settings.aliases, name: value}
    return dataclasses.replace(settings, aliases=aliases)


def remove_alias(settings: Settings, name: str) -> Settings:
    if not name:
        msg = "Specify an alias name."
        raise SettingsError(msg)
    return dataclasses.replace(settings, aliases={k: v for k, v in settings.aliases.items() if k != name})


def set_remote(settings: Settings, name: str, uri: str) -> Settings:
    """Add or update a remote; ``default`` must name another configured remote."""
    if not name or not uri:
        msg = "A remote name and URI are required."
        raise SettingsError(msg)
    if name == "default" and not settings.remotes.get(uri):
        msg = f"Remote default target name does not exist: {uri}"
        raise SettingsError(msg)
    return dataclasses.replace(settings, remotes={**settings.remotes, name: uri})


def remove_remote(settings: Settings, name: str) -> Settings:
    if not name:
        msg = "Specify a remote name."
        raise SettingsError(msg)
    if name == "default":
        msg = "The default remote pointer cannot be deleted."
        raise SettingsError(msg)
    if settings.remotes.get("default") == name:
        msg = (
            f"The '{name}' remote is currently set as the default. "
            "Switch the default to another before deleting this one."
        )
        raise SettingsError(msg)
    return dataclasses.replace(settings, remotes={k: v for k, v in settings.remotes.items() if k != name})


__all__ = [
    "DEFAULT_REMOTES",
    "HOME_ENV",
    "USE_XZ_ENV",
    "Settings",
    "default_home",
    "load_settings",
    "remove_alias",
    "remove_remote",
    "save_settings",
    "set_alias",
    "set_remote",
]
