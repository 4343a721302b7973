"""Exceptions raised while parsing version specifiers and fetching remote catalogs."""

from __future__ import annotations


class NodeSwitchError(Exception):
    """Base class of every error raised by nodeswitch."""


class InvalidFormatError(NodeSwitchError, ValueError):
    """The version specifier does not match the accepted grammar."""


class UnknownRemoteError(NodeSwitchError, ValueError):
    """The remote name is not present in the configured remote map."""

    def __init__(self, remote_name: str) -> None:
        super().__init__(f"Remote name not found in settings: {remote_name}")
        self.remote_name = remote_name


class MissingRemoteError(NodeSwitchError, ValueError):
    """A fully specified version was required but no remote name could be determined."""


class MissingArchError(NodeSwitchError, ValueError):
    """A fully specified version was required but no architecture could be determined."""


class NotFoundError(NodeSwitchError):
    """A remote resource (index file, releases list, network share) does not exist."""

    def __init__(self, message: str, uri: str) -> None:
        super().__init__(f"{message}: {uri}")
        self.uri = uri


class InvalidIndexFormatError(NodeSwitchError):
    """Upstream data could not be interpreted as a version listing."""


class InvalidTemplateError(NodeSwitchError):
    """A configured remote cannot be interpreted: a network share without its path tokens, or a bad asset filter."""


class FetchError(NodeSwitchError):
    """A transport-level failure while downloading a remote listing."""


class SettingsError(NodeSwitchError):
    """The settings file could not be read or written, or a settings change is invalid."""


__all__ = [
    "FetchError",
    "InvalidFormatError",
    "InvalidIndexFormatError",
    "InvalidTemplateError",
    "MissingArchError",
    "MissingRemoteError",
    "NodeSwitchError",
    "NotFoundError",
    "SettingsError",
    "UnknownRemoteError",
]
