"""ETag-validated cache of downloaded remote listings."""

from __future__ import annotations

import json
import logging
from contextlib import suppress
from dataclasses import dataclass
from hashlib import sha256
from typing import TYPE_CHECKING, Any, Final, Protocol, runtime_checkable

from filelock import FileLock

if TYPE_CHECKING:
    from pathlib import Path

_LOGGER: Final[logging.Logger] = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CachedListing:
    """A listing body as last downloaded from *uri*, with the ``ETag`` the server sent for it."""

    uri: str
    etag: str
    body: Any

    @classmethod
    def from_json(cls, data: object) -> CachedListing | None:
        if not isinstance(data, dict) or "body" not in data:
            return None
        uri, etag = data.get("uri"), data.get("etag")
        if not isinstance(uri, str) or not isinstance(etag, str) or not etag:
            return None
        return cls(uri=uri, etag=etag, body=data["body"])

    def to_json(self) -> dict[str, Any]:
        return {"uri": self.uri, "etag": self.etag, "body": self.body}


@runtime_checkable
class CatalogCache(Protocol):
    """Where :func:`fetch_json` keeps listings between runs, keyed by the URL they came from."""

    def get(self, uri: str) -> CachedListing | None: ...

    def put(self, listing: CachedListing) -> None: ...


class DiskCache:
    """One JSON file per listing URL under ``<root>/remote_index/1``, written under a file lock."""

    def __init__(self, root: Path) -> None:
        self.folder = root / "remote_index" / "1"

    def path(self, uri: str) -> Path:
        return self.folder / f"{sha256(uri.encode('utf-8')).hexdigest()}.json"

    def get(self, uri: str) -> CachedListing | None:
        path = self.path(uri)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except ValueError:
            _LOGGER.debug("discarding corrupt listing cache %s", path)
            with suppress(OSError):
                path.unlink()
            return None
        except OSError:
            _LOGGER.debug("failed to read %s", path, exc_info=True)
            return None
        listing = CachedListing.from_json(data)
        if listing is None or listing.uri != uri:
            _LOGGER.debug("ignoring listing cache %s written for another shape or URL", path)
            return None
        _LOGGER.debug("cached %s listing has etag %s", uri, listing.etag)
        return listing

    def put(self, listing: CachedListing) -> None:
        path = self.path(listing.uri)
        self.folder.mkdir(parents=True, exist_ok=True)
        with FileLock(str(path.with_suffix(".lock"))):
            path.write_text(json.dumps(listing.to_json(), sort_keys=True), encoding="utf-8")
        _LOGGER.debug("cached %s listing at %s", listing.uri, path)


class NoOpCache:
    """Keeps nothing, so every fetch downloads the full listing."""

    def get(self, uri: str) -> CachedListing | None:  # noqa: ARG002, PLR6301
        return None

    def put(self, listing: CachedListing) -> None:
        pass


__all__ = [
    "CachedListing",
    "CatalogCache",
    "DiskCache",
    "NoOpCache",
]
