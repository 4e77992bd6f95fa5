"""Readers returning the raw text of the historical export."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import httpx

from orderdesk.domain.errors import HistoricalSourceError, HistoricalSourceMissingError

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

_DEFAULT_TIMEOUT_SECONDS = 10.0
_ENCODING = "utf-8-sig"


class TextSource(Protocol):
    def __call__(self) -> str: ...

    @property
    def location(self) -> str: ...


@dataclass(frozen=True, slots=True)
class FileHistoricalSource:
    """Read the export from a local file on every call."""

    path: Path

    @property
    def location(self) -> str:
        return str(self.path)

    def __call__(self) -> str:
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError as exc:
            raise HistoricalSourceMissingError(f"{self.path} does not exist") from exc
        except OSError as exc:
            raise HistoricalSourceError(f"Could not read {self.path}: {exc}") from exc
        return _decode(raw, self.location)


def _default_client_factory() -> httpx.Client:
    return httpx.Client(timeout=_DEFAULT_TIMEOUT_SECONDS, follow_redirects=True)


@dataclass(slots=True)
class HttpHistoricalSource:
    """Fetch the export over HTTP(S) on every call."""

    url: str
    client_factory: Callable[[], httpx.Client] = field(default=_default_client_factory)

    @property
    def location(self) -> str:
        return self.url

    def __call__(self) -> str:
        try:
            with self.client_factory() as client:
                response = client.get(self.url)
        except httpx.HTTPError as exc:
            raise HistoricalSourceError(f"Could not fetch {self.url}: {exc}") from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            raise HistoricalSourceMissingError(f"{self.url} returned 404")
        if response.is_error:
            raise HistoricalSourceError(
                f"Could not fetch {self.url}: HTTP {response.status_code}"
            )
        return _decode(response.content, self.location)


def _decode(raw: bytes, location: str) -> str:
    try:
        return raw.decode(_ENCODING)
    except UnicodeDecodeError as exc:
        raise HistoricalSourceError(f"{location} is not valid UTF-8: {exc}") from exc


def build_text_source(location: str) -> TextSource:
    """Pick the reader for a path or an http(s) URL."""

    if location.startswith(("http://", "https://")):
        return HttpHistoricalSource(url=location)
    return FileHistoricalSource(path=Path(location).expanduser())
