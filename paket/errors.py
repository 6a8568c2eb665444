from __future__ import annotations


class PaketError(Exception):
    """Base class for errors raised by the Paket server."""


class InvalidURL(PaketError):
    def __init__(self, url: object) -> None:
        super().__init__(f"invalid url: {url!r}")
        self.url = url


class NotFound(PaketError):
    def __init__(self, guid: str) -> None:
        super().__init__(f"no article with guid {guid!r}")
        self.guid = guid


class StorageIO(PaketError):
    """The backing database failed; the operation was rolled back."""


class ExtractionError(PaketError):
    """Fetching a saved page to learn its title failed."""
