"""Error taxonomy shared by the catalog client and the feed services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from services.feed.models.Mutation import BatchReport


class CatalogError(Exception):
    """Base class for every failure talking to the catalog service."""


class TransportError(CatalogError):
    """Network failure, timeout or non-2xx response from the catalog.

    Attributes:
        status_code (int | None): HTTP status if a response was received.
        url (str | None): The requested URL, if known.
    """

    def __init__(self, message: str, status_code: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class DecodeError(CatalogError):
    """The catalog answered, but the body could not be parsed into the expected shape."""


class PersistenceReadError(Exception):
    """Stored client state is missing or corrupt. Always degraded locally, never propagated."""


class PartialBatchFailure(Exception):
    """Some, but not all, per-document calls of a batch mutation failed.

    Attributes:
        report (BatchReport): The full per-document outcome report.
    """

    def __init__(self, report: "BatchReport") -> None:
        failed = len(report.failed)
        total = len(report.outcomes)
        super().__init__(f"{failed} of {total} {report.kind.value} calls failed")
        self.report = report
