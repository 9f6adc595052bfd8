"""Infinite-scroll driver.

Asks the page fetcher for the next page whenever the view reports that the
viewport approaches the end of the list. At most one fetch is outstanding:
a single-slot request token is taken before the fetch and released when it
settles, and triggers arriving in between are dropped. A failed fetch leaves
the cursor where it was, so the next trigger retries the same page.
"""

from enum import Enum
from typing import Callable

from shared.clients.catalog.models.Query import DocumentQuery
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import CatalogError
from services.feed.FeedAssembler import FeedAssembler
from services.feed.PageFetcher import PageFetcher
from services.feed.models.Cursor import PageCursor
from services.feed.models.FeedItem import RenderItem


class TriggerOutcome(str, Enum):
    APPENDED = "appended"      # page fetched and handed to the view
    DROPPED = "dropped"        # another fetch was still in flight
    EXHAUSTED = "exhausted"    # a short page was seen earlier, nothing left to fetch
    FAILED = "failed"          # transport or decode error, cursor unchanged, retry on next trigger
    ABANDONED = "abandoned"    # the session was restarted, result discarded


class InfiniteScrollDriver:
    """Per-session fetch scheduler. The controller builds a fresh driver on every restart."""

    def __init__(
        self,
        helper_config: HelperConfig,
        page_fetcher: PageFetcher,
        assembler: FeedAssembler,
        build_request: Callable[[PageCursor], DocumentQuery],
        on_items: Callable[[list[RenderItem]], None],
    ) -> None:
        self.logging = helper_config.get_logger()
        self._fetcher = page_fetcher
        self._assembler = assembler
        self._build_request = build_request
        self._on_items = on_items

        self._in_flight: object | None = None
        self._abandoned = False
        self._last_error: CatalogError | None = None
        self._fetch_count = 0

    ##########################################
    ################ GETTER ##################
    ##########################################

    def is_fetching(self) -> bool:
        return self._in_flight is not None

    def is_exhausted(self) -> bool:
        return not self._assembler.has_next_page()

    def is_abandoned(self) -> bool:
        return self._abandoned

    def get_last_error(self) -> CatalogError | None:
        """Returns the error of the most recent fetch, None after a success."""
        return self._last_error

    def get_fetch_count(self) -> int:
        """Returns the number of fetches issued by this driver, failed ones included."""
        return self._fetch_count

    ##########################################
    ################ CORE ####################
    ##########################################

    async def trigger(self) -> TriggerOutcome:
        """Fetch and append the next page unless one is in flight or the feed ended.

        Returns:
            TriggerOutcome: What happened with this trigger.
        """
        if self._abandoned:
            return TriggerOutcome.ABANDONED
        if self._in_flight is not None:
            self.logging.debug("Fetch for page %d still in flight, dropping trigger", self._assembler.cursor.page)
            return TriggerOutcome.DROPPED
        if not self._assembler.has_next_page():
            return TriggerOutcome.EXHAUSTED

        token = object()
        self._in_flight = token
        cursor = self._assembler.cursor
        try:
            request = self._build_request(cursor)
            self._fetch_count += 1
            page = await self._fetcher.fetch_page(request)
        except CatalogError as e:
            if self._abandoned:
                return TriggerOutcome.ABANDONED
            self._last_error = e
            self.logging.warning("Fetching feed page %d failed, will retry on next trigger: %s", cursor.page, e)
            return TriggerOutcome.FAILED
        finally:
            if self._in_flight is token:
                self._in_flight = None

        # the session may have been restarted while we were waiting
        if self._abandoned:
            self.logging.debug("Discarding page %d of an abandoned feed session", cursor.page)
            return TriggerOutcome.ABANDONED

        items = self._assembler.assemble(cursor, page)
        self._last_error = None
        self._on_items(items)
        if not page.has_next_page:
            self.logging.info("Feed complete after %d pages", self._assembler.cursor.page)
        return TriggerOutcome.APPENDED

    def abandon(self) -> None:
        """Stop this driver. Any outstanding fetch result is discarded when it settles."""
        self._abandoned = True
