"""Feed assembler.

Merges fetched pages into one year-grouped render sequence. Grouping is a
single monotonic scan over fetch order: a separator is emitted whenever the
year of a document differs from the year of the one before it. The assembler
never re-sorts, so groups are only contiguous if the server honours the
requested sort order across pages.
"""

from datetime import datetime, tzinfo

from shared.clients.catalog.models.Document import DocumentRecord
from shared.clients.catalog.models.Query import SortOrder
from services.feed.PageFetcher import PageResult
from services.feed.models.Cursor import PageCursor
from services.feed.models.FeedItem import DocumentItem, RenderItem, UNKNOWN_YEAR, YearSeparator

# no timestamp maps to this, so the very first document always opens a group
_NO_YEAR = object()


class FeedAssembler:
    """Per-session assembler. Create a new one on every feed restart."""

    def __init__(self, order: SortOrder | None, tz: tzinfo) -> None:
        self._order = order
        self._tz = tz
        self._cursor = PageCursor()
        self._last_year: object = _NO_YEAR
        self._has_next_page = True
        self._separator_count = 0

    ##########################################
    ################ GETTER ##################
    ##########################################

    @property
    def cursor(self) -> PageCursor:
        return self._cursor

    @property
    def order(self) -> SortOrder | None:
        return self._order

    def has_next_page(self) -> bool:
        return self._has_next_page

    def get_separator_count(self) -> int:
        return self._separator_count

    ##########################################
    ################ CORE ####################
    ##########################################

    def assemble(self, cursor: PageCursor, page: PageResult) -> list[RenderItem]:
        """Turn one fetched page into render items and advance the cursor.

        Args:
            cursor (PageCursor): The cursor the page was fetched with. Must be the assembler's current cursor.
            page (PageResult): The fetched page.

        Returns:
            list[RenderItem]: Year separators interleaved with the page's documents, in fetch order.

        Raises:
            ValueError: If the page belongs to another cursor position or the feed already ended.
        """
        if cursor != self._cursor:
            raise ValueError(f"Page for cursor {cursor.page} does not match assembler cursor {self._cursor.page}")
        if not self._has_next_page:
            raise ValueError("Feed already ended, no further pages can be assembled")

        items: list[RenderItem] = []
        for document in page.documents:
            year = self.year_label(document)
            if year != self._last_year:
                items.append(YearSeparator(label=year))
                self._last_year = year
                self._separator_count += 1
            items.append(DocumentItem(document=document))

        self._cursor = self._cursor.advance()
        self._has_next_page = page.has_next_page
        return items

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def year_label(self, document: DocumentRecord) -> str:
        """Return the group label of a document under the active sort order.

        Args:
            document (DocumentRecord): The document to classify.

        Returns:
            str: The year, or "Unknown" if the relevant date is missing or out of range.
        """
        if self._order == SortOrder.EXTRACTED_DATE:
            seconds = document.doc_date or 0
        else:
            seconds = document.imported_date
        if seconds <= 0:
            return UNKNOWN_YEAR
        try:
            return str(datetime.fromtimestamp(seconds, self._tz).year)
        except (ValueError, OverflowError, OSError):
            # e.g. a millisecond value
            return UNKNOWN_YEAR
