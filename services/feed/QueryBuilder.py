from shared.clients.catalog.models.Query import DocumentQuery, SortOrder
from services.feed.models.Cursor import PageCursor


class QueryBuilder:
    """Turns cursor, order, free-text query and filters into a catalog listing request."""

    def build_query(
        self,
        cursor: PageCursor,
        order: SortOrder | None,
        query: str | None,
        filters: list[int],
        removed: int = 0,
    ) -> DocumentQuery:
        """Build the listing request for one feed page.

        Args:
            cursor (PageCursor): The page to fetch. Offset and page size come from it.
            order (SortOrder | None): Requested sort mode, None for the server default.
            query (str | None): Free-text query. Blank values are dropped.
            filters (list[int]): Active tag filters, duplicates are collapsed keeping first occurrence.
            removed (int): Rendered documents that have left the server listing since they were
                fetched. The offset moves back by that many so the next page skips nothing.

        Returns:
            DocumentQuery: The request descriptor.
        """
        text = query.strip() if query else None
        return DocumentQuery(
            offset=max(cursor.offset - removed, 0),
            count=cursor.count,
            order=order,
            tags=list(dict.fromkeys(filters)),
            query=text or None,
        )
