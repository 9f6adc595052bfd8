"""Document listing request descriptor."""

from enum import IntEnum

from pydantic import BaseModel, Field


class SortOrder(IntEnum):
    """Sort modes understood by the catalog listing endpoint."""
    IMPORTED_DATE = 0
    EXTRACTED_DATE = 1


class DocumentQuery(BaseModel):
    """
    One paginated document listing request.

    Attributes:
        offset (int): Index of the first document to return.
        count (int): Maximum number of documents to return.
        order (SortOrder | None): Sort mode, None lets the server pick its default order.
        tags (list[int]): Tag ids every returned document must carry. Empty means no tag filter.
        query (str | None): Free-text query, None for no text filter.
    """
    offset: int = Field(ge=0)
    count: int = Field(gt=0)
    order: SortOrder | None = None
    tags: list[int] = []
    query: str | None = None

    def to_params(self) -> dict[str, str | int]:
        """
        Returns the query string parameters. Empty filters are omitted rather than sent as empty tokens.
        """
        params: dict[str, str | int] = {"count": self.count, "offset": self.offset}
        if self.order is not None:
            params["order"] = int(self.order)
        if self.query:
            params["query"] = self.query
        if self.tags:
            params["tag"] = ",".join(str(tag_id) for tag_id in self.tags)
        return params
