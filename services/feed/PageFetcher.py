from pydantic import BaseModel

from shared.clients.catalog.CatalogClientInterface import CatalogClientInterface
from shared.clients.catalog.models.Document import DocumentRecord
from shared.clients.catalog.models.Query import DocumentQuery


class PageResult(BaseModel):
    """
    One fetched page.

    Attributes:
        documents (list[DocumentRecord]): The page content in server order.
        has_next_page (bool): False iff the page is shorter than requested. A full page always means "maybe more".
    """
    documents: list[DocumentRecord]
    has_next_page: bool


class PageFetcher:
    """Performs one paginated fetch and classifies the result."""

    def __init__(self, catalog_client: CatalogClientInterface) -> None:
        self._catalog = catalog_client
        self.logging = catalog_client.logging

    async def fetch_page(self, request: DocumentQuery) -> PageResult:
        """Fetch one page of documents.

        Args:
            request (DocumentQuery): The listing request.

        Returns:
            PageResult: The documents and the end-of-feed classification.

        Raises:
            TransportError: On network failure, timeout or a non-2xx status.
            DecodeError: If the body cannot be parsed.
        """
        documents = await self._catalog.do_fetch_documents(request)
        has_next_page = len(documents) >= request.count
        if not has_next_page:
            self.logging.debug("Short page at offset %d (%d of %d), end of feed", request.offset, len(documents), request.count)
        return PageResult(documents=documents, has_next_page=has_next_page)
