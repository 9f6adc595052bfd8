"""Feed controller.

Composition root of the document feed. One controller serves one client
session: it owns the tag cache, the persisted filter store, the selection and
the batch dispatcher, and it owns exactly one feed session at a time (an
assembler, a scroll driver and the rendered item list). A restart throws the
whole feed session away and starts again from page 0; an in-flight fetch of
the old session is abandoned and its result never reaches the new one.
"""

from shared.clients.catalog.CatalogClientInterface import CatalogClientInterface
from shared.clients.catalog.models.Document import DocumentPatch, DocumentRecord
from shared.clients.catalog.models.Query import DocumentQuery, SortOrder
from shared.clients.catalog.models.Tag import TagRecord
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import CatalogError
from shared.storage.SessionStorageInterface import SessionStorageInterface
from services.feed.BatchMutationDispatcher import BatchMutationDispatcher
from services.feed.FeedAssembler import FeedAssembler
from services.feed.FilterStateStore import FilterStateStore
from services.feed.InfiniteScrollDriver import InfiniteScrollDriver, TriggerOutcome
from services.feed.JobStatusPoller import JobStatusPoller
from services.feed.PageFetcher import PageFetcher
from services.feed.QueryBuilder import QueryBuilder
from services.feed.SelectionSet import SelectionSet
from services.feed.TagCache import TagCache
from services.feed.models.Cursor import PageCursor
from services.feed.models.FeedItem import DocumentItem, RenderItem, YearSeparator
from services.feed.models.Mutation import BatchReport, MutationKind


class FeedController:
    """Drives one paginated, year-grouped, filterable document feed."""

    def __init__(
        self,
        helper_config: HelperConfig,
        catalog_client: CatalogClientInterface,
        storage: SessionStorageInterface,
        order: SortOrder | None = None,
        query: str | None = None,
        poller: JobStatusPoller | None = None,
    ) -> None:
        self.logging = helper_config.get_logger()
        self._helper_config = helper_config
        self._order = order
        self._query = query
        self._tz = helper_config.get_timezone_val("TIMEZONE", default="Europe/Berlin")

        # per controller
        self._catalog = catalog_client
        self._filters = FilterStateStore(helper_config, storage)
        self._query_builder = QueryBuilder()
        self._fetcher = PageFetcher(catalog_client)
        self._tags = TagCache(catalog_client)
        self._dispatcher = BatchMutationDispatcher(helper_config, catalog_client)
        self._poller = poller
        self.selection = SelectionSet(self.get_rendered_ids)

        # per feed session, replaced on every restart
        self._assembler: FeedAssembler | None = None
        self._driver: InfiniteScrollDriver | None = None
        self._items: list[RenderItem] = []
        self._documents: dict[int, DocumentRecord] = {}
        self._pending_separator: YearSeparator | None = None
        # rendered ids no longer in the server listing, the next offset moves back by that many
        self._left_listing: set[int] = set()
        self._restart_count = 0

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_items(self) -> list[RenderItem]:
        return list(self._items)

    def get_rendered_ids(self) -> set[int]:
        return set(self._documents)

    def get_document(self, document_id: int) -> DocumentRecord | None:
        return self._documents.get(document_id)

    def get_filters(self) -> list[int]:
        return self._filters.get_active_filters()

    def get_order(self) -> SortOrder | None:
        return self._order

    def get_query(self) -> str | None:
        return self._query

    def get_cursor(self) -> PageCursor:
        return self._assembler.cursor if self._assembler else PageCursor()

    def has_next_page(self) -> bool:
        return self._assembler.has_next_page() if self._assembler else True

    def is_fetching(self) -> bool:
        return self._driver.is_fetching() if self._driver else False

    def get_last_error(self) -> CatalogError | None:
        return self._driver.get_last_error() if self._driver else None

    def get_restart_count(self) -> int:
        return self._restart_count

    def get_filterable_tags(self) -> list[TagRecord]:
        return self._tags.filterable_tags()

    def resolve_tag(self, tag_id: int) -> TagRecord:
        return self._tags.resolve(tag_id)

    def get_poller(self) -> JobStatusPoller | None:
        return self._poller

    ##########################################
    ############## FEED SESSION ##############
    ##########################################

    async def start(self) -> TriggerOutcome:
        """Load the tag cache and render the first page.

        A failing tag fetch is not fatal: tag chips then resolve to "unknown tag".
        """
        try:
            await self._tags.load()
        except CatalogError as e:
            self.logging.warning("Could not load tags, rendering without tag names: %s", e)
        return await self.restart()

    async def restart(self) -> TriggerOutcome:
        """Discard the feed session and fetch page 0 of a new one.

        Returns:
            TriggerOutcome: Outcome of the page 0 fetch.
        """
        if self._driver is not None:
            self._driver.abandon()

        self._assembler = FeedAssembler(self._order, self._tz)
        self._items = []
        self._documents = {}
        self._pending_separator = None
        self._left_listing = set()
        self.selection.retain(set())
        self._restart_count += 1

        driver = InfiniteScrollDriver(
            helper_config=self._helper_config,
            page_fetcher=self._fetcher,
            assembler=self._assembler,
            build_request=self._build_request,
            on_items=self._append_items,
        )
        self._driver = driver
        self.logging.debug("Feed restarted (order=%s, query=%r, filters=%s)", self._order, self._query, self.get_filters())
        return await driver.trigger()

    async def on_proximity(self) -> TriggerOutcome:
        """The viewport approaches the end of the rendered list."""
        if self._driver is None:
            return await self.restart()
        return await self._driver.trigger()

    async def set_query(self, order: SortOrder | None, query: str | None) -> TriggerOutcome:
        """Change sort order and free-text query. Always restarts the feed."""
        self._order = order
        self._query = query
        return await self.restart()

    ##########################################
    ################ FILTERS #################
    ##########################################

    async def add_filter(self, tag_id: int) -> TriggerOutcome | None:
        """Filter by one more tag. Restarts the feed if the filter set changed.

        Returns:
            TriggerOutcome | None: Outcome of the page 0 fetch, None if the tag was already active.
        """
        if not self._filters.add_filter(tag_id):
            return None
        return await self.restart()

    async def remove_filter(self, tag_id: int) -> TriggerOutcome | None:
        """Stop filtering by a tag. Restarts the feed if the filter set changed.

        Returns:
            TriggerOutcome | None: Outcome of the page 0 fetch, None if the tag was not active.
        """
        if not self._filters.remove_filter(tag_id):
            return None
        return await self.restart()

    ##########################################
    ################ BATCH ###################
    ##########################################

    async def apply_batch(
        self,
        kind: MutationKind,
        tag_id: int | None = None,
        force_ocr: bool = False,
    ) -> BatchReport:
        """Apply a mutation to the current selection and update the affected items in place.

        The cursor and year grouping are never touched. Successful deletes leave
        the feed and the selection, successful tag changes patch the rendered
        document, a reprocess batch refreshes the job status.
        Documents that drop out of the server listing (deleted, or untagged from
        an active filter) move the offset of the next page back accordingly.

        Returns:
            BatchReport: The per-document outcomes.

        Raises:
            ValueError: If a tag mutation is requested without a tag id.
        """
        report = await self._dispatcher.apply(kind, self.selection.selected, tag_id=tag_id, force_ocr=force_ocr)
        self._apply_report(report)
        if kind == MutationKind.REPROCESS and report.succeeded and self._poller is not None:
            await self._poller.poll_once()
        return report

    async def update_document(self, document_id: int, patch: DocumentPatch) -> DocumentRecord:
        """Overwrite metadata of one rendered document and update its item in place.

        Returns:
            DocumentRecord: The rendered record after the update.

        Raises:
            ValueError: If the document is not rendered in the current feed.
            TransportError: If the catalog rejects the update.
        """
        document = self._documents.get(document_id)
        if document is None:
            raise ValueError(f"Document {document_id} is not rendered in the current feed")

        await self._catalog.do_patch_document(document_id, patch)

        update = patch.model_dump(include={"title", "language", "tags"}, exclude_none=True)
        if patch.extracted is not None and patch.extracted.doc_date is not None:
            update["doc_date"] = patch.extracted.doc_date
        updated = document.model_copy(update=update)
        self._replace_document(updated)
        self._track_listing(updated)
        return updated

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _build_request(self, cursor: PageCursor) -> DocumentQuery:
        # filters are read on every fetch so a page never uses a stale set
        return self._query_builder.build_query(
            cursor, self._order, self._query, self._filters.get_active_filters(), removed=len(self._left_listing)
        )

    def _append_items(self, items: list[RenderItem]) -> None:
        """Append a page to the rendered list, skipping documents already shown in this session.

        A separator is held back until its first new document arrives, so a
        group made only of duplicates leaves no empty headline behind.
        """
        for item in items:
            if isinstance(item, YearSeparator):
                self._pending_separator = item
                continue
            document = item.document
            if document.id in self._documents:
                self.logging.debug("Skipping duplicate document id=%d in feed", document.id)
                continue
            if self._pending_separator is not None:
                self._items.append(self._pending_separator)
                self._pending_separator = None
            self._items.append(item)
            self._documents[document.id] = document

    def _apply_report(self, report: BatchReport) -> None:
        succeeded = [doc_id for doc_id in report.succeeded if doc_id in self._documents]
        if not succeeded:
            return

        if report.kind == MutationKind.DELETE:
            removed = set(succeeded)
            self._items = [
                item for item in self._items
                if not (isinstance(item, DocumentItem) and item.document.id in removed)
            ]
            for doc_id in removed:
                del self._documents[doc_id]
            self._left_listing.update(removed)
            self.selection.retain(self.get_rendered_ids())
            return

        if report.kind in (MutationKind.ADD_TAG, MutationKind.REMOVE_TAG):
            for doc_id in succeeded:
                document = self._retag(self._documents[doc_id], report.kind, report.tag_id)
                self._replace_document(document)
                self._track_listing(document)

    def _retag(self, document: DocumentRecord, kind: MutationKind, tag_id: int) -> DocumentRecord:
        if kind == MutationKind.ADD_TAG:
            if tag_id in document.tags:
                return document
            return document.model_copy(update={"tags": [*document.tags, tag_id]})
        return document.model_copy(update={"tags": [t for t in document.tags if t != tag_id]})

    def _track_listing(self, document: DocumentRecord) -> None:
        # a document missing an active filter tag drops out of the filtered listing
        if all(tag_id in document.tags for tag_id in self._filters.get_active_filters()):
            self._left_listing.discard(document.id)
        else:
            self._left_listing.add(document.id)

    def _replace_document(self, document: DocumentRecord) -> None:
        self._documents[document.id] = document
        for index, item in enumerate(self._items):
            if isinstance(item, DocumentItem) and item.document.id == document.id:
                self._items[index] = DocumentItem(document=document)
                break
