"""Batch mutation dispatcher.

The catalog has no multi-object endpoints, so a batch is one independent call
per selected document. Calls run concurrently with bounded parallelism and
may complete in any order. Every outcome is reported individually; a failed
call never rolls back the ones that succeeded.
"""

import asyncio
from typing import Iterable

from shared.clients.catalog.CatalogClientInterface import CatalogClientInterface
from shared.helper.HelperConfig import HelperConfig
from shared.models.errors import CatalogError, TransportError
from services.feed.models.Mutation import BatchReport, MutationKind, MutationOutcome

BATCH_CONCURRENCY = 5  # max parallel per-document calls


class BatchMutationDispatcher:
    """Applies one mutation to every document of a selection."""

    def __init__(self, helper_config: HelperConfig, catalog_client: CatalogClientInterface) -> None:
        self.logging = helper_config.get_logger()
        self._catalog = catalog_client
        self._concurrency = int(helper_config.get_number_val("BATCH_CONCURRENCY", default=BATCH_CONCURRENCY))

    ##########################################
    ################ CORE ####################
    ##########################################

    async def apply(
        self,
        kind: MutationKind,
        selection: Iterable[int],
        tag_id: int | None = None,
        force_ocr: bool = False,
    ) -> BatchReport:
        """Issue one remote call per selected document and collect the outcomes.

        Args:
            kind (MutationKind): The mutation to apply.
            selection (Iterable[int]): Document ids. Iterated once, in sorted order.
            tag_id (int | None): The tag for add/remove tag mutations.
            force_ocr (bool): Force OCR for reprocess mutations.

        Returns:
            BatchReport: One outcome per document, in sorted document id order.

        Raises:
            ValueError: If a tag mutation is requested without a tag id.
        """
        if kind.needs_tag() and tag_id is None:
            raise ValueError(f"Mutation '{kind.value}' needs a tag id")

        document_ids = sorted(set(selection))
        if not document_ids:
            return BatchReport(kind=kind, tag_id=tag_id)

        self.logging.info("Applying '%s' to %d documents...", kind.value, len(document_ids))
        sem = asyncio.Semaphore(max(1, self._concurrency))
        outcomes = await asyncio.gather(
            *[
                self._apply_one(kind, document_id, tag_id, force_ocr, sem)
                for document_id in document_ids
            ]
        )

        report = BatchReport(kind=kind, tag_id=tag_id if kind.needs_tag() else None, outcomes=list(outcomes))
        if report.failed:
            self.logging.warning(
                "Batch '%s' finished: %d succeeded, %d failed (%s).",
                kind.value, len(report.succeeded), len(report.failed), report.failed,
            )
        else:
            self.logging.info("Batch '%s' finished: %d succeeded.", kind.value, len(report.succeeded))
        return report

    ##########################################
    ############### HELPERS ##################
    ##########################################

    async def _apply_one(
        self,
        kind: MutationKind,
        document_id: int,
        tag_id: int | None,
        force_ocr: bool,
        sem: asyncio.Semaphore,
    ) -> MutationOutcome:
        """Run the remote call for a single document.

        Returns:
            MutationOutcome: ok=True on success, otherwise the error text and HTTP status if any.
        """
        async with sem:
            try:
                if kind == MutationKind.DELETE:
                    await self._catalog.do_delete_document(document_id)
                elif kind == MutationKind.REPROCESS:
                    await self._catalog.do_reprocess_document(document_id, force_ocr=force_ocr)
                elif kind == MutationKind.ADD_TAG:
                    await self._catalog.do_add_tag(document_id, tag_id)
                elif kind == MutationKind.REMOVE_TAG:
                    await self._catalog.do_remove_tag(document_id, tag_id)
            except CatalogError as exc:
                self.logging.warning("'%s' failed for document id=%d: %s", kind.value, document_id, exc)
                status_code = exc.status_code if isinstance(exc, TransportError) else None
                return MutationOutcome(document_id=document_id, ok=False, error=str(exc), status_code=status_code)
            return MutationOutcome(document_id=document_id, ok=True)
