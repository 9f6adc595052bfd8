"""Batch mutation kinds and their per-document outcome report."""

from enum import Enum

from pydantic import BaseModel

from shared.models.errors import PartialBatchFailure


class MutationKind(str, Enum):
    DELETE = "delete"
    REPROCESS = "reprocess"
    ADD_TAG = "add_tag"
    REMOVE_TAG = "remove_tag"

    def needs_tag(self) -> bool:
        return self in (MutationKind.ADD_TAG, MutationKind.REMOVE_TAG)


class MutationOutcome(BaseModel):
    """
    Result of the remote call for one document.

    Attributes:
        document_id (int): The addressed document.
        ok (bool): True if the catalog accepted the call.
        error (str | None): Failure description when ok is False.
        status_code (int | None): HTTP status of a rejected call, if one was received.
    """
    document_id: int
    ok: bool
    error: str | None = None
    status_code: int | None = None


class BatchReport(BaseModel):
    """
    All outcomes of one batch. Partial success is a regular result, nothing is rolled back.
    """
    kind: MutationKind
    tag_id: int | None = None
    outcomes: list[MutationOutcome] = []

    @property
    def succeeded(self) -> list[int]:
        return [o.document_id for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[int]:
        return [o.document_id for o in self.outcomes if not o.ok]

    def is_partial(self) -> bool:
        return bool(self.succeeded) and bool(self.failed)

    def raise_for_failures(self) -> None:
        """
        Raises:
            PartialBatchFailure: If some, but not all, calls failed.
        """
        if self.is_partial():
            raise PartialBatchFailure(self)
