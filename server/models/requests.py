"""Pydantic models for requests sent by the view layer."""

from pydantic import BaseModel

from shared.clients.catalog.models.Query import SortOrder
from services.feed.models.Mutation import MutationKind


class FeedQueryRequest(BaseModel):
    """New sort order and free-text query. Restarts the feed."""

    order: SortOrder | None = None
    query: str | None = None


class SelectAllRequest(BaseModel):
    """Ids visible in the viewport. None selects every rendered document."""

    document_ids: list[int] | None = None


class BatchRequest(BaseModel):
    """A mutation for every selected document."""

    kind: MutationKind
    tag_id: int | None = None
    force_ocr: bool = False
