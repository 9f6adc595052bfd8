"""Pydantic models for responses returned to the view layer."""

from pydantic import BaseModel

from shared.clients.catalog.models.Query import SortOrder
from shared.clients.catalog.models.Tag import TagRecord
from services.feed.FeedController import FeedController
from services.feed.TagCache import TagCache
from services.feed.models.FeedItem import RenderItem


class FeedStateResponse(BaseModel):
    """Full render state of the feed."""

    items: list[RenderItem]
    page: int
    has_next_page: bool
    fetching: bool
    last_error: str | None = None
    order: SortOrder | None = None
    query: str | None = None
    filters: list[int]

    @classmethod
    def from_controller(cls, controller: FeedController) -> "FeedStateResponse":
        last_error = controller.get_last_error()
        return cls(
            items=controller.get_items(),
            page=controller.get_cursor().page,
            has_next_page=controller.has_next_page(),
            fetching=controller.is_fetching(),
            last_error=str(last_error) if last_error else None,
            order=controller.get_order(),
            query=controller.get_query(),
            filters=controller.get_filters(),
        )


class FeedTriggerResponse(BaseModel):
    """Outcome of one fetch trigger plus the feed state afterwards."""

    outcome: str | None
    feed: FeedStateResponse


class TagChip(TagRecord):
    """A tag plus the text color that stays readable on its background."""

    text_color: str

    @classmethod
    def from_tag(cls, tag: TagRecord) -> "TagChip":
        return cls(**tag.model_dump(), text_color=TagCache.text_color(tag))


class FiltersResponse(BaseModel):
    active: list[TagChip]
    available: list[TagChip]


class SelectionResponse(BaseModel):
    active: bool
    document_ids: list[int]
