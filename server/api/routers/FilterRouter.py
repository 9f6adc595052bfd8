"""Filter router: the persisted tag filter set."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from server.models.responses import FeedStateResponse, FeedTriggerResponse, FiltersResponse, TagChip
from shared.dependencies.auth import verify_api_key

filter_router = APIRouter()


def _trigger_response(controller, outcome) -> JSONResponse:
    response = FeedTriggerResponse(
        outcome=outcome.value if outcome is not None else None,
        feed=FeedStateResponse.from_controller(controller),
    )
    return JSONResponse(content=response.model_dump(mode="json"))


@filter_router.get(
    "/filters",
    dependencies=[Depends(verify_api_key)],
    tags=["Filters"],
)
async def get_filters(request: Request) -> JSONResponse:
    """Return the active filters and the tags that can still be added (deactivated ones excluded)."""
    controller = request.app.state.controller
    active_ids = controller.get_filters()
    response = FiltersResponse(
        active=[TagChip.from_tag(controller.resolve_tag(tag_id)) for tag_id in active_ids],
        available=[TagChip.from_tag(tag) for tag in controller.get_filterable_tags() if tag.id not in active_ids],
    )
    return JSONResponse(content=response.model_dump(mode="json"))


@filter_router.put(
    "/filters/{tag_id}",
    dependencies=[Depends(verify_api_key)],
    tags=["Filters"],
)
async def add_filter(request: Request, tag_id: int) -> JSONResponse:
    """Filter by a tag. The feed restarts from page 0 unless the tag was already active (outcome null)."""
    controller = request.app.state.controller
    return _trigger_response(controller, await controller.add_filter(tag_id))


@filter_router.delete(
    "/filters/{tag_id}",
    dependencies=[Depends(verify_api_key)],
    tags=["Filters"],
)
async def remove_filter(request: Request, tag_id: int) -> JSONResponse:
    """Stop filtering by a tag. The feed restarts from page 0 unless the tag was not active (outcome null)."""
    controller = request.app.state.controller
    return _trigger_response(controller, await controller.remove_filter(tag_id))
