"""Feed router: render state, infinite-scroll triggers and query changes."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from server.models.requests import FeedQueryRequest
from server.models.responses import FeedStateResponse, FeedTriggerResponse
from shared.dependencies.auth import verify_api_key

feed_router = APIRouter()


@feed_router.get(
    "/feed",
    dependencies=[Depends(verify_api_key)],
    tags=["Feed"],
)
async def get_feed(request: Request) -> JSONResponse:
    """Return every rendered item plus pagination flags."""
    controller = request.app.state.controller
    return JSONResponse(content=FeedStateResponse.from_controller(controller).model_dump(mode="json"))


@feed_router.post(
    "/feed/next",
    dependencies=[Depends(verify_api_key)],
    tags=["Feed"],
)
async def next_page(request: Request) -> JSONResponse:
    """Viewport proximity signal. Fetches the next page unless one is in flight or the feed ended.

    A failed fetch is reported in the outcome and in last_error, never as an HTTP error:
    the view simply calls this endpoint again on the next proximity signal.
    """
    controller = request.app.state.controller
    outcome = await controller.on_proximity()
    response = FeedTriggerResponse(outcome=outcome.value, feed=FeedStateResponse.from_controller(controller))
    return JSONResponse(content=response.model_dump(mode="json"))


@feed_router.post(
    "/feed/restart",
    dependencies=[Depends(verify_api_key)],
    tags=["Feed"],
)
async def restart_feed(request: Request, body: FeedQueryRequest) -> JSONResponse:
    """Apply a new sort order and query, then render the feed again from page 0."""
    controller = request.app.state.controller
    request.app.state.logging.info("Feed restart requested (order=%s, query=%r)", body.order, body.query)
    outcome = await controller.set_query(body.order, body.query)
    response = FeedTriggerResponse(outcome=outcome.value, feed=FeedStateResponse.from_controller(controller))
    return JSONResponse(content=response.model_dump(mode="json"))
