"""Job router: latest status of the background job queue."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from services.feed.models.Status import StatusNotice
from shared.dependencies.auth import verify_api_key

job_router = APIRouter()


@job_router.get(
    "/job",
    dependencies=[Depends(verify_api_key)],
    tags=["Job"],
)
async def get_job_status(request: Request) -> JSONResponse:
    """Return the notice of the last successful poll.

    Before the first successful poll one is attempted on demand. If that fails
    too the status is reported as idle, the display simply does not change.
    """
    poller = request.app.state.poller
    notice = poller.get_last_notice()
    if notice is None:
        notice = await poller.poll_once() or StatusNotice(state="idle")
    return JSONResponse(content=notice.model_dump())
