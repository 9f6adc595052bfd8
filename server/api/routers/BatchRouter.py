"""Batch router: one mutation for every selected document."""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from server.models.requests import BatchRequest
from shared.dependencies.auth import verify_api_key

batch_router = APIRouter()


@batch_router.post(
    "/batch",
    dependencies=[Depends(verify_api_key)],
    tags=["Batch"],
)
async def apply_batch(request: Request, body: BatchRequest) -> JSONResponse:
    """Apply a delete, reprocess, add-tag or remove-tag mutation to the selection.

    Partial failure is a regular result: the response lists every document's
    outcome with status 200 and the view updates item by item.

    Raises:
        HTTPException: 422 if a tag mutation comes without a tag id.
    """
    controller = request.app.state.controller
    request.app.state.logging.info(
        "Batch '%s' requested for %d documents", body.kind.value, len(controller.selection)
    )
    try:
        report = await controller.apply_batch(body.kind, tag_id=body.tag_id, force_ocr=body.force_ocr)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    content = report.model_dump(mode="json")
    content["succeeded"] = report.succeeded
    content["failed"] = report.failed
    return JSONResponse(content=content)
