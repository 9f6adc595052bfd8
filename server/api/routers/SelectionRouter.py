"""Selection router: multi-selection over rendered documents."""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from server.models.requests import SelectAllRequest
from server.models.responses import SelectionResponse
from shared.dependencies.auth import verify_api_key

selection_router = APIRouter()


def _selection_response(request: Request) -> JSONResponse:
    selection = request.app.state.controller.selection
    response = SelectionResponse(active=selection.is_active(), document_ids=sorted(selection.selected))
    return JSONResponse(content=response.model_dump())


@selection_router.get("/selection", dependencies=[Depends(verify_api_key)], tags=["Selection"])
async def get_selection(request: Request) -> JSONResponse:
    return _selection_response(request)


@selection_router.post("/selection/enter", dependencies=[Depends(verify_api_key)], tags=["Selection"])
async def enter_selection(request: Request) -> JSONResponse:
    request.app.state.controller.selection.enter_selection_mode()
    return _selection_response(request)


@selection_router.post("/selection/exit", dependencies=[Depends(verify_api_key)], tags=["Selection"])
async def exit_selection(request: Request) -> JSONResponse:
    request.app.state.controller.selection.exit_selection_mode()
    return _selection_response(request)


@selection_router.post("/selection/toggle/{document_id}", dependencies=[Depends(verify_api_key)], tags=["Selection"])
async def toggle_document(request: Request, document_id: int) -> JSONResponse:
    """Flip one document.

    Raises:
        HTTPException: 409 if selection mode is off or the document is not rendered.
    """
    try:
        request.app.state.controller.selection.toggle(document_id)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _selection_response(request)


@selection_router.post("/selection/all", dependencies=[Depends(verify_api_key)], tags=["Selection"])
async def select_all(request: Request, body: SelectAllRequest) -> JSONResponse:
    controller = request.app.state.controller
    visible_ids = body.document_ids if body.document_ids is not None else controller.get_rendered_ids()
    controller.selection.select_all(visible_ids)
    return _selection_response(request)


@selection_router.delete("/selection", dependencies=[Depends(verify_api_key)], tags=["Selection"])
async def clear_selection(request: Request) -> JSONResponse:
    request.app.state.controller.selection.clear()
    return _selection_response(request)
