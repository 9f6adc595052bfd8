"""Document router: metadata edits on a single rendered document."""

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from shared.clients.catalog.models.Document import DocumentPatch
from shared.dependencies.auth import verify_api_key
from shared.models.errors import TransportError

document_router = APIRouter()


@document_router.patch(
    "/documents/{document_id}",
    dependencies=[Depends(verify_api_key)],
    tags=["Documents"],
)
async def update_document(request: Request, document_id: int, patch: DocumentPatch) -> JSONResponse:
    """Overwrite title, language, tags or extracted fields and return the updated record.

    Raises:
        HTTPException: 404 if the document is not in the feed, 502 if the catalog rejects the update.
    """
    controller = request.app.state.controller
    try:
        document = await controller.update_document(document_id, patch)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransportError as e:
        request.app.state.logging.warning("Updating document %d failed: %s", document_id, e)
        raise HTTPException(status_code=502, detail=str(e))
    return JSONResponse(content=document.model_dump(mode="json"))
