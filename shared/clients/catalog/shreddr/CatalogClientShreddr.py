from typing import Any

from shared.clients.catalog.CatalogClientInterface import CatalogClientInterface
from shared.clients.catalog.models.Document import DocumentRecord
from shared.clients.catalog.models.Tag import TagRecord
from shared.clients.catalog.models.JobStatus import JobStatus, JobIdle, JobBusy
from shared.helper.HelperConfig import HelperConfig
from shared.models.config import EnvConfig


class CatalogClientShreddr(CatalogClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)
        self._base_url = self.get_setting("BASE_URL").rstrip("/")
        self._api_key = self.get_setting("API_KEY")

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_engine_name(self) -> str:
        return "Shreddr"

    ################ CONFIG ##################
    def _get_required_config(self) -> list[EnvConfig]:
        return [
            EnvConfig(env_key="BASE_URL", val_type="string", default=None),
            EnvConfig(env_key="API_KEY", val_type="string", default="")
        ]

    ################ AUTH ##################
    def _get_auth_header(self) -> dict:
        if self._api_key:
            return {"Authorization": f"Bearer {self._api_key}"}
        else:
            return {}

    ################ ENDPOINTS ##################
    def _get_base_url(self) -> str:
        return self._base_url

    def _get_endpoint_healthcheck(self) -> str:
        return "/api/job"

    def _get_endpoint_documents(self) -> str:
        return "/documents/json"

    def _get_endpoint_document(self, document_id: int) -> str:
        return f"/documents/{document_id}"

    def _get_endpoint_document_reprocess(self, document_id: int) -> str:
        return f"/documents/{document_id}/reimport"

    def _get_endpoint_document_tag(self, document_id: int, tag_id: int) -> str:
        return f"/documents/{document_id}/tags/{tag_id}"

    def _get_endpoint_tags(self) -> str:
        return "/api/tags"

    def _get_endpoint_job_status(self) -> str:
        return "/api/job"

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    ############### LIST RESPONSES ###############
    def _parse_endpoint_documents(self, response: Any) -> list[DocumentRecord]:
        if not isinstance(response, list):
            raise TypeError(f"expected a list of documents, got {type(response).__name__}")
        return [self._parse_endpoint_document(item) for item in response]

    def _parse_endpoint_tags(self, response: Any) -> list[TagRecord]:
        if not isinstance(response, list):
            raise TypeError(f"expected a list of tags, got {type(response).__name__}")
        return [
            TagRecord(
                engine=self._get_engine_name(),
                id=item["id"],
                name=item.get("name") or "",
                color=item.get("color"),
                deactivated=bool(item.get("deactivated", False)),
            )
            for item in response
        ]

    ############### GET RESPONSES ###############
    def _parse_endpoint_document(self, response: dict) -> DocumentRecord:
        # the extracted date moved from "inferred_date" into "extracted.doc_date" between server versions
        extracted = response.get("extracted") or {}
        doc_date = extracted.get("doc_date")
        if doc_date is None:
            doc_date = response.get("inferred_date")
        return DocumentRecord(
                engine=self._get_engine_name(),
                id=response["id"],
                title=response.get("title") or "",
                tags=response.get("tags") or [],
                imported_date=response["imported_date"],
                doc_date=doc_date or None,
                original_filename=response.get("original_filename"),
                language=response.get("language"),
            )

    def _parse_endpoint_job_status(self, response: Any) -> JobStatus:
        if response == "Idle":
            return JobIdle()
        busy = response["Busy"]
        # "queue" counts the waiting jobs only, the running one comes on top
        return JobBusy(
            queue_length=int(busy.get("queue", 0)) + 1,
            current=str(busy.get("current") or ""),
            progress=int(busy.get("progress") or 0),
        )
