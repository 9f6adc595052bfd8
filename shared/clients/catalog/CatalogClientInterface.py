from abc import abstractmethod
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.catalog.models.Document import DocumentRecord, DocumentPatch
from shared.clients.catalog.models.Tag import TagRecord
from shared.clients.catalog.models.JobStatus import JobStatus
from shared.clients.catalog.models.Query import DocumentQuery
from shared.models.errors import DecodeError

T = TypeVar("T")


class CatalogClientInterface(ClientInterface):
    """
    Client for a document catalog. The catalog offers no multi-object endpoints,
    so every mutation addresses exactly one document.
    """

    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        return "catalog"

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_documents(self) -> str:
        """
        Returns the endpoint path for document listing requests (e.g. "/documents/json").
        """
        pass

    @abstractmethod
    def _get_endpoint_document(self, document_id: int) -> str:
        """
        Returns the endpoint path addressing a single document, used for delete and patch.
        """
        pass

    @abstractmethod
    def _get_endpoint_document_reprocess(self, document_id: int) -> str:
        """
        Returns the endpoint path that queues a reprocess job for a document.
        """
        pass

    @abstractmethod
    def _get_endpoint_document_tag(self, document_id: int, tag_id: int) -> str:
        """
        Returns the endpoint path addressing one tag on one document, used to add and remove it.
        """
        pass

    @abstractmethod
    def _get_endpoint_tags(self) -> str:
        """
        Returns the endpoint path listing all tags, deactivated ones included.
        """
        pass

    @abstractmethod
    def _get_endpoint_job_status(self) -> str:
        """
        Returns the endpoint path of the singleton job queue status.
        """
        pass

    ################ PARAMS ##################
    def _get_params_documents(self, query: DocumentQuery) -> dict:
        """
        Returns the query string parameters for a document listing request.

        Args:
            query (DocumentQuery): The listing request.
        """
        return query.to_params()

    ##########################################
    ############### REQUESTS #################
    ##########################################

    ############# LISTING REQUESTS ##############
    async def do_fetch_documents(self, query: DocumentQuery) -> list[DocumentRecord]:
        """
        Fetches one page of documents.

        Args:
            query (DocumentQuery): Offset, count, order and filters of the page.

        Returns:
            list[DocumentRecord]: The documents in server order.

        Raises:
            TransportError: On network failure, timeout or a non-2xx status.
            DecodeError: If the body is not a valid document list.
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_documents(), params=self._get_params_documents(query))
        documents = self._parse_safely(self._parse_endpoint_documents, self.decode_json(resp))
        self.logging.debug("Fetched %d documents at offset %d from %s", len(documents), query.offset, self._get_engine_name())
        return documents

    async def do_fetch_tags(self) -> list[TagRecord]:
        """
        Fetches all tags, deactivated ones included.

        Raises:
            TransportError: On network failure, timeout or a non-2xx status.
            DecodeError: If the body is not a valid tag list.
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_tags())
        tags = self._parse_safely(self._parse_endpoint_tags, self.decode_json(resp))
        self.logging.debug("Fetched %d tags from %s", len(tags), self._get_engine_name())
        return tags

    async def do_fetch_job_status(self) -> JobStatus:
        """
        Fetches the singleton job queue status.

        Raises:
            TransportError: On network failure, timeout or a non-2xx status.
            DecodeError: If the body is neither an idle marker nor a busy descriptor.
        """
        resp = await self.do_request(method="GET", endpoint=self._get_endpoint_job_status())
        return self._parse_safely(self._parse_endpoint_job_status, self.decode_json(resp))

    ############# MUTATION REQUESTS ##############
    async def do_delete_document(self, document_id: int) -> None:
        await self.do_request(method="DELETE", endpoint=self._get_endpoint_document(document_id))

    async def do_reprocess_document(self, document_id: int, force_ocr: bool = False) -> None:
        """
        Queues a reprocess job for a document.

        Args:
            document_id (int): The document to reprocess.
            force_ocr (bool): Force OCR even if the file carries a text layer.
        """
        await self.do_request(
            method="PUT",
            endpoint=self._get_endpoint_document_reprocess(document_id),
            params={"ocr": "true" if force_ocr else "false"},
        )

    async def do_add_tag(self, document_id: int, tag_id: int) -> None:
        await self.do_request(method="POST", endpoint=self._get_endpoint_document_tag(document_id, tag_id))

    async def do_remove_tag(self, document_id: int, tag_id: int) -> None:
        await self.do_request(method="DELETE", endpoint=self._get_endpoint_document_tag(document_id, tag_id))

    async def do_patch_document(self, document_id: int, patch: DocumentPatch) -> None:
        """
        Overwrites metadata fields of one document. Fields left unset in the patch are not sent.

        Args:
            document_id (int): The document to update.
            patch (DocumentPatch): The fields to overwrite.
        """
        await self.do_request(
            method="PATCH",
            endpoint=self._get_endpoint_document(document_id),
            json=patch.model_dump(exclude_none=True),
        )

    ##########################################
    ########### RESPONSE PARSER ##############
    ##########################################

    def _parse_safely(self, parser: Callable[[Any], T], payload: Any) -> T:
        """
        Runs a response parser and maps any shape error to DecodeError.
        """
        try:
            return parser(payload)
        except (ValidationError, KeyError, TypeError, ValueError, AttributeError) as e:
            raise DecodeError(f"Unexpected response shape from {self._get_engine_name()}: {e}") from e

    @abstractmethod
    def _parse_endpoint_documents(self, response: Any) -> list[DocumentRecord]:
        """
        Parses the raw document listing body.

        Args:
            response (Any): The decoded JSON body.
        Returns:
            list[DocumentRecord]: The documents in server order.
        """
        pass

    @abstractmethod
    def _parse_endpoint_document(self, response: dict) -> DocumentRecord:
        """
        Parses a single raw document dict into a DocumentRecord.
        """
        pass

    @abstractmethod
    def _parse_endpoint_tags(self, response: Any) -> list[TagRecord]:
        """
        Parses the raw tag listing body.
        """
        pass

    @abstractmethod
    def _parse_endpoint_job_status(self, response: Any) -> JobStatus:
        """
        Parses the raw job status body into JobIdle or JobBusy.
        """
        pass
