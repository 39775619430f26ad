import json
from abc import abstractmethod
from typing import Any, TypeVar

import httpx
from httpx._types import HeaderTypes, QueryParamTypes
from pydantic import BaseModel

from shared.helper.HelperConfig import HelperConfig
from shared.clients.ClientInterface import ClientInterface
from shared.clients.dms.models.Collection import Collection
from shared.clients.dms.models.Correspondent import CorrespondentDetails
from shared.clients.dms.models.CustomField import CustomFieldDetails
from shared.clients.dms.models.Document import BinaryResponse, DocumentMetadata
from shared.clients.dms.models.DocumentType import DocumentTypeDetails
from shared.clients.dms.models.ObjectType import ObjectType
from shared.clients.dms.models.Tag import TagDetails

T = TypeVar("T", bound=BaseModel)


class DMSClientInterface(ClientInterface):
    def __init__(self, helper_config: HelperConfig):
        super().__init__(helper_config=helper_config)

    ##########################################
    ################ GETTER ##################
    ##########################################

    ################ GENERAL ##################
    def _get_client_type(self) -> str:
        """
        Returns the type of the client. E.g. "dms"
        """
        return "dms"

    @abstractmethod
    def get_public_url(self) -> str:
        """
        Returns the URL users open in the browser to view documents. Only used for building links.
        """
        pass

    ################ ENDPOINTS ##################
    @abstractmethod
    def _get_endpoint_documents(self) -> str:
        """
        Returns the endpoint path for document listing and search requests (e.g. "/api/documents/").
        """
        pass

    @abstractmethod
    def _get_endpoint_document_details(self, document_id: int) -> str:
        """
        Returns the endpoint path for a single document (e.g. "/api/documents/{id}/").
        """
        pass

    @abstractmethod
    def _get_endpoint_document_download(self, document_id: int) -> str:
        """
        Returns the endpoint path for downloading a document file.
        """
        pass

    @abstractmethod
    def _get_endpoint_document_thumbnail(self, document_id: int) -> str:
        """
        Returns the endpoint path for a document thumbnail.
        """
        pass

    @abstractmethod
    def _get_endpoint_post_document(self) -> str:
        """
        Returns the endpoint path for multipart document uploads.
        """
        pass

    @abstractmethod
    def _get_endpoint_bulk_edit_documents(self) -> str:
        """
        Returns the endpoint path for bulk document edits.
        """
        pass

    @abstractmethod
    def _get_endpoint_bulk_edit_objects(self) -> str:
        """
        Returns the endpoint path for bulk edits of tags, correspondents, document types and custom fields.
        """
        pass

    @abstractmethod
    def _get_endpoint_objects(self, object_type: ObjectType) -> str:
        """
        Returns the listing/creation endpoint path for a reference object kind (e.g. "/api/tags/").
        """
        pass

    @abstractmethod
    def _get_endpoint_object_details(self, object_type: ObjectType, object_id: int) -> str:
        """
        Returns the endpoint path for a single reference object (e.g. "/api/tags/{id}/").
        """
        pass

    ##########################################
    ############### REQUESTS #################
    ##########################################

    async def do_json_request(
        self,
        endpoint: str,
        method: str = "GET",
        headers: HeaderTypes | None = None,
        body: Any = None,
        params: QueryParamTypes | None = None,
    ) -> Any:
        """
        Send a JSON request and return the parsed response body.

        A dict or list body is serialized to JSON. The JSON content type is only set when
        the body is absent or already a serialized string; caller headers win over it.

        Args:
            endpoint (str): The endpoint path.
            method (str): The HTTP method.
            headers (HeaderTypes | None): Extra headers, as a mapping or as (key, value) pairs.
            body (Any): A JSON-serialisable object, a pre-serialized string or raw bytes.
            params (QueryParamTypes | None): URL query parameters.

        Returns:
            Any: The decoded JSON body, the text body, or None for empty responses.

        Raises:
            RequestError: If the backend answers with a non-2xx status.
            NotConfiguredError: If the client was not booted.
        """
        content = body
        if body is not None and not isinstance(body, (str, bytes)):
            content = json.dumps(body)

        request_headers: dict[str, str] = {}
        if content is None or isinstance(content, str):
            request_headers["Content-Type"] = "application/json"
        merged_headers = httpx.Headers(request_headers)
        if headers:
            merged_headers.update(httpx.Headers(headers))

        response = await self.do_request(
            method=method,
            endpoint=endpoint,
            content=content,
            params=params,
            additional_headers=merged_headers,
        )
        return self._parse_body(response)

    async def _fetch_collection(self, endpoint: str, model: type[T], params: QueryParamTypes | None = None) -> Collection[T]:
        response = await self.do_json_request(endpoint, params=params)
        collection = Collection[model].model_validate(response or {})
        self.logging.debug("Fetched %d of %d items from %s", len(collection.results), collection.count, endpoint)
        return collection

    ############# DOCUMENTS ##############
    async def do_fetch_documents(self, params: QueryParamTypes | None = None) -> Collection[dict[str, Any]]:
        """
        Fetch one page of documents.

        Args:
            params (QueryParamTypes | None): Filter, ordering and pagination parameters.

        Returns:
            Collection[dict[str, Any]]: The page, documents kept as raw records.
        """
        response = await self.do_json_request(self._get_endpoint_documents(), params=params)
        return Collection[dict[str, Any]].model_validate(response or {})

    async def do_search_documents(self, query: str) -> Collection[dict[str, Any]]:
        """
        Full text search over document content, title and metadata.
        """
        return await self.do_fetch_documents(params={"query": query})

    async def do_fetch_document(self, document_id: int) -> dict[str, Any]:
        return await self.do_json_request(self._get_endpoint_document_details(document_id))

    async def do_update_document(self, document_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self.do_json_request(self._get_endpoint_document_details(document_id), method="PATCH", body=data)

    async def do_delete_document(self, document_id: int) -> None:
        await self.do_json_request(self._get_endpoint_document_details(document_id), method="DELETE")

    async def do_bulk_edit_documents(self, documents: list[int], method: str, parameters: dict[str, Any] | None = None) -> Any:
        """
        Apply one bulk edit method to many documents.

        Args:
            documents (list[int]): The document ids.
            method (str): The bulk edit method, e.g. "add_tag" or "modify_custom_fields".
            parameters (dict[str, Any] | None): The already normalized method parameters.

        Returns:
            Any: The backend result, usually {"result": "OK"}.
        """
        return await self.do_json_request(
            self._get_endpoint_bulk_edit_documents(),
            method="POST",
            body={"documents": documents, "method": method, "parameters": parameters or {}},
        )

    @abstractmethod
    async def do_post_document(self, content: bytes, filename: str, metadata: DocumentMetadata | None = None) -> Any:
        """
        Upload a new document.

        Args:
            content (bytes): The raw file content.
            filename (str): The original file name.
            metadata (DocumentMetadata | None): Optional metadata for the new document.

        Returns:
            Any: The backend answer, the consumption task id for Paperless.
        """
        pass

    @abstractmethod
    async def do_download_document(self, document_id: int, original: bool = False) -> BinaryResponse:
        """
        Download the archived (or original) file of a document.
        """
        pass

    @abstractmethod
    async def do_fetch_thumbnail(self, document_id: int) -> BinaryResponse:
        """
        Download the thumbnail image of a document.
        """
        pass

    ############# REFERENCE OBJECTS ##############
    async def do_fetch_correspondents(self, params: QueryParamTypes | None = None) -> Collection[CorrespondentDetails]:
        return await self._fetch_collection(self._get_endpoint_objects(ObjectType.CORRESPONDENTS), CorrespondentDetails, params)

    async def do_fetch_document_types(self, params: QueryParamTypes | None = None) -> Collection[DocumentTypeDetails]:
        return await self._fetch_collection(self._get_endpoint_objects(ObjectType.DOCUMENT_TYPES), DocumentTypeDetails, params)

    async def do_fetch_tags(self, params: QueryParamTypes | None = None) -> Collection[TagDetails]:
        return await self._fetch_collection(self._get_endpoint_objects(ObjectType.TAGS), TagDetails, params)

    async def do_fetch_custom_fields(self, params: QueryParamTypes | None = None) -> Collection[CustomFieldDetails]:
        return await self._fetch_collection(self._get_endpoint_objects(ObjectType.CUSTOM_FIELDS), CustomFieldDetails, params)

    async def do_fetch_objects(self, object_type: ObjectType, params: QueryParamTypes | None = None) -> dict[str, Any]:
        """
        Fetch one raw page of a reference object kind, keeping every field the backend sends.
        """
        response = await self.do_json_request(self._get_endpoint_objects(object_type), params=params)
        return Collection[dict[str, Any]].model_validate(response or {}).model_dump(mode="json")

    async def do_fetch_object(self, object_type: ObjectType, object_id: int) -> dict[str, Any]:
        return await self.do_json_request(self._get_endpoint_object_details(object_type, object_id))

    async def do_create_object(self, object_type: ObjectType, data: dict[str, Any]) -> dict[str, Any]:
        self.logging.info("Creating %s object %r", object_type.value, data.get("name"))
        return await self.do_json_request(self._get_endpoint_objects(object_type), method="POST", body=data)

    async def do_update_object(self, object_type: ObjectType, object_id: int, data: dict[str, Any]) -> dict[str, Any]:
        return await self.do_json_request(self._get_endpoint_object_details(object_type, object_id), method="PATCH", body=data)

    async def do_delete_object(self, object_type: ObjectType, object_id: int) -> None:
        self.logging.warning("Deleting %s object %d", object_type.value, object_id)
        await self.do_json_request(self._get_endpoint_object_details(object_type, object_id), method="DELETE")

    async def do_bulk_edit_objects(
        self,
        objects: list[int],
        object_type: ObjectType,
        operation: str,
        parameters: dict[str, Any] | None = None,
    ) -> Any:
        """
        Apply one operation to many reference objects at once.

        Args:
            objects (list[int]): The object ids.
            object_type (ObjectType): The kind of the objects.
            operation (str): "set_permissions" or "delete".
            parameters (dict[str, Any] | None): Extra top-level body fields, e.g. owner and permissions.

        Returns:
            Any: The backend result.
        """
        return await self.do_json_request(
            self._get_endpoint_bulk_edit_objects(),
            method="POST",
            body={
                "objects": objects,
                "object_type": object_type.bulk_edit_name,
                "operation": operation,
                **(parameters or {}),
            },
        )
