from typing import Annotated, Any
from urllib.parse import quote

from mcp.types import BlobResourceContents, EmbeddedResource
from pydantic import Field

from server.core.BulkEditNormalizer import BulkEditNormalizer, require_confirmation
from server.core.EnrichmentService import EnrichmentService
from server.models.tools import BulkEditMethod, DocumentPermissions
from server.tools.ToolInterface import ToolDefinition, ToolInterface, build_query_params, drop_unset, to_json
from server.tools.descriptions import CONFIRM_BULK_DESCRIPTION, CONFIRM_DESCRIPTION, CUSTOM_FIELD_VALUE_DESCRIPTION, FIELDS_DESCRIPTION
from shared.clients.dms.DMSClientInterface import DMSClientInterface
from shared.clients.dms.models.CustomField import CustomFieldValue
from shared.clients.dms.models.Document import BinaryResponse, DocumentMetadata, DownloadedFile
from shared.helper.HelperConfig import HelperConfig
from shared.helper.file_payload import decode_base64_file, encode_base64_file
from shared.helper.monetary import ensure_valid_monetary_value

LIST_DOCUMENTS_DESCRIPTION = (
    "List and filter documents by fields such as title, correspondent, document type, tag, storage path, creation date, "
    "and more. IMPORTANT: For queries like 'the last 3 contributions' or when searching by tag, correspondent, document "
    "type, or storage path, you should FIRST use the relevant tool (e.g., 'list_tags', 'list_correspondents', "
    "'list_document_types') to find the correct ID, and then use that ID as a filter here. Only use the 'search' argument "
    "for free-text search when no specific field applies. Using the correct ID filter will yield much more accurate results."
)

SEARCH_DOCUMENTS_DESCRIPTION = (
    "Full text search for documents. This tool is for searching document content, title, and metadata using a full text "
    "query. For general document listing or filtering by fields, use 'list_documents' instead."
)

BULK_EDIT_DOCUMENTS_DESCRIPTION = (
    "Apply one bulk edit method to many documents. 'remove_tag' and 'modify_tags' only detach tags from the given "
    "documents. ⚠️ WARNING: 'delete' permanently deletes the documents themselves and requires confirm: true. "
    "Use 'modify_custom_fields' with add_custom_fields [{field, value}] and remove_custom_fields [ids] to change custom fields."
)


class DocumentTools(ToolInterface):
    def __init__(
        self,
        helper_config: HelperConfig,
        dms_client: DMSClientInterface,
        enrichment_service: EnrichmentService,
        normalizer: BulkEditNormalizer,
    ):
        super().__init__(helper_config=helper_config, dms_client=dms_client)
        self._enrichment = enrichment_service
        self._normalizer = normalizer

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(name="list_documents", handler=self.list_documents, read_only=True, description=LIST_DOCUMENTS_DESCRIPTION),
            ToolDefinition(
                name="get_document",
                handler=self.get_document,
                read_only=True,
                description="Get a single document by id, with correspondent, document type, tags and custom fields resolved to names.",
            ),
            ToolDefinition(name="search_documents", handler=self.search_documents, read_only=True, description=SEARCH_DOCUMENTS_DESCRIPTION),
            ToolDefinition(
                name="update_document",
                handler=self.update_document,
                description="Update the metadata of a document. Only the given fields are changed.",
            ),
            ToolDefinition(
                name="delete_document",
                handler=self.delete_document,
                destructive=True,
                description="⚠️ DESTRUCTIVE: Permanently delete a document including its files. This cannot be undone.",
            ),
            ToolDefinition(
                name="post_document",
                handler=self.post_document,
                description=(
                    "Upload a new document. The file is passed as base64 (plain, data URL or URL-safe). "
                    "Paperless-NGX consumes it asynchronously and returns a task id."
                ),
            ),
            ToolDefinition(
                name="download_document",
                handler=self.download_document,
                read_only=True,
                description="Download the archived file of a document, or the originally uploaded file with original: true.",
            ),
            ToolDefinition(
                name="get_document_thumbnail",
                handler=self.get_document_thumbnail,
                read_only=True,
                description="Get the thumbnail image of a document.",
            ),
            ToolDefinition(
                name="bulk_edit_documents",
                handler=self.bulk_edit_documents,
                destructive=True,
                description=BULK_EDIT_DOCUMENTS_DESCRIPTION,
            ),
        ]

    ##########################################
    ############### READ TOOLS ###############
    ##########################################

    async def list_documents(
        self,
        page: int | None = None,
        page_size: int | None = None,
        search: str | None = None,
        correspondent: int | None = None,
        document_type: int | None = None,
        tag: int | None = None,
        storage_path: int | None = None,
        created__gte: str | None = None,
        created__lte: str | None = None,
        ordering: str | None = None,
        fields: Annotated[list[str] | None, Field(description=FIELDS_DESCRIPTION)] = None,
    ) -> str:
        params = build_query_params(
            page=page,
            page_size=page_size,
            search=search,
            correspondent__id=correspondent,
            document_type__id=document_type,
            tags__id=tag,
            storage_path__id=storage_path,
            created__gte=created__gte,
            created__lte=created__lte,
            ordering=ordering,
        )
        collection = await self._dms.do_fetch_documents(params=params)
        return await self._enrichment.enrich_collection(collection, fields=fields)

    async def get_document(self, id: int, fields: Annotated[list[str] | None, Field(description=FIELDS_DESCRIPTION)] = None) -> str:
        document = await self._dms.do_fetch_document(id)
        return await self._enrichment.enrich_document(document, fields=fields)

    async def search_documents(self, query: str, fields: Annotated[list[str] | None, Field(description=FIELDS_DESCRIPTION)] = None) -> str:
        collection = await self._dms.do_search_documents(query)
        return await self._enrichment.enrich_collection(collection, fields=fields)

    async def download_document(self, id: int, original: bool = False) -> EmbeddedResource:
        response = await self._dms.do_download_document(id, original=original)
        return self.to_embedded_resource(self._to_downloaded_file(response))

    async def get_document_thumbnail(self, id: int) -> EmbeddedResource:
        response = await self._dms.do_fetch_thumbnail(id)
        return self.to_embedded_resource(self._to_downloaded_file(response))

    ##########################################
    ############## WRITE TOOLS ###############
    ##########################################

    async def update_document(
        self,
        id: int,
        title: str | None = None,
        created: str | None = None,
        correspondent: int | None = None,
        document_type: int | None = None,
        storage_path: int | None = None,
        tags: list[int] | None = None,
        archive_serial_number: int | None = None,
        custom_fields: Annotated[list[CustomFieldValue] | None, Field(description=CUSTOM_FIELD_VALUE_DESCRIPTION)] = None,
    ) -> str:
        """
        PATCH the given fields of a document. Passing tags or custom_fields replaces the whole list.
        """
        custom_field_values = [CustomFieldValue.model_validate(item).model_dump() for item in custom_fields or []]
        for item in custom_field_values:
            ensure_valid_monetary_value(item["value"])

        data = drop_unset(
            {
                "title": title,
                "created": created,
                "correspondent": correspondent,
                "document_type": document_type,
                "storage_path": storage_path,
                "tags": tags,
                "archive_serial_number": archive_serial_number,
                "custom_fields": custom_field_values if custom_fields is not None else None,
            }
        )
        document = await self._dms.do_update_document(id, data)
        return await self._enrichment.enrich_document(document)

    async def delete_document(self, id: int, confirm: Annotated[bool, Field(description=CONFIRM_DESCRIPTION)] = False) -> str:
        require_confirmation("delete", confirm)
        self.logging.warning("Deleting document %d", id)
        await self._dms.do_delete_document(id)
        return to_json({"status": "deleted"})

    async def post_document(
        self,
        file: Annotated[str, Field(description="The file content, base64 encoded")],
        filename: str,
        title: str | None = None,
        created: str | None = None,
        correspondent: int | None = None,
        document_type: int | None = None,
        storage_path: int | None = None,
        tags: list[int] | None = None,
        archive_serial_number: int | str | None = None,
        custom_fields: Annotated[list[int] | None, Field(description="Ids of custom fields to add, without values")] = None,
    ) -> str:
        content = decode_base64_file(file)
        metadata = DocumentMetadata(
            title=title,
            created=created,
            correspondent=correspondent,
            document_type=document_type,
            storage_path=storage_path,
            tags=tags,
            archive_serial_number=archive_serial_number,
            custom_fields=custom_fields,
        )
        response = await self._dms.do_post_document(content, filename, metadata)
        return to_json(self._to_upload_result(response))

    async def bulk_edit_documents(
        self,
        documents: list[int],
        method: BulkEditMethod,
        confirm: Annotated[bool | None, Field(description=CONFIRM_BULK_DESCRIPTION)] = None,
        correspondent: int | None = None,
        document_type: int | None = None,
        storage_path: int | None = None,
        tag: int | None = None,
        add_tags: list[int] | None = None,
        remove_tags: list[int] | None = None,
        add_custom_fields: Annotated[
            list[CustomFieldValue] | None,
            Field(description=f"Custom fields to assign as [{{field, value}}]. {CUSTOM_FIELD_VALUE_DESCRIPTION}"),
        ] = None,
        assign_custom_fields: Annotated[
            dict[int, Any] | None,
            Field(description="Deprecated: a {field_id: value} map. Use add_custom_fields instead."),
        ] = None,
        remove_custom_fields: list[int] | None = None,
        permissions: DocumentPermissions | None = None,
        metadata_document_id: int | None = None,
        delete_originals: bool | None = None,
        pages: str | None = None,
        degrees: int | None = None,
    ) -> str:
        require_confirmation(method, confirm)
        parameters = self._normalizer.normalize(
            {
                "correspondent": correspondent,
                "document_type": document_type,
                "storage_path": storage_path,
                "tag": tag,
                "add_tags": add_tags,
                "remove_tags": remove_tags,
                "add_custom_fields": add_custom_fields,
                "assign_custom_fields": assign_custom_fields,
                "remove_custom_fields": remove_custom_fields,
                "permissions": permissions,
                "metadata_document_id": metadata_document_id,
                "delete_originals": delete_originals,
                "pages": pages,
                "degrees": degrees,
            }
        )
        self.logging.info("Bulk edit of %d documents: %s", len(documents), method)
        response = await self._dms.do_bulk_edit_documents(documents, method, parameters)
        result = response.get("result") if isinstance(response, dict) else None
        return to_json({"result": result or response})

    ##########################################
    ############### HELPERS ##################
    ##########################################

    def _to_downloaded_file(self, response: BinaryResponse) -> DownloadedFile:
        return DownloadedFile(
            filename=response.filename,
            mime_type=response.mime_type,
            blob=encode_base64_file(response.content),
        )

    def _to_upload_result(self, response: Any) -> dict[str, Any]:
        """
        Paperless answers an upload with the consumption task id. A purely numeric answer is a document id.
        """
        if isinstance(response, int) and not isinstance(response, bool):
            return {"id": response}
        if isinstance(response, str) and response.isdigit():
            return {"id": int(response)}
        return {"status": response}

    @staticmethod
    def to_embedded_resource(file: DownloadedFile) -> EmbeddedResource:
        return EmbeddedResource(
            type="resource",
            resource=BlobResourceContents(
                uri=f"file:///{quote(file.filename)}",
                mimeType=file.mime_type,
                blob=file.blob,
            ),
        )
