from typing import Annotated

from pydantic import Field

from server.models.tools import ObjectBulkOperation, PermissionSet
from server.tools.ObjectToolsInterface import ObjectToolsInterface
from server.tools.ToolInterface import ToolDefinition
from server.tools.descriptions import CONFIRM_BULK_DESCRIPTION, CONFIRM_DESCRIPTION
from shared.clients.dms.models.MatchingAlgorithm import MATCHING_ALGORITHM_DESCRIPTION
from shared.clients.dms.models.ObjectType import ObjectType


class DocumentTypeTools(ObjectToolsInterface):
    def _get_object_type(self) -> ObjectType:
        return ObjectType.DOCUMENT_TYPES

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name="list_document_types",
                handler=self.list_document_types,
                read_only=True,
                description=(
                    "List all document types. IMPORTANT: When a user query may refer to a document type or tag, you should "
                    "fetch all document types and all tags up front (with a large enough page_size), cache them for the "
                    "session, and search locally for matches by name or slug before making further API calls. This reduces "
                    "redundant requests and handles ambiguity between tags and document types efficiently."
                ),
            ),
            ToolDefinition(name="get_document_type", handler=self.get_document_type, read_only=True, description="Get a single document type by id."),
            ToolDefinition(name="create_document_type", handler=self.create_document_type, description="Create a new document type."),
            ToolDefinition(
                name="update_document_type",
                handler=self.update_document_type,
                description="Update an existing document type. Only the given fields are changed.",
            ),
            ToolDefinition(
                name="delete_document_type",
                handler=self.delete_document_type,
                destructive=True,
                description=(
                    "⚠️ DESTRUCTIVE: Permanently delete a document type from the entire system. "
                    "This will affect ALL documents that use this type."
                ),
            ),
            ToolDefinition(
                name="bulk_edit_document_types",
                handler=self.bulk_edit_document_types,
                destructive=True,
                description="Bulk edit document types. ⚠️ WARNING: 'delete' operation permanently removes document types from the entire system.",
            ),
        ]

    ##########################################
    ################ TOOLS ###################
    ##########################################

    async def list_document_types(
        self,
        page: int | None = None,
        page_size: int | None = None,
        name__icontains: str | None = None,
        name__iendswith: str | None = None,
        name__iexact: str | None = None,
        name__istartswith: str | None = None,
        ordering: str | None = None,
    ) -> str:
        return await self._list_objects(
            page=page,
            page_size=page_size,
            name__icontains=name__icontains,
            name__iendswith=name__iendswith,
            name__iexact=name__iexact,
            name__istartswith=name__istartswith,
            ordering=ordering,
        )

    async def get_document_type(self, id: int) -> str:
        return await self._get_object(id)

    async def create_document_type(
        self,
        name: str,
        match: str | None = None,
        matching_algorithm: Annotated[int | None, Field(ge=0, le=6, description=MATCHING_ALGORITHM_DESCRIPTION)] = None,
        is_insensitive: bool | None = None,
    ) -> str:
        return await self._create_object(
            {"name": name, "match": match, "matching_algorithm": matching_algorithm, "is_insensitive": is_insensitive}
        )

    async def update_document_type(
        self,
        id: int,
        name: str | None = None,
        match: str | None = None,
        matching_algorithm: Annotated[int | None, Field(ge=0, le=6, description=MATCHING_ALGORITHM_DESCRIPTION)] = None,
        is_insensitive: bool | None = None,
    ) -> str:
        return await self._update_object(
            id, {"name": name, "match": match, "matching_algorithm": matching_algorithm, "is_insensitive": is_insensitive}
        )

    async def delete_document_type(self, id: int, confirm: Annotated[bool, Field(description=CONFIRM_DESCRIPTION)] = False) -> str:
        return await self._delete_object(id, confirm)

    async def bulk_edit_document_types(
        self,
        document_type_ids: list[int],
        operation: ObjectBulkOperation,
        confirm: Annotated[bool | None, Field(description=CONFIRM_BULK_DESCRIPTION)] = None,
        owner: int | None = None,
        permissions: PermissionSet | None = None,
        merge: bool | None = None,
    ) -> str:
        return await self._bulk_edit_objects(
            document_type_ids, operation, confirm=confirm, owner=owner, permissions=permissions, merge=merge
        )
