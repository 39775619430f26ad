from typing import Annotated

from pydantic import Field

from server.models.tools import ObjectBulkOperation, PermissionSet
from server.tools.ObjectToolsInterface import ObjectToolsInterface
from server.tools.ToolInterface import ToolDefinition
from server.tools.descriptions import CONFIRM_BULK_DESCRIPTION, CONFIRM_DESCRIPTION
from shared.clients.dms.models.MatchingAlgorithm import MATCHING_ALGORITHM_DESCRIPTION
from shared.clients.dms.models.ObjectType import ObjectType


class CorrespondentTools(ObjectToolsInterface):
    def _get_object_type(self) -> ObjectType:
        return ObjectType.CORRESPONDENTS

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name="list_correspondents",
                handler=self.list_correspondents,
                read_only=True,
                description="List correspondents, optionally filtered by name. Use it to find the id to filter documents by.",
            ),
            ToolDefinition(name="get_correspondent", handler=self.get_correspondent, read_only=True, description="Get a single correspondent by id."),
            ToolDefinition(name="create_correspondent", handler=self.create_correspondent, description="Create a new correspondent."),
            ToolDefinition(
                name="update_correspondent",
                handler=self.update_correspondent,
                description="Update an existing correspondent. Only the given fields are changed.",
            ),
            ToolDefinition(
                name="delete_correspondent",
                handler=self.delete_correspondent,
                destructive=True,
                description=(
                    "⚠️ DESTRUCTIVE: Permanently delete a correspondent from the entire system. "
                    "This will affect ALL documents that use this correspondent."
                ),
            ),
            ToolDefinition(
                name="bulk_edit_correspondents",
                handler=self.bulk_edit_correspondents,
                destructive=True,
                description="Bulk edit correspondents. ⚠️ WARNING: 'delete' operation permanently removes correspondents from the entire system.",
            ),
        ]

    ##########################################
    ################ TOOLS ###################
    ##########################################

    async def list_correspondents(
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

    async def get_correspondent(self, id: int) -> str:
        return await self._get_object(id)

    async def create_correspondent(
        self,
        name: str,
        match: str | None = None,
        matching_algorithm: Annotated[int | None, Field(ge=0, le=6, description=MATCHING_ALGORITHM_DESCRIPTION)] = None,
        is_insensitive: bool | None = None,
    ) -> str:
        return await self._create_object(
            {"name": name, "match": match, "matching_algorithm": matching_algorithm, "is_insensitive": is_insensitive}
        )

    async def update_correspondent(
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

    async def delete_correspondent(self, id: int, confirm: Annotated[bool, Field(description=CONFIRM_DESCRIPTION)] = False) -> str:
        return await self._delete_object(id, confirm)

    async def bulk_edit_correspondents(
        self,
        correspondent_ids: list[int],
        operation: ObjectBulkOperation,
        confirm: Annotated[bool | None, Field(description=CONFIRM_BULK_DESCRIPTION)] = None,
        owner: int | None = None,
        permissions: PermissionSet | None = None,
        merge: bool | None = None,
    ) -> str:
        return await self._bulk_edit_objects(
            correspondent_ids, operation, confirm=confirm, owner=owner, permissions=permissions, merge=merge
        )
