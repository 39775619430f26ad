from typing import Annotated

from pydantic import Field

from server.models.tools import ObjectBulkOperation, PermissionSet
from server.tools.ObjectToolsInterface import ObjectToolsInterface
from server.tools.ToolInterface import ToolDefinition
from server.tools.descriptions import COLOR_PATTERN, CONFIRM_BULK_DESCRIPTION, CONFIRM_DESCRIPTION
from shared.clients.dms.models.MatchingAlgorithm import MATCHING_ALGORITHM_DESCRIPTION
from shared.clients.dms.models.ObjectType import ObjectType


class TagTools(ObjectToolsInterface):
    def _get_object_type(self) -> ObjectType:
        return ObjectType.TAGS

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name="list_tags",
                handler=self.list_tags,
                read_only=True,
                description=(
                    "List all tags. IMPORTANT: When a user query may refer to a tag or document type, you should fetch "
                    "all tags and all document types up front (with a large enough page_size), cache them for the session, "
                    "and search locally for matches by name or slug before making further API calls. This reduces "
                    "redundant requests and handles ambiguity between tags and document types efficiently."
                ),
            ),
            ToolDefinition(name="get_tag", handler=self.get_tag, read_only=True, description="Get a single tag by id."),
            ToolDefinition(name="create_tag", handler=self.create_tag, description="Create a new tag."),
            ToolDefinition(name="update_tag", handler=self.update_tag, description="Update an existing tag. Only the given fields are changed."),
            ToolDefinition(
                name="delete_tag",
                handler=self.delete_tag,
                destructive=True,
                description=(
                    "⚠️ DESTRUCTIVE: Permanently delete a tag from the entire system. This will remove the tag from ALL "
                    "documents that use it. Use with extreme caution."
                ),
            ),
            ToolDefinition(
                name="bulk_edit_tags",
                handler=self.bulk_edit_tags,
                destructive=True,
                description="Bulk edit tags. ⚠️ WARNING: 'delete' operation permanently removes tags from the entire system. Use with caution.",
            ),
        ]

    ##########################################
    ################ TOOLS ###################
    ##########################################

    async def list_tags(
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

    async def get_tag(self, id: int) -> str:
        return await self._get_object(id)

    async def create_tag(
        self,
        name: str,
        color: Annotated[str | None, Field(pattern=COLOR_PATTERN, description="Hex color, e.g. #a6cee3")] = None,
        match: str | None = None,
        matching_algorithm: Annotated[int | None, Field(ge=0, le=6, description=MATCHING_ALGORITHM_DESCRIPTION)] = None,
        is_inbox_tag: bool | None = None,
    ) -> str:
        return await self._create_object(
            {
                "name": name,
                "color": color,
                "match": match,
                "matching_algorithm": matching_algorithm,
                "is_inbox_tag": is_inbox_tag,
            }
        )

    async def update_tag(
        self,
        id: int,
        name: str | None = None,
        color: Annotated[str | None, Field(pattern=COLOR_PATTERN, description="Hex color, e.g. #a6cee3")] = None,
        match: str | None = None,
        matching_algorithm: Annotated[int | None, Field(ge=0, le=6, description=MATCHING_ALGORITHM_DESCRIPTION)] = None,
        is_inbox_tag: bool | None = None,
    ) -> str:
        return await self._update_object(
            id,
            {
                "name": name,
                "color": color,
                "match": match,
                "matching_algorithm": matching_algorithm,
                "is_inbox_tag": is_inbox_tag,
            },
        )

    async def delete_tag(self, id: int, confirm: Annotated[bool, Field(description=CONFIRM_DESCRIPTION)] = False) -> str:
        return await self._delete_object(id, confirm)

    async def bulk_edit_tags(
        self,
        tag_ids: list[int],
        operation: ObjectBulkOperation,
        confirm: Annotated[bool | None, Field(description=CONFIRM_BULK_DESCRIPTION)] = None,
        owner: int | None = None,
        permissions: PermissionSet | None = None,
        merge: bool | None = None,
    ) -> str:
        return await self._bulk_edit_objects(tag_ids, operation, confirm=confirm, owner=owner, permissions=permissions, merge=merge)
