from typing import Annotated, Literal

from pydantic import Field

from server.models.tools import CustomFieldExtraData
from server.tools.ObjectToolsInterface import ObjectToolsInterface
from server.tools.ToolInterface import ToolDefinition
from server.tools.descriptions import CONFIRM_BULK_DESCRIPTION, CONFIRM_DESCRIPTION
from shared.clients.dms.models.CustomField import CustomFieldDataType
from shared.clients.dms.models.ObjectType import ObjectType


class CustomFieldTools(ObjectToolsInterface):
    def _get_object_type(self) -> ObjectType:
        return ObjectType.CUSTOM_FIELDS

    def _has_matching_algorithm(self) -> bool:
        return False

    def get_tool_definitions(self) -> list[ToolDefinition]:
        return [
            ToolDefinition(
                name="list_custom_fields",
                handler=self.list_custom_fields,
                read_only=True,
                description=(
                    "List all custom fields. IMPORTANT: When a user query may refer to a custom field, you should fetch all "
                    "custom fields up front (with a large enough page_size), cache them for the session, and search locally "
                    "for matches by name before making further API calls. This reduces redundant requests and handles "
                    "ambiguity efficiently."
                ),
            ),
            ToolDefinition(name="get_custom_field", handler=self.get_custom_field, read_only=True, description="Get a single custom field by id."),
            ToolDefinition(name="create_custom_field", handler=self.create_custom_field, description="Create a new custom field."),
            ToolDefinition(
                name="update_custom_field",
                handler=self.update_custom_field,
                description="Update an existing custom field. Only the given fields are changed.",
            ),
            ToolDefinition(
                name="delete_custom_field",
                handler=self.delete_custom_field,
                destructive=True,
                description=(
                    "⚠️ DESTRUCTIVE: Permanently delete a custom field from the entire system. "
                    "This will remove the field from ALL documents that use it."
                ),
            ),
            ToolDefinition(
                name="bulk_edit_custom_fields",
                handler=self.bulk_edit_custom_fields,
                destructive=True,
                description="Bulk edit custom fields. ⚠️ WARNING: 'delete' operation permanently removes custom fields from the entire system.",
            ),
        ]

    ##########################################
    ################ TOOLS ###################
    ##########################################

    async def list_custom_fields(
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

    async def get_custom_field(self, id: int) -> str:
        return await self._get_object(id)

    async def create_custom_field(
        self,
        name: str,
        data_type: CustomFieldDataType,
        extra_data: CustomFieldExtraData | None = None,
    ) -> str:
        return await self._create_object(
            {
                "name": name,
                "data_type": CustomFieldDataType(data_type).value,
                "extra_data": extra_data.model_dump(exclude_none=True) if extra_data else None,
            }
        )

    async def update_custom_field(
        self,
        id: int,
        name: str | None = None,
        data_type: CustomFieldDataType | None = None,
        extra_data: CustomFieldExtraData | None = None,
    ) -> str:
        return await self._update_object(
            id,
            {
                "name": name,
                "data_type": CustomFieldDataType(data_type).value if data_type else None,
                "extra_data": extra_data.model_dump(exclude_none=True) if extra_data else None,
            },
        )

    async def delete_custom_field(self, id: int, confirm: Annotated[bool, Field(description=CONFIRM_DESCRIPTION)] = False) -> str:
        return await self._delete_object(id, confirm)

    async def bulk_edit_custom_fields(
        self,
        custom_fields: list[int],
        operation: Literal["delete"],
        confirm: Annotated[bool | None, Field(description=CONFIRM_BULK_DESCRIPTION)] = None,
    ) -> str:
        return await self._bulk_edit_objects(custom_fields, operation, confirm=confirm)
