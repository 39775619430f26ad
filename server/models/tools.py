from typing import Literal

from pydantic import BaseModel, Field

BulkEditMethod = Literal[
    "set_correspondent",
    "set_document_type",
    "set_storage_path",
    "add_tag",
    "remove_tag",
    "modify_tags",
    "modify_custom_fields",
    "delete",
    "reprocess",
    "set_permissions",
    "merge",
    "split",
    "rotate",
    "delete_pages",
]

ObjectBulkOperation = Literal["set_permissions", "delete"]


class PermissionGroup(BaseModel):
    users: list[int] = Field(default_factory=list, description="User ids")
    groups: list[int] = Field(default_factory=list, description="Group ids")


class PermissionSet(BaseModel):
    view: PermissionGroup = Field(default_factory=PermissionGroup)
    change: PermissionGroup = Field(default_factory=PermissionGroup)


class DocumentPermissions(BaseModel):
    """Permission changes for the "set_permissions" bulk edit method."""

    owner: int | None = Field(default=None, description="New owner user id, null removes the owner")
    set_permissions: PermissionSet | None = None
    merge: bool | None = Field(default=None, description="Merge with existing permissions instead of replacing them")


class SelectOption(BaseModel):
    label: str
    id: str | None = None


class CustomFieldExtraData(BaseModel):
    select_options: list[SelectOption] | None = Field(default=None, description="Options of a select field")
    default_currency: str | None = Field(default=None, description="Default currency code of a monetary field, e.g. EUR")
