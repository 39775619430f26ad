"""Reference object kinds managed through the generic object endpoints."""

from enum import Enum


class ObjectType(str, Enum):
    TAGS = "tags"
    CORRESPONDENTS = "correspondents"
    DOCUMENT_TYPES = "document_types"
    CUSTOM_FIELDS = "custom_fields"

    @property
    def bulk_edit_name(self) -> str:
        """
        The object_type value expected by the bulk_edit_objects endpoint.
        """
        if self is ObjectType.CUSTOM_FIELDS:
            return "custom_field"
        return self.value
