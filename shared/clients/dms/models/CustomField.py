"""Paperless custom field models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class CustomFieldDataType(str, Enum):
    STRING = "string"
    URL = "url"
    DATE = "date"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    MONETARY = "monetary"
    DOCUMENTLINK = "documentlink"
    SELECT = "select"


class CustomFieldBase(BaseModel):
    """
    Minimal custom field reference, enough to build a lookup table.
    """
    model_config = ConfigDict(extra="allow")

    id: int
    name: str | None = None


class CustomFieldDetails(CustomFieldBase):
    """
    Represents a custom field definition, as returned by Paperless.
    """
    data_type: str | None = None
    extra_data: dict[str, Any] | None = None
    document_count: int | None = None


class CustomFieldValue(BaseModel):
    """
    A custom field assignment: the field id and the value to store.
    Monetary values use a currency code prefix, e.g. "USD10.00".
    """
    field: int
    value: Any = None


class EnrichedCustomField(BaseModel):
    """
    A custom field instance of a document with the field name resolved.
    """
    field: Any
    name: str
    value: Any = None
