"""Paperless document type model."""

from pydantic import BaseModel, ConfigDict


class DocumentTypeBase(BaseModel):
    """
    Minimal document type reference, enough to build a lookup table.
    """
    model_config = ConfigDict(extra="allow")

    id: int
    name: str | None = None


class DocumentTypeDetails(DocumentTypeBase):
    """
    Represents a single document type with all its metadata, as returned by Paperless.
    """
    slug: str | None = None
    match: str | None = None
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    document_count: int | None = None
    owner: int | None = None
