"""Paperless correspondent model."""

from pydantic import BaseModel, ConfigDict


class CorrespondentBase(BaseModel):
    """
    Minimal correspondent reference, enough to build a lookup table.
    """
    model_config = ConfigDict(extra="allow")

    id: int
    name: str | None = None


class CorrespondentDetails(CorrespondentBase):
    """
    Represents a single correspondent with all its metadata, as returned by Paperless.
    """
    slug: str | None = None
    match: str | None = None
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    document_count: int | None = None
    last_correspondence: str | None = None
    owner: int | None = None
