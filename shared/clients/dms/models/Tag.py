"""Paperless tag model."""

from pydantic import BaseModel, ConfigDict


class TagBase(BaseModel):
    """
    Minimal tag reference, enough to build a lookup table.
    """
    model_config = ConfigDict(extra="allow")

    id: int
    name: str | None = None


class TagDetails(TagBase):
    """
    Represents a single tag with all its metadata, as returned by Paperless.
    """
    slug: str | None = None
    color: str | None = None
    text_color: str | None = None
    match: str | None = None
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    is_inbox_tag: bool | None = None
    document_count: int | None = None
    owner: int | None = None
