"""Generic paginated collection as returned by every DMS listing endpoint."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

T = TypeVar("T")


class Collection(BaseModel, Generic[T]):
    """
    Represents one page of a DMS listing. ``results`` is always present, an absent
    or null list from the backend becomes an empty list.
    """
    model_config = ConfigDict(extra="allow")

    count: int = 0
    next: str | None = None
    previous: str | None = None
    all: list[int] = []
    results: list[T] = []

    @field_validator("results", "all", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return [] if value is None else value

    def is_empty(self) -> bool:
        return not self.results
