"""Name-annotated foreign key reference."""

from pydantic import BaseModel


class NamedItem(BaseModel):
    """
    An ID resolved against a lookup table. Built per request, never persisted.
    """
    id: int
    name: str
