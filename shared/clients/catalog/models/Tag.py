"""Catalog tag model, backend-independent."""

from pydantic import BaseModel


class TagRecord(BaseModel):
    """
    A single tag as returned by the catalog, including deactivated ones.
    """
    engine: str
    id: int
    name: str
    color: str | None = None
    deactivated: bool = False
