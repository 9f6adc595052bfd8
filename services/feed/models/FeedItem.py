"""Render items handed to the view layer, in feed order."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from shared.clients.catalog.models.Document import DocumentRecord

UNKNOWN_YEAR = "Unknown"


class YearSeparator(BaseModel):
    """Headline opening a new year group. label is a four digit year or "Unknown"."""
    kind: Literal["year"] = "year"
    label: str


class DocumentItem(BaseModel):
    kind: Literal["document"] = "document"
    document: DocumentRecord


RenderItem = Annotated[Union[YearSeparator, DocumentItem], Field(discriminator="kind")]
