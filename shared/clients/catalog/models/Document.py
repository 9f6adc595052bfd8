"""Catalog document models, backend-independent."""

from pydantic import BaseModel, Field


class DocumentRecord(BaseModel):
    """
    A single catalog document as held by the feed. Read-only copy for one session.

    Timestamps are seconds since epoch. A doc_date of None or 0 means the
    extracted document date is unknown.
    """
    engine: str
    id: int
    title: str = ""
    tags: list[int] = []
    imported_date: int
    doc_date: int | None = None
    original_filename: str | None = None
    language: str | None = None

    def has_doc_date(self) -> bool:
        return bool(self.doc_date and self.doc_date > 0)


class ExtractedPatch(BaseModel):
    """Extracted metadata fields that may be overwritten on a document."""
    phone: list[str] | None = None
    email: list[str] | None = None
    link: list[str] | None = None
    iban: list[str] | None = None
    doc_date: int | None = None


class DocumentPatch(BaseModel):
    """
    Partial metadata update for one document. Unset fields are left untouched on the server.
    """
    title: str | None = None
    language: str | None = None
    tags: list[int] | None = None
    extracted: ExtractedPatch | None = Field(default=None)
