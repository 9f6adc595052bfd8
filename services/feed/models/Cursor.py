from pydantic import BaseModel, ConfigDict, Field

PAGE_SIZE = 10  # documents per feed page, fixed for all requests


class PageCursor(BaseModel):
    """
    Zero-based page index of a feed session. Immutable; advance() returns the next cursor.
    """
    model_config = ConfigDict(frozen=True)

    page: int = Field(default=0, ge=0)

    @property
    def offset(self) -> int:
        return self.page * PAGE_SIZE

    @property
    def count(self) -> int:
        return PAGE_SIZE

    def advance(self) -> "PageCursor":
        return PageCursor(page=self.page + 1)
