# File: app/schemas/pagination.py

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PageLinks(BaseModel):
    first: str
    last: str
    prev: Optional[str] = None
    next: Optional[str] = None


class PageMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_page: int
    from_: Optional[int] = Field(default=None, alias="from")
    last_page: int
    path: str
    per_page: int
    to: Optional[int] = None
    total: int


class Page(BaseModel, Generic[T]):
    data: List[T]
    links: PageLinks
    meta: PageMeta
