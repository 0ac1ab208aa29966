# schooldesk/core/pagination.py - List query parameters and page metadata
from dataclasses import dataclass, field
from math import ceil
from typing import Any, Dict, Generic, List, Optional, TypeVar

from schooldesk.core.config import settings

T = TypeVar("T")

STATUS_VALUES = ("active", "inactive")


@dataclass
class ListQuery:
    """Typed description of a list request, translated into SQL by the CRUD service"""
    page: int = 1
    limit: int = settings.DEFAULT_PAGE_SIZE
    search: Optional[str] = None
    status: Optional[str] = None
    filters: Dict[str, Any] = field(default_factory=dict)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page(Generic[T]):
    items: List[T]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.limit) if self.limit > 0 else 0

    def meta(self) -> dict:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
        }
