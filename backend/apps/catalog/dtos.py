"""DTO dataclasses only. Mapping logic lives in mappers.py."""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CategoryDTO:
    id: int
    name: str


@dataclass
class ProductDTO:
    id: int
    name: str
    description: str
    price: Decimal
    img_url: str
    categories: List[CategoryDTO] = field(default_factory=list)


@dataclass
class ProductMinDTO:
    id: int
    name: str
    price: Decimal
    img_url: str


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page coordinates plus an optional single-field sort."""

    page: int = 0
    size: int = 12
    sort_field: Optional[str] = None
    descending: bool = False

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass
class Page(Generic[T]):
    content: List[T]
    request: PageRequest
    total_elements: int

    @property
    def total_pages(self) -> int:
        if self.request.size <= 0:
            return 0
        return -(-self.total_elements // self.request.size)

    @property
    def is_first(self) -> bool:
        return self.request.page == 0

    @property
    def is_last(self) -> bool:
        return self.request.page + 1 >= self.total_pages
