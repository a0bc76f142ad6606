from __future__ import annotations

from typing import Any, Iterable, List, Optional, Protocol, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .dtos import PageRequest
    from .models import Category, Product


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any: ...

    def set(self, key: str, value: Any, timeout: Optional[int] = None) -> None: ...


class CategoryRepositoryProtocol(Protocol):
    def list(self, **filters) -> Iterable["Category"]: ...

    def missing_ids(self, category_ids: Iterable[int]) -> List[int]: ...


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional["Product"]: ...

    def page(
        self, name: Optional[str], request: "PageRequest"
    ) -> Tuple[List["Product"], int]: ...

    def create(self, **data) -> "Product": ...

    def update_scalar(self, product: "Product", **fields) -> "Product": ...

    def set_categories(self, product: "Product", category_ids: Iterable[int]) -> None: ...

    def delete(self, product: "Product") -> None: ...
