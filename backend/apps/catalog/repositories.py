from typing import Iterable, List, Optional, Tuple

from apps.common.repository import GenericRepository

from .dtos import PageRequest
from .models import Category, Product

SORTABLE_FIELDS = ("id", "name", "price")


class CategoryRepository(GenericRepository[Category]):
    def __init__(self):
        super().__init__(Category)

    def missing_ids(self, category_ids: Iterable[int]) -> List[int]:
        wanted = set(category_ids)
        found = set(
            self.model.objects.filter(id__in=wanted).values_list("id", flat=True)
        )
        return sorted(wanted - found)


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def queryset(self):
        """Products with categories prefetched to avoid N+1 during DTO mapping."""
        return self.model.objects.prefetch_related("categories")

    def search(self, name: Optional[str] = None):
        qs = self.model.objects.all()
        if name:
            qs = qs.filter(name__icontains=name)
        return qs

    def page(self, name: Optional[str], request: PageRequest) -> Tuple[List[Product], int]:
        qs = self.search(name)
        ordering = ["id"]
        if request.sort_field in SORTABLE_FIELDS:
            prefix = "-" if request.descending else ""
            ordering = [f"{prefix}{request.sort_field}"]
            if request.sort_field != "id":
                ordering.append("id")
        total = qs.count()
        # Pages past the end never reach the database as an OFFSET
        if request.offset >= total:
            return [], total
        items = list(qs.order_by(*ordering)[request.offset : request.offset + request.size])
        return items, total

    # --- Helper methods for service orchestration ---
    def set_categories(self, product: Product, category_ids: Iterable[int]):
        product.categories.set(Category.objects.filter(id__in=list(category_ids)))

    def update_scalar(self, product: Product, **fields):
        for k, v in fields.items():
            setattr(product, k, v)
        product.save()
        return product
