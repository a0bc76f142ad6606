from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from .repositories import CategoryRepository, ProductRepository
from .services import CategoryService, ProductService


def build_product_service() -> ProductService:
    return ProductService(
        products=ProductRepository(),
        categories=CategoryRepository(),
    )


def build_category_service(*, disable_cache: bool = False) -> CategoryService:
    return CategoryService(
        categories=CategoryRepository(),
        cache_backend=cache,
        disable_cache=disable_cache,
        timeout=getattr(settings, "CACHE_TTL", None),
    )
