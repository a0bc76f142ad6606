from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from apps.api.exceptions import DatabaseError, ResourceNotFound, ValidationFailure
from apps.common import get_logger

from .commands import ProductWriteCommand
from .dtos import CategoryDTO, Page, PageRequest, ProductDTO, ProductMinDTO
from .mappers import CategoryMapper, ProductMapper
from .models import Product
from .protocols import (
    CacheBackendProtocol,
    CategoryRepositoryProtocol,
    ProductRepositoryProtocol,
)

logger = get_logger(__name__).bind(component="catalog", layer="service")


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        categories: CategoryRepositoryProtocol,
    ):
        self.products = products
        self.categories = categories
        self.logger = logger.bind(service="ProductService")

    def find_all(
        self, name: Optional[str], page_request: PageRequest
    ) -> Page[ProductMinDTO]:
        name = (name or "").strip() or None
        self.logger.debug(
            "Listing products",
            name=name,
            page=page_request.page,
            size=page_request.size,
            sort=page_request.sort_field,
        )
        items, total = self.products.page(name, page_request)
        return Page(
            content=ProductMapper.many_to_min_dto(items),
            request=page_request,
            total_elements=total,
        )

    def find_by_id(self, product_id: int) -> ProductDTO:
        self.logger.debug("Fetching product", product_id=product_id)
        return ProductMapper.to_dto(self._require(product_id))

    def insert(self, data: Union[Dict[str, Any], ProductWriteCommand]) -> ProductDTO:
        cmd = data if isinstance(data, ProductWriteCommand) else ProductWriteCommand.from_raw(data)
        self.logger.info("Creating product", name=cmd.name)
        self._check_categories(cmd.categories)
        with transaction.atomic():
            product: Product = self.products.create(
                name=cmd.name,
                description=cmd.description,
                price=cmd.price,
                img_url=cmd.img_url,
            )
            self.products.set_categories(product, cmd.categories)
        self.logger.info("Product created", product_id=product.id)
        return ProductMapper.to_dto(product)

    def update(
        self, product_id: int, data: Union[Dict[str, Any], ProductWriteCommand]
    ) -> ProductDTO:
        cmd = data if isinstance(data, ProductWriteCommand) else ProductWriteCommand.from_raw(data)
        self.logger.info("Updating product", product_id=product_id)
        product = self._require(product_id)
        self._check_categories(cmd.categories)
        with transaction.atomic():
            self.products.update_scalar(
                product,
                name=cmd.name,
                description=cmd.description,
                price=cmd.price,
                img_url=cmd.img_url,
            )
            self.products.set_categories(product, cmd.categories)
        self.logger.info("Product updated", product_id=product_id)
        return ProductMapper.to_dto(product)

    def delete(self, product_id: int) -> None:
        self.logger.info("Deleting product", product_id=product_id)
        product = self._require(product_id)
        try:
            with transaction.atomic():
                self.products.delete(product)
        except (IntegrityError, ProtectedError) as exc:
            self.logger.warning(
                "Product deletion blocked by integrity constraint",
                product_id=product_id,
                error=str(exc),
            )
            raise DatabaseError(details={"id": product_id}) from exc
        self.logger.info("Product deleted", product_id=product_id)

    def _require(self, product_id: int) -> Product:
        product = self.products.get(id=product_id)
        if product is None:
            self.logger.info("Product not found", product_id=product_id)
            raise ResourceNotFound(details={"id": product_id})
        return product

    def _check_categories(self, category_ids: List[int]) -> None:
        if not category_ids:
            return
        missing = self.categories.missing_ids(category_ids)
        if missing:
            self.logger.warning("Unknown categories referenced", category_ids=missing)
            raise ValidationFailure(
                [("categories", f"Category not found: {', '.join(map(str, missing))}")]
            )


class CategoryService:
    cache_key = "categories:all"

    def __init__(
        self,
        categories: CategoryRepositoryProtocol,
        cache_backend: Optional[CacheBackendProtocol] = None,
        disable_cache: bool = False,
        timeout: Optional[int] = None,
    ):
        self.categories = categories
        self.cache = cache_backend
        self.disable_cache = disable_cache or cache_backend is None
        self.timeout = timeout
        self.logger = logger.bind(service="CategoryService")

    def find_all(self) -> List[CategoryDTO]:
        self.logger.debug("Listing categories", cache_enabled=not self.disable_cache)
        if self.disable_cache:
            return CategoryMapper.many_to_dto(self.categories.list())
        cached = self.cache.get(self.cache_key)
        if cached is not None:
            self.logger.debug("Category list cache hit", cache_key=self.cache_key)
            return cached
        self.logger.debug("Category list cache miss", cache_key=self.cache_key)
        data = CategoryMapper.many_to_dto(self.categories.list())
        if self.timeout is None:
            self.cache.set(self.cache_key, data)
        else:
            self.cache.set(self.cache_key, data, timeout=self.timeout)
        return data
