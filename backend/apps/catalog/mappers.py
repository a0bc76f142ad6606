from typing import Iterable, List

from .dtos import CategoryDTO, ProductDTO, ProductMinDTO
from .models import Category, Product


class CategoryMapper:
    @staticmethod
    def to_dto(cat: Category) -> CategoryDTO:
        return CategoryDTO(id=cat.id, name=cat.name)

    @staticmethod
    def many_to_dto(categories: Iterable[Category]) -> List[CategoryDTO]:
        return [CategoryMapper.to_dto(c) for c in categories]


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        # categories are prefetched by the repository; .all() hits the cache
        return ProductDTO(
            id=product.id,
            name=product.name,
            description=product.description,
            price=product.price,
            img_url=product.img_url,
            categories=CategoryMapper.many_to_dto(product.categories.all()),
        )

    @staticmethod
    def to_min_dto(product: Product) -> ProductMinDTO:
        return ProductMinDTO(
            id=product.id,
            name=product.name,
            price=product.price,
            img_url=product.img_url,
        )

    @staticmethod
    def many_to_min_dto(products: Iterable[Product]) -> List[ProductMinDTO]:
        return [ProductMapper.to_min_dto(p) for p in products]
