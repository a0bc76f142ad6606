import unittest
from decimal import Decimal
from unittest.mock import Mock, patch

from rest_framework import status
from rest_framework.test import APIRequestFactory
from rest_framework_simplejwt.tokens import AccessToken

from apps.api.exceptions import ResourceNotFound, ValidationFailure
from apps.api.validation import validate_request_context
from apps.catalog.dtos import CategoryDTO, Page, PageRequest, ProductDTO, ProductMinDTO
from apps.catalog.views import CategoryListView, ProductDetailView, ProductListView


def bearer(username, *authorities):
    token = AccessToken()
    token["username"] = username
    token["authorities"] = list(authorities)
    return f"Bearer {token}"


ADMIN = bearer("alex@gmail.com", "ROLE_CLIENT", "ROLE_ADMIN")
CLIENT = bearer("maria@gmail.com", "ROLE_CLIENT")


def make_product_dto(product_id=1, name="The Lord of the Rings"):
    return ProductDTO(
        id=product_id,
        name=name,
        description="Lorem ipsum dolor sit amet",
        price=Decimal("90.50"),
        img_url="https://example.com/1-big.jpg",
        categories=[CategoryDTO(id=1, name="Livros")],
    )


def product_payload(**overrides):
    data = {
        "name": "Console PlayStation 5",
        "description": "Lorem ipsum, dolor sit amet consectetur",
        "price": 3999.90,
        "imgUrl": "https://example.com/ps5.jpg",
        "categories": [{"id": 2}, {"id": 3}],
    }
    data.update(overrides)
    return data


class CatalogViewsUnitTests(unittest.TestCase):
    def setUp(self):
        self.factory = APIRequestFactory()

    def dispatch(self, request, view_cls, **kwargs):
        pre_response = validate_request_context(request, view_cls, kwargs)
        if pre_response is not None:
            return pre_response
        view = view_cls.as_view()
        return view(request, **kwargs)

    def test_product_list_pages_and_filters(self):
        service_mock = Mock()
        service_mock.find_all.return_value = Page(
            content=[ProductMinDTO(id=1, name="Macbook Pro", price=Decimal("1250.00"), img_url="")],
            request=PageRequest(page=0, size=12),
            total_elements=1,
        )
        with patch.object(ProductListView, "service", service_mock):
            request = self.factory.get("/products", {"name": "mac", "page": 0, "size": 12})
            response = self.dispatch(request, ProductListView)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        name, page_request = service_mock.find_all.call_args.args
        self.assertEqual(name, "mac")
        self.assertEqual((page_request.page, page_request.size), (0, 12))
        self.assertEqual(response.data["content"][0]["price"], Decimal("1250.00"))
        self.assertEqual(response.data["content"][0]["imgUrl"], "")
        self.assertEqual(response.data["totalElements"], 1)

    def test_product_detail_public(self):
        service_mock = Mock()
        service_mock.find_by_id.return_value = make_product_dto()
        with patch.object(ProductDetailView, "service", service_mock):
            response = self.dispatch(
                self.factory.get("/products/1"), ProductDetailView, product_id=1
            )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["name"], "The Lord of the Rings")
        self.assertEqual(response.data["categories"], [{"id": 1, "name": "Livros"}])
        service_mock.find_by_id.assert_called_once_with(1)

    def test_product_detail_missing(self):
        service_mock = Mock()
        service_mock.find_by_id.side_effect = ResourceNotFound()
        with patch.object(ProductDetailView, "service", service_mock):
            response = self.dispatch(
                self.factory.get("/products/2"), ProductDetailView, product_id=2
            )
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["error"], "Resource not found")
        self.assertEqual(response.data["path"], "/products/2")

    def test_insert_as_admin(self):
        service_mock = Mock()
        service_mock.insert.return_value = make_product_dto(26, "Console PlayStation 5")
        with patch.object(ProductListView, "service", service_mock):
            request = self.factory.post(
                "/products", product_payload(), format="json", HTTP_AUTHORIZATION=ADMIN
            )
            response = self.dispatch(request, ProductListView)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response["Location"].endswith("/products/26"))
        validated = service_mock.insert.call_args.args[0]
        self.assertEqual(validated["img_url"], "https://example.com/ps5.jpg")
        self.assertEqual([c["id"] for c in validated["categories"]], [2, 3])

    def test_insert_as_client_is_forbidden(self):
        service_mock = Mock()
        with patch.object(ProductListView, "service", service_mock):
            request = self.factory.post(
                "/products", product_payload(), format="json", HTTP_AUTHORIZATION=CLIENT
            )
            response = self.dispatch(request, ProductListView)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        service_mock.insert.assert_not_called()

    def test_insert_without_token_is_unauthorized(self):
        service_mock = Mock()
        with patch.object(ProductListView, "service", service_mock):
            request = self.factory.post("/products", product_payload(), format="json")
            response = self.dispatch(request, ProductListView)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        service_mock.insert.assert_not_called()

    def test_insert_with_invalid_fields(self):
        service_mock = Mock()
        with patch.object(ProductListView, "service", service_mock):
            request = self.factory.post(
                "/products",
                product_payload(name="ab", price=0, description="short"),
                format="json",
                HTTP_AUTHORIZATION=ADMIN,
            )
            response = self.dispatch(request, ProductListView)
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        errors = {e["field"]: e["message"] for e in response.data["errors"]}
        self.assertEqual(errors["name"], "Name must be between 3 and 80 characters")
        self.assertEqual(errors["price"], "Price must be positive")
        self.assertEqual(errors["description"], "Description must have at least 10 characters")
        service_mock.insert.assert_not_called()

    def test_insert_with_unknown_category(self):
        service_mock = Mock()
        service_mock.insert.side_effect = ValidationFailure(
            [("categories", "Category not found: 99")]
        )
        with patch.object(ProductListView, "service", service_mock):
            request = self.factory.post(
                "/products",
                product_payload(categories=[{"id": 99}]),
                format="json",
                HTTP_AUTHORIZATION=ADMIN,
            )
            response = self.dispatch(request, ProductListView)
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(
            response.data["errors"],
            [{"field": "categories", "message": "Category not found: 99"}],
        )

    def test_update_as_admin(self):
        service_mock = Mock()
        service_mock.update.return_value = make_product_dto(1, "Console PlayStation 5")
        with patch.object(ProductDetailView, "service", service_mock):
            request = self.factory.put(
                "/products/1", product_payload(), format="json", HTTP_AUTHORIZATION=ADMIN
            )
            response = self.dispatch(request, ProductDetailView, product_id=1)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(service_mock.update.call_args.args[0], 1)

    def test_forbidden_wins_over_missing_product(self):
        service_mock = Mock()
        service_mock.update.side_effect = ResourceNotFound()
        with patch.object(ProductDetailView, "service", service_mock):
            request = self.factory.put(
                "/products/2", product_payload(), format="json", HTTP_AUTHORIZATION=CLIENT
            )
            response = self.dispatch(request, ProductDetailView, product_id=2)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        service_mock.update.assert_not_called()

    def test_delete_as_admin(self):
        service_mock = Mock()
        with patch.object(ProductDetailView, "service", service_mock):
            request = self.factory.delete("/products/1", HTTP_AUTHORIZATION=ADMIN)
            response = self.dispatch(request, ProductDetailView, product_id=1)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        service_mock.delete.assert_called_once_with(1)

    def test_invalid_token_on_public_route_is_unauthorized(self):
        service_mock = Mock()
        with patch.object(CategoryListView, "service", service_mock):
            request = self.factory.get("/categories", HTTP_AUTHORIZATION=CLIENT + "xpto")
            response = self.dispatch(request, CategoryListView)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        service_mock.find_all.assert_not_called()

    def test_category_list(self):
        service_mock = Mock()
        service_mock.find_all.return_value = [
            CategoryDTO(id=1, name="Livros"),
            CategoryDTO(id=2, name="Eletrônicos"),
        ]
        with patch.object(CategoryListView, "service", service_mock):
            response = self.dispatch(self.factory.get("/categories"), CategoryListView)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data, [{"id": 1, "name": "Livros"}, {"id": 2, "name": "Eletrônicos"}]
        )
