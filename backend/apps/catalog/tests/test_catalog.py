from decimal import Decimal

from django.core.cache import cache
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.catalog.models import Category, Product
from apps.users.models import Role, User


class TestCatalog(APITestCase):
    @classmethod
    def setUpTestData(cls):
        client_role = Role.objects.create(authority="ROLE_CLIENT")
        admin_role = Role.objects.create(authority="ROLE_ADMIN")
        maria = User.objects.create_user(
            username="maria@gmail.com", email="maria@gmail.com", password="123456"
        )
        maria.roles.add(client_role)
        alex = User.objects.create_user(
            username="alex@gmail.com", email="alex@gmail.com", password="123456"
        )
        alex.roles.add(client_role, admin_role)

        cls.books = Category.objects.create(name="Livros")
        cls.electronics = Category.objects.create(name="Eletrônicos")
        cls.computers = Category.objects.create(name="Computadores")
        cls.product = Product.objects.create(
            name="The Lord of the Rings",
            description="Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
            price=Decimal("90.50"),
            img_url="https://example.com/1-big.jpg",
        )
        cls.product.categories.add(cls.books)
        for name, price in (("Smart TV", "2190.00"), ("Macbook Pro", "1250.00"), ("PC Gamer", "1200.00")):
            p = Product.objects.create(
                name=name,
                description="Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
                price=Decimal(price),
            )
            p.categories.add(cls.computers)

    def setUp(self):
        cache.clear()
        self.list_url = reverse("products-list")
        self.existing_url = reverse("products-detail", args=[self.product.id])
        self.missing_url = reverse("products-detail", args=[self.product.id + 1000])
        self.payload = {
            "name": "Console PlayStation 5",
            "description": "Lorem ipsum, dolor sit amet consectetur adipisicing elit.",
            "price": 3999.90,
            "imgUrl": "https://example.com/ps5.jpg",
            "categories": [{"id": self.electronics.id}, {"id": self.computers.id}],
        }

    def authenticate(self, username, suffix=""):
        login = self.client.post(
            reverse("auth-login"),
            {"username": username, "password": "123456"},
            format="json",
        )
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access']}{suffix}")

    def test_list_categories(self):
        response = self.client.get(reverse("categories-list"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            [c["name"] for c in response.json()], ["Livros", "Eletrônicos", "Computadores"]
        )

    def test_list_products_filters_by_name(self):
        response = self.client.get(self.list_url, {"name": "mac"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["totalElements"], 1)
        self.assertEqual(body["content"][0]["name"], "Macbook Pro")
        self.assertEqual(body["content"][0]["price"], 1250.0)
        self.assertNotIn("description", body["content"][0])

    def test_list_products_pages(self):
        response = self.client.get(self.list_url, {"page": 1, "size": 3})
        body = response.json()
        self.assertEqual(body["number"], 1)
        self.assertEqual(body["totalPages"], 2)
        self.assertEqual(body["numberOfElements"], 1)
        self.assertTrue(body["last"])

    def test_list_products_sorted_by_price(self):
        body = self.client.get(self.list_url, {"sort": "price,desc"}).json()
        self.assertEqual(body["content"][0]["name"], "Smart TV")

    def test_find_by_id(self):
        response = self.client.get(self.existing_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["name"], "The Lord of the Rings")
        self.assertEqual(body["price"], 90.5)
        self.assertEqual(body["imgUrl"], "https://example.com/1-big.jpg")
        self.assertEqual(body["categories"], [{"id": self.books.id, "name": "Livros"}])

    def test_find_by_missing_id(self):
        response = self.client.get(self.missing_url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        body = response.json()
        self.assertEqual(body["status"], 404)
        self.assertEqual(body["error"], "Resource not found")
        self.assertEqual(body["path"], self.missing_url)

    def test_insert_as_admin(self):
        self.authenticate("alex@gmail.com")
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        body = response.json()
        self.assertEqual(body["name"], "Console PlayStation 5")
        self.assertEqual(body["price"], 3999.9)
        self.assertEqual(len(body["categories"]), 2)
        self.assertTrue(response["Location"].endswith(f"/products/{body['id']}"))
        self.assertTrue(Product.objects.filter(id=body["id"]).exists())

    def test_insert_with_invalid_name(self):
        self.authenticate("alex@gmail.com")
        self.payload["name"] = "ab"
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.json()["errors"][0]["field"], "name")

    def test_insert_with_non_positive_price(self):
        self.authenticate("alex@gmail.com")
        self.payload["price"] = -50.0
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(
            response.json()["errors"], [{"field": "price", "message": "Price must be positive"}]
        )

    def test_insert_with_unknown_category(self):
        self.authenticate("alex@gmail.com")
        self.payload["categories"] = [{"id": 9999}]
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.json()["errors"][0]["field"], "categories")

    def test_insert_with_malformed_json(self):
        self.authenticate("alex@gmail.com")
        response = self.client.post(
            self.list_url, data="{not json", content_type="application/json"
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_insert_as_client_is_forbidden(self):
        self.authenticate("maria@gmail.com")
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_insert_without_token_is_unauthorized(self):
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_as_admin(self):
        self.authenticate("alex@gmail.com")
        response = self.client.put(self.existing_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.product.refresh_from_db()
        self.assertEqual(self.product.name, "Console PlayStation 5")
        self.assertEqual(
            sorted(self.product.categories.values_list("name", flat=True)),
            ["Computadores", "Eletrônicos"],
        )

    def test_update_missing_as_admin(self):
        self.authenticate("alex@gmail.com")
        response = self.client.put(self.missing_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_missing_as_client_is_forbidden(self):
        self.authenticate("maria@gmail.com")
        response = self.client.put(self.missing_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_as_admin(self):
        self.authenticate("alex@gmail.com")
        response = self.client.delete(self.existing_url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Product.objects.filter(id=self.product.id).exists())

    def test_delete_missing_as_admin(self):
        self.authenticate("alex@gmail.com")
        response = self.client.delete(self.missing_url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_delete_without_token(self):
        response = self.client.delete(self.existing_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_delete_as_client_is_forbidden(self):
        self.authenticate("maria@gmail.com")
        response = self.client.delete(self.existing_url)
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_products_far_past_the_end(self):
        response = self.client.get(self.list_url, {"page": str(10**20)})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        body = response.json()
        self.assertEqual(body["content"], [])
        self.assertEqual(body["totalElements"], 4)
        self.assertTrue(body["empty"])
        self.assertTrue(body["last"])

    def test_list_products_just_past_the_end(self):
        body = self.client.get(self.list_url, {"page": 2, "size": 2}).json()
        self.assertEqual(body["content"], [])
        self.assertEqual(body["totalPages"], 2)

    def test_insert_with_tampered_admin_token(self):
        self.authenticate("alex@gmail.com", suffix="xpto")
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(Product.objects.filter(name="Console PlayStation 5").exists())

    def test_update_existing_with_tampered_admin_token(self):
        self.authenticate("alex@gmail.com", suffix="xpto")
        response = self.client.put(self.existing_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.product.refresh_from_db()
        self.assertEqual(self.product.name, "The Lord of the Rings")

    def test_update_missing_with_tampered_admin_token(self):
        self.authenticate("alex@gmail.com", suffix="xpto")
        response = self.client.put(self.missing_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_existing_as_client_is_forbidden(self):
        self.authenticate("maria@gmail.com")
        response = self.client.put(self.existing_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.product.refresh_from_db()
        self.assertEqual(self.product.name, "The Lord of the Rings")

    def test_insert_with_too_many_price_decimals(self):
        self.authenticate("alex@gmail.com")
        self.payload["price"] = "3999.999"
        response = self.client.post(self.list_url, self.payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(
            response.json()["errors"],
            [{"field": "price", "message": "Price must have at most 2 decimal places"}],
        )
