from django.urls import path

from .views import CategoryListView, ProductDetailView, ProductListView

urlpatterns = [
    path("products", ProductListView.as_view(), name="products-list"),
    path("products/<int:product_id>", ProductDetailView.as_view(), name="products-detail"),
    path("categories", CategoryListView.as_view(), name="categories-list"),
]
