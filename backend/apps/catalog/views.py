from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.schemas import ErrorResponseSerializer, ValidationErrorResponseSerializer, paginated_response
from apps.auth.gate import ADMIN_ONLY, PUBLIC
from apps.common import get_logger

from .container import build_category_service, build_product_service
from .pagination import ProductPagination
from .serializers import (
    CategorySerializer,
    ProductMinSerializer,
    ProductReadSerializer,
    ProductWriteSerializer,
)

logger = get_logger(__name__).bind(component="catalog", layer="view")

PROTECTED_WRITE_RESPONSES = {
    401: OpenApiResponse(response=ErrorResponseSerializer),
    403: OpenApiResponse(response=ErrorResponseSerializer),
    422: OpenApiResponse(response=ValidationErrorResponseSerializer),
}


@extend_schema(tags=["Products"])
class ProductListView(APIView):
    access_policy = {"GET": PUBLIC, "POST": ADMIN_ONLY}
    service = build_product_service()
    pagination_class = ProductPagination
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description="Zero-based pagination via ?page and ?size, optional ?sort=field,dir.",
        parameters=[
            OpenApiParameter(
                name="name",
                description="Case-insensitive substring filter on the product name",
                required=False,
                type=str,
            ),
            OpenApiParameter(name="page", required=False, type=int),
            OpenApiParameter(name="size", required=False, type=int),
            OpenApiParameter(
                name="sort",
                description="id, name or price, optionally followed by ,asc or ,desc",
                required=False,
                type=str,
            ),
        ],
        responses={200: paginated_response(ProductMinSerializer)},
    )
    def get(self, request):
        name = request.query_params.get("name")
        paginator = self.pagination_class()
        page_request = paginator.get_page_request(request)
        self.log.debug("Handling product list request", name=name, page=page_request.page)
        page = self.service.find_all(name, page_request)
        data = ProductMinSerializer(page.content, many=True).data
        return paginator.get_page_response(page, data)

    @extend_schema(
        summary="Create product",
        request=ProductWriteSerializer,
        responses={201: ProductReadSerializer, **PROTECTED_WRITE_RESPONSES},
    )
    def post(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info(
            "Creating product via API", name=serializer.validated_data.get("name")
        )
        dto = self.service.insert(serializer.validated_data)
        self.log.info("Product created via API", product_id=dto.id)
        return Response(
            ProductReadSerializer(dto).data,
            status=status.HTTP_201_CREATED,
            headers={"Location": request.build_absolute_uri(f"/products/{dto.id}")},
        )


@extend_schema(tags=["Products"])
class ProductDetailView(APIView):
    access_policy = {"GET": PUBLIC, "PUT": ADMIN_ONLY, "DELETE": ADMIN_ONLY}
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={
            200: ProductReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        self.log.debug("Fetching product detail", product_id=product_id)
        dto = self.service.find_by_id(product_id)
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Replace product",
        request=ProductWriteSerializer,
        responses={
            200: ProductReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
            **PROTECTED_WRITE_RESPONSES,
        },
    )
    def put(self, request, product_id: int):
        serializer = ProductWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.log.info("Replacing product", product_id=product_id)
        dto = self.service.update(product_id, serializer.validated_data)
        return Response(ProductReadSerializer(dto).data)

    @extend_schema(
        summary="Delete product",
        responses={
            204: None,
            400: OpenApiResponse(response=ErrorResponseSerializer),
            401: OpenApiResponse(response=ErrorResponseSerializer),
            403: OpenApiResponse(response=ErrorResponseSerializer),
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def delete(self, request, product_id: int):
        self.log.info("Deleting product", product_id=product_id)
        self.service.delete(product_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(tags=["Categories"])
class CategoryListView(APIView):
    access_policy = {"GET": PUBLIC}
    service = build_category_service()
    log = logger.bind(view="CategoryListView")

    @extend_schema(
        summary="List categories", responses={200: CategorySerializer(many=True)}
    )
    def get(self, request):
        self.log.debug("Listing categories")
        data = self.service.find_all()
        return Response(CategorySerializer(data, many=True).data)
