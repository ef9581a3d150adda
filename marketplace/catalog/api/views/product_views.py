from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer, ProductListResponseSerializer
from marketplace.catalog.api.serializers.product_serializers import (
    ProductListQuerySerializer,
    ProductSerializer,
    ProductWriteSerializer,
)
from marketplace.services import CatalogService


class ProductViewSet(viewsets.ViewSet):
    """Catalog browsing is public; writes need an authenticated seller."""

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_service(self) -> CatalogService:
        return container.catalog_service()

    @extend_schema(
        operation_id="products_list",
        summary="Browse active products",
        description="""
        **What it receives:**
        - Optional filters: category, search (any term), min_price, max_price, in_stock,
          seller, seller_type
        - Optional location: lat, lng and radius_km (all three needed to filter)
        - Sorting: sort (created_at, price, name) and order (asc, desc)
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Paginated list of active products; with a location each carries distance_km
        """,
        parameters=[
            OpenApiParameter(name="category", type=str, description="Category (case-insensitive)"),
            OpenApiParameter(name="search", type=str, description="Match any term in name, description or tags"),
            OpenApiParameter(name="min_price", type=float, description="Minimum price"),
            OpenApiParameter(name="max_price", type=float, description="Maximum price"),
            OpenApiParameter(name="in_stock", type=bool, description="Only products with stock"),
            OpenApiParameter(name="seller", type=str, description="Seller UUID"),
            OpenApiParameter(name="seller_type", type=str, description="retailer or wholesaler"),
            OpenApiParameter(name="lat", type=float, description="Shopper latitude"),
            OpenApiParameter(name="lng", type=float, description="Shopper longitude"),
            OpenApiParameter(name="radius_km", type=float, description="Maximum seller distance in km"),
            OpenApiParameter(name="sort", type=str, description="created_at (default), price or name"),
            OpenApiParameter(name="order", type=str, description="asc or desc (default)"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: OpenApiResponse(response=ProductListResponseSerializer, description="Products retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid query parameters"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Products"],
    )
    def list(self, request):
        query = ProductListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        filters = dict(query.validated_data)
        page = filters.pop("page")
        page_size = filters.pop("page_size", None)

        result = self.get_service().list_products(filters, page, page_size)
        if not result.ok:
            return error_response(result)

        response_data = dict(result.value)
        response_data["results"] = ProductSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product details",
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_product(pk)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_create",
        summary="List a new product (retailers and wholesalers)",
        description="""
        **What it receives:**
        - Product fields; seller and seller_type come from the authenticated user
        - `is_proxy` with `proxy_source` (a wholesaler) for retailer listings that front
          a wholesaler's stock

        **What it returns:**
        - The created product
        """,
        request=ProductWriteSerializer,
        responses={
            201: OpenApiResponse(response=ProductSerializer, description="Product created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="User is not a seller"),
        },
        tags=["Marketplace - Products"],
    )
    def create(self, request):
        serializer = ProductWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().create_product(serializer.validated_data, request.user)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="products_partial_update",
        summary="Update a product (owner only)",
        request=ProductWriteSerializer,
        responses={
            200: OpenApiResponse(response=ProductSerializer, description="Product updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the product owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def partial_update(self, request, pk=None):
        serializer = ProductWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().update_product(pk, serializer.validated_data, request.user)
        if not result.ok:
            return error_response(result)
        return Response(ProductSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="products_destroy",
        summary="Delete a product (owner only)",
        responses={
            204: OpenApiResponse(description="Product deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the product owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
        },
        tags=["Marketplace - Products"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_product(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)
