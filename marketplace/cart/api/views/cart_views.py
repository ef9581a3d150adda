from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import CartResponseSerializer, ErrorResponseSerializer
from marketplace.cart.api.serializers.cart_serializers import (
    AddCartItemRequestSerializer,
    CartSerializer,
    ReplaceCartRequestSerializer,
)
from marketplace.services import CartService


class CartViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> CartService:
        return container.cart_service()

    def cart_response(self, result, success_status=status.HTTP_200_OK) -> Response:
        if not result.ok:
            return error_response(result)
        return Response(CartSerializer(result.value).data, status=success_status)

    @extend_schema(
        operation_id="cart_get",
        summary="Get user's shopping cart",
        description="""
        **What it receives:**
        - Authentication token (header)

        **What it returns:**
        - Cart lines with product details (null product for deleted products)
        - Totals (subtotal, tax, shipping, total)
        """,
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Cart retrieved successfully"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Cart"],
    )
    def list(self, request):
        return self.cart_response(self.get_service().get_cart(request.user))

    @extend_schema(
        operation_id="cart_add_item",
        summary="Add item to cart",
        description="""
        **What it receives:**
        - `product_id` (UUID): Product to add
        - `quantity` (integer, optional): Quantity to add (default: 1)

        **What it returns:**
        - Updated cart; adding a product already in the cart increases its quantity
        """,
        request=AddCartItemRequestSerializer,
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Item added successfully"),
            400: OpenApiResponse(
                response=ErrorResponseSerializer, description="Below minimum order quantity or own product"
            ),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Insufficient stock"),
        },
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["post"])
    def add_item(self, request):
        serializer = AddCartItemRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().add_item(
            request.user, serializer.validated_data["product_id"], serializer.validated_data["quantity"]
        )
        return self.cart_response(result)

    @extend_schema(
        operation_id="cart_replace",
        summary="Replace all cart lines",
        description="""
        **What it receives:**
        - `items`: complete list of {product_id, quantity}

        **What it returns:**
        - The new cart; lines for products that no longer exist are dropped
        """,
        request=ReplaceCartRequestSerializer,
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Cart replaced"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Below minimum order quantity"),
        },
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["put"])
    def replace(self, request):
        serializer = ReplaceCartRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().replace_items(request.user, serializer.validated_data["items"])
        return self.cart_response(result)

    @extend_schema(
        operation_id="cart_remove_item",
        summary="Remove a product from the cart",
        description="Removing a product that is not in the cart is not an error.",
        responses={
            200: OpenApiResponse(response=CartResponseSerializer, description="Item removed"),
        },
        tags=["Marketplace - Cart"],
    )
    @action(detail=False, methods=["delete"], url_path=r"items/(?P<product_id>[^/.]+)")
    def remove_item(self, request, product_id=None):
        return self.cart_response(self.get_service().remove_item(request.user, product_id))
