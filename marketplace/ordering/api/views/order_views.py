from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer, OrderListResponseSerializer
from marketplace.ordering.api.serializers.order_serializers import (
    OrderListQuerySerializer,
    OrderSerializer,
    PlaceOrderRequestSerializer,
    UpdateOrderRequestSerializer,
)
from marketplace.services import OrderService


class OrderViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> OrderService:
        return container.order_service()

    @extend_schema(
        operation_id="orders_list",
        summary="List the orders visible to the user",
        description="""
        **What it receives:**
        - Authentication token
        - Optional status filter (query param)
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Customers: their own orders
        - Retailers: orders they bought or placed, plus orders containing their products
        - Wholesalers: orders placed with them, plus orders containing their products
        - Newest first, with total count and page information
        """,
        parameters=[
            OpenApiParameter(name="status", type=str, description="Filter by order status"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: OpenApiResponse(response=OrderListResponseSerializer, description="Orders retrieved successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid query parameters"),
            500: OpenApiResponse(response=ErrorResponseSerializer, description="Internal server error"),
        },
        tags=["Marketplace - Orders"],
    )
    def list(self, request):
        query = OrderListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().list_orders(
            request.user,
            query.validated_data.get("status"),
            query.validated_data["page"],
            query.validated_data.get("page_size"),
        )
        if not result.ok:
            return error_response(result)

        # Serialize results
        response_data = dict(result.value)
        response_data["results"] = OrderSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_retrieve",
        summary="Get order details",
        description="""
        **What it receives:**
        - `order_id` (UUID in URL): Order to retrieve
        - Authentication token (customer, placing retailer, or seller of any line)

        **What it returns:**
        - Complete order details including line snapshots, shipping and payment status
        """,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order retrieved successfully"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed to view this order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_order(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="orders_create",
        summary="Place an order",
        description="""
        **What it receives:**
        - `items` (list): {product_id, quantity} lines
        - `shipping_address` (object): address, city, state, zip_code, phone
        - `payment_method` (online, offline, cod), `fulfillment_method` (delivery, pickup)
        - `scheduled_date`, `notes` (optional)
        - `retailer_id` (optional): place the order for this counterpart as their retailer

        **What it returns:**
        - Created order in pending status; stock is decremented in the same transaction
        - The caller's cart is cleared unless `retailer_id` was given
        """,
        request=PlaceOrderRequestSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order created successfully"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="No items or validation error"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product or counterpart not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Insufficient stock or conflict"),
        },
        tags=["Marketplace - Orders"],
    )
    def create(self, request):
        serializer = PlaceOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = self.get_service().place_order(
            request.user,
            line_items=data["items"],
            shipping_address=dict(data["shipping_address"]),
            payment_method=data["payment_method"],
            fulfillment_method=data["fulfillment_method"],
            scheduled_date=data["scheduled_date"],
            notes=data["notes"],
            retailer_id=data["retailer_id"],
        )
        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="orders_partial_update",
        summary="Update order status or fulfillment details (sellers of the order)",
        description="""
        **What it receives:**
        - `status` (optional): forward along pending, confirmed, processing, shipped, delivered,
          or cancelled
        - `tracking_number`, `delivery_date` (optional)

        **What it returns:**
        - Updated order; delivering an unpaid order marks it paid and notifies the customer
        """,
        request=UpdateOrderRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid transition or data"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a seller of this order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Marketplace - Orders"],
    )
    def partial_update(self, request, pk=None):
        serializer = UpdateOrderRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().update_order_status(pk, request.user, **serializer.validated_data)
        if not result.ok:
            return error_response(result)

        return Response(OrderSerializer(result.value).data, status=status.HTTP_200_OK)
