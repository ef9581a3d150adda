from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import (
    ErrorResponseSerializer,
    PaymentIntentResponseSerializer,
    VerifyPaymentResponseSerializer,
    WebhookResponseSerializer,
)
from marketplace.ordering.api.serializers.order_serializers import (
    OrderSerializer,
    PaymentIntentRequestSerializer,
    VerifyPaymentRequestSerializer,
)
from marketplace.services import PaymentService


class PaymentViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> PaymentService:
        return container.payment_service()

    def get_permissions(self):
        # The gateway authenticates webhooks with a payload signature, not a user token
        if self.action == "webhook":
            return [AllowAny()]
        return super().get_permissions()

    @extend_schema(
        operation_id="payments_intent",
        summary="Create a payment intent for an order",
        description="""
        **What it receives:**
        - `order_id` (UUID): Order to pay (caller must be its customer or placing retailer)
        - `currency` (optional): ISO code, defaults to the marketplace currency

        **What it returns:**
        - Gateway client secret and intent ID; amount is in the smallest currency unit
        """,
        request=PaymentIntentRequestSerializer,
        responses={
            201: OpenApiResponse(response=PaymentIntentResponseSerializer, description="Intent created"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed to pay this order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Order already paid"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Payment gateway error"),
        },
        tags=["Marketplace - Payments"],
    )
    @action(detail=False, methods=["post"])
    def intent(self, request):
        serializer = PaymentIntentRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().create_payment_intent(
            serializer.validated_data["order_id"], request.user, serializer.validated_data.get("currency")
        )
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="payments_webhook",
        summary="Payment gateway webhook",
        description="""
        **What it receives:**
        - Raw gateway event body with the `Stripe-Signature` header

        **What it returns:**
        - Whether the event changed an order; unrelated event types are acknowledged
        """,
        request=None,
        responses={
            200: OpenApiResponse(response=WebhookResponseSerializer, description="Event acknowledged"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid signature or payload"),
        },
        tags=["Marketplace - Payments"],
    )
    @action(detail=False, methods=["post"])
    def webhook(self, request):
        signature = request.META.get("HTTP_STRIPE_SIGNATURE", "")
        result = self.get_service().handle_webhook(request.body, signature)
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="payments_verify",
        summary="Verify a checkout signature",
        description="""
        **What it receives:**
        - `order_id`, `gateway_order_ref`, `payment_id` and `signature` returned by the gateway checkout

        **What it returns:**
        - `verified` flag and the updated order (paid when verified, failed otherwise)
        """,
        request=VerifyPaymentRequestSerializer,
        responses={
            200: OpenApiResponse(response=VerifyPaymentResponseSerializer, description="Signature checked"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed to pay this order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Order already paid"),
        },
        tags=["Marketplace - Payments"],
    )
    @action(detail=False, methods=["post"])
    def verify(self, request):
        serializer = VerifyPaymentRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = self.get_service().verify_payment(
            data["order_id"], request.user, data["gateway_order_ref"], data["payment_id"], data["signature"]
        )
        if not result.ok:
            return error_response(result)

        return Response(
            {"verified": result.value["verified"], "order": OrderSerializer(result.value["order"]).data},
            status=status.HTTP_200_OK,
        )
