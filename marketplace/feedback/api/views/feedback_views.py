from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer, FeedbackListResponseSerializer
from marketplace.feedback.api.serializers.feedback_serializers import (
    FeedbackCreateSerializer,
    FeedbackListQuerySerializer,
    FeedbackRespondSerializer,
    FeedbackSerializer,
)
from marketplace.services import FeedbackService


class FeedbackViewSet(viewsets.ViewSet):
    """Feedback is readable by anyone; submitting and replying need an account."""

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        return [IsAuthenticated()]

    def get_service(self) -> FeedbackService:
        return container.feedback_service()

    @extend_schema(
        operation_id="feedback_list",
        summary="List feedback",
        parameters=[
            OpenApiParameter(name="product_id", type=str, description="Only feedback about this product"),
            OpenApiParameter(name="order_id", type=str, description="Only feedback about this order"),
            OpenApiParameter(name="status", type=str, description="pending, approved or rejected"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: OpenApiResponse(response=FeedbackListResponseSerializer, description="Feedback retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid query parameters"),
        },
        tags=["Marketplace - Feedback"],
    )
    def list(self, request):
        query = FeedbackListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        filters = dict(query.validated_data)
        page = filters.pop("page")
        page_size = filters.pop("page_size", None)

        result = self.get_service().list_feedback(filters, page, page_size)
        if not result.ok:
            return error_response(result)

        response_data = dict(result.value)
        response_data["results"] = FeedbackSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="feedback_retrieve",
        summary="Get a feedback entry",
        responses={
            200: OpenApiResponse(response=FeedbackSerializer, description="Feedback retrieved"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Feedback not found"),
        },
        tags=["Marketplace - Feedback"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_feedback(pk)
        if not result.ok:
            return error_response(result)
        return Response(FeedbackSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="feedback_create",
        summary="Submit feedback",
        description="""
        **What it receives:**
        - `type`: product, service or general (product feedback must name `product_id`)
        - `rating` (1-5) and `comment`
        - Optional `order_id` (one of your own orders) and `images` (URLs)

        **What it returns:**
        - The created entry, pending moderation
        """,
        request=FeedbackCreateSerializer,
        responses={
            201: OpenApiResponse(response=FeedbackSerializer, description="Feedback submitted"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Order belongs to someone else"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Product or order not found"),
        },
        tags=["Marketplace - Feedback"],
    )
    def create(self, request):
        serializer = FeedbackCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().submit_feedback(request.user, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(FeedbackSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="feedback_respond",
        summary="Reply to or moderate feedback",
        description="""
        - `response`: reply text (seller of the product, or staff)
        - `status`: approved or rejected (staff only)
        """,
        request=FeedbackRespondSerializer,
        responses={
            200: OpenApiResponse(response=FeedbackSerializer, description="Feedback updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed to reply or moderate"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Feedback not found"),
        },
        tags=["Marketplace - Feedback"],
    )
    @action(detail=True, methods=["post"])
    def respond(self, request, pk=None):
        serializer = FeedbackRespondSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().respond_to_feedback(
            pk,
            request.user,
            response=serializer.validated_data.get("response"),
            status=serializer.validated_data.get("status"),
        )
        if not result.ok:
            return error_response(result)
        return Response(FeedbackSerializer(result.value).data, status=status.HTTP_200_OK)
