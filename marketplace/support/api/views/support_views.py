from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer, SupportQueryListResponseSerializer
from marketplace.services import SupportService
from marketplace.support.api.serializers.support_serializers import (
    SupportQueryCreateSerializer,
    SupportQueryListQuerySerializer,
    SupportQuerySerializer,
    SupportQueryUpdateSerializer,
)


class SupportQueryViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> SupportService:
        return container.support_service()

    @extend_schema(
        operation_id="queries_list",
        summary="List my support queries",
        description="""
        Customers see their own queries. Retailers and wholesalers also see the queries
        that are not closed and concern their products or orders they sold into.
        """,
        parameters=[
            OpenApiParameter(name="status", type=str, description="open, in_progress, resolved or closed"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: OpenApiResponse(response=SupportQueryListResponseSerializer, description="Queries retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid query parameters"),
        },
        tags=["Marketplace - Support"],
    )
    def list(self, request):
        query = SupportQueryListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().list_queries(
            request.user,
            status=query.validated_data.get("status"),
            page=query.validated_data["page"],
            page_size=query.validated_data.get("page_size"),
        )
        if not result.ok:
            return error_response(result)

        response_data = dict(result.value)
        response_data["results"] = SupportQuerySerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="queries_retrieve",
        summary="Get a support query with its replies",
        responses={
            200: OpenApiResponse(response=SupportQuerySerializer, description="Query retrieved"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a participant"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Query not found"),
        },
        tags=["Marketplace - Support"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_query(pk, request.user)
        if not result.ok:
            return error_response(result)
        return Response(SupportQuerySerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="queries_create",
        summary="Open a support query",
        request=SupportQueryCreateSerializer,
        responses={
            201: OpenApiResponse(response=SupportQuerySerializer, description="Query opened"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order or product not found"),
        },
        tags=["Marketplace - Support"],
    )
    def create(self, request):
        serializer = SupportQueryCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().open_query(request.user, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(SupportQuerySerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="queries_partial_update",
        summary="Reply to a query or change its status",
        description="""
        **What it receives:**
        - `message`: a reply; the first reply moves an open query to in_progress
        - `status`: open, in_progress, resolved or closed

        Closed queries refuse replies until reopened.
        """,
        request=SupportQueryUpdateSerializer,
        responses={
            200: OpenApiResponse(response=SupportQuerySerializer, description="Query updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a participant"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Query not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Query is closed"),
        },
        tags=["Marketplace - Support"],
    )
    def partial_update(self, request, pk=None):
        serializer = SupportQueryUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().update_query(
            pk,
            request.user,
            message=serializer.validated_data.get("message"),
            status=serializer.validated_data.get("status"),
        )
        if not result.ok:
            return error_response(result)
        return Response(SupportQuerySerializer(result.value).data, status=status.HTTP_200_OK)
