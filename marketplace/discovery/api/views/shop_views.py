from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer, ShopListResponseSerializer
from marketplace.discovery.api.serializers.shop_serializers import NearbyShopSerializer, ShopListQuerySerializer
from marketplace.services import ShopProximityService


class ShopViewSet(viewsets.ViewSet):
    permission_classes = [AllowAny]

    def get_service(self) -> ShopProximityService:
        return container.shop_service()

    @extend_schema(
        operation_id="shops_list",
        summary="Find retailers and wholesalers near a location",
        description="""
        **What it receives:**
        - Optional origin (lat, lng); without both, shops come back unsorted with no distance
        - Optional radius_km; shops without coordinates or farther away are left out
        - Optional role (retailer or wholesaler)

        **What it returns:**
        - Shops nearest first, each with distance_km (null when unknown)
        """,
        parameters=[
            OpenApiParameter(name="lat", type=float, description="Origin latitude"),
            OpenApiParameter(name="lng", type=float, description="Origin longitude"),
            OpenApiParameter(name="radius_km", type=float, description="Maximum distance in km"),
            OpenApiParameter(name="role", type=str, description="retailer or wholesaler"),
        ],
        responses={
            200: OpenApiResponse(response=ShopListResponseSerializer, description="Shops retrieved"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid query parameters"),
        },
        tags=["Marketplace - Discovery"],
    )
    def list(self, request):
        query = ShopListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return Response(query.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().list_shops(**query.validated_data)
        if not result.ok:
            return error_response(result)

        shops = NearbyShopSerializer(result.value, many=True).data
        return Response({"count": len(shops), "results": shops}, status=status.HTTP_200_OK)
