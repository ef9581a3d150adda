from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import (
    AccountDeletionSerializer,
    LocationUpdateSerializer,
    ProfileUpdateSerializer,
    RegisterSerializer,
    UserSerializer,
)
from authentication.api.serializers.response_serializers import (
    ErrorResponseSerializer,
    LocationResponseSerializer,
    RegisterResponseSerializer,
)
from infrastructure.container import container


# Dependency Injection Helper
def get_account_service():
    """Factory to get AccountService instance with dependencies."""
    return container.account_service()


class RegisterAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register new user account",
        description="""
        Create a customer, retailer or wholesaler account.

        **Flow:**
        1. User submits registration form (shops also send a business name and address)
        2. Account created
        3. Shop coordinates are resolved from the address when not supplied
        4. User logs in through `token/`
        """,
        request=RegisterSerializer,
        responses={
            201: OpenApiResponse(
                response=RegisterResponseSerializer,
                description="Registration successful",
                examples=[
                    OpenApiExample(
                        "Shop Registration",
                        value={
                            "message": "Registration successful.",
                            "geocoded": True,
                            "user": {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "email": "shop@example.com",
                                "role": "retailer",
                                "business_name": "Corner Store",
                                "latitude": 28.6139,
                                "longitude": 77.209,
                            },
                        },
                    )
                ],
            ),
            400: OpenApiResponse(
                response=ErrorResponseSerializer,
                description="Validation error (email exists, passwords don't match, etc.)",
            ),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = get_account_service().register(serializer.validated_data)
        if result.success:
            return Response(
                {"message": result.message, "user": UserSerializer(result.user).data, "geocoded": result.geocoded},
                status=status.HTTP_201_CREATED,
            )

        if result.errors:
            return Response(result.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(
            {"error": result.message, "detail": result.error}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


class ProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="profile_retrieve",
        summary="Get current user's account",
        responses={200: OpenApiResponse(response=UserSerializer, description="Account retrieved")},
        tags=["Profile"],
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="profile_update",
        summary="Update name, phone or business name",
        request=ProfileUpdateSerializer,
        responses={
            200: OpenApiResponse(response=UserSerializer, description="Account updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
        },
        tags=["Profile"],
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = get_account_service().update_profile(request.user, serializer.validated_data)
        if not result.success:
            return Response(
                {"error": result.message, "detail": result.error}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return Response(UserSerializer(request.user).data)


class LocationView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="profile_location_update",
        summary="Update shop location",
        description="""
        Update the shop address and coordinates.

        **Coordinates:**
        - `latitude` and `longitude` sent together are stored as given
        - Otherwise a changed address is geocoded
        - An address that cannot be resolved clears the coordinates, hiding the shop from
          proximity searches
        """,
        request=LocationUpdateSerializer,
        responses={
            200: OpenApiResponse(response=LocationResponseSerializer, description="Location updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
        },
        tags=["Profile"],
    )
    def patch(self, request):
        serializer = LocationUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = get_account_service().update_location(request.user, serializer.validated_data)
        if not result.success:
            return Response({"error": result.message, "detail": result.error}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "message": result.message,
                "user": UserSerializer(request.user).data,
                "geocoded": result.data["geocoded"],
            }
        )


class AccountDeleteView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="profile_delete_account",
        summary="Delete account",
        description="""
        Permanently delete your account.

        **Requirements:**
        - Must type "DELETE" as confirmation
        - Must provide current password

        **Process:**
        - Cart, feedback and support queries are deleted with the account
        - A seller's product listings are removed
        - Orders are kept for the sellers' records without the customer link

        **WARNING:** This action is irreversible!
        """,
        request=AccountDeletionSerializer,
        responses={
            200: OpenApiResponse(
                description="Account deleted successfully",
                examples=[OpenApiExample("Success", value={"message": "Account deleted successfully."})],
            ),
            400: OpenApiResponse(
                response=ErrorResponseSerializer,
                description="Validation error",
                examples=[
                    OpenApiExample(
                        "Invalid Confirmation", value={"error": "You must type DELETE to confirm account deletion."}
                    ),
                    OpenApiExample("Invalid Password", value={"error": "Incorrect password."}),
                ],
            ),
        },
        tags=["Profile"],
    )
    def post(self, request):
        serializer = AccountDeletionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Validation failed", "details": serializer.errors}, status=status.HTTP_400_BAD_REQUEST
            )

        if serializer.validated_data["confirmation"] != "DELETE":
            return Response(
                {"error": "You must type DELETE to confirm account deletion."}, status=status.HTTP_400_BAD_REQUEST
            )

        if not request.user.check_password(serializer.validated_data["password"]):
            return Response({"error": "Incorrect password."}, status=status.HTTP_400_BAD_REQUEST)

        result = get_account_service().delete_account(request.user)
        if not result.success:
            return Response(
                {"error": result.message, "detail": result.error}, status=status.HTTP_500_INTERNAL_SERVER_ERROR
            )
        return Response({"message": result.message}, status=status.HTTP_200_OK)
