from rest_framework import status
from rest_framework.response import Response

from marketplace.services.base import ErrorCodes, ServiceResult


ERROR_STATUS = {
    # Not found
    ErrorCodes.PRODUCT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.ORDER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.FEEDBACK_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.QUERY_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    # Business rule violations
    ErrorCodes.CART_EMPTY: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_QUANTITY: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.BELOW_MINIMUM_ORDER: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.SELF_PURCHASE: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_ORDER_STATE: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.INVALID_WEBHOOK: status.HTTP_400_BAD_REQUEST,
    ErrorCodes.PAYMENT_REFERENCE_MISMATCH: status.HTTP_400_BAD_REQUEST,
    # Permissions
    ErrorCodes.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCodes.NOT_PRODUCT_OWNER: status.HTTP_403_FORBIDDEN,
    # Conflicts
    ErrorCodes.INSUFFICIENT_STOCK: status.HTTP_409_CONFLICT,
    ErrorCodes.ORDER_ALREADY_PAID: status.HTTP_409_CONFLICT,
    ErrorCodes.QUERY_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCodes.CONFLICT: status.HTTP_409_CONFLICT,
    # Upstream
    ErrorCodes.PAYMENT_PROVIDER_ERROR: status.HTTP_502_BAD_GATEWAY,
}


def error_response(result: ServiceResult) -> Response:
    """Turn a failed ServiceResult into ``{"detail", "code"}`` with the matching status."""
    http_status = ERROR_STATUS.get(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({"detail": result.error_detail, "code": result.error}, status=http_status)
