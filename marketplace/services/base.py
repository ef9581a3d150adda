"""
Base classes and utilities for the service layer.

Services never raise for expected business failures. They return a
ServiceResult carrying either a value or an error code from ErrorCodes plus
a human-readable detail, and the API layer maps the code to an HTTP status.
"""

import logging
import time
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable, Dict, Generic, Optional, TypeVar


T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Outcome of a service operation.

    Attributes:
        ok: True if operation succeeded, False otherwise
        value: The success value (present if ok=True)
        error: Error code (present if ok=False)
        error_detail: Human-readable error message (present if ok=False)

    Examples:
        >>> result = service_ok(order)
        >>> if result.ok:
        ...     return Response(OrderSerializer(result.value).data)

        >>> result = service_err(ErrorCodes.INSUFFICIENT_STOCK, "Only 2 units of Rice left")
        >>> result.error
        'insufficient_stock'
    """

    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_detail: Optional[str] = None

    def to_dict(self) -> dict:
        if self.ok:
            return {"success": True, "data": self.value}
        return {
            "success": False,
            "error": {"code": self.error, "message": self.error_detail},
        }


def service_ok(value: T) -> ServiceResult[T]:
    """Create a successful ServiceResult."""
    return ServiceResult(ok=True, value=value)


def service_err(error: str, error_detail: str = "") -> ServiceResult:
    """
    Create a failed ServiceResult.

    Args:
        error: Error code (one of ErrorCodes)
        error_detail: Human-readable error message, defaults to the code
    """
    return ServiceResult(ok=False, error=error, error_detail=error_detail or error)


class BaseService:
    """
    Base class for all services providing common functionality.

    Provides:
    - A logger named after the concrete service class
    - A performance timing decorator

    Usage:
        class CartService(BaseService):
            @BaseService.log_performance
            def add_item(self, user, product_id, quantity):
                ...
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    @staticmethod
    def log_performance(func: Callable) -> Callable:
        """
        Decorator to log execution time and outcome of service methods.

        Failed ServiceResults are logged as warnings; exceptions are logged
        with traceback and re-raised.
        """

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            start_time = time.time()
            method_name = f"{self.__class__.__name__}.{func.__name__}"

            try:
                self.logger.debug(f"{method_name} started")
                result = func(self, *args, **kwargs)
                elapsed_time = (time.time() - start_time) * 1000

                if isinstance(result, ServiceResult):
                    if result.ok:
                        self.logger.info(f"{method_name} completed successfully in {elapsed_time:.2f}ms")
                    else:
                        self.logger.warning(
                            f"{method_name} failed with error '{result.error}' in {elapsed_time:.2f}ms"
                        )
                else:
                    self.logger.info(f"{method_name} completed in {elapsed_time:.2f}ms")

                return result

            except Exception as e:
                elapsed_time = (time.time() - start_time) * 1000
                self.logger.error(
                    f"{method_name} raised exception after {elapsed_time:.2f}ms: {str(e)}",
                    exc_info=True,
                )
                raise

        return wrapper


class ErrorCodes:
    """Standard error codes used across marketplace services."""

    # Not found
    PRODUCT_NOT_FOUND = "product_not_found"
    ORDER_NOT_FOUND = "order_not_found"
    USER_NOT_FOUND = "user_not_found"
    FEEDBACK_NOT_FOUND = "feedback_not_found"
    QUERY_NOT_FOUND = "query_not_found"

    # Cart rules
    CART_EMPTY = "cart_empty"
    INVALID_QUANTITY = "invalid_quantity"
    BELOW_MINIMUM_ORDER = "below_minimum_order"
    SELF_PURCHASE = "self_purchase"

    # Inventory
    INSUFFICIENT_STOCK = "insufficient_stock"

    # Orders
    INVALID_ORDER_STATE = "invalid_order_state"
    ORDER_ALREADY_PAID = "order_already_paid"

    # Support queries
    QUERY_CLOSED = "query_closed"

    # Permissions
    PERMISSION_DENIED = "permission_denied"
    NOT_PRODUCT_OWNER = "not_product_owner"

    # Validation
    VALIDATION_ERROR = "validation_error"

    # Persistence
    CONFLICT = "conflict"

    # Upstream collaborators
    PAYMENT_PROVIDER_ERROR = "payment_provider_error"
    INVALID_WEBHOOK = "invalid_webhook"
    PAYMENT_REFERENCE_MISMATCH = "payment_reference_mismatch"

    # Internal errors
    INTERNAL_ERROR = "internal_error"


def paginate(queryset, page: int, page_size: int) -> Dict[str, Any]:
    """
    Slice a queryset (or list) into one page.

    Unlike Django's Paginator, a page past the end yields an empty
    ``results`` list rather than the last page, and an empty result set has
    zero pages.
    """
    page = max(int(page), 1)
    page_size = max(int(page_size), 1)

    count = len(queryset) if isinstance(queryset, list) else queryset.count()
    num_pages = (count + page_size - 1) // page_size
    offset = (page - 1) * page_size
    results = list(queryset[offset : offset + page_size]) if page <= num_pages else []

    return {
        "results": results,
        "count": count,
        "page": page,
        "page_size": page_size,
        "num_pages": num_pages,
        "has_next": page < num_pages,
        "has_previous": page > 1,
    }
