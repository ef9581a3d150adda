"""
CatalogService - Product Browsing & CRUD

Handles the filtered, paginated product listing (optionally restricted to
sellers within a radius of the shopper) and seller-side product CRUD.
"""

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from marketplace.catalog.domain.models.catalog import Product
from marketplace.discovery.domain.services.proximity_service import find_nearby
from marketplace.filters import ProductFilter
from marketplace.infra.observability.metrics import catalog_query_duration
from marketplace.infra.observability.tracing import tracer
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok


User = get_user_model()
logger = logging.getLogger(__name__)

SORT_FIELDS = ("created_at", "price", "name")

EDITABLE_FIELDS = (
    "name",
    "description",
    "category",
    "subcategory",
    "price",
    "stock",
    "min_order_quantity",
    "availability_date",
    "images",
    "specifications",
    "tags",
    "status",
    "is_proxy",
    "proxy_source",
)


class CatalogService(BaseService):
    """
    Service for managing product catalog operations.

    Responsibilities:
    - List active products with filtering, location radius and pagination
    - Get product details
    - Create products (retailers and wholesalers only)
    - Update and delete products (owner only)

    All operations validate permissions and return ServiceResult.
    """

    @BaseService.log_performance
    def list_products(
        self,
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        List active products with filtering and pagination.

        Args:
            filters: Optional filters. ProductFilter fields (category, search,
                min_price, max_price, in_stock, seller, seller_type) plus
                lat, lng, radius_km, sort ('created_at', 'price', 'name')
                and order ('asc', 'desc').
            page: Page number (1-indexed)
            page_size: Items per page

        Returns:
            ServiceResult with results, count, page, page_size, num_pages.
            With a location filter each product carries ``distance_km``.

        Example:
            >>> result = catalog_service.list_products(
            ...     filters={"search": "rice basmati", "lat": 12.97, "lng": 77.59, "radius_km": 10},
            ...     page=1,
            ...     page_size=20,
            ... )
            >>> if result.ok:
            ...     products = result.value["results"]
        """
        with tracer.start_as_current_span("catalog_list_products") as span, catalog_query_duration.time():
            filters = {key: value for key, value in (filters or {}).items() if value is not None and value != ""}
            page_size = page_size or getattr(settings, "MARKETPLACE_DEFAULT_PAGE_SIZE", 20)
            span.set_attribute("filters.count", len(filters))
            span.set_attribute("page", page)

            try:
                lat = filters.pop("lat", None)
                lng = filters.pop("lng", None)
                radius_km = filters.pop("radius_km", None)
                sort = filters.pop("sort", None) or "created_at"
                order = filters.pop("order", None) or "desc"

                if sort not in SORT_FIELDS:
                    return service_err(ErrorCodes.VALIDATION_ERROR, f"Unsupported sort field: {sort}")
                if order not in ("asc", "desc"):
                    return service_err(ErrorCodes.VALIDATION_ERROR, f"Unsupported sort order: {order}")

                queryset = Product.objects.select_related("seller").filter(status=Product.STATUS_ACTIVE)

                filterset = ProductFilter(data=filters, queryset=queryset)
                if not filterset.is_valid():
                    return service_err(ErrorCodes.VALIDATION_ERROR, str(dict(filterset.errors)))
                queryset = filterset.qs

                # Location filter only applies with a complete origin and radius
                distances = None
                if lat is not None and lng is not None and radius_km is not None:
                    distances = self._sellers_within(queryset, float(lat), float(lng), float(radius_km))
                    queryset = queryset.filter(seller_id__in=list(distances.keys()))
                    span.set_attribute("filter.radius_km", float(radius_km))

                prefix = "-" if order == "desc" else ""
                queryset = queryset.order_by(f"{prefix}{sort}", f"{prefix}id")

                result_data = paginate(queryset, page, page_size)

                if distances is not None:
                    for product in result_data["results"]:
                        product.distance_km = distances.get(product.seller_id)

                span.set_attribute("result.count", result_data["count"])
                self.logger.info(
                    f"Listed products: count={result_data['count']}, page={page}/{result_data['num_pages']}"
                )

                return service_ok(result_data)

            except Exception as e:
                self.logger.error(f"Error listing products: {e}", exc_info=True)
                span.record_exception(e)
                return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def _sellers_within(self, queryset, lat: float, lng: float, radius_km: float) -> Dict[Any, float]:
        """Map seller id to distance for sellers of ``queryset`` inside the radius."""
        sellers = User.objects.filter(id__in=queryset.values("seller_id")).only("id", "latitude", "longitude")
        return {shop.seller.id: shop.distance_km for shop in find_nearby(sellers, lat, lng, radius_km)}

    @BaseService.log_performance
    def get_product(self, product_id) -> ServiceResult[Product]:
        """
        Get product details by ID.

        Example:
            >>> result = catalog_service.get_product(product_id)
            >>> if result.ok:
            ...     print(f"Product: {result.value.name}")
        """
        try:
            product = Product.objects.select_related("seller", "proxy_source").get(id=product_id)
            self.logger.info(f"Retrieved product: {product.name} (id={product_id})")
            return service_ok(product)

        except (Product.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")
        except Exception as e:
            self.logger.error(f"Error getting product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    @transaction.atomic
    def create_product(self, data: Dict[str, Any], user: User) -> ServiceResult[Product]:
        """
        Create a new product (retailer or wholesaler only).

        The seller and seller_type always come from ``user``, never from data.

        Example:
            >>> result = catalog_service.create_product(
            ...     data={"name": "Basmati Rice 5kg", "description": "Aged rice", "category": "Groceries",
            ...           "price": "450.00", "stock": 40, "min_order_quantity": 2},
            ...     user=retailer,
            ... )
        """
        try:
            if not user.is_seller:
                return service_err(ErrorCodes.PERMISSION_DENIED, "Only retailers and wholesalers can list products")

            proxy_check = self._check_proxy_source(data.get("proxy_source"))
            if not proxy_check.ok:
                return proxy_check

            fields = {field: data[field] for field in EDITABLE_FIELDS if field in data}
            product = Product(seller=user, seller_type=user.role, **fields)
            product.save()

            self.logger.info(f"Created product: {product.name} (id={product.id}) by seller {user.id}")
            return service_ok(product)

        except Exception as e:
            self.logger.error(f"Error creating product: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    @transaction.atomic
    def update_product(self, product_id, data: Dict[str, Any], user: User) -> ServiceResult[Product]:
        """
        Update an existing product (owner only).

        Turning ``is_proxy`` off, or leaving ``proxy_source`` empty, clears
        both proxy fields.
        """
        try:
            try:
                product = Product.objects.select_for_update().get(id=product_id)
            except (Product.DoesNotExist, ValidationError, ValueError):
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

            if product.seller_id != user.id:
                return service_err(ErrorCodes.NOT_PRODUCT_OWNER, "You do not own this product")

            if "proxy_source" in data:
                proxy_check = self._check_proxy_source(data["proxy_source"])
                if not proxy_check.ok:
                    return proxy_check

            updated_fields = []
            for field in EDITABLE_FIELDS:
                if field in data:
                    setattr(product, field, data[field])
                    updated_fields.append(field)

            product.save()

            self.logger.info(f"Updated product: {product.name} (id={product_id}), fields={updated_fields}")
            return service_ok(product)

        except Exception as e:
            self.logger.error(f"Error updating product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    @BaseService.log_performance
    @transaction.atomic
    def delete_product(self, product_id, user: User) -> ServiceResult[bool]:
        """Delete a product (owner only). Order lines keep their snapshot."""
        try:
            try:
                product = Product.objects.get(id=product_id)
            except (Product.DoesNotExist, ValidationError, ValueError):
                return service_err(ErrorCodes.PRODUCT_NOT_FOUND, f"Product {product_id} not found")

            if product.seller_id != user.id:
                return service_err(ErrorCodes.NOT_PRODUCT_OWNER, "You do not own this product")

            product_name = product.name
            product.delete()

            self.logger.info(f"Deleted product: {product_name} (id={product_id}) by seller {user.id}")
            return service_ok(True)

        except Exception as e:
            self.logger.error(f"Error deleting product {product_id}: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

    def _check_proxy_source(self, proxy_source) -> ServiceResult[bool]:
        if proxy_source is not None and getattr(proxy_source, "role", None) != User.ROLE_WHOLESALER:
            return service_err(ErrorCodes.VALIDATION_ERROR, "Proxy source must be a wholesaler")
        return service_ok(True)
