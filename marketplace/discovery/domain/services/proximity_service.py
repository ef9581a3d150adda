"""
ShopProximityService - Nearby Seller Discovery

Ranks retailers and wholesalers by distance from an origin point.
"""

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from django.contrib.auth import get_user_model

from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok

from .geo import distance_km


User = get_user_model()
logger = logging.getLogger(__name__)


@dataclass
class NearbyShop:
    seller: object
    distance_km: Optional[float] = None


def find_nearby(
    sellers: Iterable,
    origin_lat: Optional[float],
    origin_lng: Optional[float],
    radius_km: Optional[float] = None,
) -> List[NearbyShop]:
    """
    Attach distances to sellers and optionally filter and sort them.

    Without a complete origin every distance is None and the input order is
    kept untouched, radius included. With an origin, sellers lacking
    coordinates get None and sort after every measured seller; with a
    radius they are dropped along with anyone farther than ``radius_km``.
    """
    sellers = list(sellers)
    if origin_lat is None or origin_lng is None:
        return [NearbyShop(seller=seller) for seller in sellers]

    shops = []
    for seller in sellers:
        distance = distance_km(origin_lat, origin_lng, seller.latitude, seller.longitude)
        shops.append(NearbyShop(seller=seller, distance_km=None if math.isnan(distance) else distance))

    if radius_km is not None:
        shops = [shop for shop in shops if shop.distance_km is not None and shop.distance_km <= radius_km]

    # Stable sort: None last, ties keep input order
    shops.sort(key=lambda shop: (shop.distance_km is None, shop.distance_km or 0.0))
    return shops


class ShopProximityService(BaseService):
    """Lists every seller, nearest first when the caller gives a location."""

    @BaseService.log_performance
    def list_shops(
        self,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        radius_km: Optional[float] = None,
        role: Optional[str] = None,
    ) -> ServiceResult[List[NearbyShop]]:
        try:
            roles = [role] if role else list(User.SELLER_ROLES)
            sellers = User.objects.filter(role__in=roles, is_active=True).order_by("date_joined", "id")

            shops = find_nearby(sellers, lat, lng, radius_km)
            self.logger.info(f"Listed {len(shops)} shops near ({lat}, {lng}) radius={radius_km}")
            return service_ok(shops)

        except Exception as e:
            self.logger.error(f"Error listing shops: {e}", exc_info=True)
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))
