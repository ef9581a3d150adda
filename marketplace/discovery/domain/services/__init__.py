from .geo import distance_km
from .proximity_service import NearbyShop, ShopProximityService, find_nearby

__all__ = [
    "NearbyShop",
    "ShopProximityService",
    "distance_km",
    "find_nearby",
]
