"""
AccountService - Account and Shop Location Business Logic.

Registration, profile edits, shop location updates and account deletion.
Shop coordinates are resolved through the geocoding collaborator when the
caller does not supply them; a failed lookup leaves the seller without
coordinates, which keeps it out of proximity searches until the address is
fixed.
"""

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from infrastructure.geocoding import Coordinates, GeocoderInterface, GeocodingException

from .results import RegisterResult, Result


logger = logging.getLogger(__name__)

User = get_user_model()


class AccountService:
    """
    Account management service.

    Handles user registration, basic profile updates and shop locations.
    """

    PROFILE_FIELDS = ("name", "phone", "business_name")
    ADDRESS_FIELDS = ("address", "city", "state", "zip_code")

    def __init__(self, geocoder: GeocoderInterface):
        """
        Initialize AccountService with injected dependencies.

        Args:
            geocoder: Geocoder used to resolve shop addresses
        """
        self.geocoder = geocoder

    def register(self, data: Dict[str, Any]) -> RegisterResult:
        """
        Register a new user.

        Business Logic:
        1. Reject duplicate email or username with field-level errors
        2. Create the user with a hashed password and the requested role
        3. Resolve coordinates when an address is given without them

        Args:
            data: Validated registration fields (email, username, password,
                role, name, phone, business_name, address fields, and
                optional latitude/longitude)

        Returns:
            RegisterResult with the created user
        """
        email = (data.get("email") or "").strip().lower()
        username = (data.get("username") or "").strip() or email

        errors = {}
        if User.objects.filter(email__iexact=email).exists():
            errors["email"] = "A user with this email already exists."
        if User.objects.filter(username=username).exists():
            errors["username"] = "A user with this username already exists."
        if errors:
            return RegisterResult(success=False, errors=errors, error="Duplicate account", message="Registration failed.")

        try:
            fields = {key: data[key] for key in self.PROFILE_FIELDS + self.ADDRESS_FIELDS if data.get(key)}
            latitude = data.get("latitude")
            longitude = data.get("longitude")

            with transaction.atomic():
                user = User.objects.create_user(
                    username=username,
                    email=email,
                    password=data["password"],
                    role=data.get("role") or User.ROLE_CUSTOMER,
                    latitude=latitude,
                    longitude=longitude,
                    **fields,
                )

            geocoded = False
            if user.full_address and (latitude is None or longitude is None):
                geocoded = self._apply_geocode(user)
                user.save(update_fields=["latitude", "longitude"])

            logger.info(f"Registered user {user.id} with role {user.role}")
            return RegisterResult(success=True, user=user, geocoded=geocoded, message="Registration successful.")

        except IntegrityError as e:
            logger.warning(f"Registration conflict for {email}: {e}")
            return RegisterResult(
                success=False,
                errors={"email": "A user with this email already exists."},
                error="Duplicate account",
                message="Registration failed.",
            )
        except Exception as e:
            logger.exception(f"Registration error for email {email}: {e}")
            return RegisterResult(success=False, error=str(e), message="Registration failed. Please try again.")

    def update_profile(self, user, data: Dict[str, Any]) -> Result:
        """Update name, phone and business name."""
        try:
            updated_fields = [key for key in self.PROFILE_FIELDS if key in data]
            for key in updated_fields:
                setattr(user, key, data[key])
            if updated_fields:
                user.save(update_fields=updated_fields)

            logger.info(f"Profile updated for user {user.id}. Updated fields: {updated_fields}")
            return Result(success=True, message="Profile updated successfully.", data={"updated_fields": updated_fields})

        except Exception as e:
            logger.exception(f"Profile update error for user {user.id}: {e}")
            return Result(success=False, message="Failed to update profile.", error=str(e))

    def update_location(self, user, data: Dict[str, Any]) -> Result:
        """
        Update the shop location of a user.

        Explicit coordinates are stored as given and must come as a pair.
        Without them, a changed address is geocoded; an address that cannot
        be resolved clears the coordinates.

        Args:
            user: CustomUser instance
            data: Any of address, city, state, zip_code, latitude, longitude

        Returns:
            Result whose data holds the stored coordinates and whether the
            geocoder was used
        """
        latitude = data.get("latitude")
        longitude = data.get("longitude")
        if (latitude is None) != (longitude is None):
            return Result(
                success=False,
                message="Latitude and longitude must be provided together.",
                error="Invalid coordinates",
            )

        try:
            address_changed = False
            for key in self.ADDRESS_FIELDS:
                if key in data and data[key] != getattr(user, key):
                    setattr(user, key, data[key])
                    address_changed = True

            geocoded = False
            if latitude is not None:
                user.latitude = latitude
                user.longitude = longitude
            elif address_changed:
                geocoded = self._apply_geocode(user)

            user.save(update_fields=list(self.ADDRESS_FIELDS) + ["latitude", "longitude"])

            logger.info(
                f"Location updated for user {user.id}: "
                f"({user.latitude}, {user.longitude}) geocoded={geocoded}"
            )
            return Result(
                success=True,
                message="Location updated successfully.",
                data={"latitude": user.latitude, "longitude": user.longitude, "geocoded": geocoded},
            )

        except Exception as e:
            logger.exception(f"Location update error for user {user.id}: {e}")
            return Result(success=False, message="Failed to update location.", error=str(e))

    def delete_account(self, user) -> Result:
        """
        Permanently delete an account.

        The cart, a seller's product listings, feedback and support queries
        go with the account. Orders stay on record for their sellers with
        the customer cleared.

        Args:
            user: CustomUser instance

        Returns:
            Result whose data counts the products removed and orders kept
        """
        user_id = user.id
        try:
            with transaction.atomic():
                products_removed = user.products.count()
                orders_kept = user.orders.count()
                user.delete()

            logger.info(
                f"Deleted account {user_id}: {products_removed} products removed, {orders_kept} orders kept"
            )
            return Result(
                success=True,
                message="Account deleted successfully.",
                data={"products_removed": products_removed, "orders_kept": orders_kept},
            )

        except Exception as e:
            logger.exception(f"Account deletion error for user {user_id}: {e}")
            return Result(success=False, message="Failed to delete account.", error=str(e))

    def _apply_geocode(self, user) -> bool:
        """Set the user's coordinates from its address. Returns whether a match was found."""
        coordinates = self._geocode(user.full_address)
        if coordinates is None:
            user.latitude = None
            user.longitude = None
            return False

        user.latitude = coordinates.lat
        user.longitude = coordinates.lng
        return True

    def _geocode(self, address: str) -> Optional[Coordinates]:
        if not address:
            return None
        try:
            coordinates = self.geocoder.geocode(address)
        except GeocodingException as e:
            logger.warning(f"Geocoding failed for '{address}': {e}")
            return None

        if coordinates is None:
            logger.info(f"No geocoding match for '{address}'")
        return coordinates
