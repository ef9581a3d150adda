import uuid

from django.contrib.auth.models import AbstractUser
from django.db import models


class CustomUser(AbstractUser):
    ROLE_CUSTOMER = "customer"
    ROLE_RETAILER = "retailer"
    ROLE_WHOLESALER = "wholesaler"

    ROLE_CHOICES = [
        (ROLE_CUSTOMER, "Customer"),
        (ROLE_RETAILER, "Retailer"),
        (ROLE_WHOLESALER, "Wholesaler"),
    ]

    SELLER_ROLES = (ROLE_RETAILER, ROLE_WHOLESALER)

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=20, blank=True)

    # Role system - simple field
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)
    business_name = models.CharField(max_length=200, blank=True)

    # Shop location (coordinates are optional; sellers without them are invisible to geo queries)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=100, blank=True)
    state = models.CharField(max_length=100, blank=True)
    zip_code = models.CharField(max_length=20, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username"]

    class Meta:
        indexes = [
            models.Index(fields=["role"], name="user_role_idx"),
        ]

    def __str__(self):
        return self.email

    @property
    def is_seller(self) -> bool:
        return self.role in self.SELLER_ROLES

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def display_name(self) -> str:
        return self.business_name or self.name or self.email

    @property
    def full_address(self) -> str:
        """Single-line address suitable for geocoding."""
        parts = [self.address, self.city, self.state, self.zip_code]
        return ", ".join(part for part in parts if part)
