from django.contrib.auth import get_user_model
from django.core.validators import MinValueValidator
from django.db import models

from marketplace.catalog.domain.models.catalog import Product


User = get_user_model()


class Cart(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="cart")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Shopping Cart"
        verbose_name_plural = "Shopping Carts"
        app_label = "marketplace"

    def __str__(self):
        return f"Cart for {self.user.email}"


class CartItem(models.Model):
    cart = models.ForeignKey(Cart, on_delete=models.CASCADE, related_name="items")
    # Lines survive product deletion so totals can skip them instead of failing
    product = models.ForeignKey(Product, on_delete=models.SET_NULL, null=True, related_name="cart_items")
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        unique_together = ["cart", "product"]
        app_label = "marketplace"

    @property
    def line_total(self):
        if self.product is None:
            return None
        return self.quantity * self.product.price

    def __str__(self):
        name = self.product.name if self.product else "<deleted product>"
        return f"{self.quantity}x {name} in {self.cart.user.email}'s cart"
