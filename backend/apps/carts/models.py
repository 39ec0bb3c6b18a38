from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from apps.catalog.models import Sku

MAX_CART_QUANTITY = 999


class CartItem(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="cart_items",
    )
    # Catalog state is never copied onto the line; it is read live on every request.
    sku = models.ForeignKey(Sku, on_delete=models.CASCADE, related_name="cart_items")
    quantity = models.PositiveIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(MAX_CART_QUANTITY)]
    )
    checked = models.BooleanField(default=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"CartItem {self.id}: user {self.user_id} sku {self.sku_id} x{self.quantity}"

    class Meta:
        db_table = "shopping_cart"
        ordering = ("-created_at", "-id")
        constraints = [
            models.UniqueConstraint(
                fields=["user", "sku"], name="unique_sku_per_user_cart"
            ),
        ]
        indexes = [
            models.Index(fields=["user", "checked"], name="cart_user_checked_idx"),
        ]
