"""Cart failures. Each carries a stable code; the API layer decides the HTTP status."""
from __future__ import annotations

from typing import Any, Dict, Optional

from apps.api.exceptions import ApplicationError


class CartError(ApplicationError):
    code = "CART_ERROR"
    default_message = "Cart operation failed"

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(self.code, message or self.default_message, details=details)


class CartValidationError(CartError):
    code = "VALIDATION_ERROR"
    default_message = "Invalid cart request"


class CartItemNotFoundError(CartError):
    code = "NOT_FOUND"
    default_message = "Cart item not found"

    def __init__(self, cart_id: Any):
        super().__init__(details={"id": str(cart_id)})
        self.cart_id = cart_id


class SkuOfflineError(CartError):
    code = "SKU_OFFLINE"
    default_message = "SKU does not exist or is no longer on sale"

    def __init__(self, sku_id: Any):
        super().__init__(details={"skuId": str(sku_id)})
        self.sku_id = sku_id


class ProductOfflineError(CartError):
    code = "PRODUCT_OFFLINE"
    default_message = "Product is no longer on sale"

    def __init__(self, sku_id: Any, product_id: Any = None):
        details = {"skuId": str(sku_id)}
        if product_id is not None:
            details["productId"] = str(product_id)
        super().__init__(details=details)
        self.sku_id = sku_id
        self.product_id = product_id


class InsufficientStockError(CartError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, current_stock: int, *, requested_quantity: Optional[int] = None):
        details: Dict[str, Any] = {"currentStock": current_stock}
        if requested_quantity is not None:
            details["requestedQuantity"] = requested_quantity
        super().__init__(
            f"Insufficient stock, current stock: {current_stock}", details=details
        )
        self.current_stock = current_stock
        self.requested_quantity = requested_quantity


class OutOfStockError(InsufficientStockError):
    """Nothing left at all. Still an insufficient-stock failure for callers catching that."""

    code = "OUT_OF_STOCK"
    default_message = "Out of stock"

    def __init__(self, sku_id: Any, *, requested_quantity: Optional[int] = None):
        details: Dict[str, Any] = {"skuId": str(sku_id), "currentStock": 0}
        if requested_quantity is not None:
            details["requestedQuantity"] = requested_quantity
        CartError.__init__(self, details=details)
        self.current_stock = 0
        self.requested_quantity = requested_quantity
        self.sku_id = sku_id
