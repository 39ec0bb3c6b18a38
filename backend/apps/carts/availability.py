"""
Availability of a cart line against live catalog state.

The checks run in a fixed order and the first match wins, so a SKU that is
both offline and out of stock always reports ``sku_offline``:

1. snapshot missing or SKU inactive    -> ``sku_offline``
2. product inactive                    -> ``product_offline``
3. no stock left                       -> ``out_of_stock``
4. stock below the requested quantity  -> ``insufficient_stock``
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from apps.catalog.dtos import SkuSnapshot

from .errors import (
    CartError,
    InsufficientStockError,
    OutOfStockError,
    ProductOfflineError,
    SkuOfflineError,
)

SKU_OFFLINE = "sku_offline"
PRODUCT_OFFLINE = "product_offline"
OUT_OF_STOCK = "out_of_stock"
INSUFFICIENT_STOCK = "insufficient_stock"

STOCK_REASONS = (OUT_OF_STOCK, INSUFFICIENT_STOCK)

UNKNOWN_PRODUCT_NAME = "Unknown product"


@dataclass(frozen=True)
class AvailabilityResult:
    available: bool
    reason: Optional[str] = None

    @property
    def stock_related(self) -> bool:
        return self.reason in STOCK_REASONS


AVAILABLE = AvailabilityResult(available=True)


def evaluate(snapshot: Optional[SkuSnapshot], requested_quantity: int) -> AvailabilityResult:
    if snapshot is None or not snapshot.sku_active:
        return AvailabilityResult(False, SKU_OFFLINE)
    if not snapshot.product_active:
        return AvailabilityResult(False, PRODUCT_OFFLINE)
    if snapshot.stock <= 0:
        return AvailabilityResult(False, OUT_OF_STOCK)
    if snapshot.stock < requested_quantity:
        return AvailabilityResult(False, INSUFFICIENT_STOCK)
    return AVAILABLE


def to_error(
    result: AvailabilityResult,
    sku_id: int,
    snapshot: Optional[SkuSnapshot],
    requested_quantity: int,
) -> Optional[CartError]:
    """Translate a negative verdict into the error a mutating call should raise."""
    if result.available:
        return None
    if result.reason == SKU_OFFLINE:
        return SkuOfflineError(sku_id)
    if result.reason == PRODUCT_OFFLINE:
        return ProductOfflineError(sku_id, snapshot.product_id if snapshot else None)
    if result.reason == OUT_OF_STOCK:
        return OutOfStockError(sku_id, requested_quantity=requested_quantity)
    return InsufficientStockError(
        snapshot.stock if snapshot else 0, requested_quantity=requested_quantity
    )
