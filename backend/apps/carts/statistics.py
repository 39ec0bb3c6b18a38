from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, Optional

from apps.catalog.dtos import SkuSnapshot
from apps.common import get_logger

from .availability import evaluate
from .dtos import CartStatisticsDTO
from .protocols import CatalogSnapshotProviderProtocol

logger = get_logger(__name__).bind(component="carts", layer="statistics")

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class StatisticsAggregator:
    """Folds cart lines and their live snapshots into quantity-weighted totals."""

    def __init__(self, catalog: CatalogSnapshotProviderProtocol):
        self.catalog = catalog
        self.logger = logger.bind(service="StatisticsAggregator")

    def compute(
        self,
        items: Iterable,
        checked: Optional[bool] = None,
        snapshots: Optional[Dict[int, SkuSnapshot]] = None,
    ) -> CartStatisticsDTO:
        """
        Aggregate ``items`` (anything with ``sku_id``, ``quantity`` and ``checked``).

        When ``checked`` is given only lines with that flag are counted.
        Snapshots are fetched in one batch unless the caller already has them.
        A line whose SKU no longer resolves still counts toward the item totals,
        adds nothing to the price sums and is reported as unavailable.
        """
        lines = [i for i in items if checked is None or bool(i.checked) == checked]
        if snapshots is None:
            snapshots = self.catalog.get_sku_snapshots({i.sku_id for i in lines})

        stats = CartStatisticsDTO()
        total_price = Decimal("0")
        checked_price = Decimal("0")
        missing = 0
        for item in lines:
            qty = int(item.quantity)
            snapshot = snapshots.get(item.sku_id)
            stats.total_items += qty
            if item.checked:
                stats.checked_items += qty
            if snapshot is not None:
                line_price = snapshot.price * qty
                total_price += line_price
                if item.checked:
                    checked_price += line_price
            else:
                missing += 1
            if evaluate(snapshot, qty).available:
                stats.available_items += qty
            else:
                stats.unavailable_items += qty

        stats.total_price = money(total_price)
        stats.checked_price = money(checked_price)
        if missing:
            self.logger.warning("Cart lines reference unknown SKUs", missing=missing)
        return stats
