from typing import Dict, Iterable, Optional

from apps.common.repository import GenericRepository
from .dtos import SkuSnapshot
from .models import Sku


class SkuSnapshotRepository(GenericRepository[Sku]):
    """Reads live SKU/product state for the cart. Stock is never written here."""

    def __init__(self):
        super().__init__(Sku)

    def _base_queryset(self):
        return self.model.objects.select_related("product")

    def get_sku_snapshot(self, sku_id: int) -> Optional[SkuSnapshot]:
        sku = self._base_queryset().filter(id=sku_id).first()
        return self.to_snapshot(sku) if sku else None

    def get_sku_snapshots(self, sku_ids: Iterable[int]) -> Dict[int, SkuSnapshot]:
        """Resolve many SKUs with a single query; unknown ids are simply absent."""
        wanted = {int(s) for s in sku_ids}
        if not wanted:
            return {}
        return {
            sku.id: self.to_snapshot(sku)
            for sku in self._base_queryset().filter(id__in=wanted)
        }

    @staticmethod
    def to_snapshot(sku: Sku) -> SkuSnapshot:
        product = sku.product
        return SkuSnapshot(
            sku_id=sku.id,
            product_id=sku.product_id,
            price=sku.price,
            stock=sku.stock,
            sku_active=sku.is_active,
            product_active=product.is_active,
            product_name=product.name,
            sku_code=sku.sku_code,
            main_image=product.main_image or "",
            brand=product.brand or "",
            attributes=dict(sku.attributes or {}),
        )
