from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from apps.catalog.dtos import SkuSnapshot
from .availability import evaluate
from .dtos import CartItemDetailDTO, CartProductDTO, CartSkuDTO
from .models import CartItem
from .statistics import money


class CartSkuMapper:
    def to_dto(self, snapshot: SkuSnapshot) -> CartSkuDTO:
        return CartSkuDTO(
            id=snapshot.sku_id,
            product_id=snapshot.product_id,
            sku_code=snapshot.sku_code,
            price=snapshot.price,
            stock=snapshot.stock,
            attributes=dict(snapshot.attributes),
            active=snapshot.sku_active,
            product=CartProductDTO(
                id=snapshot.product_id,
                name=snapshot.product_name,
                main_image=snapshot.main_image,
                brand=snapshot.brand,
                active=snapshot.product_active,
            ),
        )


class CartItemMapper:
    def __init__(self, sku_mapper: Optional[CartSkuMapper] = None) -> None:
        self.sku_mapper = sku_mapper or CartSkuMapper()

    def to_dto(self, item: CartItem, snapshot: Optional[SkuSnapshot]) -> CartItemDetailDTO:
        verdict = evaluate(snapshot, item.quantity)
        total = snapshot.price * item.quantity if snapshot else Decimal("0")
        return CartItemDetailDTO(
            id=item.id,
            user_id=item.user_id,
            sku_id=item.sku_id,
            quantity=item.quantity,
            checked=bool(item.checked),
            created_at=item.created_at,
            updated_at=item.updated_at,
            sku=self.sku_mapper.to_dto(snapshot) if snapshot else None,
            total_price=money(total),
            available=verdict.available,
            unavailable_reason=verdict.reason,
        )

    def many_to_dto(
        self, items: Iterable[CartItem], snapshots: Dict[int, SkuSnapshot]
    ) -> List[CartItemDetailDTO]:
        return [self.to_dto(i, snapshots.get(i.sku_id)) for i in items]
