from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, Tuple, TYPE_CHECKING

from .models import CartItem

if TYPE_CHECKING:
    from apps.catalog.dtos import SkuSnapshot
    from apps.carts.dtos import CartItemDetailDTO


class CatalogSnapshotProviderProtocol(Protocol):
    def get_sku_snapshot(self, sku_id: int) -> Optional["SkuSnapshot"]:
        ...

    def get_sku_snapshots(self, sku_ids: Iterable[int]) -> Dict[int, "SkuSnapshot"]:
        ...


class CartItemRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[CartItem]:
        ...

    def get_for_update(self, user_id: int, sku_id: int) -> Optional[CartItem]:
        ...

    def create_or_merge(self, user_id: int, sku_id: int, quantity_delta: int) -> CartItem:
        ...

    def update(self, item: CartItem, **fields) -> CartItem:
        ...

    def delete_by_id(self, cart_id: int, user_id: Optional[int] = None) -> bool:
        ...

    def list_for_user(
        self,
        user_id: int,
        *,
        checked: Optional[bool] = None,
        sku_id: Optional[int] = None,
        ids: Optional[Iterable[int]] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[List[CartItem], int]:
        ...

    def delete_many(self, user_id: int, checked: Optional[bool] = None) -> int:
        ...

    def sum_quantity(self, user_id: int) -> int:
        ...


class CartItemMapperProtocol(Protocol):
    def to_dto(self, item: CartItem, snapshot: Optional["SkuSnapshot"]) -> "CartItemDetailDTO":
        ...

    def many_to_dto(
        self, items: Iterable[CartItem], snapshots: Dict[int, "SkuSnapshot"]
    ) -> List["CartItemDetailDTO"]:
        ...
