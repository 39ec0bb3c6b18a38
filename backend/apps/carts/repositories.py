from typing import Iterable, Optional

from django.db import IntegrityError, transaction
from django.db.models import F, Sum
from django.utils import timezone

from apps.common.repository import GenericRepository
from .models import CartItem


class CartItemRepository(GenericRepository[CartItem]):
    def __init__(self):
        super().__init__(CartItem)

    def get_for_update(self, user_id: int, sku_id: int) -> Optional[CartItem]:
        """Lock the (user, sku) row for the rest of the surrounding transaction."""
        return (
            self.model.objects.select_for_update()
            .filter(user_id=user_id, sku_id=sku_id)
            .first()
        )

    def create_or_merge(self, user_id: int, sku_id: int, quantity_delta: int) -> CartItem:
        """
        Add ``quantity_delta`` to the existing line or insert a new one.

        The increment is applied with an ``F()`` expression so the database does
        the arithmetic. If a concurrent request inserts the same pair first the
        unique constraint fires and the insert is retried once as a merge.
        """
        if not self._increment(user_id, sku_id, quantity_delta):
            try:
                with transaction.atomic():
                    return self.create(user_id=user_id, sku_id=sku_id, quantity=quantity_delta)
            except IntegrityError:
                self._increment(user_id, sku_id, quantity_delta)
        return self.model.objects.get(user_id=user_id, sku_id=sku_id)

    def _increment(self, user_id: int, sku_id: int, quantity_delta: int) -> int:
        return self.model.objects.filter(user_id=user_id, sku_id=sku_id).update(
            quantity=F("quantity") + quantity_delta, updated_at=timezone.now()
        )

    def delete_by_id(self, cart_id: int, user_id: Optional[int] = None) -> bool:
        filters = {"id": cart_id}
        if user_id is not None:
            filters["user_id"] = user_id
        return self.delete_where(**filters) > 0

    def list_for_user(
        self,
        user_id: int,
        *,
        checked: Optional[bool] = None,
        sku_id: Optional[int] = None,
        ids: Optional[Iterable[int]] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ):
        qs = self.model.objects.filter(user_id=user_id)
        if checked is not None:
            qs = qs.filter(checked=checked)
        if sku_id is not None:
            qs = qs.filter(sku_id=sku_id)
        if ids is not None:
            qs = qs.filter(id__in=list(ids))
        total = qs.count()
        qs = qs.order_by("-created_at", "-id")
        if limit is not None:
            qs = qs[offset : offset + limit]
        elif offset:
            qs = qs[offset:]
        return list(qs), total

    def delete_many(self, user_id: int, checked: Optional[bool] = None) -> int:
        filters = {"user_id": user_id}
        if checked is not None:
            filters["checked"] = checked
        return self.delete_where(**filters)

    def sum_quantity(self, user_id: int) -> int:
        agg = self.model.objects.filter(user_id=user_id).aggregate(total=Sum("quantity"))
        return int(agg["total"] or 0)
