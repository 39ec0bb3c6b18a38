from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from django.db import transaction

from apps.catalog.dtos import SkuSnapshot
from apps.common import get_logger
from .availability import UNKNOWN_PRODUCT_NAME, evaluate, to_error
from .commands import (
    AddToCartCommand,
    BatchCartCommand,
    CartListQuery,
    UpdateCartItemCommand,
    ValidateCartCommand,
)
from .dtos import (
    BatchItemResultDTO,
    BatchResultDTO,
    CartItemDetailDTO,
    CartListDTO,
    CartStatisticsDTO,
    CartValidationDTO,
    InvalidCartItemDTO,
)
from .errors import (
    CartError,
    CartItemNotFoundError,
    CartValidationError,
    InsufficientStockError,
    SkuOfflineError,
)
from .models import MAX_CART_QUANTITY, CartItem
from .protocols import (
    CartItemMapperProtocol,
    CartItemRepositoryProtocol,
    CatalogSnapshotProviderProtocol,
)
from .statistics import StatisticsAggregator

logger = get_logger(__name__).bind(component="carts", layer="service")


class CartService:
    def __init__(
        self,
        cart_items: CartItemRepositoryProtocol,
        catalog: CatalogSnapshotProviderProtocol,
        cart_item_mapper: CartItemMapperProtocol,
        statistics: Optional[StatisticsAggregator] = None,
        *,
        default_page_size: int = 20,
        max_page_size: int = 100,
    ):
        self.cart_items = cart_items
        self.catalog = catalog
        self.cart_item_mapper = cart_item_mapper
        self.statistics = statistics or StatisticsAggregator(catalog)
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.logger = logger.bind(service="CartService")

    # --- single line operations ---

    def add_to_cart(self, user_id: int, sku_id: int, quantity: int) -> CartItemDetailDTO:
        """
        Add ``quantity`` of a SKU to the user's cart, merging into an existing line.

        The merged total, not the delta, is checked against live stock. On any
        failure the existing line is left exactly as it was.
        """
        command = AddToCartCommand.create(user_id, sku_id, quantity)
        self.logger.info(
            "Adding to cart",
            user_id=command.user_id,
            sku_id=command.sku_id,
            quantity=command.quantity,
        )
        with transaction.atomic():
            snapshot = self.catalog.get_sku_snapshot(command.sku_id)
            existing = self.cart_items.get_for_update(command.user_id, command.sku_id)
            current = existing.quantity if existing else 0
            merged = current + command.quantity
            self._ensure_orderable(snapshot, command.sku_id, merged, user_id=command.user_id)
            if merged > MAX_CART_QUANTITY:
                self.logger.warning(
                    "Add to cart rejected: quantity cap exceeded",
                    user_id=command.user_id,
                    sku_id=command.sku_id,
                    merged=merged,
                )
                raise CartValidationError(
                    f"quantity must be between 1 and {MAX_CART_QUANTITY}",
                    details={"quantity": merged, "inCart": current, "max": MAX_CART_QUANTITY},
                )
            item = self.cart_items.create_or_merge(
                command.user_id, command.sku_id, command.quantity
            )
            if item.quantity != merged:
                # Another request merged into the same line meanwhile; raising here
                # rolls the whole block back.
                self._ensure_orderable(
                    snapshot, command.sku_id, item.quantity, user_id=command.user_id
                )
        self.logger.info(
            "Cart line saved",
            cart_id=item.id,
            user_id=command.user_id,
            sku_id=command.sku_id,
            quantity=item.quantity,
            merged=existing is not None,
        )
        return self.cart_item_mapper.to_dto(item, snapshot)

    def get_cart_item(self, cart_id: int, user_id: Optional[int] = None) -> CartItemDetailDTO:
        item = self._get_item(cart_id, user_id)
        snapshot = self.catalog.get_sku_snapshot(item.sku_id)
        return self.cart_item_mapper.to_dto(item, snapshot)

    def update_cart_item(
        self, cart_id: int, data: Dict[str, Any], user_id: Optional[int] = None
    ) -> CartItemDetailDTO:
        """Replace the quantity and/or flip the checked flag of one line."""
        command = UpdateCartItemCommand.from_raw(cart_id, data)
        self.logger.info(
            "Updating cart item",
            cart_id=cart_id,
            user_id=user_id,
            quantity=command.quantity,
            checked=command.checked,
        )
        snapshot: Optional[SkuSnapshot] = None
        with transaction.atomic():
            item = self._get_item(cart_id, user_id)
            if command.quantity is not None:
                snapshot = self.catalog.get_sku_snapshot(item.sku_id)
                self._ensure_stock(snapshot, item.sku_id, command.quantity, user_id=item.user_id)
            item = self.cart_items.update(item, **command.changes())
        if snapshot is None:
            snapshot = self.catalog.get_sku_snapshot(item.sku_id)
        self.logger.info("Cart item updated", cart_id=cart_id, quantity=item.quantity)
        return self.cart_item_mapper.to_dto(item, snapshot)

    def delete_cart_item(self, cart_id: int, user_id: Optional[int] = None) -> bool:
        """Hard delete one line. Returns False (never raises) when it does not exist."""
        deleted = self.cart_items.delete_by_id(cart_id, user_id=user_id)
        if deleted:
            self.logger.info("Cart item deleted", cart_id=cart_id, user_id=user_id)
        else:
            self.logger.debug("Cart item already absent", cart_id=cart_id, user_id=user_id)
        return deleted

    # --- bulk operations ---

    def batch_operate(
        self, ids: Optional[List[Any]], action: str, user_id: Optional[int] = None
    ) -> BatchResultDTO:
        """
        Apply delete/check/uncheck to every id independently.

        A failing id never aborts the batch: its error is logged and tallied.
        """
        command = BatchCartCommand.create(ids, action)
        result = BatchResultDTO()
        if not command.ids:
            return result
        self.logger.info(
            "Running cart batch", action=command.action, count=len(command.ids), user_id=user_id
        )
        for cart_id in command.ids:
            try:
                self._apply_batch_action(cart_id, command.action, user_id)
            except CartError as exc:
                self.logger.warning(
                    "Batch item failed", cart_id=cart_id, action=command.action, code=exc.code
                )
                result.failed += 1
                result.details.append(BatchItemResultDTO(id=cart_id, success=False, error=exc.message))
            except Exception as exc:
                self.logger.exception(
                    "Batch item failed unexpectedly", cart_id=cart_id, action=command.action
                )
                result.failed += 1
                result.details.append(
                    BatchItemResultDTO(id=cart_id, success=False, error=exc.__class__.__name__)
                )
            else:
                result.success += 1
                result.details.append(BatchItemResultDTO(id=cart_id, success=True))
        self.logger.info(
            "Cart batch finished",
            action=command.action,
            success=result.success,
            failed=result.failed,
        )
        return result

    def clear_cart(self, user_id: int, checked_only: bool = False) -> int:
        removed = self.cart_items.delete_many(user_id, checked=True if checked_only else None)
        self.logger.info(
            "Cart cleared", user_id=user_id, checked_only=checked_only, removed=removed
        )
        return removed

    # --- read side ---

    def get_cart_count(self, user_id: int) -> int:
        return self.cart_items.sum_quantity(user_id)

    def get_cart_statistics(
        self, user_id: int, checked: Optional[bool] = None
    ) -> CartStatisticsDTO:
        items, _total = self.cart_items.list_for_user(user_id)
        return self.statistics.compute(items, checked=checked)

    def validate_cart(
        self, user_id: int, cart_ids: Optional[Iterable[Any]] = None
    ) -> CartValidationDTO:
        """
        Check the user's whole cart, or only the listed lines, against live state.

        Ids that do not belong to the user are ignored.
        """
        command = ValidateCartCommand.from_raw(user_id, {"cartIds": list(cart_ids or [])})
        items, _total = self.cart_items.list_for_user(
            user_id, ids=command.cart_ids or None
        )
        snapshots = self.catalog.get_sku_snapshots({i.sku_id for i in items})
        report = self._build_report(items, snapshots)
        self.logger.debug(
            "Cart validated",
            user_id=user_id,
            checked_lines=len(items),
            invalid=len(report.invalid_items),
        )
        return report

    def list_cart(self, user_id: int, params: Optional[Dict[str, Any]] = None) -> CartListDTO:
        """Page of hydrated lines plus statistics and validation for the whole cart."""
        query = CartListQuery.from_raw(
            user_id,
            params or {},
            default_size=self.default_page_size,
            max_size=self.max_page_size,
        )
        self.logger.debug(
            "Listing cart",
            user_id=user_id,
            page=query.page,
            size=query.size,
            checked=query.checked,
            sku_id=query.sku_id,
        )
        all_items, _count = self.cart_items.list_for_user(user_id)
        page_items, total = self.cart_items.list_for_user(
            user_id,
            checked=query.checked,
            sku_id=query.sku_id,
            offset=query.offset,
            limit=query.size,
        )
        snapshots = self.catalog.get_sku_snapshots({i.sku_id for i in all_items})
        return CartListDTO(
            items=self.cart_item_mapper.many_to_dto(page_items, snapshots),
            total=total,
            page=query.page,
            size=query.size,
            statistics=self.statistics.compute(
                all_items, checked=query.checked, snapshots=snapshots
            ),
            validation=self._build_report(all_items, snapshots),
        )

    # --- helpers ---

    def _get_item(self, cart_id: int, user_id: Optional[int]) -> CartItem:
        filters: Dict[str, Any] = {"id": cart_id}
        if user_id is not None:
            filters["user_id"] = user_id
        item = self.cart_items.get(**filters)
        if not item:
            self.logger.info("Cart item not found", cart_id=cart_id, user_id=user_id)
            raise CartItemNotFoundError(cart_id)
        return item

    def _ensure_orderable(
        self,
        snapshot: Optional[SkuSnapshot],
        sku_id: int,
        quantity: int,
        *,
        user_id: Optional[int] = None,
    ) -> None:
        verdict = evaluate(snapshot, quantity)
        if verdict.available:
            return
        self.logger.warning(
            "Cart change rejected by catalog state",
            user_id=user_id,
            sku_id=sku_id,
            quantity=quantity,
            reason=verdict.reason,
            stock=snapshot.stock if snapshot else None,
        )
        raise to_error(verdict, sku_id, snapshot, quantity)

    def _ensure_stock(
        self,
        snapshot: Optional[SkuSnapshot],
        sku_id: int,
        quantity: int,
        *,
        user_id: Optional[int] = None,
    ) -> None:
        """
        Quantity edits on an existing line only need the SKU to resolve and
        enough stock. Offline products and SKUs surface through validate_cart.
        """
        if snapshot is None:
            error: CartError = SkuOfflineError(sku_id)
        elif snapshot.stock < quantity:
            error = InsufficientStockError(snapshot.stock, requested_quantity=quantity)
        else:
            return
        self.logger.warning(
            "Cart quantity change rejected",
            user_id=user_id,
            sku_id=sku_id,
            quantity=quantity,
            code=error.code,
            stock=snapshot.stock if snapshot else None,
        )
        raise error

    def _apply_batch_action(self, cart_id: int, action: str, user_id: Optional[int]) -> None:
        if action == "delete":
            if not self.delete_cart_item(cart_id, user_id=user_id):
                raise CartItemNotFoundError(cart_id)
            return
        self.update_cart_item(cart_id, {"checked": action == "check"}, user_id=user_id)

    @staticmethod
    def _build_report(
        items: List[CartItem], snapshots: Dict[int, SkuSnapshot]
    ) -> CartValidationDTO:
        invalid: List[InvalidCartItemDTO] = []
        for item in items:
            snapshot = snapshots.get(item.sku_id)
            verdict = evaluate(snapshot, item.quantity)
            if verdict.available:
                continue
            entry = InvalidCartItemDTO(
                cart_id=item.id,
                sku_id=item.sku_id,
                product_name=snapshot.product_name if snapshot else UNKNOWN_PRODUCT_NAME,
                reason=verdict.reason,
            )
            if verdict.stock_related:
                entry.current_stock = snapshot.stock
                entry.requested_quantity = item.quantity
            invalid.append(entry)
        return CartValidationDTO(valid=not invalid, invalid_items=invalid)
