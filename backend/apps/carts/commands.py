from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import CartValidationError
from .models import MAX_CART_QUANTITY

BATCH_ACTIONS = ("delete", "check", "uncheck")


def parse_quantity(raw: Any, *, field_name: str = "quantity") -> int:
    """Coerce a quantity and enforce the 1..MAX_CART_QUANTITY bounds."""
    if isinstance(raw, bool):
        raise CartValidationError(f"{field_name} must be an integer")
    try:
        qty = int(raw)
    except (ValueError, TypeError):
        raise CartValidationError(f"{field_name} must be an integer")
    if isinstance(raw, float) and raw != qty:
        raise CartValidationError(f"{field_name} must be an integer")
    if qty < 1 or qty > MAX_CART_QUANTITY:
        raise CartValidationError(
            f"{field_name} must be between 1 and {MAX_CART_QUANTITY}",
            details={field_name: qty, "max": MAX_CART_QUANTITY},
        )
    return qty


def parse_checked(raw: Any) -> bool:
    # The original API stored checked as 0/1, so accept both shapes
    if isinstance(raw, bool):
        return raw
    if raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str) and raw.strip().lower() in ("0", "1", "true", "false"):
        return raw.strip().lower() in ("1", "true")
    raise CartValidationError("checked must be a boolean")


def parse_id(raw: Any, *, field_name: str) -> int:
    if isinstance(raw, bool):
        raise CartValidationError(f"{field_name} must be an integer")
    try:
        value = int(raw)
    except (ValueError, TypeError):
        raise CartValidationError(f"{field_name} must be an integer")
    if value < 1:
        raise CartValidationError(f"{field_name} must be positive")
    return value


def _pick(payload: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


@dataclass
class AddToCartCommand:
    user_id: int
    sku_id: int
    quantity: int

    @staticmethod
    def create(user_id: Any, sku_id: Any, quantity: Any) -> "AddToCartCommand":
        return AddToCartCommand(
            user_id=parse_id(user_id, field_name="userId"),
            sku_id=parse_id(sku_id, field_name="skuId"),
            quantity=parse_quantity(quantity),
        )


@dataclass
class UpdateCartItemCommand:
    cart_id: int
    quantity: Optional[int] = None
    checked: Optional[bool] = None

    @staticmethod
    def from_raw(cart_id: int, payload: Dict[str, Any]) -> "UpdateCartItemCommand":
        if not isinstance(payload, dict):
            raise CartValidationError("Payload must be an object")
        raw_qty = payload.get("quantity")
        raw_checked = payload.get("checked")
        if raw_qty is None and raw_checked is None:
            raise CartValidationError("At least one of quantity or checked is required")
        return UpdateCartItemCommand(
            cart_id=cart_id,
            quantity=parse_quantity(raw_qty) if raw_qty is not None else None,
            checked=parse_checked(raw_checked) if raw_checked is not None else None,
        )

    def changes(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.quantity is not None:
            out["quantity"] = self.quantity
        if self.checked is not None:
            out["checked"] = self.checked
        return out


@dataclass
class BatchCartCommand:
    ids: List[int]
    action: str

    @staticmethod
    def create(ids: Any, action: Any) -> "BatchCartCommand":
        if action not in BATCH_ACTIONS:
            raise CartValidationError(
                "action must be one of delete, check or uncheck",
                details={"action": action},
            )
        if ids is None:
            ids = []
        if not isinstance(ids, (list, tuple, set)):
            raise CartValidationError("ids must be a list")
        parsed = [parse_id(raw, field_name="ids") for raw in ids]
        return BatchCartCommand(ids=parsed, action=action)


@dataclass
class CartListQuery:
    user_id: int
    page: int = 1
    size: int = 20
    checked: Optional[bool] = None
    sku_id: Optional[int] = None

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @staticmethod
    def from_raw(
        user_id: int, params: Dict[str, Any], *, default_size: int = 20, max_size: int = 100
    ) -> "CartListQuery":
        raw_page = _pick(params, "page")
        raw_size = _pick(params, "size", "limit")
        raw_checked = _pick(params, "checked")
        raw_sku = _pick(params, "skuId", "sku_id")
        page = parse_id(raw_page, field_name="page") if raw_page is not None else 1
        size = parse_id(raw_size, field_name="size") if raw_size is not None else default_size
        if size > max_size:
            raise CartValidationError(f"size must not exceed {max_size}")
        return CartListQuery(
            user_id=user_id,
            page=page,
            size=size,
            checked=parse_checked(raw_checked) if raw_checked is not None else None,
            sku_id=parse_id(raw_sku, field_name="skuId") if raw_sku is not None else None,
        )


@dataclass
class ValidateCartCommand:
    user_id: int
    cart_ids: List[int] = field(default_factory=list)

    @staticmethod
    def from_raw(user_id: int, payload: Optional[Dict[str, Any]]) -> "ValidateCartCommand":
        raw_ids = _pick(payload or {}, "cartIds", "cart_ids") or []
        if not isinstance(raw_ids, (list, tuple)):
            raise CartValidationError("cartIds must be a list")
        return ValidateCartCommand(
            user_id=user_id,
            cart_ids=[parse_id(raw, field_name="cartIds") for raw in raw_ids],
        )
