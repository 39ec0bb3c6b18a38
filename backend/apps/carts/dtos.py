from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass
class CartProductDTO:
    id: int
    name: str
    main_image: str
    brand: str
    active: bool


@dataclass
class CartSkuDTO:
    id: int
    product_id: int
    sku_code: str
    price: Decimal
    stock: int
    attributes: Dict[str, Any]
    active: bool
    product: CartProductDTO


@dataclass
class CartItemDetailDTO:
    id: int
    user_id: int
    sku_id: int
    quantity: int
    checked: bool
    created_at: datetime
    updated_at: datetime
    sku: Optional[CartSkuDTO]
    total_price: Decimal
    available: bool
    unavailable_reason: Optional[str] = None


@dataclass
class CartStatisticsDTO:
    total_items: int = 0
    checked_items: int = 0
    total_price: Decimal = Decimal("0.00")
    checked_price: Decimal = Decimal("0.00")
    available_items: int = 0
    unavailable_items: int = 0


@dataclass
class InvalidCartItemDTO:
    cart_id: int
    sku_id: int
    product_name: str
    reason: str
    current_stock: Optional[int] = None
    requested_quantity: Optional[int] = None


@dataclass
class CartValidationDTO:
    valid: bool
    invalid_items: List[InvalidCartItemDTO] = field(default_factory=list)


@dataclass
class BatchItemResultDTO:
    id: int
    success: bool
    error: Optional[str] = None


@dataclass
class BatchResultDTO:
    success: int = 0
    failed: int = 0
    details: List[BatchItemResultDTO] = field(default_factory=list)


@dataclass
class CartListDTO:
    items: List[CartItemDetailDTO]
    total: int
    page: int
    size: int
    statistics: CartStatisticsDTO
    validation: CartValidationDTO


"""DTO dataclasses only. Mapping logic lives in mappers.py."""
