from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict


@dataclass(frozen=True)
class SkuSnapshot:
    """Read-time projection of a SKU and its product. Never stored on a cart line."""

    sku_id: int
    product_id: int
    price: Decimal
    stock: int
    sku_active: bool
    product_active: bool
    product_name: str
    sku_code: str = ""
    main_image: str = ""
    brand: str = ""
    attributes: Dict[str, Any] = field(default_factory=dict)
