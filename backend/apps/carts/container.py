from __future__ import annotations

from django.conf import settings

from apps.catalog.repositories import SkuSnapshotRepository

from .mappers import CartItemMapper, CartSkuMapper
from .repositories import CartItemRepository
from .services import CartService
from .statistics import StatisticsAggregator


def build_cart_service() -> CartService:
    catalog = SkuSnapshotRepository()
    return CartService(
        cart_items=CartItemRepository(),
        catalog=catalog,
        cart_item_mapper=CartItemMapper(CartSkuMapper()),
        statistics=StatisticsAggregator(catalog),
        default_page_size=getattr(settings, "CART_DEFAULT_PAGE_SIZE", 20),
        max_page_size=getattr(settings, "CART_MAX_PAGE_SIZE", 100),
    )
