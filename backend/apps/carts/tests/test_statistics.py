import unittest
from decimal import Decimal

from apps.carts.statistics import StatisticsAggregator, money
from .fakes import FakeCatalog, StubCartItem, make_snapshot


class StatisticsAggregatorTests(unittest.TestCase):
    def setUp(self):
        self.catalog = FakeCatalog(make_snapshot(1, price="10.00", stock=50))
        self.aggregator = StatisticsAggregator(self.catalog)
        self.items = [
            StubCartItem(1, 5, 1, 2, checked=True),
            StubCartItem(2, 5, 1, 5, checked=False),
        ]

    def test_totals_are_quantity_weighted(self):
        stats = self.aggregator.compute(self.items)
        self.assertEqual(stats.total_items, 7)
        self.assertEqual(stats.checked_items, 2)
        self.assertEqual(stats.total_price, Decimal("70.00"))
        self.assertEqual(stats.checked_price, Decimal("20.00"))
        self.assertEqual(stats.available_items, 7)
        self.assertEqual(stats.unavailable_items, 0)
        self.assertEqual(self.catalog.batch_calls, 1)

    def test_checked_filter_limits_lines(self):
        stats = self.aggregator.compute(self.items, checked=False)
        self.assertEqual(stats.total_items, 5)
        self.assertEqual(stats.checked_items, 0)
        self.assertEqual(stats.total_price, Decimal("50.00"))

    def test_preloaded_snapshots_skip_catalog(self):
        self.aggregator.compute(self.items, snapshots=dict(self.catalog.snapshots))
        self.assertEqual(self.catalog.batch_calls, 0)

    def test_unknown_and_short_lines_count_as_unavailable(self):
        self.catalog.put(make_snapshot(2, price="3.00", stock=1))
        items = [StubCartItem(1, 5, 2, 4), StubCartItem(2, 5, 99, 3)]
        stats = self.aggregator.compute(items)
        self.assertEqual(stats.total_items, 7)
        self.assertEqual(stats.unavailable_items, 7)
        self.assertEqual(stats.total_price, Decimal("12.00"))

    def test_empty_cart(self):
        stats = self.aggregator.compute([])
        self.assertEqual(stats.total_items, 0)
        self.assertEqual(stats.total_price, Decimal("0.00"))


def test_money_rounds_half_up():
    assert money(Decimal("2.005")) == Decimal("2.01")
    assert money(Decimal("7")) == Decimal("7.00")
