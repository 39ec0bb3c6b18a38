import logging
import unittest
from decimal import Decimal

from apps.common.logger import AppLogger, get_logger


class AppLoggerTests(unittest.TestCase):
    def test_bind_merges_context_without_mutating_parent(self):
        parent = get_logger("apps.tests").bind(component="carts")
        child = parent.bind(service="CartService")
        self.assertEqual(parent.context, {"component": "carts"})
        self.assertEqual(child.context, {"component": "carts", "service": "CartService"})

    def test_format_renders_decimal_and_lists_plainly(self):
        rendered = AppLogger._format(
            "Totals", {"price": Decimal("12.50"), "ids": [1, 2], "sku": None}
        )
        self.assertEqual(rendered, "Totals | price=12.50 ids=[1,2] sku=None")

    def test_log_emits_context_suffix(self):
        log = get_logger("apps.tests.emit").bind(component="carts")
        with self.assertLogs("apps.tests.emit", level=logging.INFO) as captured:
            log.info("Cart cleared", user_id=7, removed=3)
        self.assertIn("Cart cleared | component=carts user_id=7 removed=3", captured.output[0])
