import unittest
from rest_framework import status
from apps.api.utils import error_response, status_for_code


class ErrorResponseTests(unittest.TestCase):
    def test_default_status_mapping_and_details(self):
        resp = error_response("NOT_FOUND", "missing", {"id": 1})
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["code"], "NOT_FOUND")
        self.assertEqual(resp.data["error"]["status"], status.HTTP_404_NOT_FOUND)
        self.assertEqual(resp.data["error"]["details"], {"id": 1})

    def test_custom_status_override(self):
        resp = error_response("UNKNOWN", "oops", http_status=status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(resp.data["error"]["message"], "oops")

    def test_stock_codes_map_to_conflict(self):
        for code in ("insufficient_stock", "OUT_OF_STOCK", "SKU_OFFLINE", "PRODUCT_OFFLINE"):
            self.assertEqual(status_for_code(code), status.HTTP_409_CONFLICT)

    def test_unknown_code_falls_back_to_bad_request(self):
        resp = error_response("weird_thing", "Odd")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(resp.data["error"]["code"], "WEIRD_THING")

    def test_hint_is_included(self):
        resp = error_response(
            "INSUFFICIENT_STOCK",
            "Insufficient stock, current stock: 2",
            {"currentStock": 2},
            hint="Lower the quantity",
        )
        payload = resp.data["error"]
        self.assertEqual(payload["hint"], "Lower the quantity")
        self.assertEqual(payload["details"], {"currentStock": 2})

    def test_blank_message_rejected(self):
        with self.assertRaises(ValueError):
            error_response("NOT_FOUND", "   ")
