from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.test import APITestCase

from apps.carts.models import CartItem
from apps.catalog.models import Product, Sku

LIST_URL = "/api/shopping-cart/"


def detail_url(cart_id):
    return f"{LIST_URL}{cart_id}/"


class TestShoppingCart(APITestCase):
    def setUp(self):
        User = get_user_model()
        self.user = User.objects.create_user(username="shopper", password="TestPass123")
        self.other = User.objects.create_user(username="other", password="TestPass123")
        self.product = Product.objects.create(name="Trail Shoe", brand="Peak")
        self.sku = Sku.objects.create(
            product=self.product,
            sku_code="TS-42",
            price=Decimal("25.00"),
            stock=3,
            attributes={"size": "42"},
        )
        self.cheap = Sku.objects.create(
            product=self.product, sku_code="TS-43", price=Decimal("10.00"), stock=50
        )
        self.client.force_authenticate(user=self.user)

    def _add(self, sku, quantity):
        return self.client.post(LIST_URL, {"skuId": sku.id, "quantity": quantity}, format="json")

    def test_add_merge_and_stock_rejection(self):
        res = self._add(self.sku, 2)
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["quantity"], 2)
        self.assertEqual(res.data["totalPrice"], "50.00")
        self.assertTrue(res.data["available"])
        self.assertEqual(res.data["sku"]["attributes"], {"size": "42"})

        res = self._add(self.sku, 2)
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "INSUFFICIENT_STOCK")
        self.assertEqual(res.data["error"]["details"]["currentStock"], 3)
        self.assertEqual(CartItem.objects.get(user=self.user, sku=self.sku).quantity, 2)

        res = self._add(self.sku, 1)
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["quantity"], 3)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 1)

    def test_offline_sku_is_rejected(self):
        self.sku.is_active = False
        self.sku.save()
        res = self._add(self.sku, 1)
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(res.data["error"]["code"], "SKU_OFFLINE")
        res = self.client.post(LIST_URL, {"skuId": 99999, "quantity": 1}, format="json")
        self.assertEqual(res.data["error"]["code"], "SKU_OFFLINE")

    def test_list_reflects_live_catalog_state(self):
        self._add(self.sku, 2)
        self._add(self.cheap, 5)
        CartItem.objects.filter(sku=self.cheap).update(checked=False)
        Sku.objects.filter(pk=self.sku.pk).update(stock=1)

        res = self.client.get(LIST_URL)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["total"], 2)
        stats = res.data["statistics"]
        self.assertEqual(stats["totalItems"], 7)
        self.assertEqual(stats["checkedItems"], 2)
        self.assertEqual(stats["totalPrice"], "100.00")
        self.assertEqual(stats["checkedPrice"], "50.00")
        self.assertEqual(stats["unavailableItems"], 2)
        invalid = res.data["validation"]["invalidItems"]
        self.assertEqual(len(invalid), 1)
        self.assertEqual(invalid[0]["reason"], "insufficient_stock")
        self.assertEqual(invalid[0]["currentStock"], 1)

        res = self.client.get(LIST_URL, {"checked": 1})
        self.assertEqual(res.data["total"], 1)
        self.assertEqual(res.data["items"][0]["skuId"], self.sku.id)

    def test_count_update_and_delete(self):
        cart_id = self._add(self.cheap, 4).data["id"]
        self.assertEqual(self.client.get(f"{LIST_URL}count/").data, {"count": 4})

        res = self.client.put(detail_url(cart_id), {"quantity": 7, "checked": False}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["quantity"], 7)
        self.assertFalse(res.data["checked"])

        res = self.client.put(detail_url(cart_id), {"quantity": 51}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

        self.assertEqual(self.client.delete(detail_url(cart_id)).status_code, 204)
        self.assertEqual(self.client.delete(detail_url(cart_id)).status_code, 404)
        self.assertEqual(self.client.get(detail_url(cart_id)).status_code, 404)

    def test_other_users_lines_are_invisible(self):
        foreign = CartItem.objects.create(user=self.other, sku=self.cheap, quantity=1)
        self.assertEqual(self.client.get(detail_url(foreign.id)).status_code, 404)
        self.assertEqual(self.client.delete(detail_url(foreign.id)).status_code, 404)
        res = self.client.post(
            f"{LIST_URL}validate/", {"cartIds": [foreign.id]}, format="json"
        )
        self.assertTrue(res.data["valid"])
        self.assertTrue(CartItem.objects.filter(pk=foreign.pk).exists())

    def test_batch_and_clear(self):
        first = self._add(self.sku, 1).data["id"]
        second = self._add(self.cheap, 2).data["id"]

        res = self.client.post(
            f"{LIST_URL}batch/", {"ids": [second], "action": "uncheck"}, format="json"
        )
        self.assertEqual(res.data["success"], 1)
        self.assertFalse(CartItem.objects.get(pk=second).checked)

        res = self.client.post(
            f"{LIST_URL}batch/", {"ids": [first, 424242], "action": "delete"}, format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual((res.data["success"], res.data["failed"]), (1, 1))

        self._add(self.sku, 1)
        res = self.client.delete(f"{LIST_URL}clear/?checkedOnly=true")
        self.assertEqual(res.data, {"removed": 1})
        self.assertEqual(list(CartItem.objects.values_list("id", flat=True)), [second])

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        res = self.client.get(LIST_URL)
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
