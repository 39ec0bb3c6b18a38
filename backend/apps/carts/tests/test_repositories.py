from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase

from apps.carts.models import CartItem
from apps.carts.repositories import CartItemRepository
from apps.catalog.models import Product, Sku


class CartItemRepositoryTests(TestCase):
    @classmethod
    def setUpTestData(cls):
        User = get_user_model()
        cls.user = User.objects.create_user(username="repo-user", password="x")
        cls.other = User.objects.create_user(username="repo-other", password="x")
        product = Product.objects.create(name="Bottle")
        cls.steel = Sku.objects.create(product=product, sku_code="B-1", price=Decimal("25.00"), stock=3)
        cls.matte = Sku.objects.create(product=product, sku_code="B-2", price=Decimal("27.50"), stock=9)

    def setUp(self):
        self.repo = CartItemRepository()

    def test_create_or_merge_inserts_then_increments(self):
        first = self.repo.create_or_merge(self.user.id, self.steel.id, 2)
        second = self.repo.create_or_merge(self.user.id, self.steel.id, 3)
        self.assertEqual(first.id, second.id)
        self.assertEqual(second.quantity, 5)
        self.assertTrue(second.checked)
        self.assertEqual(CartItem.objects.count(), 1)

    def test_create_or_merge_falls_back_to_merge_when_insert_collides(self):
        CartItem.objects.create(user=self.user, sku=self.steel, quantity=4)
        real_increment = self.repo._increment
        calls = []

        def stale_then_real(*args):
            # first update runs before the competing row is visible
            calls.append(args)
            return 0 if len(calls) == 1 else real_increment(*args)

        with patch.object(self.repo, "_increment", side_effect=stale_then_real):
            item = self.repo.create_or_merge(self.user.id, self.steel.id, 2)

        self.assertEqual(len(calls), 2)
        self.assertEqual(item.quantity, 6)
        self.assertEqual(CartItem.objects.filter(user=self.user, sku=self.steel).count(), 1)

    def test_get_for_update_scopes_by_user_and_sku(self):
        self.repo.create_or_merge(self.user.id, self.steel.id, 1)
        self.assertIsNotNone(self.repo.get_for_update(self.user.id, self.steel.id))
        self.assertIsNone(self.repo.get_for_update(self.other.id, self.steel.id))

    def test_update_persists_fields(self):
        item = self.repo.create_or_merge(self.user.id, self.steel.id, 1)
        self.repo.update(item, quantity=2, checked=False)
        item.refresh_from_db()
        self.assertEqual((item.quantity, item.checked), (2, False))

    def test_list_filters_counts_and_pages(self):
        a = self.repo.create_or_merge(self.user.id, self.steel.id, 1)
        b = self.repo.create_or_merge(self.user.id, self.matte.id, 2)
        self.repo.update(b, checked=False)
        self.repo.create_or_merge(self.other.id, self.steel.id, 1)

        items, total = self.repo.list_for_user(self.user.id, limit=1)
        self.assertEqual(total, 2)
        self.assertEqual([i.id for i in items], [b.id])

        items, total = self.repo.list_for_user(self.user.id, checked=True)
        self.assertEqual(([i.id for i in items], total), ([a.id], 1))

        items, total = self.repo.list_for_user(self.user.id, ids=[a.id, 10_000])
        self.assertEqual(total, 1)

        items, total = self.repo.list_for_user(self.user.id, sku_id=self.matte.id)
        self.assertEqual([i.id for i in items], [b.id])

    def test_deletes_and_sum(self):
        a = self.repo.create_or_merge(self.user.id, self.steel.id, 1)
        b = self.repo.create_or_merge(self.user.id, self.matte.id, 4)
        self.repo.update(b, checked=False)
        self.repo.create_or_merge(self.other.id, self.steel.id, 2)

        self.assertEqual(self.repo.sum_quantity(self.user.id), 5)
        self.assertFalse(self.repo.delete_by_id(a.id, user_id=self.other.id))
        self.assertEqual(self.repo.delete_many(self.user.id, checked=True), 1)
        self.assertFalse(self.repo.delete_by_id(a.id))
        self.assertTrue(self.repo.delete_by_id(b.id, user_id=self.user.id))
        self.assertEqual(self.repo.sum_quantity(self.user.id), 0)
        self.assertEqual(self.repo.sum_quantity(self.other.id), 2)
