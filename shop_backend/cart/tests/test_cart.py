# cart/tests/test_cart.py

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.test import TestCase

from cart.models import CartItem
from cart.services import CheckoutLine, clear_items, list_selected_items
from products.models import Product

User = get_user_model()


class CartServiceTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="buyer")
        self.other = User.objects.create_user(username="other")

        self.tea = Product.objects.create(name="Tea", price=Decimal("10.00"), stock=10)
        self.cup = Product.objects.create(name="Cup", price=Decimal("5.00"), stock=10)

        CartItem.objects.create(user=self.user, product=self.tea, quantity=2, selected=True)
        CartItem.objects.create(user=self.user, product=self.cup, quantity=1, selected=False)
        CartItem.objects.create(user=self.other, product=self.tea, quantity=4, selected=True)

    def test_list_selected_items_only_returns_selected_lines_for_user(self):
        lines = list_selected_items(user=self.user)
        self.assertEqual(lines, [CheckoutLine(product_id=self.tea.pk, quantity=2)])

    def test_clear_items_only_touches_given_products_of_user(self):
        removed = clear_items(user=self.user, product_ids=[self.tea.pk])

        self.assertEqual(removed, 1)
        self.assertTrue(CartItem.objects.filter(user=self.user, product=self.cup).exists())
        self.assertTrue(CartItem.objects.filter(user=self.other, product=self.tea).exists())

    def test_clear_items_with_no_ids_is_noop(self):
        self.assertEqual(clear_items(user=self.user, product_ids=[]), 0)
        self.assertEqual(CartItem.objects.filter(user=self.user).count(), 2)

    def test_one_row_per_user_product(self):
        with self.assertRaises(ValidationError):
            CartItem.objects.create(user=self.user, product=self.tea, quantity=1)

    def test_quantity_must_be_positive(self):
        with self.assertRaises(ValidationError):
            CartItem.objects.create(user=self.other, product=self.cup, quantity=0)
