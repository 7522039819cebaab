# products/tests/test_inventory.py

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from products.models import Product, StockMovement
from products.services.exceptions import (
    InsufficientStock,
    InventoryIntegrityError,
    ProductNotFound,
)
from products.services.inventory import credit, debit


class InventoryLedgerTests(TestCase):
    """
    GUARANTEES:
    - debit moves stock -> sales and never drives stock negative
    - credit reverses a debit exactly
    - every counter change leaves an immutable StockMovement row
    """

    def setUp(self):
        self.product = Product.objects.create(
            name="Oolong Tea",
            price=Decimal("25.00"),
            stock=3,
            sales=0,
            status=Product.STATUS_ON_SALE,
        )

    def test_debit_decrements_stock_and_increments_sales(self):
        product = debit(product_id=self.product.pk, quantity=2)

        self.assertEqual(product.stock, 1)
        self.assertEqual(product.sales, 2)

        movement = StockMovement.objects.get(product=self.product)
        self.assertEqual(movement.movement_type, StockMovement.MovementType.OUT)
        self.assertEqual(movement.reason, StockMovement.Reason.ORDER)
        self.assertEqual(movement.quantity, 2)

    def test_debit_more_than_stock_raises_and_changes_nothing(self):
        with self.assertRaises(InsufficientStock) as ctx:
            debit(product_id=self.product.pk, quantity=5)

        self.assertEqual(ctx.exception.available, 3)
        self.assertEqual(ctx.exception.requested, 5)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 3)
        self.assertEqual(self.product.sales, 0)
        self.assertFalse(StockMovement.objects.exists())

    def test_debit_entire_stock_reaches_zero(self):
        product = debit(product_id=self.product.pk, quantity=3)
        self.assertEqual(product.stock, 0)

        with self.assertRaises(InsufficientStock):
            debit(product_id=self.product.pk, quantity=1)

    def test_credit_round_trips_debit_to_identity(self):
        debit(product_id=self.product.pk, quantity=2)
        product = credit(
            product_id=self.product.pk,
            quantity=2,
            reason=StockMovement.Reason.CANCEL,
        )

        self.assertEqual(product.stock, 3)
        self.assertEqual(product.sales, 0)
        self.assertEqual(StockMovement.objects.filter(product=self.product).count(), 2)

    def test_credit_beyond_recorded_sales_is_integrity_error(self):
        with self.assertRaises(InventoryIntegrityError):
            credit(product_id=self.product.pk, quantity=1, reason=StockMovement.Reason.REFUND)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 3)

    def test_credit_rejects_stock_out_reason(self):
        debit(product_id=self.product.pk, quantity=1)
        with self.assertRaises(ValueError):
            credit(product_id=self.product.pk, quantity=1, reason=StockMovement.Reason.ORDER)

    def test_invalid_quantities_rejected(self):
        for bad in (0, -1, True, "2", 1.5):
            with self.subTest(quantity=bad):
                with self.assertRaises(ValueError):
                    debit(product_id=self.product.pk, quantity=bad)

    def test_unknown_product(self):
        with self.assertRaises(ProductNotFound):
            debit(product_id="00000000-0000-0000-0000-000000000000", quantity=1)

        with self.assertRaises(ProductNotFound):
            debit(product_id="not-a-uuid", quantity=1)

    def test_stock_movements_are_immutable(self):
        debit(product_id=self.product.pk, quantity=1)
        movement = StockMovement.objects.get(product=self.product)

        movement.quantity = 10
        with self.assertRaises(ValidationError):
            movement.save()

        with self.assertRaises(ValidationError):
            movement.delete()
