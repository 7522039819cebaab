# orders/tests/test_lifecycle.py

from decimal import Decimal

from django.test import TestCase

from commissions.models import Commission
from orders.models import Order
from orders.services import cancel, complete, create_order, mark_paid, request_refund, ship
from orders.services.exceptions import InvalidTransition, OrderNotFound
from orders.services.order_lifecycle import TERMINAL_STATES, can_transition
from orders.tests.helpers import create_address, create_product, create_user
from products.models import StockMovement


class OrderLifecycleTests(TestCase):
    def setUp(self):
        self.user = create_user("buyer")
        self.address = create_address(self.user)
        self.product = create_product("Longjing Tea", price="50.00", stock=10)

        self.order = create_order(
            user=self.user,
            lines=[{"product_id": self.product.pk, "quantity": 2}],
            address_id=self.address.pk,
        )

    def _assert_stock(self, stock, sales):
        self.product.refresh_from_db()
        self.assertEqual((self.product.stock, self.product.sales), (stock, sales))

    # --------------------------------------------------
    # HAPPY PATH
    # --------------------------------------------------

    def test_full_lifecycle(self):
        order = mark_paid(order_id=self.order.pk, transaction_id="TX-1")
        self.assertEqual(order.status, Order.STATUS_PENDING_DELIVERY)
        self.assertEqual(order.payment_status, Order.PAYMENT_PAID)
        self.assertEqual(order.transaction_id, "TX-1")
        self.assertIsNotNone(order.payment_time)

        order = ship(order_id=self.order.pk, tracking_no="SF123", tracking_company="SF Express")
        self.assertEqual(order.status, Order.STATUS_DELIVERED)
        self.assertEqual(order.tracking_no, "SF123")
        self.assertIsNotNone(order.delivery_time)

        order = complete(order_id=self.order.pk)
        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.assertIsNotNone(order.completion_time)

        self._assert_stock(8, 2)

    def test_mark_paid_twice_is_noop(self):
        first = mark_paid(order_id=self.order.pk, transaction_id="TX-1")
        second = mark_paid(order_id=self.order.pk, transaction_id="TX-2")

        self.assertEqual(second.payment_time, first.payment_time)
        self.assertEqual(second.transaction_id, "TX-1")

    # --------------------------------------------------
    # PRECONDITIONS
    # --------------------------------------------------

    def test_ship_requires_pending_delivery(self):
        with self.assertRaises(InvalidTransition):
            ship(order_id=self.order.pk)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING_PAYMENT)
        self.assertIsNone(self.order.delivery_time)

    def test_complete_requires_delivered(self):
        mark_paid(order_id=self.order.pk)
        with self.assertRaises(InvalidTransition):
            complete(order_id=self.order.pk)

    def test_complete_twice_raises_and_keeps_single_commission(self):
        inviter = create_user("inviter")
        self.user.inviter = inviter
        self.user.save()

        mark_paid(order_id=self.order.pk)
        ship(order_id=self.order.pk)
        complete(order_id=self.order.pk)

        with self.assertRaises(InvalidTransition):
            complete(order_id=self.order.pk)

        self.assertEqual(Commission.objects.filter(order=self.order).count(), 1)
        inviter.refresh_from_db()
        self.assertEqual(inviter.commission, Decimal("5.00"))

    def test_unknown_order(self):
        with self.assertRaises(OrderNotFound):
            ship(order_id="00000000-0000-0000-0000-000000000000")

    # --------------------------------------------------
    # CANCELLATION
    # --------------------------------------------------

    def test_cancel_unpaid_restores_stock_and_keeps_unpaid(self):
        self._assert_stock(8, 2)

        order = cancel(order_id=self.order.pk)

        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertEqual(order.payment_status, Order.PAYMENT_UNPAID)
        self.assertIsNotNone(order.cancel_time)
        self.assertEqual(order.refund_no, "")
        self._assert_stock(10, 0)

        self.assertEqual(
            StockMovement.objects.filter(order=self.order, reason=StockMovement.Reason.CANCEL).count(),
            1,
        )

    def test_cancel_paid_marks_refunded(self):
        mark_paid(order_id=self.order.pk, transaction_id="TX-1")

        order = cancel(order_id=self.order.pk)

        self.assertEqual(order.status, Order.STATUS_CANCELLED)
        self.assertEqual(order.payment_status, Order.PAYMENT_REFUNDED)
        self.assertEqual(order.refund_no, f"RF-{order.order_no}")
        self._assert_stock(10, 0)

    def test_cancel_after_shipment_rejected(self):
        mark_paid(order_id=self.order.pk)
        ship(order_id=self.order.pk)

        with self.assertRaises(InvalidTransition):
            cancel(order_id=self.order.pk)

        self._assert_stock(8, 2)

    def test_cancel_twice_rejected_and_stock_credited_once(self):
        cancel(order_id=self.order.pk)
        with self.assertRaises(InvalidTransition):
            cancel(order_id=self.order.pk)

        self._assert_stock(10, 0)

    # --------------------------------------------------
    # TERMINAL STATES
    # --------------------------------------------------

    def test_terminal_states_never_transition(self):
        for terminal in TERMINAL_STATES:
            for target, _ in Order.STATUS_CHOICES:
                with self.subTest(source=terminal, target=target):
                    self.assertFalse(can_transition(from_status=terminal, to_status=target))

    def test_cancelled_order_rejects_every_operation(self):
        cancel(order_id=self.order.pk)

        for operation in (mark_paid, ship, complete, cancel):
            with self.subTest(operation=operation.__name__):
                with self.assertRaises(InvalidTransition):
                    operation(order_id=self.order.pk)

        with self.assertRaises(InvalidTransition):
            request_refund(order_id=self.order.pk, reason="changed mind")

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_CANCELLED)
