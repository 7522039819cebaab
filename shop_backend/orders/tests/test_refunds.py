# orders/tests/test_refunds.py

from unittest import mock

from django.test import TestCase, override_settings

from orders.models import Order
from orders.services import (
    REFUND_APPROVED,
    REFUND_REJECTED,
    create_order,
    mark_paid,
    request_refund,
    resolve_refund,
    ship,
)
from orders.services.exceptions import InvalidTransition
from orders.tests.helpers import GATEWAY_SETTINGS, create_address, create_product, create_user
from payments.services import PaymentGatewayError


@override_settings(PAYMENTS=GATEWAY_SETTINGS)
class RefundFlowTests(TestCase):
    def setUp(self):
        self.user = create_user("buyer")
        self.address = create_address(self.user)
        self.product = create_product("Longjing Tea", price="50.00", stock=10)

        self.order = create_order(
            user=self.user,
            lines=[{"product_id": self.product.pk, "quantity": 2}],
            address_id=self.address.pk,
        )
        mark_paid(order_id=self.order.pk, transaction_id="TX-1")

    def test_request_refund_from_pending_delivery(self):
        order = request_refund(order_id=self.order.pk, reason="wrong size")

        self.assertEqual(order.status, Order.STATUS_REFUND_PENDING)
        self.assertEqual(order.refund_reason, "wrong size")
        self.assertIsNotNone(order.refund_request_time)

    def test_request_refund_from_delivered(self):
        ship(order_id=self.order.pk)
        order = request_refund(order_id=self.order.pk, reason="damaged")
        self.assertEqual(order.status, Order.STATUS_REFUND_PENDING)

    def test_request_refund_requires_payment(self):
        unpaid = create_order(
            user=self.user,
            lines=[{"product_id": self.product.pk, "quantity": 1}],
            address_id=self.address.pk,
        )
        with self.assertRaises(InvalidTransition):
            request_refund(order_id=unpaid.pk)

    @mock.patch("orders.services.order_orchestrator.initiate_refund")
    def test_approve_refund_restores_stock_and_calls_gateway_after_commit(self, initiate_refund):
        initiate_refund.return_value = {"refund_id": "R-1"}
        request_refund(order_id=self.order.pk, reason="wrong size")

        with self.captureOnCommitCallbacks(execute=False) as callbacks:
            order = resolve_refund(order_id=self.order.pk, decision=REFUND_APPROVED)
            # Gateway is not contacted while the transaction is still open.
            initiate_refund.assert_not_called()

        self.assertEqual(order.status, Order.STATUS_REFUND_APPROVED)
        self.assertEqual(order.payment_status, Order.PAYMENT_REFUNDED)
        self.assertEqual(order.refund_no, f"RF-{order.order_no}")
        self.assertIsNotNone(order.refund_approval_time)

        self.product.refresh_from_db()
        self.assertEqual((self.product.stock, self.product.sales), (10, 0))

        self.assertEqual(len(callbacks), 1)
        callbacks[0]()

        initiate_refund.assert_called_once_with(
            transaction_ref="TX-1",
            refund_order_ref=order.refund_no,
            amount_minor_units=10000,
            total_minor_units=10000,
            reason="wrong size",
        )

    @mock.patch("orders.services.order_orchestrator.initiate_refund")
    def test_gateway_failure_after_commit_leaves_refund_recorded(self, initiate_refund):
        initiate_refund.side_effect = PaymentGatewayError("gateway down")
        request_refund(order_id=self.order.pk)

        with self.captureOnCommitCallbacks(execute=True):
            resolve_refund(order_id=self.order.pk, decision=REFUND_APPROVED)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_REFUND_APPROVED)
        self.assertEqual(self.order.refund_transaction_id, "")

    @mock.patch("orders.services.order_orchestrator.initiate_refund")
    def test_reject_refund_is_terminal(self, initiate_refund):
        request_refund(order_id=self.order.pk)

        with self.captureOnCommitCallbacks(execute=True):
            order = resolve_refund(
                order_id=self.order.pk,
                decision=REFUND_REJECTED,
                remark="used item",
            )

        self.assertEqual(order.status, Order.STATUS_REFUND_REJECTED)
        self.assertEqual(order.payment_status, Order.PAYMENT_PAID)
        self.assertEqual(order.refund_remark, "used item")
        initiate_refund.assert_not_called()

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 8)

        with self.assertRaises(InvalidTransition):
            ship(order_id=self.order.pk)
        with self.assertRaises(InvalidTransition):
            request_refund(order_id=self.order.pk)

    def test_resolve_refund_requires_refund_pending(self):
        with self.assertRaises(InvalidTransition):
            resolve_refund(order_id=self.order.pk, decision=REFUND_APPROVED)

        self.order.refresh_from_db()
        self.assertEqual(self.order.status, Order.STATUS_PENDING_DELIVERY)
        self.assertEqual(self.order.payment_status, Order.PAYMENT_PAID)

    def test_resolve_refund_rejects_unknown_decision(self):
        request_refund(order_id=self.order.pk)
        with self.assertRaises(ValueError):
            resolve_refund(order_id=self.order.pk, decision="maybe")

    @mock.patch("orders.services.order_orchestrator.initiate_refund")
    def test_approved_refund_cannot_be_resolved_again(self, initiate_refund):
        request_refund(order_id=self.order.pk)
        with self.captureOnCommitCallbacks(execute=True):
            resolve_refund(order_id=self.order.pk, decision=REFUND_APPROVED)

        with self.assertRaises(InvalidTransition):
            resolve_refund(order_id=self.order.pk, decision=REFUND_APPROVED)

        self.product.refresh_from_db()
        self.assertEqual(self.product.stock, 10)
