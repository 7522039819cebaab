# orders/tests/test_membership.py

from datetime import datetime, timedelta
from decimal import Decimal

from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework.test import APIClient

from commissions.models import Commission
from orders.models import Order
from orders.services import (
    GatewayNotification,
    complete,
    create_vip_order,
    handle_payment_notification,
    mark_paid,
    request_refund,
    ship,
)
from orders.services.exceptions import InvalidTransition
from orders.tests.helpers import create_address, create_product, create_user
from users.services.membership import add_one_year


class MembershipOrderTests(TestCase):
    def setUp(self):
        self.inviter = create_user("inviter")
        self.user = create_user("member", inviter=self.inviter)

    @override_settings(VIP_MEMBERSHIP_PRICE=Decimal("199.00"))
    def test_price_comes_from_settings(self):
        order = create_vip_order(user=self.user)

        self.assertEqual(order.order_type, Order.TYPE_VIP)
        self.assertEqual(order.total_amount, Decimal("199.00"))
        self.assertEqual(order.status, Order.STATUS_PENDING_PAYMENT)
        self.assertFalse(order.items.exists())

    @override_settings(VIP_MEMBERSHIP_PRICE=Decimal("0"))
    def test_zero_price_is_rejected(self):
        with self.assertRaises(ValueError):
            create_vip_order(user=self.user)
        self.assertFalse(Order.objects.exists())

    def test_payment_completes_order_and_grants_a_year(self):
        order = create_vip_order(user=self.user)
        paid_at = timezone.now()

        order = mark_paid(order_id=order.pk, transaction_id="WX-VIP-1", paid_at=paid_at)

        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.assertEqual(order.payment_status, Order.PAYMENT_PAID)
        self.assertEqual(order.completion_time, paid_at)

        self.user.refresh_from_db()
        self.assertTrue(self.user.is_vip)
        self.assertEqual(self.user.vip_expire_date, add_one_year(paid_at))
        self.assertTrue(self.user.is_active_vip(paid_at + timedelta(days=364)))

    def test_active_membership_extends_from_current_expiry(self):
        paid_at = timezone.now()
        current_expiry = paid_at + timedelta(days=30)
        self.user.is_vip = True
        self.user.vip_expire_date = current_expiry
        self.user.save(update_fields=["is_vip", "vip_expire_date"])

        order = create_vip_order(user=self.user)
        mark_paid(order_id=order.pk, paid_at=paid_at)

        self.user.refresh_from_db()
        self.assertEqual(self.user.vip_expire_date, add_one_year(current_expiry))

    def test_lapsed_membership_restarts_from_payment_time(self):
        paid_at = timezone.now()
        self.user.is_vip = True
        self.user.vip_expire_date = paid_at - timedelta(days=3)
        self.user.save(update_fields=["is_vip", "vip_expire_date"])

        order = create_vip_order(user=self.user)
        mark_paid(order_id=order.pk, paid_at=paid_at)

        self.user.refresh_from_db()
        self.assertEqual(self.user.vip_expire_date, add_one_year(paid_at))

    def test_gateway_notification_pays_membership_order(self):
        order = create_vip_order(user=self.user)

        order = handle_payment_notification(
            GatewayNotification(
                reference=order.order_no,
                outcome="SUCCESS",
                transaction_ref="WX-VIP-2",
                amount_minor_units=9900,
            )
        )

        self.assertEqual(order.status, Order.STATUS_COMPLETED)
        self.user.refresh_from_db()
        self.assertTrue(self.user.is_vip)

    def test_membership_order_accrues_no_commission(self):
        order = create_vip_order(user=self.user)
        mark_paid(order_id=order.pk)

        self.assertFalse(Commission.objects.exists())
        self.inviter.refresh_from_db()
        self.assertEqual(self.inviter.commission, Decimal("0.00"))

    def test_membership_order_has_no_fulfilment_or_refund(self):
        order = create_vip_order(user=self.user)

        with self.assertRaises(InvalidTransition):
            complete(order_id=order.pk)

        mark_paid(order_id=order.pk)

        for operation in (ship, complete, request_refund):
            with self.subTest(operation=operation.__name__):
                with self.assertRaises(InvalidTransition):
                    operation(order_id=order.pk)

        order.refresh_from_db()
        self.assertEqual(order.status, Order.STATUS_COMPLETED)

    def test_add_one_year_on_leap_day(self):
        leap_day = datetime(2028, 2, 29, 12, 0, tzinfo=timezone.get_current_timezone())
        self.assertEqual(add_one_year(leap_day), leap_day.replace(year=2029, day=28))


class MembershipAPITests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = create_user("member")
        self.client.force_authenticate(user=self.user)

    def test_open_membership_order(self):
        res = self.client.post("/api/orders/vip/", {"total_amount": "0.01"}, format="json")

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["order_type"], Order.TYPE_VIP)
        self.assertEqual(Decimal(res.data["total_amount"]), Decimal("99.00"))

    def test_client_cannot_tag_goods_order_as_membership(self):
        address = create_address(self.user)
        product = create_product("Longjing Tea", price="50.00", stock=10)

        res = self.client.post(
            "/api/orders/",
            {
                "items": [{"product_id": str(product.pk), "quantity": 1}],
                "address_id": str(address.pk),
                "order_type": Order.TYPE_VIP,
            },
            format="json",
        )

        self.assertEqual(res.status_code, 201, res.data)
        self.assertEqual(res.data["order_type"], Order.TYPE_NORMAL)

    def test_requires_authentication(self):
        res = APIClient().post("/api/orders/vip/", format="json")
        self.assertEqual(res.status_code, 401)
