# users/tests/test_users.py

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from commissions.models import Commission
from orders.services import complete, create_order, mark_paid, ship
from orders.tests.helpers import create_address, create_product
from users.models import Address, User
from users.services.address_book import get_address
from users.services.exceptions import AddressNotFound, InviteCodeError
from users.services.referral import bind_inviter


class UserModelTests(TestCase):
    def test_create_user_from_openid_derives_username(self):
        user = User.objects.create_user(openid="wx-openid-123")

        self.assertEqual(user.username, "wx_wx-openid-123")
        self.assertEqual(user.role, User.ROLE_CUSTOMER)
        self.assertEqual(len(user.invite_code), 8)
        self.assertFalse(user.has_usable_password())

    def test_create_user_requires_username_or_openid(self):
        with self.assertRaises(ValueError):
            User.objects.create_user()

    def test_vip_only_while_period_open(self):
        now = timezone.now()
        user = User.objects.create_user(username="vip", is_vip=True, vip_expire_date=now + timedelta(days=1))
        self.assertTrue(user.is_active_vip(now))
        self.assertFalse(user.is_active_vip(now + timedelta(days=2)))

        user.is_vip = False
        self.assertFalse(user.is_active_vip(now))


class ReferralTests(TestCase):
    def setUp(self):
        self.inviter = User.objects.create_user(username="inviter")
        self.user = User.objects.create_user(username="invitee")

    def test_bind_inviter_sets_inviter_once(self):
        bind_inviter(user=self.user, invite_code=self.inviter.invite_code.lower())
        self.user.refresh_from_db()
        self.assertEqual(self.user.inviter_id, self.inviter.pk)

        other = User.objects.create_user(username="other")
        with self.assertRaises(InviteCodeError):
            bind_inviter(user=self.user, invite_code=other.invite_code)

        self.user.refresh_from_db()
        self.assertEqual(self.user.inviter_id, self.inviter.pk)

    def test_self_invite_rejected(self):
        with self.assertRaises(InviteCodeError):
            bind_inviter(user=self.user, invite_code=self.user.invite_code)

    def test_unknown_code_rejected(self):
        with self.assertRaises(InviteCodeError):
            bind_inviter(user=self.user, invite_code="NOPE0000")

    def test_bind_inviter_endpoint(self):
        client = APIClient()
        client.force_authenticate(self.user)

        res = client.post("/api/users/me/inviter/", {"invite_code": self.inviter.invite_code}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(str(res.data["inviter_id"]), str(self.inviter.pk))

        res = client.post("/api/users/me/inviter/", {"invite_code": self.inviter.invite_code}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.data["error"]["code"], "INVITE_CODE_REJECTED")


class AddressBookTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(username="buyer")
        self.address = Address.objects.create(
            user=self.user,
            name="Zhang San",
            phone="13800000000",
            province="Guangdong",
            city="Shenzhen",
            district="Nanshan",
            detail="1 Keji Road",
            is_default=True,
        )

    def test_get_address_returns_snapshot(self):
        snapshot = get_address(address_id=self.address.pk, user=self.user)

        self.assertEqual(snapshot.consignee, "Zhang San")
        self.assertEqual(snapshot.phone, "13800000000")
        self.assertEqual(snapshot.full_address, "GuangdongShenzhenNanshan1 Keji Road")

    def test_other_users_address_not_found(self):
        stranger = User.objects.create_user(username="stranger")
        with self.assertRaises(AddressNotFound):
            get_address(address_id=self.address.pk, user=stranger)

    def test_missing_or_malformed_address(self):
        for bad in (None, "", "not-a-uuid", "00000000-0000-0000-0000-000000000000"):
            with self.subTest(address_id=bad):
                with self.assertRaises(AddressNotFound):
                    get_address(address_id=bad, user=self.user)


class MyReferralsAPITests(TestCase):
    def setUp(self):
        self.inviter = User.objects.create_user(username="inviter")
        self.buyer = User.objects.create_user(username="buyer", inviter=self.inviter)
        self.other_invitee = User.objects.create_user(username="second", inviter=self.inviter)
        User.objects.create_user(username="unrelated")

        product = create_product("Longjing Tea", price="100.00", stock=10)
        order = create_order(
            user=self.buyer,
            lines=[{"product_id": product.pk, "quantity": 1}],
            address_id=create_address(self.buyer).pk,
        )
        mark_paid(order_id=order.pk)
        ship(order_id=order.pk)
        self.order = complete(order_id=order.pk)

        self.client = APIClient()

    def test_my_commissions_lists_beneficiary_records(self):
        self.client.force_authenticate(self.inviter)

        res = self.client.get("/api/users/me/commissions/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        row = res.data["results"][0]
        self.assertEqual(row["amount"], "5.00")
        self.assertEqual(row["status"], Commission.STATUS_SETTLED)
        self.assertEqual(row["invitee"]["id"], str(self.buyer.pk))
        self.assertEqual(row["invitee"]["nickname"], self.buyer.nickname)
        self.assertEqual(row["order"]["order_no"], self.order.order_no)
        self.assertEqual(row["order"]["total_amount"], "100.00")

    def test_invitee_sees_no_commissions(self):
        self.client.force_authenticate(self.buyer)

        res = self.client.get("/api/users/me/commissions/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 0)

    def test_my_invitees(self):
        self.client.force_authenticate(self.inviter)

        res = self.client.get("/api/users/me/invitees/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(
            {row["id"] for row in res.data["results"]},
            {str(self.buyer.pk), str(self.other_invitee.pk)},
        )
        self.assertNotIn("commission", res.data["results"][0])

    def test_referral_lists_require_authentication(self):
        for url in ("/api/users/me/commissions/", "/api/users/me/invitees/"):
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, status.HTTP_401_UNAUTHORIZED)
