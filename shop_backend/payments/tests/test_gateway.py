# payments/tests/test_gateway.py

import io
import json
from decimal import Decimal
from unittest import mock
from urllib.error import HTTPError, URLError

from django.test import SimpleTestCase, override_settings

from orders.tests.helpers import GATEWAY_SETTINGS
from payments.services import (
    GatewayNotConfigured,
    PaymentGatewayError,
    initiate_payment,
    initiate_refund,
    sign_payload,
    to_minor_units,
    verify_signature,
)


def _response(payload: dict):
    resp = mock.MagicMock()
    resp.__enter__.return_value.read.return_value = json.dumps(payload).encode("utf-8")
    return resp


class MinorUnitsTests(SimpleTestCase):
    def test_conversion(self):
        self.assertEqual(to_minor_units(Decimal("100.00")), 10000)
        self.assertEqual(to_minor_units("0.01"), 1)
        self.assertEqual(to_minor_units(Decimal("12.345")), 1235)

    def test_invalid_amount(self):
        with self.assertRaises(ValueError):
            to_minor_units("ten")


@override_settings(PAYMENTS=GATEWAY_SETTINGS)
class SignatureTests(SimpleTestCase):
    def test_round_trip(self):
        body = b'{"order_no": "ORD1", "outcome": "SUCCESS"}'
        self.assertTrue(verify_signature(raw_body=body, signature=sign_payload(body)))

    def test_tampered_body_fails(self):
        signature = sign_payload(b'{"amount": 100}')
        self.assertFalse(verify_signature(raw_body=b'{"amount": 1}', signature=signature))

    def test_missing_signature_fails(self):
        self.assertFalse(verify_signature(raw_body=b"{}", signature=None))


@override_settings(PAYMENTS=GATEWAY_SETTINGS)
class GatewayClientTests(SimpleTestCase):
    @mock.patch("payments.services.gateway.urlopen")
    def test_initiate_payment(self, urlopen):
        urlopen.return_value = _response({"prepay_id": "PREPAY-1"})

        params = initiate_payment(order_no="ORD1", amount_minor_units=10000, payer_ref="openid-1")

        self.assertEqual(params["prepay_id"], "PREPAY-1")
        self.assertEqual(params["package"], "prepay_id=PREPAY-1")

        request = urlopen.call_args.args[0]
        self.assertEqual(request.full_url, "https://gateway.test/v3/pay/transactions/jsapi")
        body = json.loads(request.data)
        self.assertEqual(body["out_trade_no"], "ORD1")
        self.assertEqual(body["amount"], {"total": 10000, "currency": "CNY"})
        self.assertEqual(body["payer"], {"openid": "openid-1"})
        self.assertEqual(request.get_header("Authorization"), "Bearer test-api-key")

    @mock.patch("payments.services.gateway.urlopen")
    def test_initiate_payment_without_prepay_id(self, urlopen):
        urlopen.return_value = _response({"message": "order closed"})

        with self.assertRaises(PaymentGatewayError):
            initiate_payment(order_no="ORD1", amount_minor_units=100, payer_ref="x")

    @mock.patch("payments.services.gateway.urlopen")
    def test_initiate_refund(self, urlopen):
        urlopen.return_value = _response({"refund_id": "R-1", "status": "PROCESSING"})

        result = initiate_refund(
            transaction_ref="TX-1",
            refund_order_ref="RF-ORD1",
            amount_minor_units=500,
            total_minor_units=1000,
        )

        self.assertEqual(result["refund_id"], "R-1")
        body = json.loads(urlopen.call_args.args[0].data)
        self.assertEqual(body["out_refund_no"], "RF-ORD1")
        self.assertEqual(body["amount"]["refund"], 500)
        self.assertEqual(body["amount"]["total"], 1000)

    @mock.patch("payments.services.gateway.urlopen")
    def test_http_error_is_wrapped(self, urlopen):
        urlopen.side_effect = HTTPError(
            "https://gateway.test", 400, "Bad Request", {}, io.BytesIO(b'{"message": "bad sign"}')
        )

        with self.assertRaisesMessage(PaymentGatewayError, "bad sign"):
            initiate_refund(transaction_ref="TX-1", refund_order_ref="RF-1", amount_minor_units=1)

    @mock.patch("payments.services.gateway.urlopen")
    def test_network_error_is_wrapped(self, urlopen):
        urlopen.side_effect = URLError("timed out")

        with self.assertRaises(PaymentGatewayError):
            initiate_refund(transaction_ref="TX-1", refund_order_ref="RF-1", amount_minor_units=1)

    @override_settings(PAYMENTS={"GATEWAY": {}})
    def test_missing_configuration(self):
        with self.assertRaises(GatewayNotConfigured):
            initiate_payment(order_no="ORD1", amount_minor_units=1, payer_ref="x")
