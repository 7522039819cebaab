# payments/urls.py

"""
Gateway callbacks (AllowAny, signature verified):

    POST /api/payments/notify/          payment outcome
    POST /api/payments/refund-notify/   refund outcome
"""

from django.urls import path

from payments.views import PaymentNotifyView, RefundNotifyView

app_name = "payments"

urlpatterns = [
    path("notify/", PaymentNotifyView.as_view(), name="payment-notify"),
    path("refund-notify/", RefundNotifyView.as_view(), name="refund-notify"),
]
