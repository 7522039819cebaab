# orders/urls.py

"""
ORDER API URLS

    GET    /api/orders/                      list (own; all for admin)
    POST   /api/orders/                      direct purchase
    POST   /api/orders/checkout/             in-cart checkout
    POST   /api/orders/vip/                  annual VIP membership order
    GET    /api/orders/stats/                per-status counters
    GET    /api/orders/<uuid>/               retrieve
    PATCH  /api/orders/<uuid>/               admin patch (remark / shipping)
    POST   /api/orders/<uuid>/pay/           gateway payment params
    POST   /api/orders/<uuid>/cancel/
    POST   /api/orders/<uuid>/ship/          admin
    POST   /api/orders/<uuid>/complete/
    POST   /api/orders/<uuid>/refund/        request refund
    POST   /api/orders/<uuid>/resolve-refund/  admin
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from orders.views import OrderViewSet

app_name = "orders"

router = SimpleRouter()
router.register(r"", OrderViewSet, basename="orders")

urlpatterns = [
    path("", include(router.urls)),
]
