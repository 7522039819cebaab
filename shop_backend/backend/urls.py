# backend/urls.py
"""
PROJECT URLS

Everything is mounted under /api/:

    users/          profile, invite code binding, own commissions and invitees
    orders/         checkout, payment params, lifecycle actions, stats
    commissions/    admin commission ledger
    payments/       gateway notifications (AllowAny, signature verified)

    health/         DB round-trip + payment gateway configuration flag
    schema/, docs/  OpenAPI
    auth/jwt/...    SimpleJWT token pair / refresh

The Django admin lives at settings.ADMIN_PATH (default "admin/").
"""

from __future__ import annotations

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

API_MODULES = {
    "users": "/api/users/",
    "orders": "/api/orders/",
    "commissions": "/api/commissions/",
    "payments": "/api/payments/",
}


@extend_schema(responses={200: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_index(request):
    return Response(
        {
            "service": settings.SPECTACULAR_SETTINGS.get("TITLE", "Shop Backend API"),
            "version": settings.SPECTACULAR_SETTINGS.get("VERSION", ""),
            "docs": "/api/docs/",
            "token": "/api/auth/jwt/create/",
            "modules": API_MODULES,
        }
    )


def _gateway_configured() -> bool:
    gateway = (getattr(settings, "PAYMENTS", {}) or {}).get("GATEWAY") or {}
    return all(gateway.get(key) for key in ("BASE_URL", "MERCHANT_ID", "API_KEY"))


@extend_schema(responses={200: dict, 503: dict})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    200 when the default database answers; 503 otherwise.
    """
    body = {"status": "ok", "db": "ok", "payments": _gateway_configured()}
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except OperationalError as e:
        body.update(status="degraded", db="down", error=str(e))
        return Response(body, status=503)
    return Response(body)


admin_path = getattr(settings, "ADMIN_PATH", "admin/").strip("/") + "/"

api_urlpatterns = [
    path("", api_index, name="api-index"),
    path("health/", health_check, name="health-check"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("users/", include("users.urls")),
    path("orders/", include("orders.urls")),
    path("commissions/", include("commissions.urls")),
    path("payments/", include("payments.urls")),
]

urlpatterns = [
    path(admin_path, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
