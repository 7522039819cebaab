# commissions/urls.py

"""
    GET  /api/commissions/                 admin list (filters: status, beneficiary, invitee, order)
    GET  /api/commissions/statistics/      settled totals
    GET  /api/commissions/<uuid>/
    PUT  /api/commissions/<uuid>/status/   status override
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from commissions.views import CommissionViewSet

app_name = "commissions"

router = SimpleRouter()
router.register(r"", CommissionViewSet, basename="commissions")

urlpatterns = [
    path("", include(router.urls)),
]
