# users/urls.py

from django.urls import path

from .views import BindInviterView, MeView, MyCommissionsView, MyInviteesView

app_name = "users"

urlpatterns = [
    path("me/", MeView.as_view(), name="me"),
    path("me/inviter/", BindInviterView.as_view(), name="bind-inviter"),
    path("me/commissions/", MyCommissionsView.as_view(), name="my-commissions"),
    path("me/invitees/", MyInviteesView.as_view(), name="my-invitees"),
]
