# users/views.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from commissions.models import Commission
from commissions.serializers import EarnedCommissionSerializer

from .models import User
from .serializers import BindInviterSerializer, InviteeSerializer, UserSerializer
from .services.exceptions import InviteCodeError
from .services.referral import bind_inviter


class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserSerializer

    @extend_schema(
        responses={200: UserSerializer},
        description="Get current authenticated user profile",
    )
    def get(self, request):
        return Response(UserSerializer(request.user).data)


class BindInviterView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=BindInviterSerializer, responses={200: UserSerializer})
    def post(self, request):
        serializer = BindInviterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = bind_inviter(
                user=request.user,
                invite_code=serializer.validated_data["invite_code"],
            )
        except InviteCodeError as exc:
            return Response(
                {"error": {"code": "INVITE_CODE_REJECTED", "message": str(exc)}},
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(UserSerializer(user).data, status=status.HTTP_200_OK)


class MyCommissionsView(generics.ListAPIView):
    """
    Commission records earned by the caller, newest first.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = EarnedCommissionSerializer

    def get_queryset(self):
        return (
            Commission.objects.filter(beneficiary=self.request.user)
            .select_related("invitee", "order")
            .order_by("-created_at")
        )


class MyInviteesView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = InviteeSerializer

    def get_queryset(self):
        return User.objects.filter(inviter=self.request.user).order_by("-created_at")
