# commissions/views.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from commissions.models import Commission
from commissions.serializers import CommissionSerializer, CommissionStatusCommandSerializer
from commissions.services import (
    CommissionNotFound,
    InvalidCommissionStatus,
    commission_statistics,
    update_status,
)
from users.permissions import IsAdmin


def error_response(*, code: str, message: str, http_status: int):
    """
    Canonical API error response.
    """
    return Response(
        {"error": {"code": code, "message": message}},
        status=http_status,
    )


class CommissionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Admin commission ledger: list / retrieve / statistics / status override.
    """

    queryset = Commission.objects.select_related("beneficiary", "invitee", "order")
    serializer_class = CommissionSerializer
    permission_classes = [IsAuthenticated, IsAdmin]
    filterset_fields = ["status", "beneficiary", "invitee", "order"]

    @extend_schema(responses={200: dict})
    @action(detail=False, methods=["get"], url_path="statistics")
    def statistics(self, request):
        return Response(commission_statistics(), status=status.HTTP_200_OK)

    @extend_schema(request=CommissionStatusCommandSerializer, responses={200: CommissionSerializer})
    @action(detail=True, methods=["put"], url_path="status")
    def set_status(self, request, pk=None):
        commission = self.get_object()

        command = CommissionStatusCommandSerializer(data=request.data)
        command.is_valid(raise_exception=True)

        try:
            commission = update_status(
                commission_id=commission.pk,
                new_status=command.validated_data["status"],
            )
        except InvalidCommissionStatus as exc:
            return error_response(
                code="INVALID_COMMISSION_STATUS",
                message=str(exc),
                http_status=status.HTTP_400_BAD_REQUEST,
            )
        except CommissionNotFound as exc:
            return error_response(
                code="COMMISSION_NOT_FOUND",
                message=str(exc),
                http_status=status.HTTP_404_NOT_FOUND,
            )

        commission = self.get_queryset().get(pk=commission.pk)
        return Response(CommissionSerializer(commission).data, status=status.HTTP_200_OK)
