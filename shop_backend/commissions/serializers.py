# commissions/serializers.py

from rest_framework import serializers

from commissions.models import Commission


class CommissionSerializer(serializers.ModelSerializer):
    beneficiary_nickname = serializers.CharField(source="beneficiary.nickname", read_only=True)
    invitee_nickname = serializers.CharField(source="invitee.nickname", read_only=True)
    order_no = serializers.CharField(source="order.order_no", read_only=True)
    order_total_amount = serializers.DecimalField(
        source="order.total_amount", max_digits=12, decimal_places=2, read_only=True
    )

    class Meta:
        model = Commission
        fields = [
            "id",
            "beneficiary",
            "beneficiary_nickname",
            "invitee",
            "invitee_nickname",
            "order",
            "order_no",
            "order_total_amount",
            "amount",
            "rate",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CommissionStatusCommandSerializer(serializers.Serializer):
    """
    Input only. Status values are validated by the ledger so that unknown
    values surface as INVALID_COMMISSION_STATUS.
    """

    status = serializers.CharField(max_length=16)


class EarnedCommissionSerializer(serializers.ModelSerializer):
    """
    A commission as its beneficiary sees it: who bought, which order.
    """

    invitee = serializers.SerializerMethodField()
    order = serializers.SerializerMethodField()

    class Meta:
        model = Commission
        fields = ["id", "amount", "rate", "status", "invitee", "order", "created_at"]
        read_only_fields = fields

    def get_invitee(self, obj):
        return {
            "id": str(obj.invitee_id),
            "nickname": obj.invitee.nickname,
            "avatar": obj.invitee.avatar,
        }

    def get_order(self, obj):
        return {
            "id": str(obj.order_id),
            "order_no": obj.order.order_no,
            "total_amount": str(obj.order.total_amount),
        }
