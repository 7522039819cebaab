# orders/serializers/order_command.py

"""
Command serializers for order actions.

These serializers do NOT touch the database.
They only validate input; the order services own every write.
"""

from rest_framework import serializers

from orders.services.order_orchestrator import REFUND_APPROVED, REFUND_REJECTED


class OrderLineCommandSerializer(serializers.Serializer):
    product_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)


class CreateOrderCommandSerializer(serializers.Serializer):
    items = OrderLineCommandSerializer(many=True, allow_empty=False)
    address_id = serializers.UUIDField()
    remark = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class CheckoutCommandSerializer(serializers.Serializer):
    address_id = serializers.UUIDField()
    remark = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class ShipCommandSerializer(serializers.Serializer):
    tracking_no = serializers.CharField(required=False, allow_blank=True, max_length=64, default="")
    tracking_company = serializers.CharField(
        required=False, allow_blank=True, max_length=64, default=""
    )


class RefundRequestCommandSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class ResolveRefundCommandSerializer(serializers.Serializer):
    decision = serializers.ChoiceField(choices=[REFUND_APPROVED, REFUND_REJECTED])
    remark = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")


class OrderPatchCommandSerializer(serializers.Serializer):
    """
    Only fields present in the request body end up in validated_data,
    which maps directly onto OrderPatch (absent -> UNSET).
    """

    remark = serializers.CharField(required=False, allow_blank=True, max_length=500)
    consignee = serializers.CharField(required=False, max_length=64)
    phone = serializers.CharField(required=False, max_length=32)
    address = serializers.CharField(required=False, max_length=512)
