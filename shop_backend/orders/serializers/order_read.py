# orders/serializers/order_read.py

from rest_framework import serializers

from orders.models import Order, OrderItem


class OrderItemSerializer(serializers.ModelSerializer):
    """
    Order line (read-only). Name / cover / price are checkout-time snapshots.
    """

    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = OrderItem
        fields = [
            "id",
            "product",
            "product_name",
            "product_cover",
            "quantity",
            "price",
            "line_total",
            "rating",
            "comment",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    items = OrderItemSerializer(many=True, read_only=True)
    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "order_no",
            "user_id",
            "order_type",
            "total_amount",
            "status",
            "payment_status",
            "payment_method",
            "transaction_id",
            "consignee",
            "phone",
            "address",
            "remark",
            "tracking_no",
            "tracking_company",
            "refund_reason",
            "refund_remark",
            "refund_no",
            "payment_time",
            "delivery_time",
            "completion_time",
            "cancel_time",
            "refund_request_time",
            "refund_approval_time",
            "created_at",
            "updated_at",
            "items",
        ]
        read_only_fields = fields
