# orders/admin.py

from django.contrib import admin

from orders.models import Order, OrderItem, PaymentAttempt


# ======================================================
# ORDER ITEM INLINE (SNAPSHOTS, READ-ONLY)
# ======================================================


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = (
        "product",
        "product_name",
        "product_cover",
        "quantity",
        "price",
        "rating",
        "comment",
        "created_at",
    )

    def has_add_permission(self, request, obj=None):
        return False


# ======================================================
# ORDER ADMIN
# ======================================================


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Status fields are read-only here: lifecycle changes go through the
    order services so stock and commissions stay consistent.
    """

    list_display = (
        "order_no",
        "user",
        "total_amount",
        "status",
        "payment_status",
        "order_type",
        "created_at",
    )
    readonly_fields = (
        "order_no",
        "user",
        "order_type",
        "total_amount",
        "status",
        "payment_status",
        "payment_method",
        "transaction_id",
        "refund_no",
        "refund_transaction_id",
        "payment_time",
        "delivery_time",
        "completion_time",
        "cancel_time",
        "refund_request_time",
        "refund_approval_time",
        "created_at",
        "updated_at",
    )
    search_fields = ("order_no", "consignee", "phone", "user__nickname")
    list_filter = ("status", "payment_status", "order_type", "created_at")
    inlines = [OrderItemInline]

    def has_delete_permission(self, request, obj=None):
        return False


# ======================================================
# PAYMENT ATTEMPT ADMIN (AUDIT)
# ======================================================


@admin.register(PaymentAttempt)
class PaymentAttemptAdmin(admin.ModelAdmin):
    list_display = ("reference", "order", "amount", "currency", "status", "initiated_at", "verified_at")
    readonly_fields = (
        "reference",
        "order",
        "amount",
        "currency",
        "status",
        "provider_payload",
        "initiated_at",
        "verified_at",
    )
    search_fields = ("reference",)
    list_filter = ("status",)

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
