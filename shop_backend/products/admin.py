# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules (audit-safe inventory):

- Product pricing and sale status are editable.
- stock / sales are counters owned by the inventory ledger; the admin shows
  them read-only so they can never drift from the StockMovement history.
- StockMovement rows are immutable and cannot be added, edited or deleted.
"""

from __future__ import annotations

from django.contrib import admin

from products.models import Product, StockMovement


class StockMovementInline(admin.TabularInline):
    model = StockMovement
    extra = 0
    can_delete = False
    fields = ("movement_type", "reason", "quantity", "order", "created_at")
    readonly_fields = fields
    ordering = ("-created_at",)

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "price",
        "vip_price",
        "wholesale_price",
        "wholesale_threshold",
        "stock",
        "sales",
        "status",
    )
    list_filter = ("status",)
    search_fields = ("name",)
    readonly_fields = ("stock", "sales", "created_at", "updated_at")
    inlines = [StockMovementInline]


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("product", "movement_type", "reason", "quantity", "order", "created_at")
    list_filter = ("movement_type", "reason")
    search_fields = ("product__name", "order__order_no")
    readonly_fields = ("product", "movement_type", "reason", "quantity", "order", "created_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
