from django.contrib import admin

from .models import CartItem


@admin.register(CartItem)
class CartItemAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "product",
        "quantity",
        "selected",
        "created_at",
    )

    readonly_fields = (
        "id",
        "user",
        "product",
        "created_at",
        "updated_at",
    )

    search_fields = ("user__username", "user__nickname", "product__name")
    list_filter = ("selected", "created_at")
