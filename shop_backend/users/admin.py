# users/admin.py

"""
USERS ADMIN REGISTRATION
"""

from __future__ import annotations

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from users.models import Address, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    ordering = ("-created_at",)
    list_display = ("username", "nickname", "role", "commission", "is_vip", "is_active")
    list_filter = ("role", "is_vip", "is_staff", "is_active")
    search_fields = ("username", "nickname", "phone", "invite_code")
    readonly_fields = ("commission", "invite_code", "created_at", "updated_at")

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        ("Profile", {"fields": ("openid", "nickname", "phone", "avatar", "role")}),
        ("Referral", {"fields": ("inviter", "invite_code", "commission")}),
        ("VIP", {"fields": ("is_vip", "vip_expire_date")}),
        (
            "Permissions",
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )

    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "password1", "password2", "role", "is_staff"),
            },
        ),
    )


@admin.register(Address)
class AddressAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "city", "user", "is_default")
    search_fields = ("name", "phone", "user__username")
