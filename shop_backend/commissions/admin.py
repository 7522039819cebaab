# commissions/admin.py

from django.contrib import admin

from commissions.models import Commission


@admin.register(Commission)
class CommissionAdmin(admin.ModelAdmin):
    """
    Read-only: status overrides must go through the commission ledger so the
    beneficiary balance moves with them (PUT /api/commissions/<id>/status/).
    """

    list_display = ("order", "beneficiary", "invitee", "amount", "status", "created_at")
    readonly_fields = (
        "order",
        "beneficiary",
        "invitee",
        "amount",
        "rate",
        "status",
        "created_at",
        "updated_at",
    )
    search_fields = ("order__order_no", "beneficiary__nickname", "invitee__nickname")
    list_filter = ("status", "created_at")

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
