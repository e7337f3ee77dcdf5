from django.contrib import admin

from .models import UnlockPayment


@admin.register(UnlockPayment)
class UnlockPaymentAdmin(admin.ModelAdmin):
    list_display = ("transaction_number", "user", "book", "amount",
                    "bkash_number", "status", "refund_requested",
                    "refund_approved", "created_at")
    list_filter = ("status", "refund_requested", "refund_approved")
    search_fields = ("transaction_number", "bkash_number", "user__username")
    # Resolution goes through UnlockLedgerService so it is exactly-once.
    readonly_fields = ("status", "resolved_at", "refund_requested",
                       "refund_requested_at", "refund_approved",
                       "refund_approved_at")
