from django.contrib import admin

from .models import AdminAlert, BroadcastLog, Notification


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("id", "recipient", "title", "notification_type",
                    "reference_type", "is_read", "created_at")
    list_filter = ("notification_type", "is_read")
    search_fields = ("title", "message", "recipient__username")


@admin.register(AdminAlert)
class AdminAlertAdmin(admin.ModelAdmin):
    list_display = ("id", "alert_type", "title", "is_read",
                    "email_sent", "created_at")
    list_filter = ("alert_type", "is_read", "email_sent")


@admin.register(BroadcastLog)
class BroadcastLogAdmin(admin.ModelAdmin):
    list_display = ("title", "target_kind", "sent_count", "sent_by",
                    "created_at")
    list_filter = ("target_kind",)
    readonly_fields = ("sent_count", "sent_by", "created_at")
