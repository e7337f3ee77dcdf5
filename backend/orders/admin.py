from django.contrib import admin

from .models import Demand, Order, StatusTransitionLog


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "user", "book", "quantity",
                    "total_price", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("order_number", "user__username", "book__title")
    # Status moves go through the workflow service so they are logged.
    readonly_fields = ("status",)


@admin.register(Demand)
class DemandAdmin(admin.ModelAdmin):
    list_display = ("demand_number", "user", "book_name", "author_name",
                    "status", "created_at")
    list_filter = ("status",)
    search_fields = ("demand_number", "book_name", "author_name")
    readonly_fields = ("status",)


@admin.register(StatusTransitionLog)
class StatusTransitionLogAdmin(admin.ModelAdmin):
    list_display = ("entity_kind", "entity_id", "from_status", "to_status",
                    "changed_by", "created_at")
    list_filter = ("entity_kind", "to_status")
    readonly_fields = ("entity_kind", "entity_id", "from_status",
                       "to_status", "changed_by", "notes", "created_at")
