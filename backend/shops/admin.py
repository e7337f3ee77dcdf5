from django.contrib import admin

from .models import Shop, ShopBook, ShopOrder


class ShopBookInline(admin.TabularInline):
    model = ShopBook
    extra = 0


@admin.register(Shop)
class ShopAdmin(admin.ModelAdmin):
    list_display = ("name", "owner", "phone_number", "is_verified",
                    "is_active", "created_at")
    list_filter = ("is_verified", "is_active")
    search_fields = ("name", "owner__username", "phone_number")
    inlines = [ShopBookInline]


@admin.register(ShopOrder)
class ShopOrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "shop", "user", "shop_book",
                    "quantity", "total_price", "status", "created_at")
    list_filter = ("status", "shop")
    search_fields = ("order_number", "user__username")
    readonly_fields = ("status",)
