from django.contrib import admin

from .models import Book


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ("title", "author", "price", "condition", "status",
                    "book_type", "seller", "is_admin_listing")
    list_filter = ("status", "condition", "book_type", "is_admin_listing")
    search_fields = ("title", "author", "seller__username")
