from django.contrib import admin

from listings.models import Listing


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ("title", "owner", "is_available", "created_at")
    list_filter = ("is_available",)
    search_fields = ("title", "owner__email", "owner__name")
    raw_id_fields = ("owner",)
    readonly_fields = ("id", "created_at", "updated_at")
