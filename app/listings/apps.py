"""
Django app configuration for listings.
"""

from django.apps import AppConfig


class ListingsConfig(AppConfig):
    """Rental listings that conversations are about."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "listings"
    verbose_name = "Listings"
