"""
Listing model.

Only the parts of a rental listing that other apps read live here: a
title for display and the owner. Browsing, search and media belong to the
listings API, which is outside this service.
"""

from django.conf import settings
from django.db import models

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class Listing(UUIDPrimaryKeyMixin, BaseModel):
    """
    A rental listing posted by an owner.

    Fields:
        title: Headline shown in lists and chat headers
        owner: User who posted the listing
        is_available: Whether the listing is still open
    """

    title = models.CharField(
        max_length=200,
        help_text="Listing headline",
    )
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="listings",
        help_text="User who posted the listing",
    )
    is_available = models.BooleanField(
        default=True,
        help_text="Whether the listing is still open",
    )

    class Meta:
        db_table = "listings_listing"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["owner", "-created_at"], name="listing_owner_created_idx"),
        ]

    def __str__(self):
        return self.title
