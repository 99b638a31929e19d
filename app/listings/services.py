"""
Listing lookups used by other apps.

The chat app denormalizes listing metadata for display only; a listing
that has disappeared must not break a conversation about it.
"""

from __future__ import annotations

from dataclasses import dataclass

from django.conf import settings

from core.exceptions import NotFoundError, ValidationError
from core.helpers import parse_uuid
from core.services import BaseService
from listings.models import Listing


@dataclass(frozen=True)
class ListingContext:
    """Display metadata for a listing."""

    listing_id: str
    title: str
    owner_id: int | None
    found: bool = True


class ListingService(BaseService):

    @classmethod
    def get_listing(cls, listing_id) -> Listing:
        """
        Load a listing that is about to be referenced.

        Raises:
            ValidationError: listing_id is not a well-formed id
            NotFoundError: no such listing
        """
        listing_uuid = parse_uuid(listing_id)
        if listing_uuid is None:
            raise ValidationError(
                "Invalid listing ID",
                error_code="INVALID_LISTING_ID",
                details={"listing_id": str(listing_id)},
            )

        with cls.storage_operation("load listing"):
            listing = Listing.objects.filter(pk=listing_uuid).first()

        if listing is None:
            raise NotFoundError(
                "Listing not found",
                error_code="LISTING_NOT_FOUND",
                details={"listing_id": str(listing_uuid)},
            )
        return listing

    @classmethod
    def resolve_context(cls, listing_id) -> ListingContext:
        """Return display metadata for one listing, tolerating its absence."""
        return cls.resolve_contexts([listing_id])[str(listing_id)]

    @classmethod
    def resolve_contexts(cls, listing_ids) -> dict[str, ListingContext]:
        """
        Return display metadata for many listings in one query.

        Missing listings map to a fallback context instead of being left
        out, so callers can index the result by any id they passed.
        """
        ids = {str(listing_id) for listing_id in listing_ids if listing_id}
        found = Listing.objects.in_bulk([parse_uuid(value) for value in ids])

        contexts = {}
        for listing_id in ids:
            listing = found.get(parse_uuid(listing_id))
            if listing is None:
                contexts[listing_id] = ListingContext(
                    listing_id=listing_id,
                    title=settings.CHAT_LISTING_FALLBACK_TITLE,
                    owner_id=None,
                    found=False,
                )
            else:
                contexts[listing_id] = ListingContext(
                    listing_id=listing_id,
                    title=listing.title,
                    owner_id=listing.owner_id,
                )
        return contexts
