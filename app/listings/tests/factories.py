"""
Factory Boy factories for listings.

Usage:
    from listings.tests.factories import ListingFactory

    listing = ListingFactory(owner=landlord, title="Sunny 2BR")
"""

import factory

from authentication.tests.factories import UserFactory
from listings.models import Listing


class ListingFactory(factory.django.DjangoModelFactory):
    """Factory for Listing; creates an owner unless one is given."""

    class Meta:
        model = Listing

    title = factory.Sequence(lambda n: f"Room for rent #{n}")
    owner = factory.SubFactory(UserFactory)
    is_available = True
