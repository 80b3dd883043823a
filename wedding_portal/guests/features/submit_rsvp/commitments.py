from collections.abc import Iterable
from decimal import Decimal

from wedding_portal.guests.dtos import AccommodationGroupDTO, ContributionTier


def accommodation_commitment(
    group: AccommodationGroupDTO, tier: ContributionTier
) -> Decimal:
    """fraction x nightly cost x nights."""
    return tier.fraction * group.per_night_cost * group.number_of_nights


def excursion_commitment(
    tiers: Iterable[ContributionTier], cost_per_person: Decimal | int
) -> Decimal:
    return sum((tier.fraction * Decimal(cost_per_person) for tier in tiers), Decimal("0"))
