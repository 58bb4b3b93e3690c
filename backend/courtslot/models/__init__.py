"""ORM models package export."""

from courtslot.models.availability_block import AvailabilityBlock
from courtslot.models.club import Club, ClubBusinessHour, ClubSpecialHour
from courtslot.models.court import Court
from courtslot.models.holiday import Holiday
from courtslot.models.player import Player
from courtslot.models.price_rule import CourtPriceRule, PriceRuleType
from courtslot.models.reservation import (
    ACTIVE_RESERVATION_STATUSES,
    Reservation,
    ReservationMode,
    ReservationStatus,
)

__all__ = [
    "ACTIVE_RESERVATION_STATUSES",
    "AvailabilityBlock",
    "Club",
    "ClubBusinessHour",
    "ClubSpecialHour",
    "Court",
    "CourtPriceRule",
    "Holiday",
    "Player",
    "PriceRuleType",
    "Reservation",
    "ReservationMode",
    "ReservationStatus",
]
