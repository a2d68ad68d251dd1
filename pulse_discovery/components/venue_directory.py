"""Venue name resolution for listings and deals."""

from typing import Dict, Iterable, Optional, Union

from ..models.deal import Deal
from ..models.listing import Listing
from ..models.service import Venue


class VenueDirectory:
    """Resolves display names for the venue a record belongs to."""

    def __init__(self, venues: Optional[Iterable[Venue]] = None):
        """Initialize directory from a venue table."""
        self._venues: Dict[str, Venue] = {}
        for venue in venues or []:
            self._venues[venue.id] = venue

    def __len__(self) -> int:
        return len(self._venues)

    def get(self, venue_id: Optional[str]) -> Optional[Venue]:
        if not venue_id:
            return None
        return self._venues.get(venue_id)

    def venue_name(self, record: Union[Listing, Deal]) -> str:
        """
        Resolve the venue name for a record.

        Inline names win over the venue table; unknown venues resolve to "".
        """
        if record.venue_name:
            return record.venue_name

        venue = self.get(record.venue_id)
        if venue is not None and venue.name:
            return venue.name

        return ""

    def is_verified(self, venue_id: Optional[str]) -> bool:
        venue = self.get(venue_id)
        return venue.verified if venue is not None else False

    def names(self):
        """All non-empty venue names in the table."""
        return [venue.name for venue in self._venues.values() if venue.name]
