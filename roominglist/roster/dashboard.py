"""
Composition of every derived view the dashboard shows for one filter context.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config.settings import roster_config
from ..utils.models import BookingSnapshot, FilterContext, GroupCount, GuestGroup, RosterStats
from . import aggregations
from .guest_list import agency_options, build_guest_list, hotel_options


@dataclass
class Dashboard:
    """Presentation-ready views computed from the reconciled roster."""
    flight_dates: List[str] = field(default_factory=list)
    stats: RosterStats = field(default_factory=RosterStats)
    occupancy_by_hotel: List[GroupCount] = field(default_factory=list)
    bookings_by_agency: List[GroupCount] = field(default_factory=list)
    unique_passengers_by_agency: List[GroupCount] = field(default_factory=list)
    nights_by_hotel: List[GroupCount] = field(default_factory=list)
    hotels: List[str] = field(default_factory=list)
    agencies: List[str] = field(default_factory=list)
    guest_groups: List[GuestGroup] = field(default_factory=list)
    split_stay_codes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        def series(items: List[GroupCount]) -> List[Dict[str, Any]]:
            return [
                {'label': g.label, 'count': g.count, 'percentage': round(g.percentage, 2)}
                for g in items
            ]

        split_stays = set(self.split_stay_codes)
        return {
            'flight_dates': list(self.flight_dates),
            'stats': self.stats.to_dict(),
            'occupancy_by_hotel': series(self.occupancy_by_hotel),
            'bookings_by_agency': series(self.bookings_by_agency),
            'unique_passengers_by_agency': series(self.unique_passengers_by_agency),
            'nights_by_hotel': series(self.nights_by_hotel),
            'hotels': list(self.hotels),
            'agencies': list(self.agencies),
            'guest_groups': [
                {
                    'label': g.label,
                    'records': [
                        dict(r.to_dict(), split_stay=r.reservation_code in split_stays)
                        for r in g.records
                    ],
                }
                for g in self.guest_groups
            ],
            'split_stay_codes': list(self.split_stay_codes),
        }


def build_dashboard(
    records: Sequence[BookingSnapshot],
    context: Optional[FilterContext] = None,
    solo_hotel: Optional[str] = None,
) -> Dashboard:
    """
    Build all dashboard views.

    The flight-date selection narrows statistics and charts. The guest list
    and the split-stay codes always work on the full reconciled roster.
    """
    context = context or FilterContext()
    solo_hotel = solo_hotel if solo_hotel is not None else roster_config.solo_hotel_target

    filtered = aggregations.filter_by_flight_date(records, context.flight_date)

    return Dashboard(
        flight_dates=aggregations.unique_flight_dates(records),
        stats=aggregations.compute_stats(filtered, solo_hotel),
        occupancy_by_hotel=aggregations.occupancy_by_hotel(filtered),
        bookings_by_agency=aggregations.bookings_by_agency(filtered),
        unique_passengers_by_agency=aggregations.unique_passengers_by_agency(filtered),
        nights_by_hotel=aggregations.nights_by_hotel(filtered),
        hotels=hotel_options(records),
        agencies=agency_options(records),
        guest_groups=build_guest_list(records, context),
        split_stay_codes=sorted(aggregations.multi_hotel_codes(records)),
    )
