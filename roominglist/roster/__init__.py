"""
Roster reconciliation and aggregation.
"""

from .reconciler import reconcile, reconcile_with_report, cancelled_codes
from .aggregations import (
    filter_by_flight_date,
    unique_flight_dates,
    total_unique_passengers,
    unique_hotels,
    total_bookings,
    solo_travelers_at_hotel,
    occupancy_by_hotel,
    bookings_by_agency,
    unique_passengers_by_agency,
    nights_by_hotel,
    multi_hotel_codes,
    compute_stats
)
from .guest_list import build_guest_list, flatten_groups
from .dashboard import Dashboard, build_dashboard

__all__ = [
    'reconcile',
    'reconcile_with_report',
    'cancelled_codes',
    'filter_by_flight_date',
    'unique_flight_dates',
    'total_unique_passengers',
    'unique_hotels',
    'total_bookings',
    'solo_travelers_at_hotel',
    'occupancy_by_hotel',
    'bookings_by_agency',
    'unique_passengers_by_agency',
    'nights_by_hotel',
    'multi_hotel_codes',
    'compute_stats',
    'build_guest_list',
    'flatten_groups',
    'Dashboard',
    'build_dashboard'
]
