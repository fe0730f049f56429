"""
Aggregate views over the reconciled roster.

Every function here is a pure function of its arguments and tolerates an
empty record list.
"""
from typing import Callable, Dict, Hashable, Iterable, List, Optional, Sequence, Set

from config.settings import roster_config
from ..utils.models import ALL, BookingSnapshot, GroupCount, RosterStats
from .dates import parse_flight_date


def percentage(count: int, total: int) -> float:
    """Share of total as a percentage; 0 when total is 0."""
    if total <= 0:
        return 0.0
    return count / total * 100


def filter_by_flight_date(records: Sequence[BookingSnapshot], flight_date: Optional[str]) -> List[BookingSnapshot]:
    if not flight_date or flight_date == ALL:
        return list(records)
    return [r for r in records if r.flight_date == flight_date]


def unique_flight_dates(records: Iterable[BookingSnapshot]) -> List[str]:
    """Distinct flight dates in chronological order, preceded by "all"."""
    dates = {r.flight_date for r in records}
    ordered = sorted(dates, key=lambda d: (parse_flight_date(d), d))
    return [ALL] + ordered


def total_unique_passengers(records: Iterable[BookingSnapshot]) -> int:
    return len({r.passenger_key for r in records})


def unique_hotels(records: Iterable[BookingSnapshot]) -> int:
    return len({r.hotel for r in records})


def total_bookings(records: Sequence[BookingSnapshot]) -> int:
    return len(records)


def solo_travelers_at_hotel(records: Iterable[BookingSnapshot], hotel_substring: Optional[str] = None) -> int:
    """
    Count reservation codes with exactly one distinct passport that stay,
    at least once, at a hotel whose name contains hotel_substring.
    """
    target = (hotel_substring if hotel_substring is not None else roster_config.solo_hotel_target).lower()

    by_code: Dict[str, List[BookingSnapshot]] = {}
    for record in records:
        by_code.setdefault(record.reservation_code, []).append(record)

    solo = 0
    for group in by_code.values():
        if len({r.passport_number for r in group}) != 1:
            continue
        if any(target in r.hotel.lower() for r in group):
            solo += 1
    return solo


def _sorted_counts(counts: Dict[str, int], total: int) -> List[GroupCount]:
    # sorted() is stable, so equal counts keep first-appearance order
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [GroupCount(label, count, percentage(count, total)) for label, count in ordered]


def count_by(
    records: Sequence[BookingSnapshot],
    label_of: Callable[[BookingSnapshot], str],
) -> List[GroupCount]:
    """Count raw records per label, largest group first."""
    counts: Dict[str, int] = {}
    for record in records:
        label = label_of(record)
        counts[label] = counts.get(label, 0) + 1
    return _sorted_counts(counts, len(records))


def count_distinct_by(
    records: Sequence[BookingSnapshot],
    label_of: Callable[[BookingSnapshot], str],
    key_of: Callable[[BookingSnapshot], Hashable],
) -> List[GroupCount]:
    """Count distinct keys per label; percentages are over all distinct keys."""
    members: Dict[str, Set[Hashable]] = {}
    for record in records:
        members.setdefault(label_of(record), set()).add(key_of(record))
    total = len({key_of(r) for r in records})
    return _sorted_counts({label: len(keys) for label, keys in members.items()}, total)


def occupancy_by_hotel(records: Sequence[BookingSnapshot]) -> List[GroupCount]:
    """Hotel stays per hotel."""
    return count_by(records, lambda r: r.hotel or roster_config.unknown_label)


def bookings_by_agency(records: Sequence[BookingSnapshot]) -> List[GroupCount]:
    """Hotel stays per travel agency."""
    return count_by(records, lambda r: r.agency or roster_config.unknown_label)


def unique_passengers_by_agency(records: Sequence[BookingSnapshot]) -> List[GroupCount]:
    """Distinct passengers per travel agency."""
    return count_distinct_by(
        records,
        lambda r: r.agency or roster_config.no_agency_label,
        lambda r: r.passenger_key,
    )


def nights_by_hotel(records: Sequence[BookingSnapshot]) -> List[GroupCount]:
    """Booked nights per hotel; percentage is the share of all nights."""
    nights: Dict[str, int] = {}
    for record in records:
        label = record.hotel or roster_config.unknown_label
        nights[label] = nights.get(label, 0) + (record.nights or 0)
    return _sorted_counts(nights, sum(nights.values()))


def multi_hotel_codes(records: Iterable[BookingSnapshot]) -> Set[str]:
    """Reservation codes whose records reference more than one hotel (split stays)."""
    hotels_by_code: Dict[str, Set[str]] = {}
    for record in records:
        hotels_by_code.setdefault(record.reservation_code, set()).add(record.hotel)
    return {code for code, hotels in hotels_by_code.items() if len(hotels) > 1}


def is_split_stay(record: BookingSnapshot, anomalies: Set[str]) -> bool:
    return record.reservation_code in anomalies


def compute_stats(records: Sequence[BookingSnapshot], hotel_substring: Optional[str] = None) -> RosterStats:
    return RosterStats(
        total_passengers=total_unique_passengers(records),
        solo_travelers=solo_travelers_at_hotel(records, hotel_substring),
        unique_hotels=unique_hotels(records),
        total_bookings=total_bookings(records),
    )
