"""
Search, sort and grouping of the guest list table.
"""
import unicodedata
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..utils.models import ALL, BookingSnapshot, FilterContext, GuestGroup, SortDirection

SORTABLE_FIELDS = tuple(BookingSnapshot.field_names())


def collation_key(value: str) -> Tuple[str, str]:
    """Accent- and case-insensitive ordering key, raw value as tie-break."""
    decomposed = unicodedata.normalize('NFKD', value)
    folded = ''.join(c for c in decomposed if not unicodedata.combining(c)).casefold()
    return (folded, value)


def hotel_options(records: Sequence[BookingSnapshot]) -> List[str]:
    return [ALL] + sorted({r.hotel for r in records})


def agency_options(records: Sequence[BookingSnapshot]) -> List[str]:
    return [ALL] + sorted({r.agency for r in records if r.agency})


def search_records(records: Sequence[BookingSnapshot], text: Optional[str]) -> List[BookingSnapshot]:
    """Keep records whose name, passport, reservation code or agency contains text."""
    if not text:
        return list(records)
    needle = text.lower()
    return [
        r for r in records
        if needle in r.full_name.lower()
        or needle in r.passport_number.lower()
        or needle in r.reservation_code.lower()
        or needle in r.agency.lower()
    ]


def _sort_value(record: BookingSnapshot, key: str) -> Tuple[int, Any]:
    value = getattr(record, key)
    if value is None:
        value = ""
    # Numbers order before text so mixed columns never compare int to str
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, str(value))


def sort_records(
    records: Sequence[BookingSnapshot],
    key: Optional[str],
    direction: SortDirection = SortDirection.ASC,
) -> List[BookingSnapshot]:
    """Stable single-key sort; absent fields compare as empty strings."""
    if not key:
        return list(records)
    if key not in SORTABLE_FIELDS:
        raise ValueError(f"Unknown sort key: {key}. Allowed values: {list(SORTABLE_FIELDS)}")
    return sorted(
        records,
        key=lambda r: _sort_value(r, key),
        reverse=direction is SortDirection.DESC,
    )


def group_records(records: Sequence[BookingSnapshot], by_flight_date: bool = False) -> List[GuestGroup]:
    """
    Split records into display sections.

    Sections are keyed by hotel, or by flight date when a single hotel is
    being shown. Records keep their incoming order within a section.
    """
    sections: Dict[str, List[BookingSnapshot]] = {}
    for record in records:
        label = record.flight_date if by_flight_date else record.hotel
        sections.setdefault(label, []).append(record)

    ordered = sorted(sections.items(), key=lambda item: collation_key(item[0]))
    return [GuestGroup(label, tuple(members)) for label, members in ordered]


def build_guest_list(records: Sequence[BookingSnapshot], context: FilterContext) -> List[GuestGroup]:
    """Apply hotel, agency and text filters, then sort and group."""
    selected = list(records)

    if context.hotel_selected:
        selected = [r for r in selected if r.hotel == context.hotel]

    if context.agency_selected:
        selected = [r for r in selected if r.agency == context.agency]

    selected = search_records(selected, context.search_text)
    selected = sort_records(selected, context.sort_key, context.sort_direction)

    return group_records(selected, by_flight_date=context.hotel_selected)


def flatten_groups(groups: Sequence[GuestGroup]) -> List[BookingSnapshot]:
    """Records of all sections in display order, as consumed by exporters."""
    return [record for group in groups for record in group.records]
