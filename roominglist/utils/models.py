"""
Data models for the Rooming List reconciliation system.
"""
import re
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Optional, Dict, Any, List, Tuple
from enum import Enum


ALL = "all"


class BookingStatus(Enum):
    """Lifecycle status reported by a booking email."""
    NEW_BOOKING = "NEW_BOOKING"
    AMEND = "AMEND"
    CANCELLATION = "CANCELLATION"

    @classmethod
    def normalize(cls, raw: Optional[str]) -> Optional['BookingStatus']:
        """Map free-text status ("new booking", "Cancellation", ...) to a member."""
        if not raw:
            return None
        key = re.sub(r'[\s\-]+', '_', str(raw).strip()).upper()
        try:
            return cls(key)
        except ValueError:
            return None


class SortDirection(Enum):
    """Guest list sort direction."""
    ASC = "asc"
    DESC = "desc"


class LoadState(Enum):
    """State of the current roster load."""
    EMPTY = "empty"
    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


class ExtractionError(Exception):
    """The extraction service failed or returned data that is not a snapshot list."""


# Keys emitted by the Spanish-language extraction schema
SOURCE_FIELD_ALIASES = {
    'fechaVuelo': 'flight_date',
    'fechaHoraCorreo': 'email_timestamp',
    'estatus': 'status',
    'codigoReserva': 'reservation_code',
    'genero': 'gender',
    'nombreCompleto': 'full_name',
    'fechaNacimiento': 'birth_date',
    'edad': 'age',
    'pasaporte': 'passport_number',
    'nacionalidad': 'nationality',
    'agencia': 'agency',
    'fechaInicio': 'check_in',
    'fechaFin': 'check_out',
    'noches': 'nights',
    'hotel': 'hotel',
    'planDeComidas': 'meal_plan',
    'alojamiento': 'accommodation',
    'observaciones': 'remarks',
}

INTEGER_FIELDS = ('age', 'nights')


def _to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat(sep=' ')
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip()))
    except (ValueError, TypeError):
        return None


@dataclass(frozen=True)
class BookingSnapshot:
    """One passenger's booking state as reported by one email."""
    flight_date: str = ""
    email_timestamp: str = ""
    status: str = ""
    reservation_code: str = ""
    gender: str = ""
    full_name: str = ""
    birth_date: str = ""
    age: Optional[int] = None
    passport_number: str = ""
    nationality: str = ""
    agency: str = ""
    check_in: str = ""
    check_out: str = ""
    nights: Optional[int] = None
    hotel: str = ""
    meal_plan: str = ""
    accommodation: str = ""
    remarks: str = ""

    @property
    def normalized_status(self) -> Optional[BookingStatus]:
        return BookingStatus.normalize(self.status)

    @property
    def is_cancellation(self) -> bool:
        return self.normalized_status is BookingStatus.CANCELLATION

    @property
    def passenger_key(self) -> Tuple[str, str]:
        """Identity used for unique-passenger counts."""
        return (self.reservation_code, self.passport_number)

    @property
    def stay(self) -> str:
        return f"{self.check_in} - {self.check_out}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert the snapshot to a plain dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BookingSnapshot':
        """
        Build a snapshot from extraction output.

        Missing text fields become empty strings and numbers that cannot be
        read become None, so a partially filled item never fails the batch.
        """
        values: Dict[str, Any] = {}
        names = {f.name for f in fields(cls)}
        for key, value in data.items():
            name = SOURCE_FIELD_ALIASES.get(key, key)
            if name in names and values.get(name) in (None, ""):
                values[name] = value

        kwargs = {}
        for name in names:
            raw = values.get(name)
            if name in INTEGER_FIELDS:
                kwargs[name] = _to_int(raw)
            else:
                kwargs[name] = _to_text(raw)
        return cls(**kwargs)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def __str__(self) -> str:
        return (f"BookingSnapshot(reservation_code='{self.reservation_code}', "
                f"passport='{self.passport_number}', "
                f"hotel='{self.hotel}', "
                f"status='{self.status}', "
                f"email_timestamp='{self.email_timestamp}')")


# A snapshot known to be the latest non-cancelled state of its reservation code
ReconciledRecord = BookingSnapshot


@dataclass(frozen=True)
class FilterContext:
    """Filter and sort selections applied to the reconciled roster."""
    hotel: str = ALL
    agency: str = ALL
    flight_date: str = ALL
    search_text: str = ""
    sort_key: Optional[str] = None
    sort_direction: SortDirection = SortDirection.ASC

    def __post_init__(self):
        if isinstance(self.sort_direction, str):
            object.__setattr__(self, 'sort_direction', SortDirection(self.sort_direction.lower()))

    @property
    def hotel_selected(self) -> bool:
        return bool(self.hotel) and self.hotel != ALL

    @property
    def agency_selected(self) -> bool:
        return bool(self.agency) and self.agency != ALL

    def with_sort(self, key: str) -> 'FilterContext':
        """Return a copy sorted by key, toggling direction on a repeated ascending key."""
        direction = SortDirection.ASC
        if self.sort_key == key and self.sort_direction is SortDirection.ASC:
            direction = SortDirection.DESC
        return FilterContext(
            hotel=self.hotel,
            agency=self.agency,
            flight_date=self.flight_date,
            search_text=self.search_text,
            sort_key=key,
            sort_direction=direction,
        )


@dataclass(frozen=True)
class GroupCount:
    """One bar of a grouped count series."""
    label: str
    count: int
    percentage: float = 0.0


@dataclass(frozen=True)
class GuestGroup:
    """A titled section of the guest list."""
    label: str
    records: Tuple[BookingSnapshot, ...] = ()

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class RosterStats:
    """Headline counters for the filtered roster."""
    total_passengers: int = 0
    solo_travelers: int = 0
    unique_hotels: int = 0
    total_bookings: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'total_passengers': self.total_passengers,
            'solo_travelers': self.solo_travelers,
            'unique_hotels': self.unique_hotels,
            'total_bookings': self.total_bookings,
        }


@dataclass
class ReconciliationReport:
    """Counters describing one reconciliation pass."""
    snapshots_received: int = 0
    cancelled_codes: List[str] = field(default_factory=list)
    cancelled_snapshots: int = 0
    superseded_snapshots: int = 0
    unparsable_timestamps: int = 0
    records_kept: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'snapshots_received': self.snapshots_received,
            'cancelled_codes': list(self.cancelled_codes),
            'cancelled_snapshots': self.cancelled_snapshots,
            'superseded_snapshots': self.superseded_snapshots,
            'unparsable_timestamps': self.unparsable_timestamps,
            'records_kept': self.records_kept,
        }
