"""
Shared fixtures for the rooming list test suite.
"""
import pytest

from roominglist.utils.models import BookingSnapshot


def pytest_collection_modifyitems(items):
    """Everything not marked as integration runs with the unit tests."""
    for item in items:
        if item.get_closest_marker("integration") is None:
            item.add_marker(pytest.mark.unit)


def snapshot(**overrides) -> BookingSnapshot:
    """Build a snapshot with sensible defaults."""
    values = dict(
        flight_date="2025-03-05",
        email_timestamp="2025-01-01 10:00:00",
        status="NEW BOOKING",
        reservation_code="R1",
        gender="Mr.",
        full_name="Juan Perez",
        birth_date="1980-04-12",
        age=44,
        passport_number="P1",
        nationality="Argentina",
        agency="Sol Tours",
        check_in="2025-03-05",
        check_out="2025-03-10",
        nights=5,
        hotel="Hotel A",
        meal_plan="All Inclusive",
        accommodation="DBL",
        remarks="",
    )
    values.update(overrides)
    return BookingSnapshot(**values)


@pytest.fixture
def make_snapshot():
    """Factory fixture for booking snapshots."""
    return snapshot


@pytest.fixture
def sample_roster():
    """A small reconciled roster spanning two flight dates and three hotels."""
    return [
        snapshot(reservation_code="R1", passport_number="P1", full_name="Juan Perez",
                 hotel="Venetur Margarita Resort", agency="Sol Tours", flight_date="05.03.25", nights=4),
        snapshot(reservation_code="R2", passport_number="P2", full_name="Ana Gomez",
                 hotel="Hotel Bella Vista", agency="Sol Tours", flight_date="05.03.25", nights=3),
        snapshot(reservation_code="R2", passport_number="P3", full_name="Luis Gomez",
                 hotel="Hotel Bella Vista", agency="Sol Tours", flight_date="05.03.25", nights=3),
        snapshot(reservation_code="R3", passport_number="P4", full_name="Maria Diaz",
                 hotel="Hotel Bella Vista", agency="Viajes Caribe", flight_date="12.03.25", nights=2),
        snapshot(reservation_code="R3", passport_number="P4", full_name="Maria Diaz",
                 hotel="Venetur Margarita Resort", agency="Viajes Caribe", flight_date="12.03.25", nights=5),
        snapshot(reservation_code="R4", passport_number="P5", full_name="Pedro Ruiz",
                 hotel="Ávila Suites", agency="", flight_date="12.03.25", nights=7),
    ]
