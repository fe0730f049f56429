"""
Unit tests for roster aggregations and date parsing.
"""
from datetime import datetime

import pytest

from roominglist.roster.aggregations import (
    percentage,
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
    is_split_stay,
    compute_stats
)
from roominglist.roster.dates import (
    parse_timestamp, parse_flight_date, is_parsable_timestamp, FALLBACK_INSTANT
)
from tests.conftest import snapshot


class TestDates:
    """Test cases for timestamp and flight-date parsing."""

    def test_parse_timestamp_formats(self):
        """ISO variants parse to the same instant."""
        expected = datetime(2025, 1, 2, 10, 0, 0)

        assert parse_timestamp("2025-01-02 10:00:00") == expected
        assert parse_timestamp("2025-01-02T10:00") == expected
        assert parse_timestamp("2025-01-02T10:00:00Z") == expected
        assert parse_timestamp("2025-01-02T12:00:00+02:00") == expected

    def test_parse_timestamp_fallback(self):
        """Unreadable timestamps map to the fallback instant."""
        assert parse_timestamp("") == FALLBACK_INSTANT
        assert parse_timestamp(None) == FALLBACK_INSTANT
        assert parse_timestamp("yesterday") == FALLBACK_INSTANT
        assert not is_parsable_timestamp("yesterday")
        assert is_parsable_timestamp("2025-01-02")

    def test_parse_flight_date_two_digit_year(self):
        """DD.MM.YY dates are in the 2000s."""
        assert parse_flight_date("05.03.25") == datetime(2025, 3, 5)
        assert parse_flight_date("5/3/2025") == datetime(2025, 3, 5)
        assert parse_flight_date("2025-03-05") == datetime(2025, 3, 5)

    def test_parse_flight_date_invalid(self):
        """Impossible or unreadable dates fall back."""
        assert parse_flight_date("31.02.25") == FALLBACK_INSTANT
        assert parse_flight_date("soon") == FALLBACK_INSTANT


class TestCounters:
    """Test cases for headline counters."""

    def test_empty_roster(self):
        """Every counter is zero for an empty roster."""
        stats = compute_stats([])

        assert stats.to_dict() == {
            'total_passengers': 0,
            'solo_travelers': 0,
            'unique_hotels': 0,
            'total_bookings': 0,
        }
        assert occupancy_by_hotel([]) == []
        assert unique_passengers_by_agency([]) == []
        assert unique_flight_dates([]) == ["all"]

    def test_split_stay_counts_once_as_passenger(self):
        """One passenger in two hotels is one passenger and two bookings."""
        records = [
            snapshot(reservation_code="R3", passport_number="P9", hotel="A"),
            snapshot(reservation_code="R3", passport_number="P9", hotel="B"),
        ]

        assert total_unique_passengers(records) == 1
        assert total_bookings(records) == 2
        assert unique_hotels(records) == 2
        assert multi_hotel_codes(records) == {"R3"}

    def test_same_passport_in_two_reservations(self):
        """Passenger identity is the (reservation, passport) pair."""
        records = [
            snapshot(reservation_code="R1", passport_number="P1"),
            snapshot(reservation_code="R2", passport_number="P1"),
        ]

        assert total_unique_passengers(records) == 2

    def test_sample_roster_stats(self, sample_roster):
        """Headline counters over the sample roster."""
        stats = compute_stats(sample_roster, "venetur margarita")

        assert stats.total_passengers == 5
        assert stats.total_bookings == 6
        assert stats.unique_hotels == 3
        assert stats.solo_travelers == 2

    def test_bookings_never_below_passengers(self, sample_roster):
        """There are at least as many stays as passengers."""
        assert total_bookings(sample_roster) >= total_unique_passengers(sample_roster)


class TestSoloTravelers:
    """Test cases for the solo-traveler metric."""

    def test_solo_at_target_hotel(self):
        """A single-passport reservation at the target counts."""
        records = [snapshot(reservation_code="R4", passport_number="P1", hotel="Venetur Margarita Resort")]

        assert solo_travelers_at_hotel(records, "venetur margarita") == 1

    def test_couple_not_counted(self):
        """Two passports in one reservation are not solo."""
        records = [
            snapshot(reservation_code="R5", passport_number="P1", hotel="Venetur Margarita"),
            snapshot(reservation_code="R5", passport_number="P2", hotel="Venetur Margarita"),
        ]

        assert solo_travelers_at_hotel(records, "venetur margarita") == 0

    def test_split_stay_touching_target_counts(self):
        """One passport staying at the target for part of the trip counts."""
        records = [
            snapshot(reservation_code="R6", passport_number="P1", hotel="Hotel Bella Vista"),
            snapshot(reservation_code="R6", passport_number="P1", hotel="VENETUR MARGARITA"),
        ]

        assert solo_travelers_at_hotel(records, "venetur margarita") == 1

    def test_other_hotel_not_counted(self):
        """A solo reservation elsewhere does not count."""
        records = [snapshot(reservation_code="R7", passport_number="P1", hotel="Hotel Bella Vista")]

        assert solo_travelers_at_hotel(records, "venetur margarita") == 0

    def test_default_target_from_config(self):
        """The configured target is used when none is given."""
        records = [snapshot(reservation_code="R8", hotel="Venetur Margarita")]

        assert solo_travelers_at_hotel(records) == 1


class TestSeries:
    """Test cases for chart series."""

    def test_occupancy_by_hotel(self, sample_roster):
        """Hotels are ordered by stays, with percentages over all stays."""
        series = occupancy_by_hotel(sample_roster)

        assert [(g.label, g.count) for g in series] == [
            ("Hotel Bella Vista", 3),
            ("Venetur Margarita Resort", 2),
            ("Ávila Suites", 1),
        ]
        assert series[0].percentage == pytest.approx(50.0)
        assert sum(g.percentage for g in series) == pytest.approx(100.0)

    def test_bookings_by_agency_unknown_label(self, sample_roster):
        """Stays without agency are grouped under Unknown."""
        series = bookings_by_agency(sample_roster)

        assert [(g.label, g.count) for g in series] == [
            ("Sol Tours", 3),
            ("Viajes Caribe", 2),
            ("Unknown", 1),
        ]

    def test_unique_passengers_by_agency(self, sample_roster):
        """Distinct passengers per agency, percentages over all passengers."""
        series = unique_passengers_by_agency(sample_roster)

        assert [(g.label, g.count) for g in series] == [
            ("Sol Tours", 3),
            ("Viajes Caribe", 1),
            ("Sin Agencia", 1),
        ]
        assert series[0].percentage == pytest.approx(60.0)
        assert series[2].percentage == pytest.approx(20.0)

    def test_missing_hotel_label(self):
        """Stays without hotel are grouped under Unknown."""
        series = occupancy_by_hotel([snapshot(hotel="")])

        assert series[0].label == "Unknown"
        assert series[0].percentage == pytest.approx(100.0)

    def test_nights_by_hotel(self, sample_roster):
        """Nights are summed per hotel."""
        series = nights_by_hotel(sample_roster)

        assert [(g.label, g.count) for g in series] == [
            ("Venetur Margarita Resort", 9),
            ("Hotel Bella Vista", 8),
            ("Ávila Suites", 7),
        ]

    def test_nights_without_values(self):
        """Missing nights contribute nothing and never divide by zero."""
        series = nights_by_hotel([snapshot(nights=None)])

        assert series[0].count == 0
        assert series[0].percentage == 0.0

    def test_equal_counts_keep_first_appearance(self):
        """Ties keep the order groups first appear in."""
        records = [snapshot(hotel="Zeta"), snapshot(hotel="Alfa")]

        assert [g.label for g in occupancy_by_hotel(records)] == ["Zeta", "Alfa"]

    def test_percentage_zero_total(self):
        """A zero total yields 0 rather than an error."""
        assert percentage(3, 0) == 0.0
        assert percentage(1, 4) == pytest.approx(25.0)


class TestFlightDates:
    """Test cases for flight-date selection."""

    def test_chronological_order(self):
        """Two-digit-year dates sort by date, not text."""
        records = [
            snapshot(flight_date="01.04.25"),
            snapshot(flight_date="28.12.24"),
            snapshot(flight_date="15.03.25"),
            snapshot(flight_date="15.03.25"),
        ]

        assert unique_flight_dates(records) == ["all", "28.12.24", "15.03.25", "01.04.25"]

    def test_filter_by_flight_date(self, sample_roster):
        """Filtering keeps only records of that date; 'all' keeps everything."""
        assert len(filter_by_flight_date(sample_roster, "12.03.25")) == 3
        assert len(filter_by_flight_date(sample_roster, "all")) == len(sample_roster)
        assert filter_by_flight_date(sample_roster, "01.01.30") == []

    def test_filtered_stats(self, sample_roster):
        """Statistics follow the flight-date selection."""
        stats = compute_stats(filter_by_flight_date(sample_roster, "12.03.25"), "venetur margarita")

        assert stats.total_passengers == 2
        assert stats.total_bookings == 3
        assert stats.solo_travelers == 1


class TestSplitStays:
    """Test cases for multi-hotel reservation detection."""

    def test_split_stay_flag(self, sample_roster):
        """Every record of a multi-hotel reservation is flagged."""
        anomalies = multi_hotel_codes(sample_roster)

        assert anomalies == {"R3"}
        flagged = [r for r in sample_roster if is_split_stay(r, anomalies)]
        assert len(flagged) == 2
        assert all(r.reservation_code == "R3" for r in flagged)

    def test_single_hotel_group_not_flagged(self):
        """Several passengers in one hotel are not a split stay."""
        records = [
            snapshot(reservation_code="R2", passport_number="P1", hotel="A"),
            snapshot(reservation_code="R2", passport_number="P2", hotel="A"),
        ]

        assert multi_hotel_codes(records) == set()
