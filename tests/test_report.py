"""Tests for report service: entry filters, totals and ledgers."""

from datetime import date

import pytest

from milkledger.domain.errors import ValidationError
from milkledger.domain.report import describe_entry, entry_amount
from milkledger.domain.entities import Category


@pytest.fixture
def dairy_month(entry_service, dairy_person):
    """Dairy entries spread over the three ten-day periods of January."""
    for day in (3, 10, 11, 20, 21, 31):
        entry_service.save_dairy_entry(dairy_person.id, date(2024, 1, day), "morning", 100, 4, 30)
    return dairy_person


def test_filter_entries_sorted_by_date_then_name(entry_service, report_service, person_service):
    amit = person_service.create_person("amit", 10, "city")
    zoya = person_service.create_person("Zoya", 10, "city")
    entry_service.save_city_entry(zoya.id, date(2024, 1, 15), 1)
    entry_service.save_city_entry(amit.id, date(2024, 1, 15), 1)
    entry_service.save_city_entry(zoya.id, date(2024, 1, 14), 1)

    entries = report_service.filter_entries("city")
    assert [(e.date.day, e.person_name) for e in entries] == [(14, "Zoya"), (15, "amit"), (15, "Zoya")]


def test_filter_entries_by_person_and_dates(entry_service, report_service, person_service, city_person):
    other = person_service.create_person("Cafe", 12, "city")
    for day in (1, 10, 20):
        entry_service.save_city_entry(city_person.id, date(2024, 1, day), 5)
    entry_service.save_city_entry(other.id, date(2024, 1, 10), 5)

    entries = report_service.filter_entries(
        Category.CITY, person_id=city_person.id, start_date=date(2024, 1, 5), end_date=date(2024, 1, 20)
    )
    assert [e.date.day for e in entries] == [10, 20]


@pytest.mark.parametrize(
    "period, days",
    [("1-10", [3, 10]), ("11-20", [11, 20]), ("21-31", [21, 31])],
)
def test_filter_dairy_period(report_service, dairy_month, period, days):
    entries = report_service.filter_entries("dairy", period=period)
    assert [e.date.day for e in entries] == days


def test_filter_unknown_period(report_service):
    with pytest.raises(ValidationError, match="Unknown period"):
        report_service.filter_entries("dairy", period="1-15")


def test_totals(report_service, dairy_month):
    entries = report_service.filter_entries("dairy", period="1-10")
    totals = report_service.totals(entries)
    assert totals.total_entries == 2
    assert totals.total_amount == pytest.approx(2 * 780.2568807, rel=1e-9)


def test_totals_of_nothing(report_service):
    totals = report_service.totals([])
    assert totals.total_amount == 0
    assert totals.total_entries == 0


class TestLedger:
    """Tests for per-person ledgers."""

    def test_running_balance(self, entry_service, payment_service, report_service, village_person):
        entry_service.save_village_entry(village_person.id, date(2024, 1, 10), 10, 4, 8, 3.5)
        payment_service.record_payment(village_person.id, date(2024, 1, 10), 1000, "part")
        payment_service.record_payment(village_person.id, date(2024, 1, 5), 400)

        [ledger] = report_service.ledger("village", date(2024, 1, 1), date(2024, 1, 31))

        assert ledger.total_earnings == 3400
        assert ledger.total_payments == 1400
        assert ledger.net_amount == 2000
        assert [(line.kind, line.amount, line.balance) for line in ledger.lines] == [
            ("payment", -400, -400),
            ("entry", 3400, 3000),
            ("payment", -1000, 2000),
        ]
        assert ledger.lines[0].description == "Payment - No comment"
        assert ledger.lines[2].description == "Payment - part"
        assert ledger.lines[1].description == "Village Entry - M/Milk: 10, E/Milk: 8"

    def test_every_person_of_the_line_is_listed(self, report_service, village_person, city_person, person_service):
        idle = person_service.create_person("Anil", 45, "village")

        ledgers = report_service.ledger("village", date(2024, 1, 1), date(2024, 1, 31))

        assert [lg.person_name for lg in ledgers] == ["Anil", "Ramesh"]
        assert all(lg.lines == () for lg in ledgers)
        assert ledgers[0].person_id == idle.id

    def test_out_of_range_lines_are_excluded(self, entry_service, payment_service, report_service, city_person):
        entry_service.save_city_entry(city_person.id, date(2023, 12, 31), 20)
        payment_service.record_payment(city_person.id, date(2024, 2, 1), 100)

        [ledger] = report_service.ledger("city", date(2024, 1, 1), date(2024, 1, 31))
        assert ledger.lines == ()
        assert ledger.net_amount == 0

    def test_single_person(self, report_service, village_person, person_service):
        person_service.create_person("Anil", 45, "village")
        ledgers = report_service.ledger("village", date(2024, 1, 1), date(2024, 1, 31), person_id=village_person.id)
        assert [lg.person_name for lg in ledgers] == ["Ramesh"]

    def test_reversed_range(self, report_service):
        with pytest.raises(ValidationError):
            report_service.ledger("village", date(2024, 2, 1), date(2024, 1, 1))


def test_entry_amount_and_description(entry_service, dairy_person):
    entry, _ = entry_service.save_dairy_entry(dairy_person.id, date(2024, 1, 15), "evening", 100, 4.5, 30)
    assert entry_amount(entry) == entry.total_amount
    assert describe_entry(Category.DAIRY, entry) == "Dairy Entry - evening - Milk: 100, Fat: 4.5"
