"""Report domain service: filtered entry views, totals and per-person ledgers."""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from milkledger.domain.entities import Category, DairyEntry, ENTRY_COLLECTIONS
from milkledger.domain.entry import Entry
from milkledger.domain.errors import ValidationError
from milkledger.domain.person import PersonService, parse_category
from milkledger.domain.sync import SyncCoordinator
from milkledger.utils.number_parser import format_number

# Ten-day billing periods of the dairy cooperative, as day-of-month ranges
DAIRY_PERIODS: dict[str, tuple[int, int]] = {
    "1-10": (1, 10),
    "11-20": (11, 20),
    "21-31": (21, 31),
}


@dataclass(frozen=True)
class ReportTotals:
    total_amount: float
    total_entries: int


@dataclass(frozen=True)
class LedgerLine:
    """One dated line of a person's ledger.

    Entries are positive; payments are negative. ``balance`` is the running
    balance after this line.
    """

    date: date
    kind: str
    amount: float
    description: str
    balance: float


@dataclass(frozen=True)
class PersonLedger:
    person_id: str
    person_name: str
    total_earnings: float
    total_payments: float
    lines: tuple[LedgerLine, ...]

    @property
    def net_amount(self) -> float:
        return self.total_earnings - self.total_payments


def entry_amount(entry: Entry) -> float:
    """Money value of an entry; dairy entries carry it as total_amount."""
    if isinstance(entry, DairyEntry):
        return entry.total_amount
    return entry.amount


def describe_entry(category: Category, entry: Entry) -> str:
    """Ledger description of an entry."""
    if category is Category.VILLAGE:
        return f"Village Entry - M/Milk: {format_number(entry.m_milk)}, E/Milk: {format_number(entry.e_milk)}"
    if category is Category.CITY:
        return f"City Entry - Value: {format_number(entry.value)}"
    return (
        f"Dairy Entry - {entry.session.value} - Milk: {format_number(entry.milk)}, "
        f"Fat: {format_number(entry.fat)}"
    )


class ReportService:
    """Service for building entry views and ledgers."""

    def __init__(self, context: SyncCoordinator):
        """Initialize report service.

        Args:
            context: Sync coordinator of the signed-in owner
        """
        self.context = context
        self.person_service = PersonService(context)

    def filter_entries(
        self,
        category: Category | str,
        person_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        period: Optional[str] = None,
    ) -> list[Entry]:
        """List entries of a business line, sorted by date then person name.

        Args:
            category: Business line
            person_id: Optional person filter
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            period: Optional day-of-month period ("1-10", "11-20", "21-31")

        Raises:
            ValidationError: If the category or period is unknown
        """
        category = parse_category(category)
        day_range = None
        if period is not None:
            if period not in DAIRY_PERIODS:
                raise ValidationError(
                    f"Unknown period '{period}'. Choose one of: {', '.join(DAIRY_PERIODS)}"
                )
            day_range = DAIRY_PERIODS[period]

        entries = []
        for entry in self.context.data.get(ENTRY_COLLECTIONS[category]):
            if person_id is not None and entry.person_id != person_id:
                continue
            if start_date is not None and entry.date < start_date:
                continue
            if end_date is not None and entry.date > end_date:
                continue
            if day_range is not None and not (day_range[0] <= entry.date.day <= day_range[1]):
                continue
            entries.append(entry)

        return sorted(entries, key=lambda e: (e.date, e.person_name.lower()))

    def totals(self, entries: Sequence[Entry]) -> ReportTotals:
        """Sum the money value of entries."""
        return ReportTotals(
            total_amount=sum(entry_amount(e) for e in entries),
            total_entries=len(entries),
        )

    def ledger(
        self,
        category: Category | str,
        start_date: date,
        end_date: date,
        person_id: Optional[str] = None,
    ) -> list[PersonLedger]:
        """Build per-person ledgers for a business line over a date range.

        Every person of the line gets a ledger, even without lines in range.
        Lines are sorted by date; on the same day entries come before payments.

        Raises:
            ValidationError: If the range is reversed
        """
        category = parse_category(category)
        if start_date > end_date:
            raise ValidationError("Start date must be on or before end date")

        people = self.person_service.list_people(category)
        if person_id is not None:
            people = [p for p in people if p.id == person_id]

        ledgers = []
        for person in people:
            raw_lines: list[tuple[date, str, float, str]] = []
            total_earnings = 0.0
            total_payments = 0.0

            for entry in self.filter_entries(category, person.id, start_date, end_date):
                amount = entry_amount(entry)
                total_earnings += amount
                raw_lines.append((entry.date, "entry", amount, describe_entry(category, entry)))

            for payment in self.context.data.payments:
                if payment.person_id != person.id or payment.category is not category:
                    continue
                if not (start_date <= payment.date <= end_date):
                    continue
                total_payments += payment.amount
                raw_lines.append(
                    (payment.date, "payment", -payment.amount, f"Payment - {payment.comment or 'No comment'}")
                )

            raw_lines.sort(key=lambda line: line[0])
            balance = 0.0
            lines = []
            for line_date, kind, amount, description in raw_lines:
                balance += amount
                lines.append(LedgerLine(line_date, kind, amount, description, balance))

            ledgers.append(
                PersonLedger(
                    person_id=person.id,
                    person_name=person.name,
                    total_earnings=total_earnings,
                    total_payments=total_payments,
                    lines=tuple(lines),
                )
            )
        return ledgers
