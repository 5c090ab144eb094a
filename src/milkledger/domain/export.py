"""CSV export domain service."""

import csv
import io
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

from milkledger.domain.entities import Category
from milkledger.domain.entry import Entry
from milkledger.domain.person import parse_category
from milkledger.domain.report import PersonLedger, ReportService
from milkledger.domain.sync import SyncCoordinator
from milkledger.utils.number_parser import format_number

ENTRY_HEADERS: dict[Category, list[str]] = {
    Category.VILLAGE: ["Date", "Person", "M/Milk", "M/Fat", "E/Milk", "E/Fat", "M/FatKg", "E/FatKg", "Rate", "Amount"],
    Category.CITY: ["Date", "Person", "Value", "Rate", "Amount"],
    Category.DAIRY: [
        "Date", "Person", "Session", "Milk", "Fat", "Meter", "Rate",
        "FatKg", "MeterKg", "Fat Amount", "Meter Amount", "Total Amount",
    ],
}

ENTRY_FIELDS: dict[Category, list[str]] = {
    Category.VILLAGE: ["m_milk", "m_fat", "e_milk", "e_fat", "m_fat_kg", "e_fat_kg", "rate", "amount"],
    Category.CITY: ["value", "rate", "amount"],
    Category.DAIRY: ["milk", "fat", "meter", "rate", "fat_kg", "meter_kg", "fat_amount", "meter_amount", "total_amount"],
}

LEDGER_HEADERS = ["Person", "Date", "Type", "Amount", "Description", "Running Balance"]


def entries_to_csv(category: Category | str, entries: Sequence[Entry]) -> str:
    """Render entries of one business line as CSV text (header plus one row each)."""
    category = parse_category(category)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(ENTRY_HEADERS[category])
    for entry in entries:
        row = [entry.date.isoformat(), entry.person_name]
        if category is Category.DAIRY:
            row.append(entry.session.value)
        row.extend(format_number(getattr(entry, name)) for name in ENTRY_FIELDS[category])
        writer.writerow(row)
    return buffer.getvalue()


def ledger_to_csv(ledgers: Sequence[PersonLedger]) -> str:
    """Render ledgers as CSV text, amounts at two decimals, a blank row between people."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(LEDGER_HEADERS)
    for ledger in ledgers:
        for line in ledger.lines:
            writer.writerow(
                [
                    ledger.person_name,
                    line.date.isoformat(),
                    line.kind,
                    f"{line.amount:.2f}",
                    line.description,
                    f"{line.balance:.2f}",
                ]
            )
        writer.writerow([])
    return buffer.getvalue()


def entries_filename(category: Category | str, on: date) -> str:
    return f"{parse_category(category).value}-data-{on.isoformat()}.csv"


def ledger_filename(category: Category | str, start_date: date, end_date: date) -> str:
    return f"{parse_category(category).value}-ledger-{start_date.isoformat()}-to-{end_date.isoformat()}.csv"


class ExportService:
    """Service for exporting entries and ledgers to CSV files."""

    def __init__(self, context: SyncCoordinator):
        """Initialize export service.

        Args:
            context: Sync coordinator of the signed-in owner
        """
        self.context = context
        self.report_service = ReportService(context)

    def export_entries(
        self,
        category: Category | str,
        output: Optional[Path | str] = None,
        person_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        period: Optional[str] = None,
    ) -> tuple[Path, int]:
        """Write filtered entries of a business line to a CSV file.

        Args:
            output: Target path; defaults to ``<category>-data-<today>.csv``

        Returns:
            Tuple of (written path, number of entry rows)
        """
        entries = self.report_service.filter_entries(
            category, person_id=person_id, start_date=start_date, end_date=end_date, period=period
        )
        path = Path(output) if output is not None else Path(entries_filename(category, date.today()))
        path.write_text(entries_to_csv(category, entries), encoding="utf-8")
        return path, len(entries)

    def export_ledger(
        self,
        category: Category | str,
        start_date: date,
        end_date: date,
        output: Optional[Path | str] = None,
        person_id: Optional[str] = None,
    ) -> tuple[Path, int]:
        """Write per-person ledgers to a CSV file.

        Returns:
            Tuple of (written path, number of ledger lines)
        """
        ledgers = self.report_service.ledger(category, start_date, end_date, person_id=person_id)
        path = Path(output) if output is not None else Path(ledger_filename(category, start_date, end_date))
        path.write_text(ledger_to_csv(ledgers), encoding="utf-8")
        return path, sum(len(ledger.lines) for ledger in ledgers)
