"""Rate calculators for the three business lines.

Pure functions from raw entered readings to derived quantities and amounts.
Any missing or non-numeric input counts as zero. Results are never rounded;
two-decimal formatting belongs to display and export only.
"""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class VillageAmounts:
    m_fat_kg: float
    e_fat_kg: float
    amount: float


@dataclass(frozen=True)
class CityAmounts:
    amount: float


@dataclass(frozen=True)
class DairyAmounts:
    fat_kg: float
    meter_kg: float
    fat_amount: float
    meter_amount: float
    total_amount: float


def coerce_number(raw: Any) -> float:
    """Convert a raw reading to a float, treating anything unusable as zero.

    Examples:
        >>> coerce_number("4.5")
        4.5
        >>> coerce_number("")
        0.0
        >>> coerce_number(None)
        0.0
    """
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return 0.0
    try:
        number = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def calculate_village(rate: Any, m_milk: Any, m_fat: Any, e_milk: Any, e_fat: Any) -> VillageAmounts:
    """Village: fat-kg per session is milk times fat; amount is rate times total fat-kg."""
    rate = coerce_number(rate)
    m_fat_kg = coerce_number(m_milk) * coerce_number(m_fat)
    e_fat_kg = coerce_number(e_milk) * coerce_number(e_fat)
    return VillageAmounts(m_fat_kg=m_fat_kg, e_fat_kg=e_fat_kg, amount=rate * (m_fat_kg + e_fat_kg))


def calculate_city(rate: Any, value: Any) -> CityAmounts:
    """City: amount is quantity times rate."""
    return CityAmounts(amount=coerce_number(value) * coerce_number(rate))


def calculate_dairy(rate: Any, milk: Any, fat: Any, meter: Any) -> DairyAmounts:
    """Dairy cooperative pricing from milk volume, fat percentage and meter reading.

    Args:
        rate: Person's rate
        milk: Milk volume
        fat: Fat percentage
        meter: Meter reading

    Returns:
        DairyAmounts with fat-kg, meter-kg, both partial amounts and the total
    """
    rate = coerce_number(rate)
    milk = coerce_number(milk)
    fat = coerce_number(fat)
    meter = coerce_number(meter)

    fat_kg = milk * fat / 1000
    meter_kg = ((meter * 25 + 14 + 2 * fat) * milk) / 10000
    fat_amount = fat_kg * rate * 60 / 100
    meter_amount = meter_kg * (rate / 327) * 100
    return DairyAmounts(
        fat_kg=fat_kg,
        meter_kg=meter_kg,
        fat_amount=fat_amount,
        meter_amount=meter_amount,
        total_amount=fat_amount + meter_amount,
    )
