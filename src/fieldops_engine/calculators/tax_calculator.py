"""PAYG withholding using a swappable bracket table."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from fieldops_engine.calculators.types import TaxBracket


def _resident_brackets() -> tuple[TaxBracket, ...]:
    return (
        TaxBracket(Decimal("0"), Decimal("18200"), Decimal("0")),
        TaxBracket(Decimal("18200"), Decimal("45000"), Decimal("0.16")),
        TaxBracket(Decimal("45000"), Decimal("135000"), Decimal("0.30")),
        TaxBracket(Decimal("135000"), Decimal("190000"), Decimal("0.37")),
        TaxBracket(Decimal("190000"), None, Decimal("0.45")),
    )


@dataclass(frozen=True)
class TaxTable:
    """Withholding policy approximating the ATO tax tables.

    Period earnings are annualised, taxed through progressive resident
    brackets plus the Medicare levy, then divided back to the period. This
    is a simplification of the published coefficient tables, chosen because
    it is monotonic in gross pay. Swap the table to change policy.
    """

    name: str = "resident-2024-25"
    brackets: tuple[TaxBracket, ...] = field(default_factory=_resident_brackets)
    levy_rate: Decimal = Decimal("0.02")
    levy_threshold: Decimal = Decimal("26000")  # No levy at or below
    levy_shade_in_rate: Decimal = Decimal("0.10")  # On the excess, while below the full levy
    periods_per_year: int = 52

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> TaxTable:
        """Build a table from a JSON-style config.

        {
            "name": "resident-2024-25",
            "brackets": [{"min": 0, "max": 18200, "rate": 0}, ...],
            "levy_rate": 0.02,
            "levy_threshold": 26000,
            "levy_shade_in_rate": 0.10,
            "periods_per_year": 52
        }
        """
        brackets = tuple(
            TaxBracket(
                min_amount=Decimal(str(b["min"])),
                max_amount=Decimal(str(b["max"])) if b.get("max") is not None else None,
                rate=Decimal(str(b["rate"])),
            )
            for b in payload.get("brackets", [])
        )
        defaults = cls()
        return cls(
            name=payload.get("name", defaults.name),
            brackets=brackets or defaults.brackets,
            levy_rate=Decimal(str(payload.get("levy_rate", defaults.levy_rate))),
            levy_threshold=Decimal(str(payload.get("levy_threshold", defaults.levy_threshold))),
            levy_shade_in_rate=Decimal(
                str(payload.get("levy_shade_in_rate", defaults.levy_shade_in_rate))
            ),
            periods_per_year=int(payload.get("periods_per_year", defaults.periods_per_year)),
        )


class TaxCalculator:
    """Calculates per-period tax withholding from gross pay."""

    def __init__(self, table: TaxTable | None = None):
        self.table = table or TaxTable()

    def calculate_withholding(self, gross: Decimal) -> Decimal:
        """Tax to withhold for one pay period of ``gross`` earnings."""
        if gross <= 0:
            return Decimal("0.00")

        periods = Decimal(self.table.periods_per_year)
        annual = gross * periods

        annual_tax = self._calculate_progressive_tax(annual, self.table.brackets)
        annual_tax += self._calculate_levy(annual)

        withholding = (annual_tax / periods).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        # Never withhold more than was earned
        return min(withholding, gross.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))

    def _calculate_progressive_tax(
        self,
        income: Decimal,
        brackets: tuple[TaxBracket, ...],
    ) -> Decimal:
        """Calculate tax using marginal brackets."""
        if income <= 0:
            return Decimal("0")

        total_tax = Decimal("0")
        for bracket in sorted(brackets, key=lambda b: b.min_amount):
            if income <= bracket.min_amount:
                break
            upper = income if bracket.max_amount is None else min(income, bracket.max_amount)
            taxable_in_bracket = upper - bracket.min_amount
            if taxable_in_bracket > 0:
                total_tax += taxable_in_bracket * bracket.rate

        return total_tax

    def _calculate_levy(self, income: Decimal) -> Decimal:
        """Levy on the whole income, shaded in above the low-income threshold.

        Just over the threshold the levy is the shade-in rate on the excess
        only, so a small raise never costs more than it pays.
        """
        if income <= self.table.levy_threshold:
            return Decimal("0")
        full = income * self.table.levy_rate
        shaded = (income - self.table.levy_threshold) * self.table.levy_shade_in_rate
        return min(full, shaded)
