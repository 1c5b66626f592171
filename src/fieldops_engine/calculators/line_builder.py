"""Pay line item construction and rounding."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from fieldops_engine.calculators.types import PayLineItem, PayTier


class LineItemBuilder:
    """Builds pay line items with consistent rounding.

    Rounding:
    - Rates kept at 4 decimals (derived overtime multipliers)
    - Line totals rounded half-up to cents
    - Gross is the sum of rounded line totals, so it always reconciles
    """

    PRECISION = Decimal("0.0001")  # 4 decimal places for rates and hours
    OUTPUT_PRECISION = Decimal("0.01")  # 2 decimal places for money

    # Tiers that count towards ordinary time earnings
    ORDINARY_TIERS = frozenset({PayTier.ORDINARY, PayTier.SALARY})

    @staticmethod
    def round_to_cents(amount: Decimal) -> Decimal:
        """Round amount to 2 decimal places (cents)."""
        return amount.quantize(LineItemBuilder.OUTPUT_PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def round_rate(rate: Decimal) -> Decimal:
        """Round a rate or hour quantity to 4 decimal places."""
        return rate.quantize(LineItemBuilder.PRECISION, rounding=ROUND_HALF_UP)

    @staticmethod
    def create_line(
        work_date: date | None,
        tier: PayTier,
        hours: Decimal,
        rate: Decimal,
        description: str | None = None,
    ) -> PayLineItem:
        """Create a line item; total = hours x rate, rounded to cents."""
        hours = LineItemBuilder.round_rate(hours)
        rate = LineItemBuilder.round_rate(rate)
        return PayLineItem(
            work_date=work_date,
            description=description or LineItemBuilder.describe(tier, hours, rate),
            tier=tier,
            hours=hours,
            rate=rate,
            line_total=LineItemBuilder.round_to_cents(hours * rate),
        )

    @staticmethod
    def create_salary_line(amount: Decimal, description: str = "Salary") -> PayLineItem:
        """Create the single line for a salaried pay period."""
        return PayLineItem(
            work_date=None,
            description=description,
            tier=PayTier.SALARY,
            hours=Decimal("0"),
            rate=Decimal("0"),
            line_total=LineItemBuilder.round_to_cents(amount),
        )

    @staticmethod
    def describe(tier: PayTier, hours: Decimal, rate: Decimal) -> str:
        label = tier.value.replace("_", " ").title()
        return f"{label}: {hours.normalize():f}h @ {rate.normalize():f}"

    @staticmethod
    def calculate_gross_from_lines(lines: list[PayLineItem]) -> Decimal:
        """GROSS = sum of line totals."""
        gross = Decimal("0")
        for line in lines:
            gross += line.line_total
        return LineItemBuilder.round_to_cents(gross)

    @staticmethod
    def sum_by_tier(lines: list[PayLineItem]) -> dict[PayTier, Decimal]:
        """Sum line totals by tier."""
        totals: dict[PayTier, Decimal] = {tier: Decimal("0") for tier in PayTier}
        for line in lines:
            totals[line.tier] += line.line_total
        return totals

    @staticmethod
    def validate_lines(lines: list[PayLineItem]) -> list[str]:
        """Validate that hours, rates and totals are non-negative.

        Returns list of error messages (empty if all valid).
        """
        errors: list[str] = []
        for i, line in enumerate(lines):
            if line.hours < 0 or line.rate < 0 or line.line_total < 0:
                errors.append(
                    f"Line {i} ({line.tier.value}) has a negative value: "
                    f"{line.hours}h @ {line.rate} = {line.line_total}"
                )
        return errors
