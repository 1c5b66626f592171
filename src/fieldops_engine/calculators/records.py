"""Build payroll records from loosely-typed mappings (JSON documents, forms)."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from fieldops_engine.calculators.errors import (
    InvalidEmployeeConfigurationError,
    InvalidRulesError,
    InvalidTimesheetError,
)
from fieldops_engine.calculators.types import (
    Employee,
    EmploymentType,
    HourlyEmployee,
    LaborRateRule,
    PayType,
    SalaryEmployee,
    TimesheetEntry,
)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_keys(record: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of ``record`` with camelCase keys converted to snake_case."""
    return {_CAMEL_BOUNDARY.sub("_", key).lower(): value for key, value in record.items()}


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    try:
        # str() so floats keep their printed value, not their binary one
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Expected a number, got {value!r}") from exc


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value)
    try:
        return date.fromisoformat(text[:10])
    except ValueError as exc:
        raise ValueError(f"Unparseable date {value!r}") from exc


def parse_employee(record: Mapping[str, Any]) -> Employee:
    """Build an ``HourlyEmployee`` or ``SalaryEmployee`` from a mapping.

    Accepts ``payType``/``pay_type`` style keys. The pay type decides which
    record is built and which amount is required.
    """
    data = snake_keys(record)
    name = str(data.get("name") or "")

    try:
        pay_type = PayType(data.get("pay_type"))
    except ValueError as exc:
        raise InvalidEmployeeConfigurationError(
            f"Unknown pay type {data.get('pay_type')!r}; expected Hourly or Salary",
            name or None,
        ) from exc

    try:
        employment_type = EmploymentType(data.get("employment_type") or EmploymentType.FULL_TIME.value)
    except ValueError as exc:
        raise InvalidEmployeeConfigurationError(
            f"Unknown employment type {data.get('employment_type')!r}",
            name or None,
        ) from exc

    try:
        non_billable = _to_decimal(data.get("estimated_non_billable_hours")) or Decimal("0")
        wage = _to_decimal(data.get("wage"))
        annual_salary = _to_decimal(data.get("annual_salary"))
    except ValueError as exc:
        raise InvalidEmployeeConfigurationError(str(exc), name or None) from exc

    common = {
        "name": name,
        "employment_type": employment_type,
        "estimated_non_billable_hours": non_billable,
        "tfn": data.get("tfn"),
        "role": data.get("role"),
    }

    if pay_type == PayType.HOURLY:
        if wage is None or wage <= 0:
            raise InvalidTimesheetError(
                f"Hourly employee '{name}' requires a positive wage",
                name or None,
            )
        return HourlyEmployee(wage=wage, **common)

    if annual_salary is None or annual_salary <= 0:
        raise InvalidEmployeeConfigurationError(
            f"Salaried employee '{name}' requires a positive annual salary",
            name or None,
        )
    return SalaryEmployee(annual_salary=annual_salary, **common)


def parse_timesheet(
    rows: Iterable[Mapping[str, Any]],
    employee_name: str | None = None,
) -> list[TimesheetEntry]:
    """Build timesheet entries; each row needs a date and non-negative hours."""
    entries: list[TimesheetEntry] = []
    for index, row in enumerate(rows):
        data = snake_keys(row)
        raw_date = data.get("work_date", data.get("date"))
        if raw_date is None:
            raise InvalidTimesheetError(
                f"Timesheet entry {index} has no date", employee_name, index
            )
        try:
            work_date = _to_date(raw_date)
            hours = _to_decimal(data.get("hours"))
        except ValueError as exc:
            raise InvalidTimesheetError(
                f"Timesheet entry {index}: {exc}", employee_name, index
            ) from exc
        if hours is None or hours < 0:
            raise InvalidTimesheetError(
                f"Timesheet entry {index} has invalid hours: {data.get('hours')!r}",
                employee_name,
                index,
            )
        entries.append(TimesheetEntry(work_date, hours, data.get("description")))
    return entries


def parse_rules(record: Mapping[str, Any]) -> LaborRateRule:
    """Build a ``LaborRateRule``; omitted fields keep their defaults."""
    data = snake_keys(record)
    values: dict[str, Any] = {}
    for f in fields(LaborRateRule):
        if f.name not in data:
            continue
        if f.name == "name":
            values["name"] = str(data["name"] or "")
            continue
        try:
            amount = _to_decimal(data[f.name])
        except ValueError as exc:
            raise InvalidRulesError(f"{f.name}: {exc}") from exc
        if amount is None:
            continue
        if amount < 0:
            raise InvalidRulesError(f"{f.name} must be non-negative, got {amount}")
        values[f.name] = amount
    return LaborRateRule(**values)
