"""Payroll calculation engine."""

from fieldops_engine.calculators.engine import PayrollCalculator, calculate_pay
from fieldops_engine.calculators.errors import (
    InvalidEmployeeConfigurationError,
    InvalidRulesError,
    InvalidTimesheetError,
    MissingRulesError,
    PayrollError,
)
from fieldops_engine.calculators.line_builder import LineItemBuilder
from fieldops_engine.calculators.rates import (
    calculate_cost_rate,
    generate_labor_rate,
    labor_rates_by_role,
    margin_percent,
)
from fieldops_engine.calculators.records import parse_employee, parse_rules, parse_timesheet
from fieldops_engine.calculators.tax_calculator import TaxCalculator, TaxTable
from fieldops_engine.calculators.types import (
    Employee,
    EmploymentType,
    HourlyEmployee,
    LaborRateRule,
    PayLineItem,
    PayResult,
    PayTier,
    PayType,
    SalaryEmployee,
    TaxBracket,
    TimesheetEntry,
)

__all__ = [
    "PayrollCalculator",
    "calculate_pay",
    "calculate_cost_rate",
    "generate_labor_rate",
    "labor_rates_by_role",
    "margin_percent",
    "parse_employee",
    "parse_rules",
    "parse_timesheet",
    "LineItemBuilder",
    "TaxCalculator",
    "TaxTable",
    "TaxBracket",
    "Employee",
    "EmploymentType",
    "HourlyEmployee",
    "SalaryEmployee",
    "LaborRateRule",
    "PayLineItem",
    "PayResult",
    "PayTier",
    "PayType",
    "TimesheetEntry",
    "PayrollError",
    "MissingRulesError",
    "InvalidTimesheetError",
    "InvalidEmployeeConfigurationError",
    "InvalidRulesError",
]
