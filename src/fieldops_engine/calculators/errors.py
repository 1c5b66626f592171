"""Payroll calculation errors."""

from __future__ import annotations

from typing import Any


class PayrollError(Exception):
    """Base class for payroll calculation errors."""

    code = "PAYROLL_ERROR"

    def __init__(self, message: str, employee_name: str | None = None):
        self.message = message
        self.employee_name = employee_name
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "employee_name": self.employee_name,
        }


class MissingRulesError(PayrollError):
    """Hourly payroll was requested without a labour rate rule set."""

    code = "MISSING_RULES"

    def __init__(self, employee_name: str | None = None):
        who = f"employee '{employee_name}'" if employee_name else "employee"
        super().__init__(
            f"Hourly {who} requires a labour rate rule set",
            employee_name,
        )


class InvalidTimesheetError(PayrollError):
    """Negative hours, an unparseable date, or no positive hourly wage."""

    code = "INVALID_TIMESHEET"

    def __init__(
        self,
        message: str,
        employee_name: str | None = None,
        entry_index: int | None = None,
    ):
        self.entry_index = entry_index
        super().__init__(message, employee_name)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["entry_index"] = self.entry_index
        return data


class InvalidEmployeeConfigurationError(PayrollError):
    """No positive annual salary, or a pay type outside Hourly/Salary."""

    code = "INVALID_EMPLOYEE_CONFIGURATION"


class InvalidRulesError(PayrollError):
    """The rule set cannot price hours (e.g. a zero standard rate)."""

    code = "INVALID_RULES"
