"""Tests for building payroll records from loose mappings."""

from datetime import date
from decimal import Decimal

import pytest

from fieldops_engine.calculators import (
    EmploymentType,
    HourlyEmployee,
    InvalidEmployeeConfigurationError,
    InvalidRulesError,
    InvalidTimesheetError,
    PayType,
    SalaryEmployee,
    parse_employee,
    parse_rules,
    parse_timesheet,
)
from fieldops_engine.calculators.records import snake_keys


class TestSnakeKeys:
    def test_camel_case_converted(self):
        assert snake_keys({"estimatedNonBillableHours": 1, "pay_type": "Hourly", "tfn": "x"}) == {
            "estimated_non_billable_hours": 1,
            "pay_type": "Hourly",
            "tfn": "x",
        }


class TestParseEmployee:
    """Test employee record parsing."""

    def test_hourly_camel_case(self):
        employee = parse_employee(
            {
                "name": "Sam Patel",
                "payType": "Hourly",
                "wage": "32.5",
                "employmentType": "Casual",
                "estimatedNonBillableHours": 2,
                "tfn": "123 456 789",
                "role": "Technician",
            }
        )

        assert isinstance(employee, HourlyEmployee)
        assert employee.pay_type == PayType.HOURLY
        assert employee.wage == Decimal("32.5")
        assert employee.employment_type == EmploymentType.CASUAL
        assert employee.estimated_non_billable_hours == Decimal("2")
        assert employee.tfn == "123 456 789"
        assert employee.role == "Technician"

    def test_salary_snake_case(self):
        employee = parse_employee(
            {"name": "Robin", "pay_type": "Salary", "annual_salary": 95000}
        )

        assert isinstance(employee, SalaryEmployee)
        assert employee.annual_salary == Decimal("95000")
        assert employee.employment_type == EmploymentType.FULL_TIME

    def test_float_wage_keeps_printed_value(self):
        employee = parse_employee({"name": "F", "payType": "Hourly", "wage": 32.1})

        assert employee.wage == Decimal("32.1")

    def test_unknown_pay_type(self):
        with pytest.raises(InvalidEmployeeConfigurationError) as exc_info:
            parse_employee({"name": "C", "payType": "Contract", "wage": 50})

        assert exc_info.value.employee_name == "C"

    def test_missing_pay_type(self):
        with pytest.raises(InvalidEmployeeConfigurationError):
            parse_employee({"name": "C", "wage": 50})

    def test_unknown_employment_type(self):
        with pytest.raises(InvalidEmployeeConfigurationError):
            parse_employee({"name": "C", "payType": "Hourly", "wage": 50, "employmentType": "Seasonal"})

    def test_hourly_without_wage(self):
        with pytest.raises(InvalidTimesheetError):
            parse_employee({"name": "H", "payType": "Hourly"})

    def test_salary_without_salary(self):
        with pytest.raises(InvalidEmployeeConfigurationError):
            parse_employee({"name": "S", "payType": "Salary", "wage": 30})

    def test_non_numeric_wage(self):
        with pytest.raises(InvalidEmployeeConfigurationError):
            parse_employee({"name": "N", "payType": "Hourly", "wage": "thirty"})


class TestParseTimesheet:
    """Test timesheet row parsing."""

    def test_rows(self):
        entries = parse_timesheet(
            [
                {"date": "2024-07-01", "hours": 8, "description": "Site A"},
                {"workDate": "2024-07-02T00:00:00", "hours": "7.5"},
            ]
        )

        assert [(e.work_date, e.hours) for e in entries] == [
            (date(2024, 7, 1), Decimal("8")),
            (date(2024, 7, 2), Decimal("7.5")),
        ]
        assert entries[0].description == "Site A"

    def test_bad_date(self):
        with pytest.raises(InvalidTimesheetError) as exc_info:
            parse_timesheet([{"date": "01/07/2024", "hours": 8}], "Sam")

        assert exc_info.value.entry_index == 0
        assert exc_info.value.employee_name == "Sam"

    def test_missing_date(self):
        with pytest.raises(InvalidTimesheetError):
            parse_timesheet([{"hours": 8}])

    def test_negative_hours(self):
        with pytest.raises(InvalidTimesheetError) as exc_info:
            parse_timesheet([{"date": "2024-07-01", "hours": 8}, {"date": "2024-07-02", "hours": -2}])

        assert exc_info.value.entry_index == 1

    def test_missing_hours(self):
        with pytest.raises(InvalidTimesheetError):
            parse_timesheet([{"date": "2024-07-01"}])


class TestParseRules:
    """Test rate card parsing."""

    def test_camel_case_with_defaults(self):
        rules = parse_rules({"name": "Tech", "standardRate": 40, "overtimeRate": "60"})

        assert rules.name == "Tech"
        assert rules.standard_rate == Decimal("40")
        assert rules.overtime_rate == Decimal("60")
        assert rules.overtime_after_hours == Decimal("8")
        assert rules.saturday_first_hours == Decimal("2")

    def test_unknown_keys_ignored(self):
        rules = parse_rules({"id": "role-tech", "isDefault": True, "sundayRate": 80})

        assert rules.sunday_rate == Decimal("80")

    def test_negative_rate(self):
        with pytest.raises(InvalidRulesError):
            parse_rules({"sundayRate": -1})
