"""Payroll, cost rate and labour rate endpoints."""

from fastapi import APIRouter, status

from fieldops_engine.api.dependencies import Calculator, Policy
from fieldops_engine.api.schemas import (
    CostRateRequest,
    CostRateResponse,
    EmployeeIn,
    ErrorResponse,
    LaborRateRuleOut,
    LaborRatesRequest,
    LaborRatesResponse,
    PayCalculationRequest,
    PayResultResponse,
)
from fieldops_engine.calculators import (
    Employee,
    calculate_cost_rate,
    labor_rates_by_role,
    margin_percent,
    parse_employee,
    parse_rules,
    parse_timesheet,
)

router = APIRouter(prefix="/payroll", tags=["payroll"])


def _employee(payload: EmployeeIn) -> Employee:
    return parse_employee(payload.model_dump(mode="json"))


@router.post(
    "/calculate",
    response_model=PayResultResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def calculate_pay(
    payload: PayCalculationRequest,
    calculator: Calculator,
) -> PayResultResponse:
    """Calculate one employee's pay for a weekly period."""
    employee = _employee(payload.employee)
    timesheet = parse_timesheet(
        [entry.model_dump(mode="json") for entry in payload.timesheet],
        employee.name,
    )
    rules = parse_rules(payload.rules.model_dump(mode="json")) if payload.rules else None

    result = calculator.calculate_pay(
        employee, timesheet, rules, public_holidays=payload.public_holidays
    )
    return PayResultResponse.model_validate(result)


@router.post(
    "/cost-rate",
    response_model=CostRateResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def cost_rate(payload: CostRateRequest, policy: Policy) -> CostRateResponse:
    """True hourly cost of an employee including super, leave and non-billable time."""
    employee = _employee(payload.employee)
    return CostRateResponse(
        employee_name=employee.name,
        pay_type=employee.pay_type,
        employment_type=employee.employment_type,
        cost_rate=calculate_cost_rate(employee, policy),
    )


@router.post(
    "/labor-rates",
    response_model=LaborRatesResponse,
    status_code=status.HTTP_200_OK,
    responses={422: {"model": ErrorResponse}},
)
async def labor_rates(payload: LaborRatesRequest, policy: Policy) -> LaborRatesResponse:
    """Generate one rate card per role at the target margin."""
    employees = [_employee(e) for e in payload.employees]
    rules = labor_rates_by_role(employees, payload.target_margin, policy)

    return LaborRatesResponse(
        rates=[
            LaborRateRuleOut.model_validate(
                {
                    **rule.to_dict(),
                    "margin_percent": margin_percent(rule.standard_rate, rule.cost_rate),
                }
            )
            for rule in rules
        ]
    )
