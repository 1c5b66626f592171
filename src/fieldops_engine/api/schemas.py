"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from fieldops_engine.calculators.types import EmploymentType, PayTier, PayType
from fieldops_engine.scheduling import ResourceBooking
from fieldops_engine.timeline import ScheduleItem, as_utc

# Naive timestamps are read as UTC; aware ones are converted to it
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


# ============================================================================
# Timeline schemas
# ============================================================================


class ScheduleItemIn(BaseModel):
    """A timeline item as submitted by a client."""

    id: str
    name: str = ""
    start: UtcDatetime
    end: UtcDatetime
    dependencies: list[str] = Field(default_factory=list)
    assigned_resource_ids: list[str] = Field(default_factory=list)

    def to_domain(self) -> ScheduleItem:
        return ScheduleItem(
            id=self.id,
            name=self.name,
            start=self.start,
            end=self.end,
            dependencies=tuple(self.dependencies),
            assigned_resource_ids=tuple(self.assigned_resource_ids),
        )


class TimelineRequest(BaseModel):
    """Full snapshot of a project's timeline items."""

    items: list[ScheduleItemIn]
    project_epoch: UtcDatetime | None = None

    def to_domain(self) -> list[ScheduleItem]:
        return [item.to_domain() for item in self.items]


class ValidationIssue(BaseModel):
    """One problem found in a timeline."""

    code: str
    message: str
    item_ids: list[str] = Field(default_factory=list)


class TimelineValidationResponse(BaseModel):
    """Outcome of validating a timeline snapshot."""

    valid: bool
    has_cycle: bool
    cycle: list[str] = Field(default_factory=list)
    errors: list[ValidationIssue] = Field(default_factory=list)


class ScheduledItemOut(BaseModel):
    """Forward/backward pass figures for one item, as seconds from project start."""

    id: str
    name: str
    duration_seconds: float
    early_start_seconds: float
    early_finish_seconds: float
    late_start_seconds: float
    late_finish_seconds: float
    slack_seconds: float
    is_critical: bool


class CriticalPathResponse(BaseModel):
    """Critical path analysis of a timeline."""

    items: list[ScheduledItemOut]
    critical_path: list[str]
    project_duration_seconds: float


# ============================================================================
# Scheduling schemas
# ============================================================================


class Booking(BaseModel):
    """A resource held over an inclusive time interval."""

    model_config = ConfigDict(from_attributes=True)

    resource_id: str
    start: UtcDatetime
    end: UtcDatetime
    item_id: str

    @model_validator(mode="after")
    def check_interval(self) -> "Booking":
        if self.start > self.end:
            raise ValueError("start must not be after end")
        return self

    def to_domain(self) -> ResourceBooking:
        return ResourceBooking(
            resource_id=self.resource_id,
            start=self.start,
            end=self.end,
            item_id=self.item_id,
        )


class ConflictCheckRequest(BaseModel):
    """A proposed booking checked against existing bookings."""

    candidate: Booking
    existing: list[Booking] = Field(default_factory=list)


class ConflictCheckResponse(BaseModel):
    """Whether the candidate conflicts, and with which bookings."""

    conflict: bool
    conflicting: list[Booking] = Field(default_factory=list)


class ConflictScanRequest(BaseModel):
    """Bookings to scan; items are expanded into one booking per resource."""

    bookings: list[Booking] = Field(default_factory=list)
    items: list[ScheduleItemIn] = Field(default_factory=list)


class ConflictPairOut(BaseModel):
    """Two overlapping bookings of the same resource."""

    model_config = ConfigDict(from_attributes=True)

    resource_id: str
    first: Booking
    second: Booking


class ConflictScanResponse(BaseModel):
    """Every conflicting pair found."""

    count: int
    conflicts: list[ConflictPairOut]


# ============================================================================
# Payroll schemas
# ============================================================================


class EmployeeIn(BaseModel):
    """Employee record; the pay type decides which amount is required."""

    name: str
    pay_type: PayType
    wage: Decimal | None = None
    annual_salary: Decimal | None = None
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    estimated_non_billable_hours: Decimal = Field(default=Decimal("0"), ge=0)
    tfn: str | None = None
    role: str | None = None


class TimesheetEntryIn(BaseModel):
    """Hours worked on one day."""

    work_date: date
    hours: Decimal
    description: str | None = None


class LaborRateRuleIn(BaseModel):
    """Rate card; omitted thresholds take the usual 8 / 10 / 2 hours."""

    model_config = ConfigDict(from_attributes=True)

    name: str = ""
    cost_rate: Decimal = Field(default=Decimal("0"), ge=0)
    standard_rate: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_rate: Decimal = Field(default=Decimal("0"), ge=0)
    overtime_after_hours: Decimal = Field(default=Decimal("8"), ge=0)
    double_time_rate: Decimal = Field(default=Decimal("0"), ge=0)
    double_time_after_hours: Decimal = Field(default=Decimal("10"), ge=0)
    saturday_first_rate: Decimal = Field(default=Decimal("0"), ge=0)
    saturday_first_hours: Decimal = Field(default=Decimal("2"), ge=0)
    saturday_after_rate: Decimal = Field(default=Decimal("0"), ge=0)
    sunday_rate: Decimal = Field(default=Decimal("0"), ge=0)
    public_holiday_rate: Decimal = Field(default=Decimal("0"), ge=0)
    after_hours_callout_rate: Decimal = Field(default=Decimal("0"), ge=0)


class PayCalculationRequest(BaseModel):
    """One employee's week of work."""

    employee: EmployeeIn
    timesheet: list[TimesheetEntryIn] = Field(default_factory=list)
    rules: LaborRateRuleIn | None = None
    public_holidays: list[date] = Field(default_factory=list)


class PayLineItemOut(BaseModel):
    """One tier of hours on one day."""

    model_config = ConfigDict(from_attributes=True)

    work_date: date | None
    description: str
    tier: PayTier
    hours: Decimal
    rate: Decimal
    line_total: Decimal


class PayResultResponse(BaseModel):
    """Pay for one employee and one period."""

    model_config = ConfigDict(from_attributes=True)

    employee_name: str
    gross_pay: Decimal
    ordinary_time_earnings: Decimal
    superannuation: Decimal
    tax_deductions: Decimal
    net_pay: Decimal
    total_hours: Decimal
    line_items: list[PayLineItemOut]


class CostRateRequest(BaseModel):
    """Employee whose true hourly cost is wanted."""

    employee: EmployeeIn


class CostRateResponse(BaseModel):
    """True hourly cost of an employee."""

    employee_name: str
    pay_type: PayType
    employment_type: EmploymentType
    cost_rate: Decimal


class LaborRatesRequest(BaseModel):
    """Employees to derive per-role rate cards from."""

    employees: list[EmployeeIn]
    target_margin: Decimal = Field(default=Decimal("0.40"), ge=0, lt=1)


class LaborRateRuleOut(LaborRateRuleIn):
    """Generated rate card with its achieved margin."""

    margin_percent: Decimal


class LaborRatesResponse(BaseModel):
    """Generated rate cards, one per role."""

    rates: list[LaborRateRuleOut]


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str
    code: str
    item_ids: list[str] = Field(default_factory=list)
