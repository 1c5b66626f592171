"""FastAPI dependencies for dependency injection."""

from typing import Annotated

from fastapi import Depends

from fieldops_engine.calculators import PayrollCalculator
from fieldops_engine.config import PayrollPolicy, get_payroll_policy


def get_policy() -> PayrollPolicy:
    """Payroll policy configured from the environment."""
    return get_payroll_policy()


def get_payroll_calculator(
    policy: Annotated[PayrollPolicy, Depends(get_policy)],
) -> PayrollCalculator:
    """Payroll calculator bound to the configured policy."""
    return PayrollCalculator(policy)


# Type aliases for cleaner dependency injection
Policy = Annotated[PayrollPolicy, Depends(get_policy)]
Calculator = Annotated[PayrollCalculator, Depends(get_payroll_calculator)]
