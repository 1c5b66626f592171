"""Calculation cores for field-services operations.

- ``fieldops_engine.timeline``: dependency validation and critical path
- ``fieldops_engine.scheduling``: resource booking conflicts
- ``fieldops_engine.calculators``: pay, tax, superannuation and cost rates
"""

__version__ = "1.0.0"
