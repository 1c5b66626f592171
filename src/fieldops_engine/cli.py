"""Field-ops engine command line interface.

Runs the calculation cores over JSON documents:
- Timeline validation and critical path
- Resource booking conflicts
- Pay, cost rates and generated labour rates

Usage:
    fieldops-engine validate-timeline timeline.json
    fieldops-engine critical-path timeline.json --epoch 2024-07-01T00:00:00
    fieldops-engine conflicts bookings.json
    fieldops-engine pay payslip.json
    fieldops-engine cost-rate employees.json
    fieldops-engine labor-rates employees.json --margin 0.35

Pass ``-`` as the file to read standard input. Exit codes: 0 success,
1 invalid input or problems found, 2 usage errors (unreadable file, bad JSON).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable

from fieldops_engine.calculators import (
    PayrollCalculator,
    PayrollError,
    calculate_cost_rate,
    labor_rates_by_role,
    margin_percent,
    parse_employee,
    parse_rules,
    parse_timesheet,
)
from fieldops_engine.calculators.records import snake_keys
from fieldops_engine.config import configure_logging, get_payroll_policy
from fieldops_engine.scheduling import ResourceBooking, ScheduleConflictDetector
from fieldops_engine.timeline import ScheduleItem, TimelineError, TimelineGraph

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_USAGE = 2


class UsageError(Exception):
    """The input document could not be read or has the wrong shape."""


def parse_datetime(s: str) -> datetime:
    """Parse ISO datetime string."""
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def parse_decimal(s: str) -> Decimal:
    """Parse a decimal argument, reporting bad input as an argparse error."""
    try:
        return Decimal(s)
    except ArithmeticError as exc:
        raise argparse.ArgumentTypeError(f"not a number: {s!r}") from exc


def _records(data: Any, key: str) -> list[Mapping[str, Any]]:
    """Accept either a bare list or an object holding the list under ``key``."""
    if isinstance(data, Mapping):
        data = data.get(key, [])
    if not isinstance(data, list) or not all(isinstance(r, Mapping) for r in data):
        raise UsageError(f"Expected a list of objects under '{key}'")
    return data


def schedule_item_from_dict(record: Mapping[str, Any]) -> ScheduleItem:
    """Build a ScheduleItem from a JSON object (camelCase keys accepted)."""
    data = snake_keys(record)
    try:
        item_id = str(data["id"])
        start = parse_datetime(str(data["start"]))
        end = parse_datetime(str(data["end"]))
    except KeyError as exc:
        raise UsageError(f"Timeline item is missing {exc.args[0]!r}") from exc
    except ValueError as exc:
        raise UsageError(f"Timeline item {data.get('id')!r}: {exc}") from exc

    return ScheduleItem(
        id=item_id,
        name=str(data.get("name") or ""),
        start=start,
        end=end,
        dependencies=tuple(data.get("dependencies") or ()),
        assigned_resource_ids=tuple(data.get("assigned_resource_ids") or ()),
    )


def booking_from_dict(record: Mapping[str, Any]) -> ResourceBooking:
    """Build a ResourceBooking from a JSON object (camelCase keys accepted)."""
    data = snake_keys(record)
    try:
        resource_id = str(data["resource_id"])
        item_id = str(data["item_id"])
        start = parse_datetime(str(data["start"]))
        end = parse_datetime(str(data["end"]))
    except KeyError as exc:
        raise UsageError(f"Booking is missing {exc.args[0]!r}") from exc
    except ValueError as exc:
        raise UsageError(f"Booking for {data.get('resource_id')!r}: {exc}") from exc

    return ResourceBooking(resource_id=resource_id, start=start, end=end, item_id=item_id)


class FieldOpsCli:
    """Field-ops engine command line interface."""

    def __init__(self) -> None:
        self.parser = self._build_parser()

    def _build_parser(self) -> argparse.ArgumentParser:
        """Build argument parser."""
        parser = argparse.ArgumentParser(
            prog="fieldops-engine",
            description="Timeline, scheduling and payroll calculations over JSON files",
        )
        parser.add_argument(
            "--log-level",
            default=None,
            help="Logging level (defaults to LOG_LEVEL from the environment)",
        )
        subparsers = parser.add_subparsers(dest="command", help="Commands")

        validate = subparsers.add_parser(
            "validate-timeline",
            help="Report dangling dependencies, duplicate ids and cycles",
        )
        validate.add_argument("file", help="Timeline JSON ('items' list)")

        critical = subparsers.add_parser(
            "critical-path",
            help="Compute early/late dates, slack and the critical path",
        )
        critical.add_argument("file", help="Timeline JSON ('items' list)")
        critical.add_argument(
            "--epoch",
            type=parse_datetime,
            help="Project start (ISO format); roots start at their own offset from it",
        )

        conflicts = subparsers.add_parser(
            "conflicts",
            help="List overlapping bookings of the same resource",
        )
        conflicts.add_argument("file", help="JSON with 'bookings' and/or 'items'")

        pay = subparsers.add_parser(
            "pay",
            help="Calculate one employee's weekly pay",
        )
        pay.add_argument(
            "file",
            help="JSON with 'employee', 'timesheet', 'rules' and 'publicHolidays'",
        )

        cost = subparsers.add_parser(
            "cost-rate",
            help="True hourly cost rate of each employee",
        )
        cost.add_argument("file", help="JSON 'employees' list")

        rates = subparsers.add_parser(
            "labor-rates",
            help="Generate one labour rate card per role",
        )
        rates.add_argument("file", help="JSON 'employees' list")
        rates.add_argument(
            "--margin",
            type=parse_decimal,
            default=Decimal("0.40"),
            help="Target margin on the standard rate (default: 0.40)",
        )

        return parser

    def run(self, args: list[str] | None = None) -> int:
        """Run the CLI with given arguments."""
        parsed = self.parser.parse_args(args)
        configure_logging(parsed.log_level)

        if not parsed.command:
            self.parser.print_help()
            return EXIT_USAGE

        # Dispatch to command handler
        handlers: dict[str, Callable[..., int]] = {
            "validate-timeline": self._cmd_validate_timeline,
            "critical-path": self._cmd_critical_path,
            "conflicts": self._cmd_conflicts,
            "pay": self._cmd_pay,
            "cost-rate": self._cmd_cost_rate,
            "labor-rates": self._cmd_labor_rates,
        }

        handler = handlers.get(parsed.command)
        if handler is None:
            print(f"Unknown command: {parsed.command}", file=sys.stderr)
            return EXIT_USAGE

        logger.debug("Running %s on %s", parsed.command, parsed.file)
        try:
            return handler(parsed, self._load(parsed.file))
        except UsageError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_USAGE
        except (TimelineError, PayrollError) as exc:
            self._emit({"error": exc.to_dict()}, stream=sys.stderr)
            return EXIT_INVALID

    @staticmethod
    def _load(path: str) -> Any:
        """Read a JSON document from a file or standard input."""
        try:
            if path == "-":
                return json.load(sys.stdin)
            with open(path, encoding="utf-8") as fh:
                return json.load(fh)
        except OSError as exc:
            raise UsageError(f"Cannot read {path}: {exc.strerror}") from exc
        except json.JSONDecodeError as exc:
            raise UsageError(f"{path} is not valid JSON: {exc}") from exc

    @staticmethod
    def _emit(payload: Any, stream: Any = None) -> None:
        print(json.dumps(payload, indent=2, default=str), file=stream or sys.stdout)

    def _items(self, data: Any) -> list[ScheduleItem]:
        return [schedule_item_from_dict(r) for r in _records(data, "items")]

    def _cmd_validate_timeline(self, args: argparse.Namespace, data: Any) -> int:
        """Validate a timeline snapshot."""
        items = self._items(data)
        result = TimelineGraph.detect_cycle(items)
        errors = TimelineGraph.validate(items)

        self._emit(
            {
                "valid": not errors,
                "has_cycle": result.has_cycle,
                "cycle": list(result.cycle),
                "errors": [e.to_dict() for e in errors],
            }
        )
        return EXIT_OK if not errors else EXIT_INVALID

    def _cmd_critical_path(self, args: argparse.Namespace, data: Any) -> int:
        """Compute the critical path of a timeline."""
        scheduled = TimelineGraph.compute_critical_path(self._items(data), args.epoch)

        self._emit(
            {
                "items": [s.to_dict() for s in scheduled],
                "critical_path": [s.id for s in TimelineGraph.critical_path(scheduled)],
                "project_duration_seconds": TimelineGraph.project_finish(scheduled).total_seconds(),
            }
        )
        return EXIT_OK

    def _cmd_conflicts(self, args: argparse.Namespace, data: Any) -> int:
        """Find every overlapping pair of bookings."""
        if isinstance(data, list):
            data = {"bookings": data}
        if not isinstance(data, Mapping):
            raise UsageError("Expected an object with 'bookings' and/or 'items'")

        bookings = [booking_from_dict(r) for r in _records(data, "bookings")]
        bookings.extend(ScheduleConflictDetector.bookings_for_items(self._items(data)))
        pairs = ScheduleConflictDetector.find_all_conflicts(bookings)

        self._emit({"count": len(pairs), "conflicts": [p.to_dict() for p in pairs]})
        return EXIT_OK if not pairs else EXIT_INVALID

    def _cmd_pay(self, args: argparse.Namespace, data: Any) -> int:
        """Calculate pay for one employee."""
        if not isinstance(data, Mapping) or "employee" not in data:
            raise UsageError("Expected an object with an 'employee' record")
        doc = snake_keys(data)

        employee = parse_employee(doc["employee"])
        timesheet = parse_timesheet(_records(doc, "timesheet"), employee.name)
        rules = parse_rules(doc["rules"]) if doc.get("rules") else None
        try:
            holidays = [parse_datetime(str(d)).date() for d in doc.get("public_holidays") or ()]
        except ValueError as exc:
            raise UsageError(f"Bad public holiday date: {exc}") from exc

        calculator = PayrollCalculator(get_payroll_policy())
        result = calculator.calculate_pay(employee, timesheet, rules, public_holidays=holidays)

        self._emit(result.to_dict())
        return EXIT_OK

    def _cmd_cost_rate(self, args: argparse.Namespace, data: Any) -> int:
        """Cost rate of each employee."""
        policy = get_payroll_policy()
        employees = [parse_employee(r) for r in _records(data, "employees")]

        self._emit(
            [
                {
                    "name": e.name,
                    "pay_type": e.pay_type.value,
                    "employment_type": e.employment_type.value,
                    "cost_rate": str(calculate_cost_rate(e, policy)),
                }
                for e in employees
            ]
        )
        return EXIT_OK

    def _cmd_labor_rates(self, args: argparse.Namespace, data: Any) -> int:
        """Generated labour rate cards per role."""
        employees = [parse_employee(r) for r in _records(data, "employees")]
        rules = labor_rates_by_role(employees, args.margin, get_payroll_policy())

        self._emit(
            [
                {
                    **rule.to_dict(),
                    "margin_percent": str(margin_percent(rule.standard_rate, rule.cost_rate)),
                }
                for rule in rules
            ]
        )
        return EXIT_OK


def main() -> int:
    """CLI entry point."""
    cli = FieldOpsCli()
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
