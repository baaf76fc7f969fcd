"""
Reconciliation of a physical count against the planned ledger.

An operator scans a line (FNSKU, UPC, units per case, number of cases). The
line becomes one entry per case, and a CheckRow compares it with the entries
the plan expects for that FNSKU, reporting every mismatch or handling concern.
"""

import logging
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union
from pydantic import BaseModel, Field, ValidationError

from . import ledger, settings, utils
from .errors import InvalidInput
from .schemas import Entry, ScanLine

logger = logging.getLogger(__name__)


class WarnKind(str, Enum):
    UPC = "Upc"
    CASES = "Cases"
    UNITS = "Units"
    TEAM_LIFT = "TeamLift"
    TOO_HEAVY = "TooHeavy"
    TOO_LONG = "TooLong"
    MISSING_INFO = "MissingInfo"


class Warn(BaseModel):
    kind: WarnKind
    entries: list[Entry] = Field(default_factory=list)

    def __str__(self) -> str:
        if not self.entries:
            return self.kind.value
        return f"{self.kind.value} ({len(self.entries)} entries)"


def _as_scan_line(line: Union[ScanLine, Mapping[str, Any]]) -> ScanLine:
    if isinstance(line, ScanLine):
        return line
    try:
        return ScanLine.model_validate(dict(line))
    except ValidationError as e:
        raise InvalidInput(f"Rejected scan line {dict(line)}: {e}") from e


def submit_scan(line: Union[ScanLine, Mapping[str, Any]]) -> list[Entry]:
    """
    Turn one scanned line into entries, one per physical case, each with its own case id.
    Raises InvalidInput for an empty FNSKU or a zero quantity; nothing is created then.
    """
    scan = _as_scan_line(line)
    return [
        Entry(
            fnsku=scan.fnsku,
            upc=scan.upc,
            units=scan.units_per_case,
            id=utils.gen_case_id(),
        )
        for _ in range(scan.cases)
    ]


class CheckRow:
    """The expected entries for one scanned line, and what the operator counted."""

    def __init__(
        self,
        predicate: Sequence[Entry],
        upc: Optional[str] = None,
        units: Optional[int] = None,
        cases: Optional[int] = None,
    ):
        self.predicate = list(predicate)
        self.upc = upc
        self.units = units
        self.cases = cases

    def all_checks(self) -> list[Warn]:
        """Run every check; the warnings come back in a fixed order."""
        warnings = []
        if not self.same_upc():
            warnings.append(Warn(kind=WarnKind.UPC))
        if not self.same_num_cases():
            warnings.append(Warn(kind=WarnKind.CASES))
        if not self.same_num_units():
            warnings.append(Warn(kind=WarnKind.UNITS))

        flagged = [
            (WarnKind.TEAM_LIFT, self.cases_need_team_lift()),
            (WarnKind.TOO_HEAVY, self.cases_too_heavy()),
            (WarnKind.TOO_LONG, self.cases_too_long()),
            (WarnKind.MISSING_INFO, self.needs_info()),
        ]
        for kind, entries in flagged:
            if entries:
                warnings.append(Warn(kind=kind, entries=entries))
        return warnings

    def same_upc(self) -> bool:
        return any(entry.upc == self.upc for entry in self.predicate)

    def same_num_cases(self) -> bool:
        if self.cases is None:
            return False
        return self.cases == ledger.count_real_cases(self.predicate)

    def same_num_units(self) -> bool:
        if self.units is None:
            return False
        expectation = sum(ledger.units_per_sku(self.predicate).values())
        # A negative expectation can never match a physical count.
        return expectation >= 0 and self.units == expectation

    def cases_need_team_lift(self) -> list[Entry]:
        """Single item cases heavy enough to need a team lift sticker."""
        return [
            entry
            for entry in self.predicate
            if entry.units == 1 and (entry.total_pounds or 0.0) > settings.TEAM_LIFT_POUNDS
        ]

    def cases_too_heavy(self) -> list[Entry]:
        """Multi item cases over the weight limit."""
        return [
            entry
            for entry in self.predicate
            if entry.units > 1 and (entry.total_pounds or 0.0) > settings.TEAM_LIFT_POUNDS
        ]

    def cases_too_long(self) -> list[Entry]:
        return [
            entry
            for entry in self.predicate
            if any(side > settings.MAX_CASE_INCHES for side in (entry.case_dimensions or ()))
        ]

    def needs_info(self) -> list[Entry]:
        return [
            entry
            for entry in self.predicate
            if entry.case_dimensions is None or entry.total_pounds is None
        ]


def check_scan(line: Union[ScanLine, Mapping[str, Any]], expected: Sequence[Entry]) -> list[Warn]:
    """Compare one scanned line with the plan entries for the same FNSKU."""
    scan = _as_scan_line(line)
    predicate = [entry for entry in expected if entry.fnsku == scan.fnsku]
    row = CheckRow(predicate, upc=scan.upc, units=scan.total_units, cases=scan.cases)
    warnings = row.all_checks()
    if warnings:
        logger.warning(
            f"⚠️ {scan.fnsku}: " + ", ".join(str(warning) for warning in warnings)
        )
    else:
        logger.info(f"✅ {scan.fnsku} matches the plan.")
    return warnings
