"""
Ledger math over flat sequences of entries.

Nothing here keeps a running total: every figure is folded again from the
entries it is given, so a group can always be recomputed from what is on disk.
"""

import logging
from typing import Iterable, Sequence
import pandas as pd

from . import settings
from .schemas import Entry

logger = logging.getLogger(__name__)


def total_units(entries: Iterable[Entry]) -> int:
    return sum(entry.units for entry in entries)


def sum_by_fnsku(entries: Iterable[Entry]) -> list[Entry]:
    """
    Collapse entries to one per FNSKU with the units summed.

    The first entry seen for an FNSKU provides every other field; later
    metadata is ignored, not merged. The result no longer respects case
    boundaries, so it is for display and counting only and must never be
    persisted back as ledger entries.
    """
    summed: dict[str, Entry] = {}
    for entry in entries:
        found = summed.get(entry.fnsku)
        if found is None:
            summed[entry.fnsku] = entry.model_copy(deep=True)
        else:
            found.units += entry.units
    return list(summed.values())


def group_by_case(entries: Iterable[Entry]) -> dict[str, list[Entry]]:
    cases: dict[str, list[Entry]] = {}
    for entry in entries:
        cases.setdefault(entry.id, []).append(entry)
    return cases


def folded_cases(entries: Iterable[Entry]) -> dict[str, list[Entry]]:
    """Net quantity of every FNSKU inside every case."""
    return {
        case_id: sum_by_fnsku(contents)
        for case_id, contents in group_by_case(entries).items()
    }


def case_totals(entries: Iterable[Entry]) -> dict[str, int]:
    """Net units per case, across every FNSKU in it."""
    return {
        case_id: total_units(contents)
        for case_id, contents in group_by_case(entries).items()
    }


def count_real_cases(entries: Iterable[Entry]) -> int:
    """Cases that still physically hold something (net units > 0)."""
    return sum(1 for net in case_totals(entries).values() if net > 0)


def count_nonzero_cases(entries: Iterable[Entry]) -> int:
    return sum(1 for net in case_totals(entries).values() if net != 0)


def units_per_sku(entries: Iterable[Entry]) -> dict[str, int]:
    return {entry.fnsku: entry.units for entry in sum_by_fnsku(entries)}


def saturating_negate(units: int) -> int:
    """
    Negate a signed 32-bit quantity. A result that does not fit (only -2**31)
    becomes 0 instead of wrapping.
    """
    negated = -units
    if negated < settings.I32_MIN or negated > settings.I32_MAX:
        logger.warning(
            f"⚠️ Negating {units} units overflows a 32-bit quantity. Clamped to 0; "
            "the ledger will no longer balance for this entry."
        )
        return 0
    return negated


def negate(entries: Iterable[Entry]) -> list[Entry]:
    """Deep copies of `entries` with every quantity reversed."""
    return [
        entry.model_copy(update={"units": saturating_negate(entry.units)}, deep=True)
        for entry in entries
    ]


def summary_frame(entries: Sequence[Entry]) -> pd.DataFrame:
    """
    One row per FNSKU for display and the check sheet: identifiers, the net
    units and the number of cases that still hold the FNSKU.
    """
    columns = ["asin", "title", "units", "amz_size", "fnsku", "upc", "cases"]
    rows = []
    for summed in sum_by_fnsku(entries):
        same_sku = [entry for entry in entries if entry.fnsku == summed.fnsku]
        rows.append(
            {
                "asin": summed.asin,
                "title": summed.title,
                "units": summed.units,
                "amz_size": summed.amz_size,
                "fnsku": summed.fnsku,
                "upc": summed.upc,
                "cases": count_real_cases(same_sku),
            }
        )
    return pd.DataFrame(rows, columns=columns)
