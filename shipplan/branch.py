"""
Branching: move part of a plan group into a new group.

Nothing is deleted from the source group. The moved entries are saved as the
new group and their negation is appended to the source as a new revision, so
the source's summed units drop by exactly what moved and no units are created
or destroyed overall.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Sequence

from . import ledger, utils
from .errors import EverythingSelected, NothingSelected
from .schemas import Entry
from .status import INITIAL_STATUS, StatusStore
from .storage import PlanStore

logger = logging.getLogger(__name__)


class SelectionMode(str, Enum):
    SELECTED = "selected"  # move the selected FNSKUs
    UNSELECTED = "unselected"  # move everything else


@dataclass
class BranchResult:
    source: str
    branch: str
    moving: list[Entry]
    staying: list[Entry]
    negation: list[Entry]
    paths: list[Path] = field(default_factory=list)

    @property
    def source_entries(self) -> list[Entry]:
        """What the source group holds after the branch: its history plus the negation."""
        return self.moving + self.staying + self.negation

    @property
    def moved_units(self) -> int:
        return ledger.total_units(self.moving)


def partition(
    entries: Iterable[Entry], selected: Iterable[str], mode: SelectionMode = SelectionMode.SELECTED
) -> tuple[list[Entry], list[Entry]]:
    """Split entries into (moving, staying) by FNSKU membership in `selected`."""
    chosen = set(selected)
    move_chosen = SelectionMode(mode) is SelectionMode.SELECTED

    moving, staying = [], []
    for entry in entries:
        if (entry.fnsku in chosen) == move_chosen:
            moving.append(entry)
        else:
            staying.append(entry)
    return moving, staying


def branch_group(
    group: str,
    entries: Sequence[Entry],
    selected: Iterable[str],
    store: PlanStore,
    status_store: StatusStore,
    mode: SelectionMode = SelectionMode.SELECTED,
    new_group: Optional[str] = None,
) -> BranchResult:
    """
    Move the selected part of `group` (given as its full entry snapshot) into a new group.

    Raises NothingSelected / EverythingSelected before anything is written when
    there is nothing to move. If the negation cannot be written, the new group's
    revision is removed again and the OSError propagates.
    """
    mode = SelectionMode(mode)
    moving, staying = partition(entries, selected, mode)
    if not moving:
        raise NothingSelected() if mode is SelectionMode.SELECTED else EverythingSelected()

    branch_name = new_group or utils.gen_group_name()
    negation = ledger.negate(moving)

    branch_path = store.save(branch_name, moving)
    try:
        source_path = store.save(group, negation)
    except OSError:
        logger.error(f"❌ Could not append negation to '{group}'. Rolling back '{branch_name}'.")
        store.remove(branch_path)
        raise
    status_path = status_store.mark(branch_name, INITIAL_STATUS)

    result = BranchResult(
        source=group,
        branch=branch_name,
        moving=list(moving),
        staying=list(staying),
        negation=negation,
        paths=[branch_path, source_path, status_path],
    )
    logger.info(
        f"✅ Branched {result.moved_units} units ({len(moving)} entries) "
        f"from '{group}' into '{branch_name}'."
    )
    return result
