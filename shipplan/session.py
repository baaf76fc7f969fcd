import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from . import ledger, utils
from .branch import BranchResult, SelectionMode, branch_group
from .errors import NoActiveGroup
from .schemas import Entry
from .status import INITIAL_STATUS, Status, StatusStore
from .storage import PlanStore

logger = logging.getLogger(__name__)


@dataclass
class PlanSession:
    """
    One operator's working context: the stores it writes to and the
    currently open group.

    The open group (name and entries) is replaced as a whole and only after
    the writes behind the change have succeeded.
    """

    store: PlanStore
    status_store: StatusStore
    scan_store: PlanStore
    group: Optional[str] = None
    entries: list[Entry] = field(default_factory=list)

    def require_group(self) -> str:
        if self.group is None:
            raise NoActiveGroup()
        return self.group

    def open_group(self, group: str) -> list[Entry]:
        entries = self.store.load(group)
        self.group, self.entries = group, entries
        logger.info(f"Opened '{group}' ({len(entries)} entries, {ledger.total_units(entries)} units).")
        return entries

    def create_group(self, entries: Sequence[Entry], group: Optional[str] = None) -> str:
        name = group or utils.gen_group_name()
        self.store.save(name, entries)
        self.status_store.mark(name, INITIAL_STATUS)
        self.group, self.entries = name, list(entries)
        return name

    def close(self) -> None:
        self.group, self.entries = None, []

    @property
    def status(self) -> Status:
        return self.status_store.current(self.require_group())

    def mark(self, status: Status) -> None:
        self.status_store.mark(self.require_group(), status)

    def advance(self) -> Status:
        """Mark the open group with the stage after its current one. Shipped groups stay put."""
        current = self.status
        if current.is_terminal:
            logger.info(f"'{self.group}' is already {current}.")
            return current
        following = current.next()
        self.mark(following)
        return following

    def last_scan(self) -> list[Entry]:
        """Entries of the newest check run of the open group; each run replaces the one before."""
        return self.scan_store.latest(self.require_group())

    def branch(
        self, selected: Iterable[str], mode: SelectionMode = SelectionMode.SELECTED
    ) -> BranchResult:
        group = self.require_group()
        result = branch_group(
            group, self.entries, selected, self.store, self.status_store, mode=mode
        )
        self.entries = result.source_entries
        return result
