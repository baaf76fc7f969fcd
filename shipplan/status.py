import json
import logging
from enum import Enum
from pathlib import Path
from pydantic import BaseModel

from . import utils

logger = logging.getLogger(__name__)


class Status(str, Enum):
    """The stage a plan group has reached, in the order groups move through them."""

    OPEN = "Open"
    CHECK = "Check"
    CONFIRM = "Confirm"
    MEASURE = "Measure"
    BOX_CONTENTS = "BoxContents"
    CASE_LABEL = "CaseLabel"
    STAGED = "Staged"
    SHIPPED = "Shipped"

    @property
    def rank(self) -> int:
        return list(Status).index(self)

    @property
    def is_terminal(self) -> bool:
        return self is Status.SHIPPED

    def next(self) -> "Status":
        stages = list(Status)
        return stages[min(self.rank + 1, len(stages) - 1)]

    def __str__(self) -> str:
        return self.value


INITIAL_STATUS = Status.OPEN


class StatusRecord(BaseModel):
    group: str
    status: Status


class StatusStore:
    """
    Status marks kept as small JSON files, `<group>_<token>.json`, each holding
    one serialized status value. Every mark is a new file; the latest one wins.
    Going back a stage is just another mark.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def mark(self, group: str, status: Status) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{group}_{utils.gen_token()}.json"
        path.write_text(json.dumps(Status(status).value), encoding="utf-8")
        logger.info(f"Marked '{group}' as {Status(status)}.")
        return path

    def mark_for_check(self, group: str) -> Path:
        return self.mark(group, Status.CHECK)

    def _paths(self, group: str) -> list[Path]:
        if not self.directory.is_dir():
            return []
        paths = [
            p
            for p in self.directory.glob("*_*.json")
            if p.stem.rsplit("_", 1)[0] == group
        ]
        return sorted(paths, key=lambda p: p.stem.rsplit("_", 1)[1])

    def history(self, group: str) -> list[Status]:
        return [
            Status(json.loads(p.read_text(encoding="utf-8"))) for p in self._paths(group)
        ]

    def current(self, group: str) -> Status:
        history = self.history(group)
        return history[-1] if history else INITIAL_STATUS

    def record(self, group: str) -> StatusRecord:
        return StatusRecord(group=group, status=self.current(group))
