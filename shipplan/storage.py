import logging
from pathlib import Path
from typing import Sequence

from . import data_handler, utils
from .errors import InvalidInput
from .schemas import Entry

logger = logging.getLogger(__name__)


class PlanStore:
    """
    Plan groups persisted as JSON revisions, `<group>_<token>.json`.

    A group is every revision saved under its name; revisions are only ever
    added, never rewritten, so branching away inventory leaves the history intact.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def save(self, group: str, entries: Sequence[Entry]) -> Path:
        if "_" in group:
            raise InvalidInput(f"Group name '{group}' may not contain '_'.")
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{group}_{utils.gen_token()}.json"
        path.write_text(data_handler.serialize(entries), encoding="utf-8")
        logger.info(f"Saved {len(entries)} entries to {path.name}")
        return path

    def revisions(self, group: str) -> list[Path]:
        if not self.directory.is_dir():
            return []
        paths = [
            p
            for p in self.directory.glob("*_*.json")
            if p.stem.rsplit("_", 1)[0] == group
        ]
        return sorted(paths, key=lambda p: p.stem.rsplit("_", 1)[1])

    def load(self, group: str) -> list[Entry]:
        entries: list[Entry] = []
        for path in self.revisions(group):
            entries.extend(data_handler.deserialize(path.read_text(encoding="utf-8")))
        return entries

    def latest(self, group: str) -> list[Entry]:
        """Only the newest revision of a group, for records that replace rather than add up."""
        paths = self.revisions(group)
        if not paths:
            return []
        return data_handler.deserialize(paths[-1].read_text(encoding="utf-8"))

    def groups(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted({p.stem.rsplit("_", 1)[0] for p in self.directory.glob("*_*.json")})

    def remove(self, path: Path) -> None:
        Path(path).unlink(missing_ok=True)
        logger.info(f"Removed revision {Path(path).name}")
