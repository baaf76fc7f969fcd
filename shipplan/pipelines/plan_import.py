import logging
from pathlib import Path
from typing import Optional

from shipplan import ledger, parsers, settings, utils
from shipplan.errors import ReportImportError
from shipplan.pipeline import DataPipeline
from shipplan.schemas import Entry
from shipplan.session import PlanSession

logger = logging.getLogger(__name__)


class PlanImportPipeline(DataPipeline):
    """Shipping plan export -> enriched entries -> a new plan group marked Open."""

    def __init__(
        self,
        session: PlanSession,
        report_path: Optional[Path] = None,
        input_dir: Optional[Path] = None,
        lookup_dir: Optional[Path] = None,
        group: Optional[str] = None,
    ):
        super().__init__("import", session)
        self.report_path = report_path
        self.input_dir = Path(input_dir) if input_dir is not None else settings.INPUT_DIR
        self.lookup_dir = Path(lookup_dir) if lookup_dir is not None else settings.LOOKUP_DIR
        self.group = group

    def extract(self) -> list[Entry] | None:
        logger.info("--- Starting Plan Import ---")

        path = self.report_path
        if path is None:
            found = utils.find_latest_report(self.input_dir, settings.PLAN_FILENAME_PREFIX)
            if not found:
                logger.error(
                    f"  > ERROR: No shipping plan with prefix '{settings.PLAN_FILENAME_PREFIX}' in {self.input_dir}"
                )
                return None
            path, report_date = found
            logger.info(f"  > Found: {path.name} ({report_date})")

        try:
            return parsers.parse_plan_report(Path(path))
        except ReportImportError as e:
            logger.error(f"❌ Import aborted: {e}")
            return None

    def transform(self, entries: list[Entry]) -> list[Entry] | None:
        logger.info("\n--- Filling Entries From Amazon Reports ---")
        entries = parsers.fill_entries(entries, self.lookup_dir)

        missing_titles = sorted({entry.fnsku for entry in entries if entry.title is None})
        if missing_titles:
            logger.warning(
                f"    - ⚠️  No report data for ({len(missing_titles)}): {', '.join(missing_titles)}"
            )
        return entries

    def load(self, entries: list[Entry]) -> None:
        group = self.session.create_group(entries, self.group)

        logger.info("\n--- Imported Plan ---")
        logger.info(ledger.summary_frame(entries).to_string())

        self.summary = {
            "group": group,
            "entries": len(entries),
            "units": ledger.total_units(entries),
            "cases": ledger.count_real_cases(entries),
        }
        logger.info(
            f"✅ Created '{group}': {self.summary['units']} units in {self.summary['cases']} cases."
        )
