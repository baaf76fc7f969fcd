import logging
from pathlib import Path
from typing import Any, Optional
import pandas as pd

from shipplan import check, data_handler, settings, utils
from shipplan.errors import InvalidInput
from shipplan.pipeline import DataPipeline
from shipplan.schemas import Entry
from shipplan.session import PlanSession
from shipplan.status import Status

logger = logging.getLogger(__name__)


class CheckPipeline(DataPipeline):
    """
    Scan sheet -> scanned entries and warnings for the open group.
    The scan is saved as the group's latest count, the group is marked Check,
    then its check file is written and the report posted.
    """

    def __init__(
        self,
        session: PlanSession,
        scan_path: Optional[Path] = None,
        input_dir: Optional[Path] = None,
        output_dir: Optional[Path] = None,
        test_mode: bool = False,
    ):
        super().__init__("check", session, test_mode=test_mode)
        self.scan_path = scan_path
        self.input_dir = Path(input_dir) if input_dir is not None else settings.INPUT_DIR
        self.output_dir = Path(output_dir) if output_dir is not None else settings.OUTPUT_DIR

    def extract(self) -> pd.DataFrame | None:
        group = self.session.require_group()
        logger.info(f"--- Checking '{group}' ---")

        path = self.scan_path
        if path is None:
            found = utils.find_latest_report(self.input_dir, settings.SCAN_FILENAME_PREFIX)
            if not found:
                logger.error(
                    f"  > ERROR: No scan sheet with prefix '{settings.SCAN_FILENAME_PREFIX}' in {self.input_dir}"
                )
                return None
            path, report_date = found
            logger.info(f"  > Found: {path.name} ({report_date})")

        return utils.load_csv(Path(path))

    def transform(self, df: pd.DataFrame) -> dict[str, Any] | None:
        logger.info("\n--- Reconciling Scan Lines ---")

        scanned: list[Entry] = []
        warnings: dict[str, list[check.Warn]] = {}
        rejected = 0

        for row in df.to_dict("records"):
            line = {key: value for key, value in row.items() if pd.notna(value)}
            try:
                entries = check.submit_scan(line)
            except InvalidInput as e:
                rejected += 1
                logger.error(f"  > ❌ {e}")
                continue
            scanned.extend(entries)
            warnings.setdefault(entries[0].fnsku, []).extend(
                check.check_scan(line, self.session.entries)
            )

        if not scanned:
            logger.error("❌ No scan line could be used.")
            return None

        return {"scanned": scanned, "warnings": warnings, "rejected": rejected}

    def load(self, result: dict[str, Any]) -> None:
        group = self.session.require_group()

        # One revision per run; only the latest run counts.
        scan_path = self.session.scan_store.save(group, result["scanned"])
        self.session.mark(Status.CHECK)
        check_file = data_handler.write_check_file(self.session.entries, group, self.output_dir)

        all_warnings = [w for found in result["warnings"].values() for w in found]
        if not self.test_mode:
            data_handler.post_to_webhook(group, Status.CHECK, all_warnings)
        else:
            logger.info("🧪 Test Mode: Skipping webhook post.")

        self.summary = {
            "group": group,
            "scanned": len(result["scanned"]),
            "rejected": result["rejected"],
            "warnings": result["warnings"],
            "check_file": check_file,
            "scan_file": scan_path,
        }
