import csv
import json
import logging
from pathlib import Path
from typing import Optional, Sequence
import pandas as pd
import requests
from pydantic import BaseModel, TypeAdapter

from . import ledger, settings
from .schemas import Entry

logger = logging.getLogger(__name__)

_ENTRY_LIST = TypeAdapter(list[Entry])


def serialize(entries: Sequence[Entry]) -> str:
    """Entries as the persisted JSON array, one object per entry."""
    return json.dumps([entry.model_dump(mode="json") for entry in entries], indent=2)


def deserialize(text: str) -> list[Entry]:
    return _ENTRY_LIST.validate_json(text)


def check_file_frame(entries: Sequence[Entry]) -> pd.DataFrame:
    """The check sheet body: one row per FNSKU, COUNT and NOTES left for the operator."""
    summary = ledger.summary_frame(entries)
    df = pd.DataFrame(
        {
            "ASIN": summary["asin"],
            "TITLE": summary["title"],
            "UNITS": summary["units"],
            "SIZE": summary["amz_size"],
            "FNSKU": summary["fnsku"],
            "UPC": summary["upc"],
            "COUNT": "",
            "NOTES": "",
        },
        columns=settings.CHECK_FILE_COLUMNS,
    )
    return df.fillna("")


def write_check_file(
    entries: Sequence[Entry], group: str, directory: Optional[Path] = None
) -> Path:
    """Writes `<group>-CheckFile.csv`: the group name on the first line, then the sheet."""
    directory = Path(directory) if directory is not None else settings.OUTPUT_DIR
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{group}{settings.CHECK_FILENAME_SUFFIX}"

    with open(path, "w", newline="", encoding="utf-8") as f:
        f.write(f"{group}\n")
        check_file_frame(entries).to_csv(f, index=False, quoting=csv.QUOTE_ALL)

    logger.info(f"✅ Check file saved to: {path}")
    return path


def post_to_webhook(
    group: str, status: str, warnings: Sequence[BaseModel], url: Optional[str] = None
) -> bool:
    """
    Posts a check report for `group` to the webhook.
    Returns True when the webhook accepted it; failures are logged, never raised.
    """
    url = url or settings.WEBHOOK_URL
    if not url:
        logger.warning("⚠️ WEBHOOK_URL not set. Skipping webhook post.")
        return False

    logger.info(f"🚀 Posting check report for '{group}' to webhook.")

    payload = {
        "group": group,
        "status": str(status),
        "warnings": [warning.model_dump(mode="json") for warning in warnings],
    }

    try:
        response = requests.post(url, json=payload, timeout=15)
        response.raise_for_status()
        logger.info("✅ Check report successfully posted to webhook.")
        return True
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error posting to webhook: {e}")
        return False
