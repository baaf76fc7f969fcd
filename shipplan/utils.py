import logging
import time
import uuid
from datetime import date, datetime
from pathlib import Path
import pandas as pd

logger = logging.getLogger(__name__)

_last_stamp = 0


def gen_token() -> str:
    """
    A unique token used to keep persisted filenames from colliding.
    Tokens sort in the order they were generated.
    """
    global _last_stamp
    _last_stamp = max(time.time_ns(), _last_stamp + 1)
    return f"{_last_stamp:020d}-{uuid.uuid4().hex[:8]}"


def gen_case_id() -> str:
    """A fresh identifier for one physical case."""
    return str(uuid.uuid4())


def gen_group_name() -> str:
    """
    Returns a new plan group name, e.g. '20240630-1a2b3c4d'.
    Group names never contain '_' since it separates the name from the token on disk.
    """
    return f"{datetime.now().strftime('%Y%m%d')}-{uuid.uuid4().hex[:8]}"


def find_latest_report(directory: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the most recently modified report in `directory` whose name starts with `prefix`.
    Returns the path and its modification date, or None when nothing matches.
    """
    if not directory.is_dir():
        return None

    candidates = [
        p for p in directory.iterdir() if p.is_file() and p.name.startswith(prefix)
    ]
    if not candidates:
        return None

    latest = max(candidates, key=lambda p: (p.stat().st_mtime, p.name))
    return latest, date.fromtimestamp(latest.stat().st_mtime)


def load_csv(file_path: Path, skiprows: int = 0, sep: str = ",") -> pd.DataFrame | None:
    """
    A more robust CSV loader with a multi-stage encoding fallback.
    It will attempt to read a file in the following order:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1 - A permissive fallback that never fails but might misinterpret characters.
    Every column is read as text so identifiers such as UPCs keep their leading zeros.
    """
    try:
        return pd.read_csv(
            file_path, encoding="utf-8-sig", skiprows=skiprows, sep=sep, dtype=str
        )

    except UnicodeDecodeError:
        logger.info(
            f"INFO: UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(
                file_path, encoding="latin-1", skiprows=skiprows, sep=sep, dtype=str
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e_latin1:
            logger.error(
                f"ERROR: Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.info(f"INFO: Report not found at {file_path}, skipping.")
        return None

    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e_general:
        logger.error(
            f"ERROR: An unexpected error occurred while reading {file_path.name}. Reason: {e_general}"
        )
        return None
