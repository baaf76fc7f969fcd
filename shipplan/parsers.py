import logging
import math
from pathlib import Path
from typing import Any, Optional
import pandas as pd
from pydantic import ValidationError

from . import settings, utils
from .errors import ReportImportError
from .schemas import Entry

logger = logging.getLogger(__name__)

ALL_LISTINGS_HEADER = [
    "seller-sku",
    "asin1",
    "item-name",
    "product-id-type",
    "item-condition",
    "product-id",
]

# Amazon's numeric item-condition codes that we care about.
LISTING_CONDITIONS = {"11": "New", "1": "UsedLikeNew"}

# product-id-type code for a UPC on the all listings report.
UPC_PRODUCT_ID_TYPE = "3"


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value)) or str(value).strip() == ""


def _text(value: Any) -> Optional[str]:
    return None if _is_blank(value) else str(value).strip()


def _number(value: Any, column: str) -> Optional[float]:
    if _is_blank(value):
        return None
    try:
        return float(str(value).strip())
    except ValueError:
        raise ReportImportError(f"Expected a number in '{column}', got {value!r}.") from None


def _count(value: Any, column: str) -> Optional[int]:
    number = _number(value, column)
    if number is None:
        return None
    if number < 0 or not number.is_integer():
        raise ReportImportError(f"Expected a whole, non-negative number in '{column}', got {value!r}.")
    return int(number)


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def plan_row_to_entries(row: dict[str, Any]) -> list[Entry]:
    """
    Converts one shipping plan row into entries.
    - 'Loose' rows ship as one lot: one entry for the whole quantity.
    - Any other pack type is cased: one entry per physical case, each with its own id.
    """
    fnsku = _text(row.get("FNSKU"))
    if fnsku is None:
        raise ReportImportError(f"Expected 'FNSKU' in {row}.")
    units = _count(row.get("Quantity"), "Quantity")
    if units is None:
        raise ReportImportError(f"Expected 'Quantity' in {row}.")

    if _text(row.get("Pack Type")) == settings.LOOSE_PACK_TYPE:
        pounds = _number(row.get("Unit Weight"), "Unit Weight") or 0.0
        return [
            Entry(
                fnsku=fnsku,
                units=units,
                total_pounds=_round_half_up(pounds * units),
                id=_text(row.get("Staging Group")) or "",
            )
        ]

    per_case = _count(row.get("Case QT"), "Case QT")
    if per_case is None:
        raise ReportImportError(f"Expected 'Case QT' in {row}.")
    if per_case == 0 or units % per_case != 0:
        raise ReportImportError(
            f"Expected 'Quantity' ({units}) to be evenly divisible by 'Case QT' ({per_case}) for {fnsku}."
        )
    cases = units // per_case
    if cases == 0:
        raise ReportImportError(f"Expected {fnsku} to not be zero cases.")

    case_weight = _number(row.get("Case Weight"), "Case Weight")
    sides = [
        _number(row.get(column), column)
        for column in ("Case Length", "Case Width", "Case Height")
    ]

    entries = []
    for _ in range(cases):
        entry = Entry(fnsku=fnsku, units=per_case, id=utils.gen_case_id(), total_pounds=case_weight)
        if all(side is not None for side in sides):
            entry.set_dimensions(sides)
        entries.append(entry)
    return entries


def parse_plan_report(file_path: Path) -> list[Entry]:
    """
    Loads a shipping plan export and converts every row carrying an FNSKU into entries.
    Any bad row aborts the whole import: either every row converts or ReportImportError is raised.
    """
    df = utils.load_csv(file_path)
    if df is None:
        raise ReportImportError(f"Could not read shipping plan {file_path}.")

    missing = [column for column in ("FNSKU", "Quantity") if column not in df.columns]
    if missing:
        raise ReportImportError(f"{file_path.name} is missing required columns: {missing}")

    df = df[df["FNSKU"].fillna("").str.strip() != ""]

    entries = []
    for row in df.to_dict("records"):
        try:
            entries.extend(plan_row_to_entries(row))
        except ValidationError as e:
            raise ReportImportError(f"Invalid plan row {row}: {e}") from e

    logger.info(f"✅ Parsed {file_path.name}: {len(df)} rows, {len(entries)} entries.")
    return entries


def parse_storage_fees_report(file_path: Path) -> pd.DataFrame | None:
    """Loads the monthly storage fee report, normalised to one row per FNSKU."""
    df = utils.load_csv(file_path)
    if df is None:
        return None
    if "fnsku" not in df.columns:
        logger.warning(f"⚠️ {file_path.name} is not a storage fee report (no 'fnsku' column).")
        return None

    column_map = {
        "fnsku": "fnsku",
        "asin": "asin",
        "title": "product_name",
        "amz_size": "product_size_tier",
        "weight": "weight",
        "longest_side": "longest_side",
        "median_side": "median_side",
        "shortest_side": "shortest_side",
    }
    parsed = pd.DataFrame({
        standard_name: df[source_name] if source_name in df.columns else None
        for standard_name, source_name in column_map.items()
    })
    for column in ("weight", "longest_side", "median_side", "shortest_side"):
        parsed[column] = pd.to_numeric(parsed[column], errors="coerce")

    # A report lists an FNSKU once per fulfillment center; the first row is enough.
    parsed = parsed.drop_duplicates(subset="fnsku", keep="first")
    logger.info(f"✅ Parsed {file_path.name} successfully.")
    return parsed


def parse_fba_inventory_report(file_path: Path) -> pd.DataFrame | None:
    """Loads the FBA inventory report for MSKU and condition lookups."""
    df = utils.load_csv(file_path)
    if df is None:
        return None

    # Stop other reports (the storage fee report) from being read as this one.
    if any(str(column).lower() == "weight" for column in df.columns):
        logger.warning(f"⚠️ {file_path.name} looks like a different report. Skipping.")
        return None

    column_map = {
        "seller-sku": "msku",
        "fulfillment-channel-sku": "fnsku",
        "condition-type": "condition",
    }
    missing = [column for column in column_map if column not in df.columns]
    if missing:
        logger.warning(f"⚠️ {file_path.name} is missing columns {missing}. Skipping.")
        return None

    parsed = df[list(column_map)].rename(columns=column_map)
    parsed = parsed.drop_duplicates(subset="fnsku", keep="first")
    logger.info(f"✅ Parsed {file_path.name} successfully.")
    return parsed


def parse_all_listings_report(file_path: Path) -> pd.DataFrame:
    """
    Loads the tab delimited All Listings Report.
    The header has to match the standard report exactly. Condition codes are
    translated: '11' is New, '1' is UsedLikeNew, anything else is None.
    """
    df = utils.load_csv(file_path, sep="\t")
    if df is None:
        raise ReportImportError(f"Could not read listings report {file_path}.")
    if list(df.columns) != ALL_LISTINGS_HEADER:
        raise ReportImportError(f"Expected {ALL_LISTINGS_HEADER}, got {list(df.columns)}")

    parsed = df.rename(columns=lambda column: column.replace("-", "_")).rename(
        columns={"asin1": "asin"}
    )
    parsed["item_condition"] = (
        parsed["item_condition"].fillna("").str.strip().map(LISTING_CONDITIONS)
    )
    parsed = parsed.astype(object).where(parsed.notna(), None)
    logger.info(f"✅ Parsed {file_path.name} successfully.")
    return parsed


def _lookup(df: pd.DataFrame | None, key: str) -> dict[str, dict[str, Any]]:
    if df is None or df.empty:
        return {}
    return {
        str(row[key]): row
        for row in df.to_dict("records")
        if not _is_blank(row.get(key))
    }


def fill_entries(entries: list[Entry], lookup_dir: Optional[Path] = None) -> list[Entry]:
    """
    Fills in entry metadata from the latest Amazon reports in `lookup_dir`.
    - Storage fees (by FNSKU): title, ASIN, size tier, Amazon dimensions, and weight when the plan had none.
    - FBA inventory (by FNSKU): MSKU and condition.
    - All listings (by MSKU): UPC.
    Entries are updated in place and returned. Missing reports are skipped.
    """
    lookup_dir = Path(lookup_dir) if lookup_dir is not None else settings.LOOKUP_DIR

    fees, inventory, listings = None, None, None
    found = utils.find_latest_report(lookup_dir, settings.STORAGE_FEES_FILENAME_PREFIX)
    if found:
        fees = parse_storage_fees_report(found[0])
    found = utils.find_latest_report(lookup_dir, settings.FBA_INVENTORY_FILENAME_PREFIX)
    if found:
        inventory = parse_fba_inventory_report(found[0])
    found = utils.find_latest_report(lookup_dir, settings.LISTINGS_FILENAME_PREFIX)
    if found:
        listings = parse_all_listings_report(found[0])

    fees_by_fnsku = _lookup(fees, "fnsku")
    inventory_by_fnsku = _lookup(inventory, "fnsku")
    listings_by_msku = _lookup(listings, "seller_sku")

    for entry in entries:
        fee = fees_by_fnsku.get(entry.fnsku)
        if fee:
            entry.title = _text(fee["title"])
            entry.asin = _text(fee["asin"])
            entry.amz_size = _text(fee["amz_size"])
            if entry.total_pounds is None and not _is_blank(fee["weight"]):
                entry.total_pounds = float(fee["weight"])
            # Amazon's measurements are kept apart from the measured case dimensions.
            entry.amz_dimensions = tuple(
                0.0 if _is_blank(fee[side]) else float(fee[side])
                for side in ("longest_side", "median_side", "shortest_side")
            )

        stock = inventory_by_fnsku.get(entry.fnsku)
        if stock:
            entry.msku = _text(stock["msku"])
            entry.condition = _text(stock["condition"])

        listing = listings_by_msku.get(entry.msku) if entry.msku else None
        if listing and listing.get("product_id_type") == UPC_PRODUCT_ID_TYPE:
            entry.upc = _text(listing.get("product_id"))

    return entries
