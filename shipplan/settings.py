import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
# Use Path objects for robust, OS-agnostic path handling.
INPUT_DIR = BASE_DIR / os.getenv("INPUT_DIR", "input")
OUTPUT_DIR = BASE_DIR / os.getenv("OUTPUT_DIR", "output")

# Persisted plan revisions and status records live in separate folders.
STORAGE_DIR = BASE_DIR / os.getenv("STORAGE_DIR", ".plans")
STATUS_DIR = BASE_DIR / os.getenv("STATUS_DIR", ".status")
# Physical counts from check runs, kept apart from the plan groups.
SCAN_DIR = BASE_DIR / os.getenv("SCAN_DIR", ".scans")

# Amazon lookup reports used to enrich imported plans.
LOOKUP_DIR = BASE_DIR / os.getenv("LOOKUP_DIR", ".local")

# --- Logging ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Filename Configuration ---
PLAN_FILENAME_PREFIX = os.getenv("PLAN_FILENAME_PREFIX", "shipping_plan_")
SCAN_FILENAME_PREFIX = os.getenv("SCAN_FILENAME_PREFIX", "scan_")
STORAGE_FEES_FILENAME_PREFIX = os.getenv(
    "STORAGE_FEES_FILENAME_PREFIX", "monthly_storage_fees_"
)
FBA_INVENTORY_FILENAME_PREFIX = os.getenv(
    "FBA_INVENTORY_FILENAME_PREFIX", "fba_inventory_"
)
LISTINGS_FILENAME_PREFIX = os.getenv("LISTINGS_FILENAME_PREFIX", "all_listings_")
CHECK_FILENAME_SUFFIX = "-CheckFile.csv"

# --- Webhook ---
WEBHOOK_URL = os.getenv("WEBHOOK_URL")

# --- Shared Business Logic ---
# Carrier handling rules for a single case.
TEAM_LIFT_POUNDS = 49.0
MAX_CASE_INCHES = 24.0

# Units are stored as signed 32-bit quantities.
I32_MIN = -(2**31)
I32_MAX = 2**31 - 1

# Pack type on the shipping plan that ships as one unboxed lot.
LOOSE_PACK_TYPE = "Loose"

# Header of the exported check sheet.
CHECK_FILE_COLUMNS = ["ASIN", "TITLE", "UNITS", "SIZE", "FNSKU", "UPC", "COUNT", "NOTES"]
