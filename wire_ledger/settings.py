import os
from pathlib import Path
from dotenv import load_dotenv

# --- Base Directory ---
BASE_DIR = Path(__file__).resolve().parent.parent

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")

# --- Path Configuration ---
LOG_DIR = BASE_DIR / os.getenv("LOG_DIR", "logs")
LOG_FILENAME = os.getenv("LOG_FILENAME", "wire_ledger.log")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Transaction Store / Vendor Directory API ---
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:4003/api")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "15"))

# --- Ledger Rules ---
# Rows per ledger page. Page totals and prefix totals are computed against this size.
PAGE_SIZE = int(os.getenv("PAGE_SIZE", "20"))

# Batch ids are derived from the OUT entry's sequence number, e.g. S-000042.
BATCH_ID_PREFIX = os.getenv("BATCH_ID_PREFIX", "S-")
BATCH_ID_WIDTH = int(os.getenv("BATCH_ID_WIDTH", "6"))

# --- Console Report Layout ---
# Column order for the ledger page table.
LEDGER_COLUMNS = [
    "Sr.No",
    "Date",
    "Vendor",
    "Wire",
    "Design",
    "Out",
    "In",
    "Balance",
    "Wire ID",
    "Status",
    "Labour",
]

AGING_COLUMNS = [
    "Wire ID",
    "Wire",
    "Out Date",
    "Remaining",
    "Days",
]
