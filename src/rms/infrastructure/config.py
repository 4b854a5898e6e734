"""Runtime configuration read from the environment.

Values come from the process environment, falling back to a ``.env``
file at the project root.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Resolve the project root relative to this file (src/rms/infrastructure).
BASE_DIR = Path(__file__).resolve().parents[3]
load_dotenv(BASE_DIR / ".env")

# Database
DATA_DIR = Path(os.getenv("RMS_DATA_DIR", str(BASE_DIR / "data")))
DATABASE_URL = os.getenv("RMS_DATABASE_URL", f"sqlite:///{DATA_DIR / 'rms.db'}")
DB_ISOLATION_LEVEL = os.getenv("RMS_DB_ISOLATION_LEVEL", "SERIALIZABLE") or None
# Seconds a SQLite writer waits for the database lock before giving up.
DB_LOCK_TIMEOUT = float(os.getenv("RMS_DB_LOCK_TIMEOUT", 5))

# Logging
LOG_LEVEL = os.getenv("RMS_LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("RMS_LOG_FILE") or None

# Stands in for the authenticated user when commands run from the CLI.
DEFAULT_ACTOR = os.getenv("RMS_ACTOR", "cli")

# Invoices: "after_discount" or "before_discount"
INVOICE_DELIVERY_POLICY = os.getenv("RMS_INVOICE_DELIVERY_POLICY", "after_discount")

# Listing
PAGE_SIZE = int(os.getenv("RMS_PAGE_SIZE", 10))
MAX_PAGE_SIZE = int(os.getenv("RMS_MAX_PAGE_SIZE", 100))
