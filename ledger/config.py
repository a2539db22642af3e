"""Configuration for the ledger and its dashboard.

Paths and defaults live here; each value can be overridden through an
environment variable.
"""

from __future__ import annotations

import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("LEDGER_DATA_DIR", _PROJECT_ROOT / "data"))

SEED_PATH = Path(os.getenv("LEDGER_SEED_PATH", DATA_DIR / "seed.json")).resolve()

# Identity used by the dashboard when no login layer is wired in
OWNER_ID: str = os.getenv("LEDGER_OWNER_ID", "demo-user")

LOG_LEVEL: str = os.getenv("LEDGER_LOG_LEVEL", "INFO")

SUMMARY_MONTHS: int = int(os.getenv("LEDGER_SUMMARY_MONTHS", "6"))

CURRENCY_SYMBOL: str = os.getenv("LEDGER_CURRENCY_SYMBOL", "$")
