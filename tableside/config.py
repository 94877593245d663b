"""Runtime configuration defaults for persistence, logging and the dashboards."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("TABLESIDE_DB_PATH", "data/tableside.db")
DEBUG_LOG_PATH = os.environ.get("TABLESIDE_DEBUG_LOG", "/tmp/tableside-debug.log")

# Dashboards re-read the store on this cadence to refresh elapsed-time labels.
POLL_INTERVAL_SECONDS = float(os.environ.get("TABLESIDE_POLL_SECONDS", "5"))

TABLE_COUNT = 12
LOYALTY_POINT_DIVISOR = 10
DEFAULT_PREPARATION_MINUTES = 15
FEEDBACK_RATING_RANGE = (1, 5)
