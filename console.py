# ─────────────────────────────────────────────────────────────────
# console.py — Logging Setup & Device Status Announcements
#
# Every module gets its own named logger via logging.getLogger(name),
# and they all share the format configured here. Importing this
# module anywhere is enough to switch logging on.
#
# The poller reports each verdict ("Device is ACTIVE/INACTIVE")
# through announce_status() so the console shows a live heartbeat.
# ─────────────────────────────────────────────────────────────────

import logging
from datetime import datetime, timezone

from models import LogRecord

# ── LOGGING CONFIGURATION ─────────────────────────────────────────
# %(asctime)s    → timestamp e.g. "2026-03-01 10:34:22"
# %(levelname)s  → severity e.g. "INFO", "ERROR"
# %(name)s       → which logger sent this e.g. "timer"
# %(message)s    → the actual message we wrote
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s — %(levelname)s — [%(name)s] — %(message)s"
)

logger = logging.getLogger("device")


def set_log_level(level: str):
    """Applies the configured level (e.g. "DEBUG") to the root logger."""
    logging.getLogger().setLevel(level.upper())


def announce_status(record: LogRecord):
    """Logs one poll result as ACTIVE or INACTIVE."""

    state = "ACTIVE" if record.device_status else "INACTIVE"
    stamp = datetime.now(timezone.utc).isoformat()

    logger.info(f"[{stamp}] Device is {state}")


def announce_endpoints(host: str, port: int, endpoints):
    """Prints the startup banner listing every route we serve."""

    logger.info(f"🚀 API listening on http://{host}:{port}")
    for method, path in endpoints:
        logger.info(f"   • {method:<4} {path}")
