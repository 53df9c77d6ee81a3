# ─────────────────────────────────────────────────────────────────
# routes/devices.py — Device Endpoints
#
#   GET /deviceLivedata → fetch NOW, return {time, data, deviceStatus}
#   GET /alldata        → every record the poller has logged
#
# This file only translates HTTP ↔ function calls. Detection lives
# in activity.py, storage in database.py.
# ─────────────────────────────────────────────────────────────────

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from activity import ActivityDetector
from clock import now_iso_colombo
from database import LogStore
from dependencies import get_detector, get_fetcher, get_log_store
from models import ErrorResponse, LogRecord

# Named logger for this module
logger = logging.getLogger("routes")

router = APIRouter(tags=["Device"])


@router.get("/deviceLivedata", responses={500: {"model": ErrorResponse}})
async def device_live_data(
    detector: ActivityDetector = Depends(get_detector),
    fetcher=Depends(get_fetcher),
):
    """
    Reads Firebase right now and reports whether the device is active.

    This shares the detector with the poller, so a live request also
    advances the "previous key" the next poll compares against.
    The result is NOT written to the log store.
    """

    try:
        snapshot, active = await detector.refresh(fetcher)
    except Exception as err:
        logger.exception("❌ /deviceLivedata error")
        return JSONResponse(status_code=500, content={"error": str(err)})

    record = LogRecord(time=now_iso_colombo(), data=snapshot, device_status=active)
    return record.to_json()


@router.get("/alldata")
def all_data(log_store: LogStore = Depends(get_log_store)):
    """Returns the logged records, oldest first ([] before the first poll)."""

    return log_store.snapshot_all()
