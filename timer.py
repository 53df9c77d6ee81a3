# ─────────────────────────────────────────────────────────────────
# timer.py — Periodic Device Poller
#
# Every `interval` seconds (2s by default) we:
#   1. Fetch the Firebase tree and decide ACTIVE / INACTIVE
#   2. Stamp it with Colombo time
#   3. Log the verdict to the console
#   4. Append the record to the capped log store (→ data.json)
#
# WHY ASYNCIO?
# The poller has to run in the BACKGROUND while the API keeps serving
# requests. asyncio.sleep() pauses ONLY the schedule loop, not the
# server — uvicorn's event loop keeps handling HTTP in between.
#
# Each tick is launched as its own task on schedule, like a JS
# setInterval: a slow fetch does not delay the next tick, and ticks
# may overlap. A failing tick is logged and the schedule carries on.
# ─────────────────────────────────────────────────────────────────

import asyncio
import logging
from typing import Optional, Set

from activity import ActivityDetector
from clock import now_iso_colombo
from console import announce_status
from database import LogStore
from models import LogRecord

# Named logger for this module
logger = logging.getLogger("timer")


class DevicePoller:
    """
    Runs poll ticks on a fixed interval until stopped.

    start() awaits one tick immediately, then schedules the rest in a
    background task. stop() cancels the schedule and any tick still
    in flight.
    """

    def __init__(
        self,
        detector: ActivityDetector,
        fetcher,
        log_store: LogStore,
        interval: float = 2.0,
    ):
        self.detector = detector
        self.fetcher = fetcher
        self.log_store = log_store
        self.interval = interval

        self._task: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> Optional[LogRecord]:
        """
        One poll: fetch → detect → record → persist.

        Returns the record that was logged, or None if the tick failed.
        Errors never escape — the next tick simply tries again.
        """

        try:
            snapshot, active = await self.detector.refresh(self.fetcher)

            record = LogRecord(
                time=now_iso_colombo(),
                data=snapshot,
                device_status=active,
            )

            announce_status(record)
            self.log_store.append(record)
            return record

        except Exception:
            logger.exception("❌ periodic poll error")
            return None

    async def start(self):
        if self.running:
            return

        # First tick runs right away, before the first scheduled one
        await self.tick()

        self._task = asyncio.create_task(self._schedule())
        logger.info(f"⏱️  Polling every {self.interval}s")

    async def stop(self):
        pending = list(self._in_flight)
        if self._task is not None:
            pending.append(self._task)

        for task in pending:
            task.cancel()

        # Wait for cancellations to land; CancelledError is expected here
        await asyncio.gather(*pending, return_exceptions=True)

        self._task = None
        self._in_flight.clear()
        logger.info("⏹️  Poller stopped")

    async def _schedule(self):
        while True:
            await asyncio.sleep(self.interval)

            task = asyncio.create_task(self.tick())
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
