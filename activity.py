# ─────────────────────────────────────────────────────────────────
# activity.py — Device Activity Detection
#
# The device rewrites a "key" field in Firebase each time it pushes
# a reading. We can't see the device directly, so we watch that key:
#
#   previous key │ current key │ verdict
#   ─────────────┼─────────────┼──────────
#   (never seen) │ anything    │ INACTIVE   (first look, nothing to compare)
#   "a"          │ "a"         │ INACTIVE   (nothing new since last poll)
#   "a"          │ "b"         │ ACTIVE     (device wrote something)
#   (no key)     │ "a"         │ ACTIVE     (device started writing)
#
# Known blind spot: a key that flips back to an earlier value within
# one interval looks exactly like an idle device. We keep it that way.
#
# CONCURRENCY:
# Both the poller and GET /deviceLivedata fetch and then update the
# same state. Fetches run concurrently; only detect() touches the
# state, and it never awaits, so each compare-and-update runs in one
# go on the event loop. Verdicts follow fetch COMPLETION order.
# ─────────────────────────────────────────────────────────────────

from typing import Any, Optional, Tuple

# Marks "no snapshot observed yet", distinct from a snapshot without a key
_NEVER_OBSERVED = object()


def same_key(a: Any, b: Any) -> bool:
    """Key equality where True/False never match 1/0."""
    return a == b and isinstance(a, bool) == isinstance(b, bool)


class ActivityDetector:
    """Owns the process-wide ActivityState (previous key + active flag)."""

    def __init__(self):
        self._previous_key: Any = _NEVER_OBSERVED
        self._device_active = False

    @property
    def observed(self) -> bool:
        return self._previous_key is not _NEVER_OBSERVED

    @property
    def previous_key(self) -> Optional[Any]:
        return self._previous_key if self.observed else None

    @property
    def device_active(self) -> bool:
        return self._device_active

    def detect(self, snapshot: Any) -> bool:
        """
        Compares the snapshot's key with the one seen last time.

        Updates the stored state and returns the new verdict.
        A snapshot that isn't a mapping has no key (None).
        """

        key = snapshot.get("key") if isinstance(snapshot, dict) else None

        self._device_active = self.observed and not same_key(key, self._previous_key)
        self._previous_key = key

        return self._device_active

    async def refresh(self, fetcher) -> Tuple[Any, bool]:
        """
        Fetches a fresh snapshot and runs detect() on it.

        `fetcher` is anything with an async fetch_snapshot() — normally
        a firebase.FirebaseClient. Fetch errors propagate unchanged and
        leave the state untouched.
        """

        snapshot = await fetcher.fetch_snapshot()
        return snapshot, self.detect(snapshot)
