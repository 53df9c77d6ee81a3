import asyncio

from activity import ActivityDetector
from database import LogStore
from errors import RemoteDatabaseError
from tests.conftest import FakeFetcher, keyed
from timer import DevicePoller


def make_poller(tmp_path, fetcher, interval=3600):
    store = LogStore(tmp_path / "data.json")
    store.load()
    return DevicePoller(ActivityDetector(), fetcher, store, interval=interval), store


def test_tick_logs_a_record(tmp_path):
    poller, store = make_poller(tmp_path, FakeFetcher(keyed("a", volts=230)))

    record = asyncio.run(poller.tick())

    assert record.device_status is False
    assert record.data == {"key": "a", "volts": 230}
    assert record.time.endswith("+05:30")
    assert store.snapshot_all() == [record.to_json()]


def test_failed_tick_is_swallowed_and_next_tick_recovers(tmp_path):
    fetcher = FakeFetcher(keyed("a"), RemoteDatabaseError("offline"), keyed("b"))
    poller, store = make_poller(tmp_path, fetcher)

    async def run():
        return [await poller.tick() for _ in range(3)]

    first, failed, third = asyncio.run(run())

    assert failed is None
    assert third.device_status is True
    assert [r["data"]["key"] for r in store.snapshot_all()] == ["a", "b"]


def test_start_runs_immediately_then_on_schedule(tmp_path):
    fetcher = FakeFetcher(keyed("a"), keyed("b"), keyed("c"))
    poller, store = make_poller(tmp_path, fetcher, interval=0.01)

    async def run():
        await poller.start()
        after_start = len(store)
        await asyncio.sleep(0.1)
        await poller.stop()
        return after_start

    after_start = asyncio.run(run())

    assert after_start == 1
    assert len(store) >= 3
    statuses = [r["deviceStatus"] for r in store.snapshot_all()]
    assert statuses[:3] == [False, True, True]
    assert not poller.running


def test_schedule_survives_failing_ticks(tmp_path):
    fetcher = FakeFetcher(RemoteDatabaseError("down"), RemoteDatabaseError("down"), keyed("x"))
    poller, store = make_poller(tmp_path, fetcher, interval=0.01)

    async def run():
        await poller.start()
        await asyncio.sleep(0.1)
        await poller.stop()

    asyncio.run(run())

    assert fetcher.calls >= 3
    assert len(store) >= 1
