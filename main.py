# ─────────────────────────────────────────────────────────────────
# main.py — Application Entry Point
#
# Boot order (any failure here is fatal — uvicorn exits non-zero):
#   1. Load data.json and users.json (create them as [] if missing)
#   2. Sign in anonymously to Firebase
#   3. Run one poll immediately, then every POLL_INTERVAL seconds
#   4. Serve the HTTP API (CORS open to every origin)
#
# Run with:  python main.py   (or: uvicorn main:app --port 3300)
# ─────────────────────────────────────────────────────────────────

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from activity import ActivityDetector
from config import Settings, get_settings
from console import announce_endpoints, set_log_level
from database import LogStore, UserRegistry
from firebase import FirebaseClient
from routes import devices, users
from timer import DevicePoller

logger = logging.getLogger("main")

ENDPOINTS = [
    ("GET", "/deviceLivedata"),
    ("GET", "/alldata"),
    ("POST", "/addUser"),
    ("GET", "/viewUsers"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Startup: build the stores, sign in, start the poller.
    Shutdown: stop the poller and close the Firebase client.
    """

    settings: Settings = app.state.settings
    fetcher = app.state.fetcher
    owns_fetcher = fetcher is None

    try:
        log_store = LogStore(settings.data_file, capacity=settings.log_capacity)
        user_registry = UserRegistry(settings.users_file)
        log_store.load()
        user_registry.load()

        if owns_fetcher:
            fetcher = FirebaseClient(
                settings.firebase_api_key,
                settings.firebase_database_url,
                timeout=settings.remote_timeout,
            )
        await fetcher.sign_in_anonymously()

    except Exception as err:
        logger.critical(f"💥 Fatal error: {err}")
        if owns_fetcher and fetcher is not None:
            await fetcher.aclose()
        raise

    detector = ActivityDetector()

    app.state.fetcher = fetcher
    app.state.detector = detector
    app.state.log_store = log_store
    app.state.users = user_registry

    poller = DevicePoller(detector, fetcher, log_store, interval=settings.poll_interval)
    app.state.poller = poller
    await poller.start()

    announce_endpoints(settings.host, settings.port, ENDPOINTS)

    yield

    await poller.stop()
    if owns_fetcher:
        await fetcher.aclose()
        app.state.fetcher = None


def create_app(settings: Optional[Settings] = None, fetcher=None) -> FastAPI:
    """
    Builds the FastAPI app.

    `fetcher` replaces the Firebase client (tests pass a fake); it
    must provide async sign_in_anonymously() and fetch_snapshot().
    """

    settings = settings or get_settings()
    set_log_level(settings.log_level)

    app = FastAPI(
        title="Device Live Log API",
        description="Polls a Firebase device feed, logs activity and keeps a user registry",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.fetcher = fetcher

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(devices.router)
    app.include_router(users.router)

    @app.get("/")
    def root():
        return {
            "message": "Device Live Log API is running",
            "version": "1.0.0",
            "endpoints": [f"{method} {path}" for method, path in ENDPOINTS],
        }

    return app


app = create_app()


if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
