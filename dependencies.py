# ─────────────────────────────────────────────────────────────────
# dependencies.py — FastAPI Dependencies
#
# The stores, detector and Firebase client are created once in the
# app lifespan (main.py) and parked on app.state. Routes ask for
# them through Depends(...) instead of importing globals, which
# keeps every test free to build an app with its own temp files.
# ─────────────────────────────────────────────────────────────────

from fastapi import Request

from activity import ActivityDetector
from database import LogStore, UserRegistry


def get_detector(request: Request) -> ActivityDetector:
    return request.app.state.detector


def get_fetcher(request: Request):
    return request.app.state.fetcher


def get_log_store(request: Request) -> LogStore:
    return request.app.state.log_store


def get_user_registry(request: Request) -> UserRegistry:
    return request.app.state.users
