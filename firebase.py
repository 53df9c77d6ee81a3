# ─────────────────────────────────────────────────────────────────
# firebase.py — Firebase Realtime Database Client (REST)
#
# The device writes its readings into a Firebase Realtime Database.
# We only ever need two things from Firebase:
#   1. An anonymous session (the database rules require auth != null)
#   2. A read of the whole tree at "/"
#
# Both are plain HTTPS calls, so we talk to the REST APIs with httpx
# instead of pulling in an SDK:
#   - Identity Toolkit  → accounts:signUp  (anonymous sign-in)
#   - Secure Token      → token            (refresh an expired ID token)
#   - RTDB              → GET /.json?auth=<idToken>
#
# ID tokens last one hour. We refresh slightly before expiry so a
# long-running poller never reads with a stale token.
# ─────────────────────────────────────────────────────────────────

import logging
import time
from typing import Any, Dict, Optional

import httpx

from errors import RemoteDatabaseError

logger = logging.getLogger("firebase")

SIGN_UP_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signUp"
REFRESH_URL = "https://securetoken.googleapis.com/v1/token"

# Refresh this many seconds before the token actually expires
TOKEN_REFRESH_MARGIN = 60


class FirebaseClient:
    """
    Anonymous-session reader for one Firebase Realtime Database.

    Usage:
        client = FirebaseClient(api_key, database_url)
        await client.sign_in_anonymously()
        snapshot = await client.fetch_snapshot()
        await client.aclose()

    Pass `http` to share (or mock) an httpx.AsyncClient; otherwise the
    client creates and owns one.
    """

    def __init__(
        self,
        api_key: str,
        database_url: str,
        http: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
        clock=time.monotonic,
    ):
        if not api_key or not database_url:
            raise RemoteDatabaseError(
                "Firebase credentials not configured. "
                "Set FIREBASE_API_KEY and FIREBASE_DATABASE_URL in .env file."
            )

        self.api_key = api_key
        self.database_url = database_url.rstrip("/")

        self._owns_http = http is None
        self._http = http or httpx.AsyncClient(timeout=timeout)
        self._clock = clock

        self._id_token: Optional[str] = None
        self._refresh_token: Optional[str] = None
        self._expires_at: float = 0.0
        self.user_id: Optional[str] = None

    @property
    def signed_in(self) -> bool:
        return self._id_token is not None

    async def sign_in_anonymously(self):
        """Creates a new anonymous user and stores its tokens."""

        body = await self._post_json(
            SIGN_UP_URL,
            json={"returnSecureToken": True},
            what="anonymous sign-in",
        )

        self._store_tokens(
            id_token=body.get("idToken"),
            refresh_token=body.get("refreshToken"),
            expires_in=body.get("expiresIn"),
        )
        self.user_id = body.get("localId")

        logger.info("✅ Signed in anonymously to RTDB")

    async def fetch_snapshot(self) -> Any:
        """
        Reads the entire database tree rooted at "/".

        Firebase answers `null` for an empty path — we return {} so
        callers can always do snapshot.get("key").
        """

        token = await self._valid_token()
        url = f"{self.database_url}/.json"

        try:
            response = await self._http.get(url, params={"auth": token})
            response.raise_for_status()
            value = response.json()
        except httpx.HTTPStatusError as err:
            raise RemoteDatabaseError(
                f"snapshot fetch failed: HTTP {err.response.status_code}"
            ) from err
        except (httpx.HTTPError, ValueError) as err:
            raise RemoteDatabaseError(f"snapshot fetch failed: {err}") from err

        return value or {}

    async def aclose(self):
        if self._owns_http:
            await self._http.aclose()

    # ── internals ─────────────────────────────────────────────────

    async def _valid_token(self) -> str:
        if not self.signed_in:
            raise RemoteDatabaseError("not signed in — call sign_in_anonymously() first")

        if self._clock() >= self._expires_at - TOKEN_REFRESH_MARGIN:
            await self._refresh()

        return self._id_token

    async def _refresh(self):
        body = await self._post_json(
            REFRESH_URL,
            data={"grant_type": "refresh_token", "refresh_token": self._refresh_token},
            what="token refresh",
        )

        # The Secure Token API answers in snake_case
        self._store_tokens(
            id_token=body.get("id_token"),
            refresh_token=body.get("refresh_token"),
            expires_in=body.get("expires_in"),
        )
        logger.info("🔄 Refreshed Firebase ID token")

    def _store_tokens(self, id_token, refresh_token, expires_in):
        if not id_token:
            raise RemoteDatabaseError("Firebase response did not contain an ID token")

        self._id_token = id_token
        self._refresh_token = refresh_token or self._refresh_token
        self._expires_at = self._clock() + float(expires_in or 3600)

    async def _post_json(self, url: str, what: str, **kwargs) -> Dict[str, Any]:
        try:
            response = await self._http.post(url, params={"key": self.api_key}, **kwargs)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as err:
            raise RemoteDatabaseError(
                f"{what} failed: HTTP {err.response.status_code}"
            ) from err
        except (httpx.HTTPError, ValueError) as err:
            raise RemoteDatabaseError(f"{what} failed: {err}") from err
