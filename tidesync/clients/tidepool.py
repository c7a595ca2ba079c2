"""Tidepool API adapter.

Authenticates with email + password and reads device data for one user.

API base: https://api.tidepool.org

Endpoints used:
    POST /auth/login         — HTTP basic auth; session token in the
                               ``x-tidepool-session-token`` response header
    GET  /data/{userid}      — device data, filtered by ``type``,
                               ``startDate`` and ``endDate``

Data types read:
    pumpSettings, bolus, food, physicalActivity
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TypeVar

import httpx

from tidesync.clients.base import SourceClient
from tidesync.config import Settings
from tidesync.models.base import TideSyncBase
from tidesync.models.tidepool import Bolus, Food, PhysicalActivity, PumpSettings

logger = logging.getLogger("tidesync.clients.tidepool")

_SESSION_HEADER = "x-tidepool-session-token"

ModelT = TypeVar("ModelT", bound=TideSyncBase)


class TidepoolAuthError(RuntimeError):
    """Raised when login succeeds at the HTTP level but yields no session."""


@dataclass
class TidepoolSession:
    """Session obtained from ``/auth/login``.

    Attributes:
        token:   Value for the ``x-tidepool-session-token`` header.
        user_id: Tidepool user id whose data is read.
    """

    token: str
    user_id: str


class TidepoolClient(SourceClient):
    """Read-only Tidepool client.

    Logs in lazily on the first data request and reuses the session for the
    lifetime of the client.  Token refresh is not handled: a sync run is short
    and a new client is built per process.
    """

    SOURCE_NAME = "Tidepool"

    def __init__(
        self,
        email: str,
        password: str,
        base_url: str = "https://api.tidepool.org",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the Tidepool client.

        Args:
            email:       Tidepool account email.
            password:    Tidepool account password.
            base_url:    API root (override for the integration environment).
            http_client: Optional pre-configured httpx client (for testing or
                         connection sharing).
            timeout:     Per-request timeout when no client is injected.
        """
        self._email = email
        self._password = password
        self._base_url = base_url.rstrip("/")
        self._http_client = http_client
        self._timeout = timeout
        self._session: TidepoolSession | None = None

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "TidepoolClient":
        return cls(
            email=settings.tidepool_email,
            password=settings.tidepool_password,
            base_url=settings.tidepool_base_url,
            http_client=http_client,
            timeout=settings.http_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # SourceClient interface
    # ------------------------------------------------------------------

    async def get_pump_settings(
        self, since: datetime, till: datetime | None = None
    ) -> list[PumpSettings]:
        return await self._get_data("pumpSettings", PumpSettings, since, till)

    async def get_boluses(
        self, since: datetime, till: datetime | None = None
    ) -> list[Bolus]:
        return await self._get_data("bolus", Bolus, since, till)

    async def get_food(self, since: datetime, till: datetime | None = None) -> list[Food]:
        return await self._get_data("food", Food, since, till)

    async def get_physical_activity(
        self, since: datetime, till: datetime | None = None
    ) -> list[PhysicalActivity]:
        return await self._get_data("physicalActivity", PhysicalActivity, since, till)

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    async def login(self) -> TidepoolSession:
        """Authenticate and cache the session.

        Returns:
            The new TidepoolSession.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses (bad credentials).
            TidepoolAuthError:     If the response carries no session token.
        """
        logger.info("Tidepool: logging in as %s", self._email)
        response = await self._request(
            "POST",
            f"{self._base_url}/auth/login",
            auth=(self._email, self._password),
        )
        response.raise_for_status()

        token = response.headers.get(_SESSION_HEADER)
        user_id = response.json().get("userid")
        if not token or not user_id:
            raise TidepoolAuthError("Tidepool login returned no session token or user id")

        self._session = TidepoolSession(token=token, user_id=user_id)
        return self._session

    async def _ensure_session(self) -> TidepoolSession:
        if self._session is None:
            return await self.login()
        return self._session

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _get_data(
        self,
        data_type: str,
        model: type[ModelT],
        since: datetime,
        till: datetime | None,
    ) -> list[ModelT]:
        """Fetch one data type for the window and parse each document.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses.
        """
        session = await self._ensure_session()

        params = {"type": data_type, "startDate": _format_time(since)}
        if till is not None:
            params["endDate"] = _format_time(till)

        response = await self._request(
            "GET",
            f"{self._base_url}/data/{session.user_id}",
            params=params,
            headers={_SESSION_HEADER: session.token},
        )
        response.raise_for_status()

        items = [model.model_validate(item) for item in response.json()]
        logger.info("Tidepool: fetched %d %s record(s)", len(items), data_type)
        return items

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        if self._http_client:
            return await self._http_client.request(method, url, **kwargs)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.request(method, url, **kwargs)


def _format_time(value: datetime) -> str:
    """Render a window bound as Tidepool expects (UTC, millisecond precision).

    Naive datetimes are taken as UTC.
    """
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
