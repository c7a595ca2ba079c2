"""Nightscout API v1 adapter.

Environment variables (via Settings):
    NIGHTSCOUT_URL        — site root, e.g. https://my-cgm.example.com
    NIGHTSCOUT_API_SECRET — plain API secret; sent as its SHA-1 hex digest

Endpoints used:
    GET  /api/v1/profile     — all stored profiles
    POST /api/v1/profile     — create a profile (no ``_id``)
    PUT  /api/v1/profile     — update a profile in place (``_id`` set)
    POST /api/v1/treatments  — bulk insert treatments (JSON array)
"""

from __future__ import annotations

import hashlib
import logging
from typing import Any, Sequence

import httpx

from tidesync.clients.base import TargetClient
from tidesync.config import Settings
from tidesync.models.nightscout import Profile, StoredProfile, Treatment

logger = logging.getLogger("tidesync.clients.nightscout")


def hash_api_secret(secret: str) -> str:
    """Return the SHA-1 hex digest Nightscout expects in the ``api-secret`` header."""
    return hashlib.sha1(secret.encode("utf-8")).hexdigest()


class NightscoutClient(TargetClient):
    """Profile and treatment writer for one Nightscout site."""

    def __init__(
        self,
        base_url: str,
        api_secret: str = "",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the Nightscout client.

        Args:
            base_url:    Nightscout site root.
            api_secret:  Plain API secret (empty for read-only public sites).
            http_client: Optional pre-configured httpx client.
            timeout:     Per-request timeout when no client is injected.
        """
        self._base_url = base_url.rstrip("/")
        self._api_secret = api_secret
        self._http_client = http_client
        self._timeout = timeout

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> "NightscoutClient":
        return cls(
            base_url=settings.nightscout_url,
            api_secret=settings.nightscout_api_secret,
            http_client=http_client,
            timeout=settings.http_timeout_seconds,
        )

    # ------------------------------------------------------------------
    # TargetClient interface
    # ------------------------------------------------------------------

    async def get_profiles(self) -> list[StoredProfile]:
        data = await self._send("GET", "/api/v1/profile")
        profiles = [StoredProfile.model_validate(item) for item in _as_list(data)]
        logger.info("Nightscout: %d stored profile(s)", len(profiles))
        return profiles

    async def set_profile(self, profile: Profile) -> Profile:
        """Create or update ``profile``.

        PUT when the profile carries a stored ``_id``, POST otherwise.  If the
        site answers without a document body, the submitted profile is
        returned as-is.
        """
        method = "PUT" if profile.id else "POST"
        logger.info(
            "Nightscout: %s profile mills=%s id=%s",
            "updating" if profile.id else "creating",
            profile.mills,
            profile.id,
        )
        data = await self._send(method, "/api/v1/profile", json=profile.to_wire())
        stored = _as_list(data)
        if not stored:
            return profile
        return Profile.model_validate(stored[0])

    async def add_treatments(self, treatments: Sequence[Treatment]) -> list[Treatment]:
        payload = [t.to_wire() for t in treatments]
        data = await self._send("POST", "/api/v1/treatments", json=payload)
        accepted = [Treatment.model_validate(item) for item in _as_list(data)]
        logger.info(
            "Nightscout: submitted %d treatment(s), %d accepted",
            len(payload),
            len(accepted),
        )
        return accepted

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    def _build_headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_secret:
            headers["api-secret"] = hash_api_secret(self._api_secret)
        return headers

    async def _send(self, method: str, path: str, json: Any = None) -> Any:
        """Make an authenticated request and return the decoded JSON body.

        Returns:
            Decoded JSON, or None for an empty body.

        Raises:
            httpx.HTTPStatusError: On non-2xx responses.
        """
        url = f"{self._base_url}{path}"
        headers = self._build_headers()

        if self._http_client:
            response = await self._http_client.request(method, url, json=json, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.request(method, url, json=json, headers=headers)

        response.raise_for_status()
        if not response.content:
            return None
        return response.json()


def _as_list(data: Any) -> list[dict]:
    """Nightscout answers with a document, a list of documents, or nothing."""
    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]
