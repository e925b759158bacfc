"""Clan directory HTTP client.

Thin wrapper over ``httpx.Client`` that turns every failure into the lookup
failure taxonomy from ``domain.errors``. No retries:
a failed lookup is reported once and the user resubmits.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

import httpx

from config import settings
from domain.errors import ClientError, UnknownError
from domain.mapping import normalize_tag
from domain.models import Clan

__all__ = ["ClanDirectoryClient", "NETWORK_ERROR"]

log = logging.getLogger(__name__)

NETWORK_ERROR = "NETWORK"


class ClanDirectoryClient:
    def __init__(
        self,
        token: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._token = token if token is not None else settings.API_TOKEN
        self._base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._owns_client = client is None
        if client is None:
            client = httpx.Client(
                headers={"User-Agent": settings.DEFAULT_USER_AGENT},
                timeout=timeout or settings.DEFAULT_TIMEOUT,
            )
        self._client = client
        self._closed = False

    def lookup(self, query: str) -> Clan:
        tag = normalize_tag(query)
        if not tag:
            raise ClientError("400", "Empty clan tag")
        if self._closed:
            raise ClientError(NETWORK_ERROR, "Client closed")
        url = f"{self._base_url}/clans/{quote(tag, safe='')}"
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        try:
            resp = self._client.get(url, headers=headers)
        except httpx.TransportError as e:
            log.warning("Clan lookup transport failure for %s: %s", tag, e)
            raise ClientError(NETWORK_ERROR, str(e)) from e
        if not resp.is_success:
            log.info("Clan lookup for %s returned HTTP %s", tag, resp.status_code)
            raise ClientError(resp.status_code, _reason(resp))
        try:
            payload = resp.json()
        except ValueError as e:
            raise UnknownError(f"Invalid JSON for {tag}") from e
        if not isinstance(payload, dict):
            raise UnknownError(f"Unexpected payload type for {tag}: {type(payload).__name__}")
        return Clan.from_payload(payload)

    def close(self) -> None:
        self._closed = True
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ClanDirectoryClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _reason(resp: httpx.Response) -> str:
    # Directory errors carry {"reason": ..., "message": ...}
    try:
        body = resp.json()
    except ValueError:
        return resp.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("reason") or resp.reason_phrase)
    return resp.reason_phrase
