"""Verkada access-control integration for breakwatch."""

import logging
import time
from threading import Lock
from typing import List, Optional
import requests

from breakwatch import config
from breakwatch.errors import UpstreamFetchError
from breakwatch.models.report import Door

logger = logging.getLogger(__name__)


def order_doors_for_breaks(doors: List[Door]) -> List[Door]:
    """Order doors with break-room doors first, then alphabetically by name."""
    def _key(door: Door):
        name = (door.name or "").lower()
        return (0 if "break" in name else 1, name)

    return sorted(doors, key=_key)


class VerkadaClient:
    """Client for the Verkada access API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        api_base: Optional[str] = None,
        token_ttl_seconds: int = config.TOKEN_TTL_SECONDS,
        page_size: int = config.EVENTS_PAGE_SIZE,
        timeout: int = config.REQUEST_TIMEOUT_SEC,
    ):
        """Initialize Verkada client.

        Args:
            api_key: Verkada API key. If None, reads VERKADA_API_KEY from config.
            api_base: API base URL. If None, reads VERKADA_API_BASE from config.
            token_ttl_seconds: How long a fetched API token is reused
            page_size: Events requested per page
            timeout: Per-request timeout in seconds
        """
        self.api_key = api_key or config.VERKADA_API_KEY
        if not self.api_key:
            raise ValueError("Verkada API key is required. Set VERKADA_API_KEY env var.")

        self.api_base = (api_base or config.VERKADA_API_BASE).rstrip("/")
        self.token_ttl_seconds = token_ttl_seconds
        self.page_size = page_size
        self.timeout = timeout

        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._token_lock = Lock()

    def get_bearer_token(self) -> str:
        """Return a cached API token, fetching a new one once it has expired.

        Raises:
            UpstreamFetchError: If the token request fails
        """
        with self._token_lock:
            now = time.time()
            if self._token and self._token_expires_at > now:
                return self._token

            try:
                response = requests.post(
                    f"{self.api_base}/token",
                    headers={"accept": "application/json", "x-api-key": self.api_key},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                token = response.json()["token"]
            except (requests.RequestException, ValueError, KeyError) as e:
                logger.error(f"Failed to get API token: {type(e).__name__}: {str(e)}")
                raise UpstreamFetchError(f"Failed to get API token: {e}") from e

            self._token = token
            self._token_expires_at = now + self.token_ttl_seconds
            logger.debug(f"Fetched new API token, valid for {self.token_ttl_seconds}s")
            return token

    def _get(self, path: str, params: Optional[dict] = None) -> dict:
        headers = {"accept": "application/json", "x-verkada-auth": self.get_bearer_token()}
        response = requests.get(f"{self.api_base}{path}", headers=headers, params=params, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    def fetch_doors(self, site_id: Optional[str] = None) -> List[Door]:
        """Fetch access-controlled doors.

        Args:
            site_id: Restrict to one site. If None, returns doors for all sites.

        Returns:
            List of Door objects in API order

        Raises:
            UpstreamFetchError: If the API call fails
        """
        params = {"site_ids": site_id} if site_id else None
        try:
            data = self._get("/access/v1/doors", params=params)
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Failed to fetch doors: {type(e).__name__}: {str(e)}")
            raise UpstreamFetchError(f"Failed to fetch doors: {e}") from e

        doors: List[Door] = []
        for item in (data or {}).get("doors") or []:
            if not isinstance(item, dict) or item.get("door_id") in (None, ""):
                logger.warning(f"Skipping door record without door_id: {item!r}")
                continue
            doors.append(Door.from_vendor(item))
        logger.debug(f"Fetched {len(doors)} doors")
        return doors

    def fetch_access_events(self, start_unix: int, end_unix: int) -> List[dict]:
        """Fetch every access event in a time range, following pagination.

        The API does not filter by door; callers filter client-side.

        Args:
            start_unix: Range start (unix seconds)
            end_unix: Range end (unix seconds, inclusive)

        Returns:
            Raw vendor event dicts across all pages

        Raises:
            UpstreamFetchError: If any page request fails
        """
        events: List[dict] = []
        page_token: Optional[str] = None
        pages = 0

        while True:
            params = {
                "start_time": str(start_unix),
                "end_time": str(end_unix),
                "page_size": str(self.page_size),
            }
            if page_token:
                params["page_token"] = page_token

            try:
                data = self._get("/events/v1/access", params=params)
            except (requests.RequestException, ValueError) as e:
                logger.error(f"Failed to fetch access events (page {pages + 1}): {type(e).__name__}: {str(e)}")
                raise UpstreamFetchError(f"Failed to fetch access events: {e}") from e

            data = data or {}
            events.extend(data.get("events") or [])
            pages += 1

            page_token = data.get("next_page_token")
            if not page_token:
                break

        logger.debug(f"Fetched {len(events)} access events in {pages} page(s)")
        return events
