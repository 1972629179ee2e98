"""
Consumer side of the public room view.

``RoomViewLoader`` fetches ``/public/viewroom/{city}/{room}`` and renders it.
Each load takes a new request token; a response that arrives after a newer
load has started is dropped without touching the loader state.
"""

import enum
import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from seating_layout import Grid, parse_layout_or_default
from seating_occupancy import Allocation, OccupancyMap, resolve_occupancy
from seating_render import Region, render_regions

logger = logging.getLogger(__name__)

VIEWROOM_API_URL = os.environ.get("VIEWROOM_API_URL", "http://localhost:8080/api/v1")
VIEWROOM_TIMEOUT_SECONDS = float(os.environ.get("VIEWROOM_TIMEOUT_SECONDS", 10))
DEFAULT_CITY = "bengaluru"


class LoadStatus(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class RoomViewError(Exception):
    pass


class RoomNotFoundError(RoomViewError):
    pass


class RoomViewFetchError(RoomViewError):
    pass


@dataclass(frozen=True)
class RoomView:
    room_name: str
    block_name: Optional[str]
    occupancy: OccupancyMap
    regions: List[Region]

    @property
    def grid(self) -> Grid:
        return self.occupancy.grid

    @property
    def title(self) -> str:
        if self.block_name:
            return f"{self.block_name} / {self.room_name}"
        return self.room_name


def fetch_room_view(
    room_name: str,
    city: str = DEFAULT_CITY,
    *,
    base_url: Optional[str] = None,
    session: Optional[requests.Session] = None,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    if not str(room_name or "").strip():
        raise RoomViewError("Room name missing")
    url = f"{(base_url or VIEWROOM_API_URL).rstrip('/')}/public/viewroom/{quote(city, safe='')}/{quote(room_name, safe='')}"
    http = session or requests
    try:
        response = http.get(url, timeout=timeout or VIEWROOM_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        logger.error(f"Room view request failed: {exc}")
        raise RoomViewFetchError("Failed to load room") from exc

    if response.status_code == 404:
        raise RoomNotFoundError("Room not found")
    if not response.ok:
        logger.error(f"Room view request returned {response.status_code}")
        raise RoomViewFetchError("Failed to load room")
    try:
        payload = response.json()
    except ValueError as exc:
        raise RoomViewFetchError("Failed to load room") from exc
    if not isinstance(payload, dict):
        raise RoomViewFetchError("Failed to load room")
    return payload


def build_room_view(payload: Dict[str, Any]) -> RoomView:
    grid = parse_layout_or_default(payload.get("layout"))
    allocations = [
        Allocation.from_payload(item)
        for item in payload.get("allocations") or []
        if isinstance(item, dict)
    ]
    occupancy = resolve_occupancy(grid, allocations)
    return RoomView(
        room_name=str(payload.get("room_name") or ""),
        block_name=payload.get("block_name") or None,
        occupancy=occupancy,
        regions=render_regions(occupancy),
    )


class RoomViewLoader:
    def __init__(
        self,
        city: str = DEFAULT_CITY,
        *,
        base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ):
        self.city = city
        self.base_url = base_url
        self.session = session
        self.timeout = timeout
        self.status = LoadStatus.IDLE
        self.view: Optional[RoomView] = None
        self.error: Optional[str] = None
        self._latest_token = 0
        self._lock = threading.Lock()

    def begin(self) -> int:
        with self._lock:
            self._latest_token += 1
            self.status = LoadStatus.LOADING
            self.error = None
            return self._latest_token

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest_token

    def complete(self, token: int, payload: Dict[str, Any]) -> Optional[RoomView]:
        view = build_room_view(payload)
        with self._lock:
            if token != self._latest_token:
                logger.debug(f"Discarding room view for superseded request {token}")
                return None
            self.view = view
            self.status = LoadStatus.SUCCESS
            return view

    def fail(self, token: int, error: Exception) -> bool:
        with self._lock:
            if token != self._latest_token:
                logger.debug(f"Discarding error for superseded request {token}: {error}")
                return False
            self.view = None
            self.error = str(error) or "Failed to load"
            self.status = LoadStatus.ERROR
            return True

    def load(self, room_name: str) -> Optional[RoomView]:
        token = self.begin()
        try:
            payload = fetch_room_view(
                room_name,
                self.city,
                base_url=self.base_url,
                session=self.session,
                timeout=self.timeout,
            )
        except RoomViewError as exc:
            self.fail(token, exc)
            return None
        try:
            return self.complete(token, payload)
        except Exception as exc:
            logger.error(f"Could not render room view for {room_name!r}: {exc}")
            self.fail(token, RoomViewFetchError("Failed to load room"))
            return None
