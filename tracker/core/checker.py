"""
Server status checker.
Fetches live status, TCP latency and host location for one server
concurrently, with a shared aiohttp session.

Every lookup degrades to a safe default on failure: an unreachable status
API means "offline", a failed ping is "N/A", an unknown host location is
"Unknown Location".
"""

import asyncio
import re
import time
import unicodedata
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import aiohttp
from loguru import logger

from .models import ServerStatus


DEFAULT_PORT = 25565

STATUS_URL = "https://api.mcstatus.io/v2/status/java/{host}:{port}"
ICON_URL = "https://api.mcstatus.io/v2/icon/{host}"
LOCATION_URL = "http://ip-api.com/json/{host}"

_DIGIT = re.compile(r"\d")
_JOINERS = {"\ufe0f", "\u200d"}


def parse_address(address: str) -> Tuple[str, int]:
    """Split ``host[:port]``; the port defaults to 25565."""
    address = address.strip()
    if ":" in address:
        host, _, port = address.partition(":")
        try:
            return host, int(port)
        except ValueError:
            logger.warning(f"Invalid port in {address!r}, using {DEFAULT_PORT}")
            return host, DEFAULT_PORT
    return address, DEFAULT_PORT


def _strip_emoji(text: str) -> str:
    return "".join(
        ch for ch in text
        if ch not in _JOINERS and unicodedata.category(ch) not in ("So", "Cs", "Sk")
    )


def extract_game_modes(players: Any) -> Tuple[str, ...]:
    """
    Player-list entries that name a game mode rather than a player.

    Servers that advertise modes through the sample list use entries with a
    digit in them (player counts); promotional "discord" lines are dropped.
    """
    if not isinstance(players, list):
        return ()

    modes = []
    for entry in players:
        name = entry.get("name_clean") if isinstance(entry, dict) else None
        if not isinstance(name, str) or not _DIGIT.search(name):
            continue
        label = f"🎲{_strip_emoji(name).strip()}"
        if "discord" in label.lower():
            continue
        modes.append(label)
    return tuple(modes)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


class StatusChecker:
    """Queries the status, latency and geolocation of a single server."""

    _LOCATION_TTL = 3600  # host location rarely changes

    def __init__(self, address: str, timeout: float = 5.0):
        self.address = address
        self.host, self.port = parse_address(address)
        self.timeout = timeout

        self._session: Optional[aiohttp.ClientSession] = None
        self._session_lock = asyncio.Lock()
        self._location_cache: Optional[Tuple[float, Tuple[str, str]]] = None

    # ──────────────────────────────────────────────────────────────────
    # Session management
    # ──────────────────────────────────────────────────────────────────

    async def _get_session(self) -> aiohttp.ClientSession:
        async with self._session_lock:
            if self._session is None or self._session.closed:
                self._session = aiohttp.ClientSession(
                    timeout=aiohttp.ClientTimeout(
                        total=self.timeout,
                        connect=self.timeout / 2,
                    ),
                    headers={"User-Agent": "server-tracker/1.0"},
                )
            return self._session

    async def close(self):
        async with self._session_lock:
            if self._session and not self._session.closed:
                await self._session.close()
            self._session = None

    async def __aenter__(self):
        await self._get_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ──────────────────────────────────────────────────────────────────
    # Checks
    # ──────────────────────────────────────────────────────────────────

    async def check(self) -> ServerStatus:
        """Run all lookups concurrently and build the status."""
        data, ping, (location, isp) = await asyncio.gather(
            self.fetch_status(),
            self.measure_ping(),
            self.lookup_location(),
        )
        return self.build_status(data, ping, location, isp)

    def build_status(self, data: Dict[str, Any], ping: str, location: str, isp: str) -> ServerStatus:
        now = datetime.now()
        if not data.get("online"):
            return ServerStatus(
                address=self.address,
                online=False,
                timestamp=now,
                ping=ping,
                location=location,
                isp=isp,
            )

        players = _section(data, "players")
        version = _section(data, "version")
        motd = _section(data, "motd")

        return ServerStatus(
            address=self.address,
            online=True,
            timestamp=now,
            players_online=players.get("online") or 0,
            players_max=players.get("max") or 0,
            version=version.get("name_raw") or "Unknown",
            motd=motd.get("clean") or "",
            game_modes=extract_game_modes(players.get("list")),
            ping=ping,
            location=location,
            isp=isp,
            icon_url=ICON_URL.format(host=self.host),
        )

    async def fetch_status(self) -> Dict[str, Any]:
        """Raw status payload; ``{"online": False}`` when unreachable."""
        url = STATUS_URL.format(host=self.host, port=self.port)
        try:
            session = await self._get_session()
            async with session.get(url) as response:
                if response.status == 404:
                    return {"online": False}
                if response.status >= 400:
                    logger.error(f"Status API error {response.status} for {self.address}")
                    return {"online": False}
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            logger.warning(f"Status API timed out for {self.address}")
            return {"online": False}
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Error fetching server status: {e}")
            return {"online": False}

        if not isinstance(data, dict) or "online" not in data:
            logger.error(f"Invalid status response for {self.address}")
            return {"online": False}
        return data

    async def measure_ping(self) -> str:
        """TCP connect round trip to the server port."""
        start = time.monotonic()
        try:
            reader, writer = await asyncio.wait_for(
                asyncio.open_connection(self.host, self.port),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, OSError) as e:
            logger.debug(f"Ping to {self.host}:{self.port} failed: {e!r}")
            return "N/A"

        elapsed_ms = (time.monotonic() - start) * 1000
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            logger.debug(f"Ping socket close: {e!r}")
        return f"{round(elapsed_ms)}ms"

    async def lookup_location(self) -> Tuple[str, str]:
        """``("Country - City", isp)`` for the server host, cached."""
        now = time.monotonic()
        if self._location_cache is not None:
            cached_at, cached = self._location_cache
            if now - cached_at < self._LOCATION_TTL:
                return cached

        fallback = ("Unknown Location", "Unknown ISP")
        try:
            session = await self._get_session()
            async with session.get(LOCATION_URL.format(host=self.host)) as response:
                data = await response.json(content_type=None)
        except asyncio.TimeoutError:
            logger.warning(f"Location API timed out for {self.host}")
            return fallback
        except (aiohttp.ClientError, ValueError) as e:
            logger.warning(f"Location API error: {e}")
            return fallback

        if not isinstance(data, dict) or data.get("status") != "success":
            return fallback

        result = (
            f"{data.get('country')} - {data.get('city') or 'Unknown City'}",
            data.get("isp") or "Unknown ISP",
        )
        self._location_cache = (now, result)
        return result
