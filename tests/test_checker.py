import asyncio
import time

import aiohttp
import pytest

from tracker.core.checker import StatusChecker, extract_game_modes, parse_address


def test_parse_address():
    assert parse_address("play.example.net") == ("play.example.net", 25565)
    assert parse_address("play.example.net:25570") == ("play.example.net", 25570)
    assert parse_address(" 1.2.3.4:abc ") == ("1.2.3.4", 25565)


def test_extract_game_modes():
    players = [
        {"name_clean": "Steve"},
        {"name_clean": "⚔ Survival 12 ✨"},
        {"name_clean": "Join discord 2day"},
        {"name_clean": "Skyblock 3"},
        "garbage",
    ]

    assert extract_game_modes(players) == ("🎲Survival 12", "🎲Skyblock 3")
    assert extract_game_modes(None) == ()


def test_build_online_status():
    checker = StatusChecker("play.example.net:25570")
    data = {
        "online": True,
        "players": {"online": 8, "max": 50, "list": [{"name_clean": "Bedwars 8"}]},
        "version": {"name_raw": "1.20.4"},
        "motd": {"clean": "Example"},
    }

    status = checker.build_status(data, "30ms", "Germany - Berlin", "ISP")

    assert status.online is True
    assert status.players_online == 8
    assert status.players_max == 50
    assert status.version == "1.20.4"
    assert status.motd == "Example"
    assert status.game_modes == ("🎲Bedwars 8",)
    assert status.icon_url == "https://api.mcstatus.io/v2/icon/play.example.net"


def test_build_offline_status():
    checker = StatusChecker("play.example.net")

    status = checker.build_status({"online": False}, "N/A", "Unknown Location", "Unknown ISP")

    assert status.online is False
    assert status.players_online == 0
    assert status.ping == "N/A"


def test_location_lookup_uses_cache():
    checker = StatusChecker("play.example.net")
    checker._location_cache = (time.monotonic(), ("Germany - Berlin", "ISP"))

    assert asyncio.run(checker.lookup_location()) == ("Germany - Berlin", "ISP")


def test_build_status_ignores_malformed_sections():
    checker = StatusChecker("play.example.net")
    data = {"online": True, "version": "1.20.4", "players": 12, "motd": ["Example"]}

    status = checker.build_status(data, "30ms", "Unknown Location", "Unknown ISP")

    assert status.online is True
    assert status.version == "Unknown"
    assert status.players_online == 0
    assert status.motd == ""
    assert status.game_modes == ()


class FakeResponse:
    def __init__(self, status=200, body=None, error=None):
        self.status = status
        self.body = body
        self.error = error

    async def __aenter__(self):
        if self.error is not None:
            raise self.error
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    async def json(self, content_type=None):
        if isinstance(self.body, Exception):
            raise self.body
        return self.body


class FakeSession:
    closed = False

    def __init__(self, response):
        self.response = response
        self.urls = []

    def get(self, url):
        self.urls.append(url)
        return self.response


def _checker_with(response) -> StatusChecker:
    checker = StatusChecker("play.example.net:25570")
    checker._session = FakeSession(response)
    return checker


def test_fetch_status_returns_payload():
    body = {"online": True, "players": {"online": 3, "max": 10}}
    checker = _checker_with(FakeResponse(200, body))

    assert asyncio.run(checker.fetch_status()) == body
    assert checker._session.urls == ["https://api.mcstatus.io/v2/status/java/play.example.net:25570"]


@pytest.mark.parametrize("response", [
    FakeResponse(404),
    FakeResponse(500),
    FakeResponse(403),
    FakeResponse(error=asyncio.TimeoutError()),
    FakeResponse(error=aiohttp.ClientConnectionError("refused")),
    FakeResponse(200, ValueError("not json")),
    FakeResponse(200, ["online"]),
    FakeResponse(200, {"players": {}}),
])
def test_fetch_status_failures_mean_offline(response):
    checker = _checker_with(response)

    assert asyncio.run(checker.fetch_status()) == {"online": False}


def test_lookup_location_success_is_cached():
    body = {"status": "success", "country": "Germany", "city": "", "isp": "Hetzner"}
    checker = _checker_with(FakeResponse(200, body))

    assert asyncio.run(checker.lookup_location()) == ("Germany - Unknown City", "Hetzner")
    checker._session.response = FakeResponse(error=aiohttp.ClientConnectionError("down"))
    assert asyncio.run(checker.lookup_location()) == ("Germany - Unknown City", "Hetzner")


@pytest.mark.parametrize("response", [
    FakeResponse(200, {"status": "fail", "message": "invalid query"}),
    FakeResponse(error=asyncio.TimeoutError()),
    FakeResponse(error=aiohttp.ClientConnectionError("down")),
    FakeResponse(200, ValueError("not json")),
])
def test_lookup_location_fallback(response):
    checker = _checker_with(response)

    assert asyncio.run(checker.lookup_location()) == ("Unknown Location", "Unknown ISP")
    assert checker._location_cache is None


def test_measure_ping_unreachable(monkeypatch):
    async def refuse(host, port):
        raise ConnectionRefusedError("refused")

    monkeypatch.setattr("tracker.core.checker.asyncio.open_connection", refuse)

    assert asyncio.run(StatusChecker("play.example.net").measure_ping()) == "N/A"


def test_measure_ping_reports_milliseconds(monkeypatch):
    class FakeWriter:
        closed = False

        def close(self):
            self.closed = True

        async def wait_closed(self):
            return None

    writer = FakeWriter()

    async def connect(host, port):
        return object(), writer

    monkeypatch.setattr("tracker.core.checker.asyncio.open_connection", connect)

    result = asyncio.run(StatusChecker("play.example.net").measure_ping())

    assert result.endswith("ms")
    assert int(result[:-2]) >= 0
    assert writer.closed is True
