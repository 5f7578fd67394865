"""Tests for the MetaTFT byte source."""

import pytest

from tftsight.core.config import IntegrationConfig
from tftsight.core.errors import NotFoundError, SourceError
from tftsight.integrations.metatft import AppMatch, MetaTFTClient


class StubResponse:
    def __init__(self, payload=None, content=b"", status_error=None):
        self._payload = payload
        self.content = content
        self._status_error = status_error

    def raise_for_status(self):
        if self._status_error:
            raise self._status_error

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class StubSession:
    """Returns canned responses keyed by URL substring."""

    def __init__(self, routes: dict):
        self.routes = routes
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        for fragment, response in self.routes.items():
            if fragment in url:
                return response
        raise AssertionError(f"unexpected URL {url}")


PROFILE = {
    "app_matches": [
        {
            "uuid": "uuid-1",
            "match_id_ow": "7412345678",
            "player_id": 1,
            "created_timestamp": 1700000000000,
        },
        {"uuid": "uuid-2", "match_id_ow": "7400000000", "created_timestamp": 0},
    ]
}


def _client(routes: dict) -> MetaTFTClient:
    return MetaTFTClient(
        game_name="The Player",
        tag_line="EUW",
        config=IntegrationConfig(platform="euw1"),
        session=StubSession(routes),
    )


class TestUrls:
    def test_profile_url(self):
        client = _client({})
        url = client.profile_url()
        assert url.startswith("https://api.metatft.com/public/profile/lookup_by_riotid/EUW1/")
        assert "The%20Player/EUW" in url
        assert url.endswith("tft_set=TFTSet16")

    def test_snapshot_url(self):
        assert _client({}).snapshot_url("abc").endswith("/abc.json")


class TestFindAppMatch:
    """Tests for locating the tracked game."""

    def test_prefix_stripped(self):
        client = _client({"lookup_by_riotid": StubResponse(PROFILE)})
        assert client.find_app_match("EUW1_7412345678").uuid == "uuid-1"

    def test_plain_id(self):
        client = _client({"lookup_by_riotid": StubResponse(PROFILE)})
        assert client.find_app_match("7400000000").uuid == "uuid-2"

    def test_no_tracked_games(self):
        client = _client({"lookup_by_riotid": StubResponse({"app_matches": []})})
        with pytest.raises(NotFoundError) as exc_info:
            client.find_app_match("EUW1_1")
        assert "tip" in exc_info.value.to_dict()

    def test_unknown_match_lists_available(self):
        client = _client({"lookup_by_riotid": StubResponse(PROFILE)})
        with pytest.raises(NotFoundError) as exc_info:
            client.find_app_match("EUW1_1")
        payload = exc_info.value.to_dict()
        assert payload["code"] == "TRACKER_NOT_FOUND"
        assert [m["matchId"] for m in payload["availableMatches"]] == ["7412345678", "7400000000"]
        assert payload["availableMatches"][0]["date"].startswith("2023-11-14")

    def test_http_failure(self):
        client = _client({"lookup_by_riotid": StubResponse(status_error=RuntimeError("500"))})
        with pytest.raises(SourceError):
            client.find_app_match("EUW1_1")

    def test_non_json_profile(self):
        client = _client({"lookup_by_riotid": StubResponse(ValueError("bad json"))})
        with pytest.raises(SourceError):
            client.get_app_matches()


class TestFetch:
    def test_fetch_tracker_bytes(self):
        client = _client(
            {
                "lookup_by_riotid": StubResponse(PROFILE),
                "uuid-1.json": StubResponse(content=b"\x1f\x8bdata"),
            }
        )
        app_match, raw = client.fetch_tracker_bytes("EUW1_7412345678")
        assert app_match.uuid == "uuid-1"
        assert raw == b"\x1f\x8bdata"


class TestAppMatch:
    def test_created_at_empty(self):
        assert AppMatch(uuid="u", match_id="1").created_at == ""
