"""Unit tests for the timed-mission page fetcher."""

from __future__ import annotations

import httpx
import pytest
import respx

from mission_source import (
    MISSIONS_URL,
    MissionFetchError,
    extract_fragments,
    fetch_fragments,
    fetch_missions,
)


PAGE = """
<html><body>
  <div class="news-link">
    <div class="infonotice">
      500 80PL Defend in Stonewood
    </div>
    <div class="infonotice">Support the site! Use code "iFeral" in the Item Shop</div>
    <div class="infonotice">300 90 Survive the Storm in <b>Canny Valley</b></div>
    <div class="infonotice">Missions refresh at 00:00 UTC</div>
  </div>
  <div class="infonotice">999 140 Not a timed mission in Twine Peaks</div>
</body></html>
"""


class TestExtractFragments:
    def test_selects_nested_notices_in_order(self):
        assert extract_fragments(PAGE) == [
            "500 80PL Defend in Stonewood",
            'Support the site! Use code "iFeral" in the Item Shop',
            "300 90 Survive the Storm in Canny Valley",
            "Missions refresh at 00:00 UTC",
        ]

    def test_no_matches(self):
        assert extract_fragments("<html><body><p>maintenance</p></body></html>") == []


class TestFetchFragments:
    @respx.mock
    def test_returns_fragments(self):
        respx.get(MISSIONS_URL).respond(200, text=PAGE)
        fragments = fetch_fragments(timeout_s=5.0)
        assert len(fragments) == 4

    @respx.mock
    def test_http_error_raises(self):
        respx.get(MISSIONS_URL).respond(503, text="down")
        with pytest.raises(MissionFetchError, match="503"):
            fetch_fragments()

    @respx.mock
    def test_timeout_raises(self):
        respx.get(MISSIONS_URL).mock(side_effect=httpx.ConnectTimeout("slow"))
        with pytest.raises(MissionFetchError, match="Timed out"):
            fetch_fragments(timeout_s=1.0)

    @respx.mock
    def test_connection_error_raises(self):
        respx.get(MISSIONS_URL).mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(MissionFetchError):
            fetch_fragments()

    @respx.mock
    def test_client_follows_redirects(self):
        moved = "https://new.example.com/timed-missions/"
        respx.get(MISSIONS_URL).respond(301, headers={"Location": moved})
        respx.get(moved).respond(200, text=PAGE)
        with httpx.Client() as client:
            fragments = fetch_fragments(client=client)
        assert len(fragments) == 4

    @respx.mock
    def test_custom_url_and_client(self):
        url = "https://mirror.example.com/missions"
        respx.get(url).respond(200, text=PAGE)
        with httpx.Client() as client:
            fragments = fetch_fragments(url, client=client)
        assert fragments[0] == "500 80PL Defend in Stonewood"


class TestFetchMissions:
    @respx.mock
    def test_filters_and_parses(self):
        respx.get(MISSIONS_URL).respond(200, text=PAGE)
        missions = fetch_missions()
        assert [(m.amount, m.power_level, m.mission_type, m.area) for m in missions] == [
            ("500", "80", "PL Defend", "Stonewood"),
            ("300", "90", "Survive the Storm", "Canny Valley"),
        ]
