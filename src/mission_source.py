"""Timed-mission page fetcher.

Downloads the public timed-missions page and hands the text of each
mission notice to :mod:`mission_parser`.
"""

from __future__ import annotations

import logging

import httpx
from bs4 import BeautifulSoup

from mission_parser import parse_missions
from models import MissionRecord

logger = logging.getLogger(__name__)

MISSIONS_URL = "https://freethevbucks.com/timed-missions/"
FRAGMENT_SELECTOR = "div.news-link div.infonotice"
DEFAULT_TIMEOUT_S = 20.0


class MissionFetchError(RuntimeError):
    """The mission page could not be fetched."""


def extract_fragments(html: str) -> list[str]:
    """Return the stripped text of every mission notice in *html*."""
    soup = BeautifulSoup(html, "html.parser")
    return [el.get_text().strip() for el in soup.select(FRAGMENT_SELECTOR)]


def fetch_fragments(
    url: str = MISSIONS_URL,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    client: httpx.Client | None = None,
) -> list[str]:
    """GET *url* and extract mission fragments.

    Raises:
        MissionFetchError: on timeout, connection failure or non-2xx status.
    """
    headers = {"User-Agent": "vbucks-missions/0.1"}
    try:
        if client is not None:
            resp = client.get(url, headers=headers, timeout=timeout_s, follow_redirects=True)
        else:
            resp = httpx.get(url, headers=headers, timeout=timeout_s, follow_redirects=True)
        resp.raise_for_status()
    except httpx.TimeoutException as exc:
        raise MissionFetchError(f"Timed out after {timeout_s}s fetching {url}") from exc
    except httpx.HTTPStatusError as exc:
        raise MissionFetchError(
            f"HTTP {exc.response.status_code} fetching {url}"
        ) from exc
    except httpx.HTTPError as exc:
        raise MissionFetchError(f"Failed to fetch {url}: {exc}") from exc

    fragments = extract_fragments(resp.text)
    logger.info("Fetched %d fragment(s) from %s", len(fragments), url)
    return fragments


def fetch_missions(
    url: str = MISSIONS_URL,
    *,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    client: httpx.Client | None = None,
) -> list[MissionRecord]:
    """Fetch the page and parse it into mission records."""
    fragments = fetch_fragments(url, timeout_s=timeout_s, client=client)
    missions = parse_missions(fragments)
    logger.info("Parsed %d mission(s)", len(missions))
    return missions
