"""Genius lyrics lookup: song search followed by a lyrics page scrape."""

import json
from typing import Optional
from urllib.parse import quote

import requests  # type: ignore[import-untyped]
from bs4 import BeautifulSoup

from ..config import FETCH_RETRIES, FETCH_TIMEOUT
from ..exceptions import (
    LyricsError,
    PageFetchFailedError,
    ParseFailedError,
    SearchFailedError,
)
from ..utils.logging import get_logger
from .fetch import fetch_text
from .models import LyricResult, TrackIdentity
from .provider import LyricProvider

logger = get_logger(__name__)

# ----------------------
# Site-specific details
# ----------------------
SEARCH_URL = "https://genius.com/api/search/song?per_page=5&q={query}"

LYRICS_CONTAINER_SELECTOR = (
    'div[data-lyrics-container="true"], div[class^="Lyrics__Container"]'
)

# Elements inside lyric containers that hold page metadata, not lyrics
NON_LYRIC_SELECTOR = ", ".join(
    f'[class*="{name}"]'
    for name in ("LyricsHeader", "SongBioPreview", "ContributorsCredit")
)


def build_search_url(query: TrackIdentity) -> str:
    """Search URL for ``"<artist> <title>"``, URL-encoded."""
    return SEARCH_URL.format(query=quote(query.query))


def find_song_url(data: dict) -> Optional[str]:
    """
    Return the first lyrics-page URL among the song hits of a search response.

    Raises:
        ParseFailedError: if the response does not have the expected shape
    """
    try:
        sections = data.get("response", {}).get("sections", [])
        for section in sections:
            if section.get("type") != "song":
                continue
            for hit in section.get("hits", []):
                url = hit.get("result", {}).get("url")
                if url and url.endswith("-lyrics") and "/artists/" not in url:
                    return url
    except (AttributeError, TypeError) as e:
        raise ParseFailedError(f"Unexpected search response: {e}") from e
    return None


def extract_lyrics(html: str) -> Optional[str]:
    """
    Pull lyric text out of a Genius song page.

    Every lyric container contributes its text followed by a newline, in
    document order; ``<br>`` tags become newlines first. Returns None when
    the page has no lyric text.
    """
    soup = BeautifulSoup(html, "html.parser")
    containers = soup.select(LYRICS_CONTAINER_SELECTOR)
    if not containers:
        return None

    blocks = []
    for container in containers:
        for elem in container.select(NON_LYRIC_SELECTOR):
            elem.decompose()
        for br in container.find_all("br"):
            br.replace_with("\n")
        blocks.append(container.get_text() + "\n")

    lyrics = "".join(blocks)
    if not lyrics.strip():
        return None
    return lyrics


class GeniusProvider(LyricProvider):
    """Two-stage Genius lookup behind the ``LyricProvider`` contract."""

    name = "genius"

    def __init__(
        self,
        timeout: float = FETCH_TIMEOUT,
        max_retries: int = FETCH_RETRIES,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session

    def _get(self, url: str) -> str:
        return fetch_text(
            url,
            timeout=self.timeout,
            max_retries=self.max_retries,
            session=self.session,
        )

    def search(self, query: TrackIdentity) -> Optional[str]:
        """Stage one: URL of the best matching lyrics page, or None."""
        url = build_search_url(query)
        logger.debug(f"Searching Genius: {url}")
        try:
            body = self._get(url)
        except requests.RequestException as e:
            raise SearchFailedError(f"Search request failed: {e}") from e

        try:
            data = json.loads(body)
        except ValueError as e:
            raise ParseFailedError(f"Search response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise ParseFailedError("Search response is not a JSON object")
        return find_song_url(data)

    def page(self, url: str) -> Optional[str]:
        """Stage two: raw lyric text from the song page, or None."""
        logger.debug(f"Fetching lyrics page: {url}")
        try:
            html = self._get(url)
        except requests.RequestException as e:
            raise PageFetchFailedError(f"Page request failed: {e}") from e

        try:
            return extract_lyrics(html)
        except Exception as e:
            raise ParseFailedError(f"Cannot parse lyrics page: {e}") from e

    def fetch(self, query: TrackIdentity) -> LyricResult:
        try:
            song_url = self.search(query)
            if not song_url:
                logger.info(f"No Genius result for {query}")
                return LyricResult.not_found()

            lyrics = self.page(song_url)
        except LyricsError as e:
            logger.warning(f"Lyrics lookup failed for {query}: {e}")
            return LyricResult.fetch_error(e.kind, str(e))

        if lyrics is None:
            logger.info(f"No lyric containers on {song_url}")
            return LyricResult.not_found()

        logger.info(f"Fetched lyrics for {query} from {song_url}")
        return LyricResult.text(lyrics)
