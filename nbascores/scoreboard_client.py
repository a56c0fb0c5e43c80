"""
Fetches the Basketball-Reference daily scoreboard and hands it to the parser.
"""
import logging
from datetime import date
from typing import List, Optional, Tuple

import requests

from nbascores.models import GameRecord
from nbascores.scoreboard_parser import ScoreboardParser

logger = logging.getLogger(__name__)

USER_AGENT = 'nba-scores/1.0 (daily scoreboard to Telegram; +https://www.basketball-reference.com/boxscores/)'


class ScoreboardFetchError(Exception):
    pass


class ScoreboardClient:
    BASE_URL = "https://www.basketball-reference.com"
    SCOREBOARD_PATH = "/boxscores/"

    def __init__(self, session: Optional[requests.Session] = None, base_url: str = BASE_URL,
                 timeout: float = 30, parser: Optional[ScoreboardParser] = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': USER_AGENT})
        self.parser = parser or ScoreboardParser(log=logger.info)

    @staticmethod
    def query_for(target_date: date) -> dict:
        return {'month': target_date.month, 'day': target_date.day, 'year': target_date.year}

    def scoreboard_url(self, target_date: date) -> str:
        query = self.query_for(target_date)
        return (f"{self.base_url}{self.SCOREBOARD_PATH}"
                f"?month={query['month']}&day={query['day']}&year={query['year']}")

    def fetch(self, target_date: date) -> Tuple[int, str]:
        """GET the scoreboard page; returns (status_code, body_text)."""
        try:
            response = self.session.get(f"{self.base_url}{self.SCOREBOARD_PATH}",
                                        params=self.query_for(target_date),
                                        timeout=self.timeout)
        except requests.RequestException as e:
            raise ScoreboardFetchError(f"Failed to fetch scoreboard for {target_date}: {e}") from e
        return response.status_code, response.text

    def games_for(self, target_date: date) -> List[GameRecord]:
        status_code, body = self.fetch(target_date)
        if not 200 <= status_code < 300:
            raise ScoreboardFetchError(
                f"Failed to fetch scoreboard for {target_date}: HTTP {status_code}")
        if "Rate Limit Exceeded" in body:
            raise ScoreboardFetchError("Rate limited by basketball-reference.com, try again later")
        return self.parser.parse(body, target_date)
