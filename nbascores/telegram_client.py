"""
Minimal Telegram Bot API client for posting game results to a chat.
"""
import logging
from typing import Optional

import requests

from nbascores.models import GameRecord

logger = logging.getLogger(__name__)

API_URL = "https://api.telegram.org"


class TelegramError(Exception):
    pass


class TelegramClient:
    def __init__(self, token: str, chat_id: str, session: Optional[requests.Session] = None,
                 timeout: float = 15):
        self.token = token
        self.chat_id = chat_id
        self.timeout = timeout
        self.session = session or requests.Session()

    def send_message(self, text: str):
        url = f"{API_URL}/bot{self.token}/sendMessage"
        try:
            response = self.session.post(url, json={'chat_id': self.chat_id, 'text': text},
                                         timeout=self.timeout)
        except requests.RequestException as e:
            raise TelegramError(f"Telegram request failed: {e}") from e

        if response.status_code != 200:
            raise TelegramError(f"Telegram error {response.status_code}: {response.text}")
        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if payload.get('ok') is False:
            raise TelegramError(f"Telegram rejected message: {payload.get('description', 'unknown error')}")
        logger.debug(f"Message delivered to chat {self.chat_id}")

    def send_game_score(self, game: GameRecord):
        self.send_message(self.format_game_message(game))

    @staticmethod
    def format_game_message(game: GameRecord) -> str:
        if game.is_final:
            return ("🏀 NBA Game Result\n\n"
                    f"{game.visitor_team_name}: {game.visitor_score}\n"
                    f"{game.home_team_name}: {game.home_score}\n\n"
                    f"📅 {game.date}\n"
                    "✅ Final")
        return ("🏀 NBA Game\n\n"
                f"{game.visitor_team_name} vs {game.home_team_name}\n"
                f"📅 {game.date}\n"
                f"Status: {game.status}")
