#!/usr/bin/env python3
"""
Post yesterday's (or a given day's) NBA results to Telegram.

Usage: nba-scores [YYYY-MM-DD]
"""
import sys
import logging
from datetime import date, datetime, timedelta
from typing import Optional

from tqdm import tqdm

from nbascores.config import ConfigError, Settings
from nbascores.rate_limiter import RateLimiter
from nbascores.scoreboard_client import ScoreboardClient, ScoreboardFetchError
from nbascores.telegram_client import TelegramClient, TelegramError

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

logger = logging.getLogger(__name__)


def parse_date_argument(argument: Optional[str], today: Optional[date] = None) -> date:
    """Empty or missing argument means yesterday; anything else must be YYYY-MM-DD."""
    if argument is None or not argument.strip():
        return (today or date.today()) - timedelta(days=1)
    return datetime.strptime(argument.strip(), '%Y-%m-%d').date()


class App:
    def __init__(self, scoreboard_client: ScoreboardClient, telegram_client: TelegramClient,
                 rate_limiter: Optional[RateLimiter] = None, today: Optional[date] = None):
        self.scoreboard_client = scoreboard_client
        self.telegram_client = telegram_client
        self.rate_limiter = rate_limiter or RateLimiter(delay=1.0)
        self.today = today or date.today()

    def run(self, target_date: date) -> int:
        scoreboard_url = self.scoreboard_client.scoreboard_url(target_date)
        logger.info(f"Fetching NBA games for {target_date}...")
        logger.info(f"Scoreboard URL: {scoreboard_url}")

        games = self.scoreboard_client.games_for(target_date)

        if not games:
            logger.info(f"No games found for {target_date}.")
            logger.info(f"Checked scoreboard: {scoreboard_url}")
            self.telegram_client.send_message(
                f"No NBA games were played {self.formatted_date_phrase(target_date)}.")
            return 0

        logger.info(f"Found {len(games)} game(s). Sending to Telegram...")
        for index, game in enumerate(tqdm(games, desc="Sending games", unit="game"), 1):
            self.rate_limiter.wait()
            logger.info(f"Sending game {index}/{len(games)}: {game.summary()}")
            self.telegram_client.send_game_score(game)
            logger.info(f"Game {index} dispatched to Telegram")

        logger.info("All games sent successfully!")
        return len(games)

    def formatted_date_phrase(self, target_date: date) -> str:
        if target_date == self.today - timedelta(days=1):
            return 'yesterday'
        return f"on {target_date.strftime('%B')} {target_date.day}, {target_date.year}"


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    argument = argv[0] if argv else None

    try:
        target_date = parse_date_argument(argument)
    except ValueError:
        print(f"Invalid date format: {argument}. Please use YYYY-MM-DD.", file=sys.stderr)
        return 1

    try:
        settings = Settings.from_env()
    except ConfigError as e:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.error(f"Configuration error: {e}")
        return 1

    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO), format=LOG_FORMAT)

    app = App(
        scoreboard_client=ScoreboardClient(),
        telegram_client=TelegramClient(settings.telegram_bot_token, settings.telegram_chat_id),
        rate_limiter=RateLimiter(delay=settings.message_delay),
    )
    try:
        app.run(target_date)
    except (ScoreboardFetchError, TelegramError) as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
