"""
Runtime settings, read from the environment (and a local .env file if present).
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_MESSAGE_DELAY = 1.0
DEFAULT_LOG_LEVEL = 'INFO'


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    telegram_bot_token: str
    telegram_chat_id: str
    message_delay: float = DEFAULT_MESSAGE_DELAY
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ=None, dotenv: bool = True) -> 'Settings':
        if dotenv:
            load_dotenv()
        env = os.environ if environ is None else environ

        token = env.get('TELEGRAM_BOT_TOKEN', '').strip()
        chat_id = env.get('TELEGRAM_CHAT_ID', '').strip()
        missing = [name for name, value in (('TELEGRAM_BOT_TOKEN', token),
                                            ('TELEGRAM_CHAT_ID', chat_id)) if not value]
        if missing:
            raise ConfigError(f"Missing required setting(s): {', '.join(missing)}")

        raw_delay = env.get('NBA_SCORES_MESSAGE_DELAY', str(DEFAULT_MESSAGE_DELAY))
        try:
            message_delay = float(raw_delay)
        except ValueError as e:
            raise ConfigError(f"NBA_SCORES_MESSAGE_DELAY must be a number, got {raw_delay!r}") from e
        if message_delay < 0:
            raise ConfigError(f"NBA_SCORES_MESSAGE_DELAY must not be negative, got {raw_delay!r}")

        return cls(
            telegram_bot_token=token,
            telegram_chat_id=chat_id,
            message_delay=message_delay,
            log_level=env.get('NBA_SCORES_LOG_LEVEL', DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL,
        )
