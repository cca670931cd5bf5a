# assistant_relay/config.py
"""
Configuration management for the assistant relay bot
"""

import os
import sys
import logging
import tempfile
from dataclasses import dataclass
from typing import List
from dotenv import load_dotenv

from .errors import ConfigError

# Load environment variables
load_dotenv()

TRUE_VALUES = ["true", "1", "yes", "on"]


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in TRUE_VALUES


def _env_number(name: str, default: str, cast):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Config:
    """Configuration settings for the relay bot, read once at startup"""
    # === REQUIRED CREDENTIALS ===
    telegram_token: str
    openai_api_key: str
    assistant_id: str

    # === MODEL CONFIGURATION ===
    stt_model: str

    # === RUN POLLING ===
    poll_interval: float
    poll_max_attempts: int

    # === CONVERSATION ===
    restart_command: str
    fresh_thread_per_message: bool

    # === STORAGE ===
    session_store_path: str
    voice_download_dir: str

    # === TELEGRAM ===
    concurrent_updates: bool

    # === LOGGING CONFIGURATION ===
    log_level: str
    log_file: str

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables"""
        return cls(
            # === REQUIRED CREDENTIALS ===
            # The lowercase name is what older deployments export
            telegram_token=os.getenv("TELEGRAM_TOKEN") or os.getenv("telegram_token", ""),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            assistant_id=os.getenv("ASSISTANT_ID", ""),

            # === MODEL CONFIGURATION ===
            stt_model=os.getenv("STT_MODEL", "whisper-1"),

            # === RUN POLLING ===
            poll_interval=_env_number("POLL_INTERVAL", "8.0", float),
            poll_max_attempts=_env_number("POLL_MAX_ATTEMPTS", "5", int),

            # === CONVERSATION ===
            restart_command=os.getenv("RESTART_COMMAND", "/restart"),
            fresh_thread_per_message=_env_flag("FRESH_THREAD_PER_MESSAGE", "false"),

            # === STORAGE ===
            session_store_path=os.getenv("SESSION_STORE_PATH", "sessions.json"),
            voice_download_dir=os.getenv("VOICE_DOWNLOAD_DIR", tempfile.gettempdir()),

            # === TELEGRAM ===
            concurrent_updates=_env_flag("CONCURRENT_UPDATES", "true"),

            # === LOGGING CONFIGURATION ===
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "relay_bot.log"),
        )

    def missing_settings(self) -> List[str]:
        """Names of required settings that are empty"""
        required = {
            "TELEGRAM_TOKEN": self.telegram_token,
            "OPENAI_API_KEY": self.openai_api_key,
            "ASSISTANT_ID": self.assistant_id,
        }
        return [name for name, value in required.items() if not value.strip()]

    def validate(self) -> "Config":
        """Raise ConfigError when a required setting is missing or a value is out of range"""
        missing = self.missing_settings()
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")
        if self.poll_max_attempts < 1:
            raise ConfigError("POLL_MAX_ATTEMPTS must be at least 1")
        if self.poll_interval < 0:
            raise ConfigError("POLL_INTERVAL must not be negative")
        if not self.restart_command.startswith("/"):
            raise ConfigError("RESTART_COMMAND must start with '/'")
        return self


def load_config() -> Config:
    """Read and validate the configuration in one step"""
    return Config.from_env().validate()


def setup_logging(config: Config):
    """Configure logging with a file handler and console output"""
    handlers = [
        logging.FileHandler(config.log_file, encoding='utf-8'),
        logging.StreamHandler(sys.stdout),
    ]

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True  # Reconfigure even if already configured
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("telegram").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
