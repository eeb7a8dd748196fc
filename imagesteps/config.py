"""
Process configuration read from the environment.

The runner calls `load_dotenv()` before the first `get_settings()` call, so values
from a local `.env` file are picked up as well.
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from .errors import ConfigurationError

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    fetch_timeout: float = 30.0
    user_agent: str = "imagesteps/0.1"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        raw_timeout = os.environ.get("IMAGESTEPS_FETCH_TIMEOUT")
        fetch_timeout = cls.fetch_timeout
        if raw_timeout is not None:
            try:
                fetch_timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError("IMAGESTEPS_FETCH_TIMEOUT", raw_timeout, "a number of seconds") from None
            if not fetch_timeout > 0:
                raise ConfigurationError("IMAGESTEPS_FETCH_TIMEOUT", raw_timeout, "a positive number of seconds")

        log_level = os.environ.get("IMAGESTEPS_LOG_LEVEL", cls.log_level).upper()
        if log_level not in LOG_LEVELS:
            raise ConfigurationError("IMAGESTEPS_LOG_LEVEL", log_level, "one of " + ", ".join(LOG_LEVELS))

        return cls(
            fetch_timeout=fetch_timeout,
            user_agent=os.environ.get("IMAGESTEPS_USER_AGENT", cls.user_agent),
            log_level=log_level,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
