"""
Client configuration loaded from the environment.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_TIMEOUT = 30
DEFAULT_CURRENCY_CODE = "EGP"


@dataclass(frozen=True)
class ClientConfig:
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    currency_code: str = DEFAULT_CURRENCY_CODE
    auto_refresh_seconds: int = 300

    @classmethod
    def from_env(cls):
        """
        Build a config from POS_API_URL, POS_API_TIMEOUT, POS_CURRENCY_CODE and
        POS_AUTO_REFRESH_SECONDS, reading a local .env file first.
        """
        load_dotenv()
        return cls(
            api_url=os.getenv("POS_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout=float(os.getenv("POS_API_TIMEOUT", DEFAULT_TIMEOUT)),
            currency_code=os.getenv("POS_CURRENCY_CODE", DEFAULT_CURRENCY_CODE),
            auto_refresh_seconds=int(os.getenv("POS_AUTO_REFRESH_SECONDS", "300")),
        )
