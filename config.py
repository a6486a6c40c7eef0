"""
Application configuration.

Values are read from environment variables (a local ``.env`` file is
loaded first if present).  ``DATABASE_URL`` has no default: the app
refuses to start without a database.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_CORS_ORIGINS = (
    "http://localhost:3000,"
    "https://sashakt-child-empowerment.vercel.app,"
    "https://sashakt-five.vercel.app/"
)


def parse_origins(raw: str) -> List[str]:
    """Split a comma separated origin list, dropping trailing slashes.

    Browsers send the ``Origin`` header without a trailing slash, so
    ``https://host/`` would never match unless normalised.
    """
    return [o.strip().rstrip("/") for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    """Settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "Sashakt API")
    database_url: Optional[str] = os.getenv("DATABASE_URL")
    database_name: str = os.getenv("DATABASE_NAME", "sashakt")
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "4000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE")
    cors_origins: str = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)

    @property
    def allowed_origins(self) -> List[str]:
        return parse_origins(self.cors_origins)


settings = Settings()
