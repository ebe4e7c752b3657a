# src/config/settings.py

"""Central configuration for the storefront catalog."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront catalog."""

    # --- Product API ---
    API_BASE_URL: str = os.getenv(
        "STOREFRONT_API_URL", "https://fakestoreapi.com"
    )
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Page rendering ---
    REVALIDATE_SECONDS: int = int(
        os.getenv("STOREFRONT_REVALIDATE_SECONDS", "3600")
    )
    META_DESCRIPTION_LENGTH: int = 155  # SEO meta description cap
    SITE_NAME: str = "Storefront"

    # --- Interactive filtering ---
    SEARCH_DEBOUNCE_SECONDS: float = 0.3
    DISCARD_STALE_CATEGORY_RESULTS: bool = True

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
