"""
Centralized configuration for the attraction sync service.

All constants are defined here to avoid scattered magic numbers
and enable easy configuration management.
"""

import os
from pathlib import Path


class Config:
    """Application configuration constants."""

    # === Duplicate Lookup ===
    MATCH_THRESHOLD = 0.5  # Minimum Dice similarity for /check results

    # === Image Processing ===
    TARGET_WIDTH = 1200        # Resize width, height follows aspect ratio
    CROP_RATIO = (3, 2)        # Width:height of the centered crop
    JPEG_QUALITY = 80          # Local sink encode quality

    # === Validation ===
    MIN_INFO_LENGTH = 30   # Description info must be longer than this
    MIN_NAME_LENGTH = 3
    MIN_CITY_LENGTH = 3

    # Only coordinates inside Lithuania are accepted
    LATITUDE_MIN = 53.53
    LATITUDE_MAX = 56.27
    LONGITUDE_MIN = 20.56
    LONGITUDE_MAX = 26.5

    # === Environment ===
    @staticmethod
    def cache_db_path() -> str:
        """Path to the SQLite cache database.
        Default: data/cache.db (relative to the repository root).
        Override with CACHE_DB_PATH env var for container deployments.
        """
        default = str(Path(__file__).parent.parent / "data" / "cache.db")
        return os.getenv("CACHE_DB_PATH", default)

    @staticmethod
    def image_output_dir() -> str:
        """Directory the local sink writes <id>.jpg files into. Default: cwd."""
        return os.getenv("IMAGE_OUTPUT_DIR", ".")

    @staticmethod
    def fetch_timeout() -> float:
        """Timeout in seconds for a single image download. Default: 15.0."""
        try:
            return float(os.getenv("FETCH_TIMEOUT", "15.0"))
        except ValueError:
            return 15.0

    @staticmethod
    def send_timeout() -> float:
        """Timeout in seconds for the remote sink POST. Default: 60.0."""
        try:
            return float(os.getenv("SEND_TIMEOUT", "60.0"))
        except ValueError:
            return 60.0

    @staticmethod
    def fetch_workers() -> int:
        """Worker count when parallel fetching is enabled. Default: 4."""
        try:
            return max(1, int(os.getenv("FETCH_WORKERS", "4")))
        except ValueError:
            return 4

    @staticmethod
    def log_level() -> str:
        """Log level (DEBUG, INFO, WARNING, ERROR)."""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @staticmethod
    def command_console_enabled() -> bool:
        """Read merge/initialize commands from stdin while serving. Default: False."""
        return os.getenv("COMMAND_CONSOLE", "false").lower() == "true"
