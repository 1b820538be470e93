import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default

# ==================== SERVICE ====================

SERVICE_NAME = "Enrollment Processing API"
SERVICE_VERSION = "1.0.0"

# ==================== LOGGING ====================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ==================== SIMULATED DELAYS ====================

PROCESSING_DELAY_MS = _int_env("ENROLLMENT_PROCESSING_DELAY_MS", 1000)
DB_DELAY_MS = _int_env("ENROLLMENT_DB_DELAY_MS", 300)
EMAIL_DELAY_MS = _int_env("ENROLLMENT_EMAIL_DELAY_MS", 200)


def setup_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the function.

    The Lambda runtime installs its own handler on the root logger, so only the
    level is adjusted when a handler is already present.
    """
    level = (level or LOG_LEVEL).upper()
    numeric_level = logging.getLevelName(level)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    root = logging.getLogger()
    if root.handlers:
        root.setLevel(numeric_level)
        return

    logging.basicConfig(
        level=numeric_level,
        format="[%(levelname)s] %(asctime)s %(name)s - %(message)s",
    )
