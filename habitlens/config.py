"""Configuration — loads environment variables with sensible defaults.

All tunables live here. Override via .env file or environment variables.
No hardcoded thresholds/horizons elsewhere in the codebase.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env from project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

def _env(key: str, default: str = "") -> str:
    return os.getenv(key, default)

def _env_int(key: str, default: int) -> int:
    return int(os.getenv(key, str(default)))


# ═══════════════════════════════════════════════════════════════════════════
# Analytics window
# ═══════════════════════════════════════════════════════════════════════════

ANALYTICS_DAYS = _env_int("ANALYTICS_DAYS", 90)

# Habits saved without a category are grouped under this label
DEFAULT_CATEGORY = _env("DEFAULT_CATEGORY", "General")

# ═══════════════════════════════════════════════════════════════════════════
# Insight thresholds (rates and gaps are percentage points)
# ═══════════════════════════════════════════════════════════════════════════

CHAMPION_RATE = _env_int("CHAMPION_RATE", 80)
WEEK_WARRIOR_DAYS = _env_int("WEEK_WARRIOR_DAYS", 7)
MONTHLY_MASTER_DAYS = _env_int("MONTHLY_MASTER_DAYS", 30)
TOP_PERFORMER_RATE = _env_int("TOP_PERFORMER_RATE", 70)
NEEDS_ATTENTION_RATE = _env_int("NEEDS_ATTENTION_RATE", 30)
WEEKEND_SKEW_POINTS = _env_int("WEEKEND_SKEW_POINTS", 20)
CATEGORY_GAP_POINTS = _env_int("CATEGORY_GAP_POINTS", 20)
TREND_POINTS = _env_int("TREND_POINTS", 10)

# ═══════════════════════════════════════════════════════════════════════════
# Database
# ═══════════════════════════════════════════════════════════════════════════

DB_PATH = Path(_env("HABITLENS_DB_PATH") or _PROJECT_ROOT / "data" / "habitlens.db")

# ═══════════════════════════════════════════════════════════════════════════
# Logging
# ═══════════════════════════════════════════════════════════════════════════

LOG_LEVEL = _env("LOG_LEVEL", "INFO").upper()

# ═══════════════════════════════════════════════════════════════════════════
# Timezone (default UTC, override for your locale in .env)
# ═══════════════════════════════════════════════════════════════════════════

TIMEZONE_OFFSET_HOURS = _env_int("TIMEZONE_OFFSET_HOURS", 0)
