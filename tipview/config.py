"""
Configuration constants for TipView.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Persistence
STORE_PATH = os.getenv("TIPVIEW_STORE_PATH", "./tipview_store.json")
HISTORY_KEY = os.getenv("TIPVIEW_HISTORY_KEY", "TipHistory")

# Input bounds
TIP_PERCENT_MIN = 5
TIP_PERCENT_MAX = 30
DEFAULT_TIP_PERCENT = int(os.getenv("DEFAULT_TIP_PERCENT", "15"))

PARTY_SIZE_MIN = 1
PARTY_SIZE_MAX = 20
DEFAULT_PARTY_SIZE = int(os.getenv("DEFAULT_PARTY_SIZE", "2"))

# Window used for the weekly tip total
RECENT_WINDOW_DAYS = int(os.getenv("RECENT_WINDOW_DAYS", "7"))

# Guardrails
SAVE_RATE_LIMIT = os.getenv("SAVE_RATE_LIMIT", "60/minute")
MAX_AMOUNT_LENGTH = int(os.getenv("MAX_AMOUNT_LENGTH", "32"))
MAX_HISTORY_PAGE = int(os.getenv("MAX_HISTORY_PAGE", "500"))

# Logging
LOG_FILE = os.getenv("LOG_FILE", "tipview.log")
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(10 * 1024 * 1024)))  # 10MB
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))
SLOW_REQUEST_THRESHOLD_MS = int(os.getenv("SLOW_REQUEST_THRESHOLD_MS", "500"))
