# Shared configuration, helpers, and constants for the portal and seed modules

import os
import uuid
import logging
from pathlib import Path
from datetime import datetime, timezone

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent
# Try multiple .env locations: next to this package, one level up, then cwd
for _env_path in [BASE_DIR / ".env", BASE_DIR.parent / ".env", Path.cwd() / ".env"]:
    if _env_path.is_file():
        load_dotenv(_env_path, override=True)
        break
else:
    load_dotenv(override=True)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
logging.basicConfig(level=getattr(logging, LOG_LEVEL, logging.INFO))

# ---------------------------------------------------------------------------
# Connection strings
# ---------------------------------------------------------------------------
MONGODB_URL     = os.getenv("MONGODB_URL", "mongodb://localhost:27017")
MONGODB_DB      = os.getenv("MONGODB_DB", "grievance_portal")
GRIEVANCE_TABLE = os.getenv("GRIEVANCE_TABLE", "grievances")

# ---------------------------------------------------------------------------
# Behaviour
# ---------------------------------------------------------------------------
SUBMIT_RATE_LIMIT = os.getenv("SUBMIT_RATE_LIMIT", "10/minute")
# Presentation timeouts (seconds) for transient UI states
STATUS_RESET_SECONDS = 3.0
SUCCESS_RESET_SECONDS = 5.0

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def new_id() -> str:
    return str(uuid.uuid4())

def now_utc() -> datetime:
    return datetime.now(timezone.utc)
