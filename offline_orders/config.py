import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL")

# Cafe24 Admin API Configuration
CAFE24_MALLID = os.getenv("CAFE24_MALLID")
CAFE24_CLIENT_ID = os.getenv("CAFE24_CLIENT_ID")
CAFE24_CLIENT_SECRET = os.getenv("CAFE24_CLIENT_SECRET")
CAFE24_API_VERSION = os.getenv("CAFE24_API_VERSION", "2025-12-01")
CAFE24_HTTP_TIMEOUT = float(os.getenv("CAFE24_HTTP_TIMEOUT", "30"))

# Initial token pair - only used when the token store is still empty
CAFE24_ACCESS_TOKEN = os.getenv("CAFE24_ACCESS_TOKEN")
CAFE24_REFRESH_TOKEN = os.getenv("CAFE24_REFRESH_TOKEN")

# Fernet key for tokens at rest (generate with: python -c "from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())")
TOKEN_ENCRYPTION_KEY = os.getenv("TOKEN_ENCRYPTION_KEY")

# Administrative overrides (direct hard delete, reseed). Disabled when unset.
ADMIN_API_KEY = os.getenv("ADMIN_API_KEY")

# Reference list storage: "db" (reference_entries table) or "file" (JSON per kind)
REFERENCE_STORAGE = os.getenv("REFERENCE_STORAGE", "db").strip().lower()
REFERENCE_DATA_DIR = os.getenv(
    "REFERENCE_DATA_DIR", str(Path(__file__).resolve().parent.parent / "data")
)

# Outbound notification profile (alimtalk / SMS)
NOTIFY_API_KEY = os.getenv("NOTIFY_API_KEY")
NOTIFY_API_SECRET = os.getenv("NOTIFY_API_SECRET")
NOTIFY_PROFILE_ID = os.getenv("NOTIFY_PROFILE_ID")
NOTIFY_SENDER = os.getenv("NOTIFY_SENDER")

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")
ENABLE_DEBUG_ROUTES = os.getenv("ENABLE_DEBUG_ROUTES", "false").lower() == "true"
PORT = int(os.getenv("PORT", "8080"))

REQUIRED_SETTINGS = ("DATABASE_URL", "CAFE24_MALLID", "CAFE24_CLIENT_ID", "CAFE24_CLIENT_SECRET")
NOTIFY_SETTINGS = ("NOTIFY_API_KEY", "NOTIFY_API_SECRET", "NOTIFY_PROFILE_ID", "NOTIFY_SENDER")


def validate_settings() -> None:
    """
    Check that every required setting is present.

    Raises ConfigError naming all missing keys at once so a broken deployment
    can be fixed in one pass.
    """
    module_globals = globals()
    missing = [name for name in REQUIRED_SETTINGS if not module_globals.get(name)]
    if missing:
        raise ConfigError(f"Missing required configuration: {', '.join(missing)}")

    if REFERENCE_STORAGE not in ("db", "file"):
        raise ConfigError(f"REFERENCE_STORAGE must be 'db' or 'file', got '{REFERENCE_STORAGE}'")

    notify_present = [name for name in NOTIFY_SETTINGS if module_globals.get(name)]
    if notify_present and len(notify_present) != len(NOTIFY_SETTINGS):
        missing_notify = sorted(set(NOTIFY_SETTINGS) - set(notify_present))
        logger.warning(f"⚠️ Notification profile incomplete, missing: {', '.join(missing_notify)}")

    if not TOKEN_ENCRYPTION_KEY:
        logger.warning("TOKEN_ENCRYPTION_KEY not set - Cafe24 tokens will be stored unencrypted")
