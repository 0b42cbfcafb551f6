import os

# Tests run against an in-memory SQLite database with rate limiting off.
# These must be set before any settings are read.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("CRON_SECRET_KEY", "test-cron-secret")
os.environ.setdefault("REMINDER_CRON_SECRET", "test-reminder-secret")

from libs.common.config import get_settings  # noqa: E402

get_settings.cache_clear()
