from datetime import datetime
import os

import pytz

APP_TIMEZONE = os.getenv("APP_TIMEZONE", "Asia/Jakarta")


def local_now() -> datetime:
    """Current time in the configured business timezone."""
    return datetime.now(pytz.timezone(APP_TIMEZONE))

__all__ = ['APP_TIMEZONE', 'local_now']
