"""Environment helpers."""
from __future__ import annotations

import os


def is_production_env() -> bool:
    """
    True when ENVIRONMENT, APP_ENV or NODE_ENV is "production"
    (case-insensitive, surrounding whitespace ignored).
    """
    for name in ("ENVIRONMENT", "APP_ENV", "NODE_ENV"):
        if os.getenv(name, "").strip().lower() == "production":
            return True
    return False


def debug_enabled() -> bool:
    """DEBUG set to anything but an empty/false value turns on debug logging."""
    return os.getenv("DEBUG", "").strip().lower() not in ("", "0", "false", "no")
