"""
Punchman configuration.

Usage in settings.py:
    PUNCHMAN = {
        "TOKEN_MAX_AGE": 60 * 60 * 24,
        "GOOGLE_CLIENT_ID": "...apps.googleusercontent.com",
        "GOOGLE_CLIENT_SECRET": "...",
        "GOOGLE_REDIRECT_URI": "https://app.example.com/auth/callback",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class PunchmanSettings:
    """Punchman configuration settings."""

    # Session tokens (signed with SECRET_KEY)
    TOKEN_MAX_AGE: int = 60 * 60 * 24 * 7
    TOKEN_SALT: str = "punchman.session"

    # Customer login
    IDENTITY_PROVIDER: str = "punchman.adapters.google.GoogleOAuthProvider"
    GOOGLE_CLIENT_ID: str = ""
    GOOGLE_CLIENT_SECRET: str = ""
    GOOGLE_REDIRECT_URI: str = "postmessage"
    GOOGLE_TIMEOUT: int = 10

    # Shown as shopAddress when a merchant has none
    DEFAULT_SHOP_ADDRESS: str = "Address Unavailable"


def get_punchman_settings() -> PunchmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "PUNCHMAN", {})
    return PunchmanSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_punchman_settings(), name)


punchman_settings = _LazySettings()
