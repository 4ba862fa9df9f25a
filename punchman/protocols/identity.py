"""Identity provider protocol (customer login)."""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ExternalIdentity:
    """Identity asserted by the provider."""

    subject: str
    email: str | None = None


@runtime_checkable
class IdentityProvider(Protocol):
    """Exchanges a one-time login code for a verified identity."""

    def exchange_code(self, code: str) -> ExternalIdentity:
        """Raises PunchmanError(GOOGLE_AUTH_FAILED)."""
        ...
