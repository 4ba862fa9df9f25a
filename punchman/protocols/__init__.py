"""Punchman protocols."""

from punchman.protocols.punch_cards import (
    PunchCardRecord,
    PunchCardSnapshot,
    PunchOperationResult,
    ProgramRequirements,
    PunchCardStore,
    ProgramPolicy,
)
from punchman.protocols.session import SessionPayload
from punchman.protocols.identity import ExternalIdentity, IdentityProvider

__all__ = [
    # Punch cards
    "PunchCardRecord",
    "PunchCardSnapshot",
    "PunchOperationResult",
    "ProgramRequirements",
    "PunchCardStore",
    "ProgramPolicy",
    # Sessions
    "SessionPayload",
    # Identity
    "ExternalIdentity",
    "IdentityProvider",
]
