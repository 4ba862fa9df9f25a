"""Punch card records and storage protocols."""

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable


@dataclass(frozen=True)
class PunchCardRecord:
    """Plain, immutable view of a stored punch card."""

    id: str
    user_id: str
    loyalty_program_id: str
    current_punches: int = 0
    rewards_redeemed: int = 0


@dataclass(frozen=True)
class ProgramRequirements:
    """Reward rule of a loyalty program, plus the shop it belongs to."""

    loyalty_program_id: str
    merchant_id: str
    required_punches: int
    reward_description: str
    shop_name: str = ""
    shop_address: str = ""


@dataclass(frozen=True)
class PunchCardSnapshot:
    """Card state as shown to clients."""

    id: str
    loyalty_program_id: str
    shop_name: str
    shop_address: str
    current_punches: int
    total_punches: int
    status: str

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "loyaltyProgramId": self.loyalty_program_id,
            "shopName": self.shop_name,
            "shopAddress": self.shop_address,
            "currentPunches": self.current_punches,
            "totalPunches": self.total_punches,
            "status": self.status,
        }


@dataclass(frozen=True)
class PunchOperationResult:
    """Outcome of a punch or a redemption."""

    reward_achieved: bool
    required_punches: int
    current_punches: int
    new_punch_card: PunchCardSnapshot | None = None

    def as_dict(self) -> dict:
        return {
            "rewardAchieved": self.reward_achieved,
            "newPunchCard": self.new_punch_card.as_dict() if self.new_punch_card else None,
            "required_punches": self.required_punches,
            "current_punches": self.current_punches,
        }


@runtime_checkable
class PunchCardStore(Protocol):
    """
    Storage collaborator for punch cards.

    Every method may raise TransientStorageError on contention.
    """

    def atomic(self) -> AbstractContextManager:
        """All-or-nothing unit of work."""
        ...

    def get(self, punch_card_id: str) -> PunchCardRecord | None:
        ...

    def get_or_create(self, user_id: str, loyalty_program_id: str) -> PunchCardRecord:
        """
        Return the card for (user, program), creating it exactly once.

        Concurrent callers for the same pair get the same card.
        """
        ...

    def get_for_update(self, punch_card_id: str) -> PunchCardRecord | None:
        """Read a card with a row lock. MUST be called inside atomic()."""
        ...

    def save(self, card: PunchCardRecord) -> PunchCardRecord:
        ...

    def append_punch(self, card: PunchCardRecord) -> None:
        """Append a ledger entry for the card's current cycle."""
        ...

    def on_commit(self, callback: Callable[[], None]) -> None:
        """Run callback once the enclosing unit of work commits."""
        ...


@runtime_checkable
class ProgramPolicy(Protocol):
    """Read-only loyalty program lookup."""

    def get_requirements(self, loyalty_program_id: str) -> ProgramRequirements:
        """Raises PunchmanError(PROGRAM_NOT_FOUND)."""
        ...
