"""
Punch/redemption engine - per-card state machine.

Card states (derived from current vs required punches):
    ACTIVE          current < required    accepts punches
    REWARD_READY    current == required   rejects punches, accepts redemption

Redemption resets the same card to ACTIVE(0); REWARD_REDEEMED only labels
the redemption result.

Every mutation of a card runs inside one exclusive section per card id
(in-process lock + storage row lock + storage transaction), so committed
states of a card are totally ordered and a card never overflows.
"""

import logging
from dataclasses import replace

from punchman.exceptions import PunchmanError, TransientStorageError
from punchman.gates import MERCHANT_ROLES, Gates
from punchman.locks import CardLockRegistry
from punchman.models import PunchCardStatus
from punchman.protocols.punch_cards import (
    ProgramPolicy,
    ProgramRequirements,
    PunchCardRecord,
    PunchCardSnapshot,
    PunchCardStore,
    PunchOperationResult,
)
from punchman.protocols.session import SessionPayload
from punchman.signals import punch_added, reward_redeemed

logger = logging.getLogger(__name__)

# Shared by every default engine in this process
_card_locks = CardLockRegistry()


def card_status(current_punches: int, required_punches: int) -> str:
    """Derive the resting status of a card."""
    if current_punches >= required_punches:
        return PunchCardStatus.REWARD_READY
    return PunchCardStatus.ACTIVE


class PunchEngine:
    """
    Applies punches and redemptions to punch cards.

    Depends only on the PunchCardStore and ProgramPolicy protocols.
    A transient storage failure retries the whole operation once; a second
    failure surfaces as SERVICE_ERROR.
    """

    def __init__(
        self,
        store: PunchCardStore,
        policy: ProgramPolicy,
        locks: CardLockRegistry | None = None,
    ):
        self.store = store
        self.policy = policy
        self.locks = locks if locks is not None else CardLockRegistry()

    # ======================================================================
    # Operations
    # ======================================================================

    def apply_punch(self, loyalty_program_id: str, user_id: str) -> PunchOperationResult:
        """
        Add one punch to the user's card for the program.

        Creates the card on the first punch for the pair.

        Raises:
            PunchmanError: PROGRAM_NOT_FOUND, INVALID_USER_ID, REWARD_ALREADY_READY,
                SERVICE_ERROR
        """
        result = self._with_retry(self._apply_punch, loyalty_program_id, user_id)
        self.store.on_commit(
            lambda: punch_added.send(sender=PunchEngine, result=result, user_id=user_id)
        )
        return result

    def redeem(self, punch_card_id: str, caller: SessionPayload | None) -> PunchOperationResult:
        """
        Consume a completed card and start a new cycle on it.

        Args:
            punch_card_id: Card to redeem
            caller: Verified payload of the staff/admin performing redemption

        Raises:
            GateError: UNAUTHENTICATED, FORBIDDEN (customers, other merchants)
            PunchmanError: PUNCH_CARD_NOT_FOUND, REWARD_NOT_READY, SERVICE_ERROR
        """
        Gates.authorize(caller, MERCHANT_ROLES)
        result = self._with_retry(self._redeem, punch_card_id, caller)
        self.store.on_commit(
            lambda: reward_redeemed.send(sender=PunchEngine, result=result, redeemed_by=caller.user_id)
        )
        return result

    def get_card(self, punch_card_id: str) -> PunchCardSnapshot:
        """Read-only snapshot of a card. Does not wait for mutations."""
        card = self.store.get(punch_card_id)
        if card is None:
            raise PunchmanError("PUNCH_CARD_NOT_FOUND", punch_card_id=punch_card_id)
        requirements = self.policy.get_requirements(card.loyalty_program_id)
        status = card_status(card.current_punches, requirements.required_punches)
        return self._snapshot(card, requirements, status)

    # ======================================================================
    # Critical sections
    # ======================================================================

    def _apply_punch(self, loyalty_program_id: str, user_id: str) -> PunchOperationResult:
        requirements = self.policy.get_requirements(loyalty_program_id)
        card = self.store.get_or_create(user_id, requirements.loyalty_program_id)

        with self.locks.hold(card.id), self.store.atomic():
            card = self.store.get_for_update(card.id)
            if card.current_punches >= requirements.required_punches:
                raise PunchmanError(
                    "REWARD_ALREADY_READY",
                    punch_card_id=card.id,
                    current_punches=card.current_punches,
                )
            self.store.append_punch(card)
            card = self.store.save(replace(card, current_punches=card.current_punches + 1))

        reward_achieved = card.current_punches == requirements.required_punches
        logger.info(
            "Punch recorded: card=%s user=%s punches=%d/%d reward=%s",
            card.id,
            user_id,
            card.current_punches,
            requirements.required_punches,
            reward_achieved,
        )
        status = card_status(card.current_punches, requirements.required_punches)
        return PunchOperationResult(
            reward_achieved=reward_achieved,
            required_punches=requirements.required_punches,
            current_punches=card.current_punches,
            new_punch_card=self._snapshot(card, requirements, status),
        )

    def _redeem(self, punch_card_id: str, caller: SessionPayload) -> PunchOperationResult:
        card = self.store.get(punch_card_id)
        if card is None:
            raise PunchmanError("PUNCH_CARD_NOT_FOUND", punch_card_id=punch_card_id)

        requirements = self.policy.get_requirements(card.loyalty_program_id)
        Gates.merchant_ownership(caller, requirements.merchant_id)

        with self.locks.hold(card.id), self.store.atomic():
            card = self.store.get_for_update(card.id)
            if card.current_punches < requirements.required_punches:
                raise PunchmanError(
                    "REWARD_NOT_READY",
                    punch_card_id=card.id,
                    current_punches=card.current_punches,
                    required_punches=requirements.required_punches,
                )
            card = self.store.save(
                replace(card, current_punches=0, rewards_redeemed=card.rewards_redeemed + 1)
            )

        logger.info(
            "Reward redeemed: card=%s by=%s cycle=%d",
            card.id,
            caller.user_id,
            card.rewards_redeemed,
        )
        return PunchOperationResult(
            reward_achieved=False,
            required_punches=requirements.required_punches,
            current_punches=card.current_punches,
            new_punch_card=self._snapshot(card, requirements, PunchCardStatus.REWARD_REDEEMED),
        )

    # ======================================================================
    # Helpers
    # ======================================================================

    def _with_retry(self, operation, *args):
        try:
            return operation(*args)
        except TransientStorageError as exc:
            logger.warning("Transient storage error, retrying once: %s", exc.data.get("detail"))
        try:
            return operation(*args)
        except TransientStorageError as exc:
            logger.error("Storage unavailable after retry: %s", exc.data.get("detail"))
            raise PunchmanError("SERVICE_ERROR") from exc

    @staticmethod
    def _snapshot(
        card: PunchCardRecord,
        requirements: ProgramRequirements,
        status: str,
    ) -> PunchCardSnapshot:
        return PunchCardSnapshot(
            id=card.id,
            loyalty_program_id=card.loyalty_program_id,
            shop_name=requirements.shop_name,
            shop_address=requirements.shop_address,
            current_punches=card.current_punches,
            total_punches=requirements.required_punches,
            status=str(status),
        )


def get_engine() -> PunchEngine:
    """Default engine: Django ORM storage and program policy."""
    from punchman.adapters.django_store import DjangoPunchCardStore
    from punchman.services.program import ProgramPolicy as DjangoProgramPolicy

    return PunchEngine(DjangoPunchCardStore(), DjangoProgramPolicy, locks=_card_locks)
