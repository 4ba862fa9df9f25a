"""Django ORM implementation of the PunchCardStore protocol."""

from contextlib import contextmanager

from django.core.exceptions import ValidationError
from django.db import OperationalError, transaction
from django.utils import timezone

from punchman.exceptions import PunchmanError, TransientStorageError
from punchman.models import Punch, PunchCard, User
from punchman.protocols.punch_cards import PunchCardRecord


@contextmanager
def _transient_errors():
    try:
        yield
    except OperationalError as exc:
        raise TransientStorageError(detail=str(exc)) from exc


class DjangoPunchCardStore:
    """
    Adapter: punch cards stored through the Django ORM.

    get_for_update() takes a row lock (select_for_update), so on a
    relational backend mutations of one card are serialized across processes.
    """

    @contextmanager
    def atomic(self):
        with _transient_errors(), transaction.atomic():
            yield

    def get(self, punch_card_id: str) -> PunchCardRecord | None:
        with _transient_errors():
            try:
                return self._to_record(PunchCard.objects.get(pk=punch_card_id))
            except (PunchCard.DoesNotExist, ValidationError, ValueError):
                return None

    def get_or_create(self, user_id: str, loyalty_program_id: str) -> PunchCardRecord:
        try:
            with self.atomic():
                # QR codes may name a user this database has not seen yet
                User.objects.get_or_create(pk=user_id)
                card, _ = PunchCard.objects.get_or_create(
                    user_id=user_id,
                    loyalty_program_id=loyalty_program_id,
                )
        except (ValidationError, ValueError):
            raise PunchmanError("INVALID_USER_ID", user_id=str(user_id))
        return self._to_record(card)

    def get_for_update(self, punch_card_id: str) -> PunchCardRecord | None:
        with _transient_errors():
            try:
                card = PunchCard.objects.select_for_update().get(pk=punch_card_id)
            except (PunchCard.DoesNotExist, ValidationError, ValueError):
                return None
        return self._to_record(card)

    def save(self, card: PunchCardRecord) -> PunchCardRecord:
        with _transient_errors():
            PunchCard.objects.filter(pk=card.id).update(
                current_punches=card.current_punches,
                rewards_redeemed=card.rewards_redeemed,
                updated_at=timezone.now(),
            )
        return card

    def append_punch(self, card: PunchCardRecord) -> None:
        with _transient_errors():
            Punch.objects.create(punch_card_id=card.id, cycle=card.rewards_redeemed)

    def on_commit(self, callback) -> None:
        transaction.on_commit(callback)

    @staticmethod
    def _to_record(card: PunchCard) -> PunchCardRecord:
        return PunchCardRecord(
            id=str(card.pk),
            user_id=str(card.user_id),
            loyalty_program_id=str(card.loyalty_program_id),
            current_punches=card.current_punches,
            rewards_redeemed=card.rewards_redeemed,
        )
