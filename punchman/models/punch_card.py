"""PunchCard and Punch models."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class PunchCardStatus(models.TextChoices):
    """
    Derived card status. Never stored.

    REWARD_REDEEMED only labels the result of a redemption; the card
    itself is back to ACTIVE right after.
    """

    ACTIVE = "ACTIVE", _("Active")
    REWARD_READY = "REWARD_READY", _("Reward ready")
    REWARD_REDEEMED = "REWARD_REDEEMED", _("Reward redeemed")


class PunchCard(models.Model):
    """
    Per-customer, per-program progress toward a reward.

    One card per (user, loyalty_program). Created on first punch, never
    deleted: redemption resets ``current_punches`` to 0 and bumps
    ``rewards_redeemed`` on the same row.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        "punchman.User",
        on_delete=models.CASCADE,
        related_name="punch_cards",
        verbose_name=_("user"),
    )
    loyalty_program = models.ForeignKey(
        "punchman.LoyaltyProgram",
        on_delete=models.CASCADE,
        related_name="punch_cards",
        verbose_name=_("loyalty program"),
    )
    current_punches = models.PositiveIntegerField(_("current punches"), default=0)
    rewards_redeemed = models.PositiveIntegerField(
        _("rewards redeemed"),
        default=0,
        help_text=_("Completed cycles; also the cycle number of new punches"),
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "punchman_punch_card"
        verbose_name = _("punch card")
        verbose_name_plural = _("punch cards")
        constraints = [
            models.UniqueConstraint(
                fields=["user", "loyalty_program"],
                name="punchman_unique_card_per_user_program",
            ),
        ]

    def __str__(self):
        return f"{self.user_id}: {self.current_punches} punches"


class Punch(models.Model):
    """
    Immutable ledger entry for one punch.

    Append-only. Punches of the current cycle (``cycle`` equal to the
    card's ``rewards_redeemed``) always number ``current_punches``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    punch_card = models.ForeignKey(
        PunchCard,
        on_delete=models.CASCADE,
        related_name="punches",
        verbose_name=_("punch card"),
    )
    cycle = models.PositiveIntegerField(_("cycle"), default=0)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True, db_index=True)

    class Meta:
        db_table = "punchman_punch"
        verbose_name = _("punch")
        verbose_name_plural = _("punches")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["punch_card", "cycle"], name="punchman_punch_card_cycle_idx"),
        ]

    def __str__(self):
        return f"{self.punch_card_id} #{self.cycle}"
