"""Merchant and LoyaltyProgram models."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class Merchant(models.Model):
    """
    A business running one or more loyalty programs.

    ``slug`` identifies the merchant at staff login; ``address`` is shown
    on the customer's punch card.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(_("name"), max_length=200)
    slug = models.SlugField(_("slug"), max_length=100, unique=True)
    address = models.CharField(_("address"), max_length=300, blank=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "punchman_merchant"
        verbose_name = _("merchant")
        verbose_name_plural = _("merchants")
        ordering = ["name"]

    def __str__(self):
        return self.name


class LoyaltyProgram(models.Model):
    """
    Merchant-defined reward rule: punches required and reward granted.

    Read-only for the punch engine (see services.program.ProgramPolicy).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    merchant = models.ForeignKey(
        Merchant,
        on_delete=models.CASCADE,
        related_name="loyalty_programs",
        verbose_name=_("merchant"),
    )
    name = models.CharField(_("name"), max_length=200)
    description = models.TextField(_("description"), blank=True)
    required_punches = models.PositiveIntegerField(
        _("required punches"),
        help_text=_("Punches needed to earn the reward"),
    )
    reward_description = models.CharField(_("reward"), max_length=300)
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "punchman_loyalty_program"
        verbose_name = _("loyalty program")
        verbose_name_plural = _("loyalty programs")
        constraints = [
            models.CheckConstraint(
                condition=models.Q(required_punches__gte=1),
                name="punchman_program_required_punches_positive",
            ),
        ]

    def __str__(self):
        return f"{self.merchant.name}: {self.name} ({self.required_punches})"
