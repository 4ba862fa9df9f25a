"""End customer identity."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class User(models.Model):
    """
    End customer.

    Identity only, no PII. ``external_id`` holds the identity provider's
    stable subject; users created lazily by a first scan have none.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    external_id = models.CharField(
        _("external id"),
        max_length=255,
        unique=True,
        null=True,
        blank=True,
        help_text=_("Identity provider subject (Google 'sub')"),
    )
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)

    class Meta:
        db_table = "punchman_user"
        verbose_name = _("user")
        verbose_name_plural = _("users")

    def __str__(self):
        return str(self.id)
