"""MerchantUser model - staff and admin accounts."""

import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _


class MerchantRole(models.TextChoices):
    """Merchant staff roles. Closed set, no hierarchy."""

    ADMIN = "admin", _("Admin")
    STAFF = "staff", _("Staff")


class MerchantUser(models.Model):
    """
    Staff/admin account of a Merchant.

    ``password_hash`` is a Django password hasher string
    (see django.contrib.auth.hashers.make_password).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    merchant = models.ForeignKey(
        "punchman.Merchant",
        on_delete=models.CASCADE,
        related_name="users",
        verbose_name=_("merchant"),
    )
    login = models.CharField(_("login"), max_length=150)
    password_hash = models.CharField(_("password hash"), max_length=255)
    role = models.CharField(
        _("role"),
        max_length=20,
        choices=MerchantRole.choices,
        default=MerchantRole.STAFF,
    )
    is_active = models.BooleanField(_("active"), default=True)
    created_at = models.DateTimeField(_("created at"), auto_now_add=True)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    class Meta:
        db_table = "punchman_merchant_user"
        verbose_name = _("merchant user")
        verbose_name_plural = _("merchant users")
        constraints = [
            models.UniqueConstraint(
                fields=["merchant", "login"],
                name="punchman_unique_merchant_login",
            ),
        ]

    def __str__(self):
        return f"{self.login} ({self.role})"
