"""Session tokens - issue and verify.

Tokens are django.core.signing timestamped blobs (signed with SECRET_KEY)
carrying {userId, merchantId, role}. No session store: expiry is checked
in verify() only.
"""

import logging
from dataclasses import dataclass

from django.contrib.auth.hashers import check_password, make_password
from django.core import signing
from django.db import transaction
from django.utils.module_loading import import_string

from punchman.conf import punchman_settings
from punchman.exceptions import PunchmanError
from punchman.models import MerchantUser, User
from punchman.protocols.identity import IdentityProvider
from punchman.protocols.session import SessionPayload

logger = logging.getLogger(__name__)


@dataclass
class IssuedToken:
    """Login result: the token and a public view of the principal."""

    token: str
    user: dict

    def as_dict(self) -> dict:
        return {"token": self.token, "user": self.user}


def _get_identity_provider() -> IdentityProvider:
    """Get configured IdentityProvider."""
    return import_string(punchman_settings.IDENTITY_PROVIDER)()


def mint(payload: SessionPayload) -> str:
    """Sign a payload into an opaque token."""
    return signing.dumps(payload.to_claims(), salt=punchman_settings.TOKEN_SALT, compress=True)


def verify(token: str) -> SessionPayload:
    """
    Verify signature and expiry of a token.

    Raises:
        PunchmanError: TOKEN_EXPIRED, TOKEN_INVALID
    """
    if not token:
        raise PunchmanError("TOKEN_INVALID")
    try:
        claims = signing.loads(
            token,
            salt=punchman_settings.TOKEN_SALT,
            max_age=punchman_settings.TOKEN_MAX_AGE,
        )
    except signing.SignatureExpired:
        raise PunchmanError("TOKEN_EXPIRED")
    except signing.BadSignature:
        raise PunchmanError("TOKEN_INVALID")

    if not isinstance(claims, dict) or not claims.get("userId"):
        raise PunchmanError("TOKEN_INVALID")
    return SessionPayload.from_claims(claims)


def issue_for_customer(google_code: str, provider: IdentityProvider | None = None) -> IssuedToken:
    """
    Log a customer in with a Google authorization code.

    Resolves the User by the provider's stable subject, creating it on first login.

    Raises:
        PunchmanError: GOOGLE_AUTH_FAILED
    """
    provider = provider or _get_identity_provider()
    identity = provider.exchange_code(google_code)

    with transaction.atomic():
        user, created = User.objects.get_or_create(external_id=identity.subject)

    if created:
        logger.info("Customer created from identity provider: user=%s", user.pk)
    payload = SessionPayload(user_id=str(user.pk))
    return IssuedToken(
        token=mint(payload),
        user={"id": str(user.pk), "createdAt": user.created_at.isoformat()},
    )


def issue_for_merchant_user(merchant_slug: str, login: str, password: str) -> IssuedToken:
    """
    Log a merchant staff/admin account in.

    Unknown merchant, unknown login, inactive account and wrong password all
    fail the same way.

    Raises:
        PunchmanError: INVALID_CREDENTIALS
    """
    account = (
        MerchantUser.objects.select_related("merchant")
        .filter(merchant__slug=merchant_slug, login=login)
        .first()
    )

    if account is None:
        # Run the hasher anyway so unknown logins cost the same as bad passwords
        make_password(password)
        logger.warning("Merchant login rejected: merchant=%s (unknown login)", merchant_slug)
        raise PunchmanError("INVALID_CREDENTIALS")

    if not check_password(password, account.password_hash) or not account.is_active:
        logger.warning("Merchant login rejected: merchant=%s user=%s", merchant_slug, account.pk)
        raise PunchmanError("INVALID_CREDENTIALS")

    payload = SessionPayload(
        user_id=str(account.pk),
        merchant_id=str(account.merchant_id),
        role=account.role,
    )
    logger.info("Merchant user logged in: user=%s role=%s", account.pk, account.role)
    return IssuedToken(
        token=mint(payload),
        user={
            "id": str(account.pk),
            "merchantId": str(account.merchant_id),
            "login": account.login,
            "role": account.role,
        },
    )
