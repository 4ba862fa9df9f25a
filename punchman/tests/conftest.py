"""Pytest fixtures for Punchman tests."""

import pytest
from django.contrib.auth.hashers import make_password

from punchman.models import LoyaltyProgram, Merchant, MerchantRole, MerchantUser, User
from punchman.protocols.session import SessionPayload
from punchman.services.punch import get_engine


@pytest.fixture
def merchant(db):
    """Create a test merchant."""
    return Merchant.objects.create(
        name="Coffee Lab",
        slug="coffee-lab",
        address="Rua Example, 123",
    )


@pytest.fixture
def other_merchant(db):
    """Create a second, unrelated merchant."""
    return Merchant.objects.create(name="Bakery", slug="bakery")


@pytest.fixture
def program(merchant):
    """Loyalty program: 3 punches for a free coffee."""
    return LoyaltyProgram.objects.create(
        merchant=merchant,
        name="Coffee card",
        required_punches=3,
        reward_description="Free coffee",
    )


@pytest.fixture
def other_program(other_merchant):
    return LoyaltyProgram.objects.create(
        merchant=other_merchant,
        name="Bread card",
        required_punches=5,
        reward_description="Free bread",
    )


@pytest.fixture
def customer(db):
    """Create an end customer with a Google subject."""
    return User.objects.create(external_id="google-sub-001")


@pytest.fixture
def staff_user(merchant):
    return MerchantUser.objects.create(
        merchant=merchant,
        login="barista",
        password_hash=make_password("s3cret"),
        role=MerchantRole.STAFF,
    )


@pytest.fixture
def admin_user(merchant):
    return MerchantUser.objects.create(
        merchant=merchant,
        login="owner",
        password_hash=make_password("0wner"),
        role=MerchantRole.ADMIN,
    )


@pytest.fixture
def customer_payload(customer):
    return SessionPayload(user_id=str(customer.pk))


@pytest.fixture
def staff_payload(staff_user):
    return SessionPayload(
        user_id=str(staff_user.pk),
        merchant_id=str(staff_user.merchant_id),
        role="staff",
    )


@pytest.fixture
def admin_payload(admin_user):
    return SessionPayload(
        user_id=str(admin_user.pk),
        merchant_id=str(admin_user.merchant_id),
        role="admin",
    )


@pytest.fixture
def engine(db):
    """Django-backed engine."""
    return get_engine()
