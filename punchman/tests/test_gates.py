"""Authorization gate tests (role guard and merchant ownership)."""

import pytest

from punchman.exceptions import GateError, PunchmanError
from punchman.gates import ADMIN_ONLY, ANY_AUTHENTICATED, MERCHANT_ROLES, Gates
from punchman.protocols.session import SessionPayload

MERCHANT_ID = "0c9f3a52-7a43-4d4b-b1b8-5a1f2f7d9e10"

CUSTOMER = SessionPayload(user_id="u-1")
STAFF = SessionPayload(user_id="s-1", merchant_id=MERCHANT_ID, role="staff")
ADMIN = SessionPayload(user_id="a-1", merchant_id=MERCHANT_ID, role="admin")


class TestAuthorize:
    def test_no_payload_is_unauthenticated(self):
        with pytest.raises(GateError) as exc_info:
            Gates.authorize(None, MERCHANT_ROLES)
        assert exc_info.value.code == "UNAUTHENTICATED"
        assert exc_info.value.gate_name == "G1_Authenticated"

    def test_no_payload_fails_even_for_open_actions(self):
        with pytest.raises(GateError, match="UNAUTHENTICATED"):
            Gates.authorize(None, ANY_AUTHENTICATED)

    def test_empty_role_set_allows_any_principal(self):
        assert Gates.authorize(CUSTOMER, ANY_AUTHENTICATED).passed
        assert Gates.authorize(STAFF).passed

    def test_customer_forbidden_for_merchant_action(self):
        with pytest.raises(GateError) as exc_info:
            Gates.authorize(CUSTOMER, MERCHANT_ROLES)
        assert exc_info.value.code == "FORBIDDEN"

    def test_staff_and_admin_allowed_for_merchant_action(self):
        assert Gates.authorize(STAFF, MERCHANT_ROLES).passed
        assert Gates.authorize(ADMIN, MERCHANT_ROLES).passed

    def test_admin_does_not_satisfy_staff_only(self):
        """Role sets are closed, not hierarchical."""
        with pytest.raises(GateError, match="FORBIDDEN"):
            Gates.authorize(ADMIN, {"staff"})

    def test_staff_forbidden_for_admin_only(self):
        with pytest.raises(GateError, match="FORBIDDEN"):
            Gates.authorize(STAFF, ADMIN_ONLY)

    def test_gate_error_is_punchman_error(self):
        with pytest.raises(PunchmanError):
            Gates.authorize(None)

    def test_check_variant_returns_bool(self):
        assert Gates.check_authorize(STAFF, MERCHANT_ROLES)
        assert not Gates.check_authorize(CUSTOMER, MERCHANT_ROLES)
        assert not Gates.check_authorize(None)


class TestMerchantOwnership:
    def test_same_merchant_passes(self):
        assert Gates.merchant_ownership(STAFF, MERCHANT_ID).passed

    def test_other_merchant_forbidden(self):
        with pytest.raises(GateError, match="FORBIDDEN") as exc_info:
            Gates.merchant_ownership(STAFF, "another-merchant")
        assert exc_info.value.gate_name == "G3_MerchantOwnership"

    def test_customer_has_no_merchant(self):
        assert not Gates.check_merchant_ownership(CUSTOMER, MERCHANT_ID)
