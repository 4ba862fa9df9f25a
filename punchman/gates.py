"""
Punchman Gates - Authorization rules.

G1: Authenticated - A verified session payload is present
G2: RoleAllowed - Caller's role is in the action's allow-list
G3: MerchantOwnership - Merchant user acts only on its own merchant's programs

Role sets are closed: "admin" does not satisfy a "staff"-only action unless
the allow-list names both.
"""

from dataclasses import dataclass

from punchman.exceptions import GateError
from punchman.models import MerchantRole
from punchman.protocols.session import SessionPayload

# Allow-lists used by the engine and the scan dispatcher
ANY_AUTHENTICATED: frozenset[str] = frozenset()
MERCHANT_ROLES: frozenset[str] = frozenset({MerchantRole.ADMIN.value, MerchantRole.STAFF.value})
ADMIN_ONLY: frozenset[str] = frozenset({MerchantRole.ADMIN.value})


@dataclass
class GateResult:
    """Result of a gate check."""

    passed: bool
    gate_name: str
    message: str = ""


# =============================================================================
# Gates
# =============================================================================


class Gates:
    """Punchman authorization gates."""

    # =========================================================================
    # G1 + G2: Role guard
    # =========================================================================

    @classmethod
    def authorize(
        cls,
        payload: SessionPayload | None,
        required_roles: frozenset[str] | set[str] = ANY_AUTHENTICATED,
    ) -> GateResult:
        """
        Allow or deny an action for a verified principal.

        Args:
            payload: Verified session payload, or None when no token was sent
            required_roles: Allowed roles; empty means any authenticated caller

        Raises:
            GateError: UNAUTHENTICATED without payload, FORBIDDEN on role mismatch
        """
        if payload is None:
            raise GateError("G1_Authenticated", "UNAUTHENTICATED")

        if required_roles and payload.role not in required_roles:
            raise GateError(
                "G2_RoleAllowed",
                "FORBIDDEN",
                role=payload.role,
                allowed=sorted(required_roles),
            )

        return GateResult(True, "G2_RoleAllowed")

    @classmethod
    def check_authorize(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.authorize(*args, **kwargs)
            return True
        except GateError:
            return False

    # =========================================================================
    # G3: Merchant ownership
    # =========================================================================

    @classmethod
    def merchant_ownership(cls, payload: SessionPayload, merchant_id: str) -> GateResult:
        """
        G3: Merchant users may only act on their own merchant's resources.

        Raises:
            GateError: FORBIDDEN if the resource belongs to another merchant
        """
        if str(payload.merchant_id) != str(merchant_id):
            raise GateError(
                "G3_MerchantOwnership",
                "FORBIDDEN",
                message="The resource does not belong to the merchant",
            )

        return GateResult(True, "G3_MerchantOwnership")

    @classmethod
    def check_merchant_ownership(cls, *args, **kwargs) -> bool:
        """Check without raising (returns bool)."""
        try:
            cls.merchant_ownership(*args, **kwargs)
            return True
        except GateError:
            return False
