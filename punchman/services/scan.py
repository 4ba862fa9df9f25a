"""Scan dispatcher - QR payload + session token -> punch or redemption.

Flow:
    1. Verify token (absent token -> UNAUTHENTICATED)
    2. Decode QR payload
    3. Authorize for the payload variant
    4. Dispatch to PunchEngine.apply_punch() or PunchEngine.redeem()
"""

import logging

from punchman import qr
from punchman.exceptions import PunchmanError
from punchman.gates import ANY_AUTHENTICATED, MERCHANT_ROLES, Gates
from punchman.protocols.punch_cards import PunchOperationResult
from punchman.protocols.session import SessionPayload
from punchman.services import auth
from punchman.services.punch import PunchEngine, get_engine

logger = logging.getLogger(__name__)


def scan(
    qr_payload: str,
    token: str | None,
    loyalty_program_id: str | None = None,
    engine: PunchEngine | None = None,
) -> PunchOperationResult:
    """
    Handle one scan event.

    Args:
        qr_payload: Raw QR content
        token: Caller's session token
        loyalty_program_id: Program to punch (required for user_id scans)
        engine: Engine override (defaults to the Django-backed engine)

    Raises:
        PunchmanError: any code from the token, codec, gates, or engine
    """
    engine = engine or get_engine()
    payload = auth.verify(token) if token else None
    Gates.authorize(payload, ANY_AUTHENTICATED)

    value = qr.decode(qr_payload)

    if isinstance(value, qr.UserQR):
        return _punch(engine, value, payload, loyalty_program_id)
    if isinstance(value, qr.RedemptionQR):
        return engine.redeem(value.punch_card_id, payload)
    raise PunchmanError("INVALID_QR_PAYLOAD", reason="unhandled type")


def _punch(
    engine: PunchEngine,
    value: qr.UserQR,
    payload: SessionPayload,
    loyalty_program_id: str | None,
) -> PunchOperationResult:
    if not loyalty_program_id:
        raise PunchmanError("PROGRAM_REQUIRED")

    if payload.is_merchant_user:
        Gates.authorize(payload, MERCHANT_ROLES)
        requirements = engine.policy.get_requirements(loyalty_program_id)
        Gates.merchant_ownership(payload, requirements.merchant_id)
    elif payload.user_id.lower() != value.user_id.lower():
        # Customers may only punch their own card
        logger.warning("Scan rejected: customer %s scanned user %s", payload.user_id, value.user_id)
        raise PunchmanError("FORBIDDEN", message="Customers can only scan their own code")

    return engine.apply_punch(loyalty_program_id, value.user_id)
