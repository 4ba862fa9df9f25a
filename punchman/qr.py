"""
QR payload codec.

Two payload variants travel inside QR codes as compact JSON:

    {"type":"user_id","user_id":"<uuid>"}
    {"type":"redemption_punch_card_id","punch_card_id":"<uuid>"}

decode() validates and returns a typed value; encode() is its exact inverse.
"""

import json
import uuid
from dataclasses import dataclass

from punchman.exceptions import PunchmanError

USER_ID = "user_id"
REDEMPTION_PUNCH_CARD_ID = "redemption_punch_card_id"


@dataclass(frozen=True)
class UserQR:
    """Identifies a customer (shown by the customer, scanned to punch)."""

    user_id: str


@dataclass(frozen=True)
class RedemptionQR:
    """Requests redemption of a completed punch card."""

    punch_card_id: str


QRValue = UserQR | RedemptionQR


def decode(raw: str | bytes) -> QRValue:
    """
    Parse a scanned QR payload.

    Raises:
        PunchmanError: INVALID_QR_PAYLOAD for malformed JSON, unknown types,
            or a missing/empty/non-UUID id.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError):
        raise PunchmanError("INVALID_QR_PAYLOAD", reason="not JSON")

    if not isinstance(data, dict):
        raise PunchmanError("INVALID_QR_PAYLOAD", reason="not an object")

    qr_type = data.get("type")
    if qr_type == USER_ID:
        return UserQR(user_id=_require_id(data, "user_id"))
    if qr_type == REDEMPTION_PUNCH_CARD_ID:
        return RedemptionQR(punch_card_id=_require_id(data, "punch_card_id"))
    raise PunchmanError("INVALID_QR_PAYLOAD", reason="unknown type", type=qr_type)


def encode(value: QRValue) -> str:
    """Serialize a QR value to its compact JSON transport form."""
    if isinstance(value, UserQR):
        data = {"type": USER_ID, "user_id": value.user_id}
    elif isinstance(value, RedemptionQR):
        data = {"type": REDEMPTION_PUNCH_CARD_ID, "punch_card_id": value.punch_card_id}
    else:
        raise PunchmanError("INVALID_QR_PAYLOAD", reason="unknown value", value=repr(value))
    return json.dumps(data, separators=(",", ":"))


def _require_id(data: dict, field: str) -> str:
    value = data.get(field)
    if not isinstance(value, str) or not value:
        raise PunchmanError("INVALID_QR_PAYLOAD", reason=f"missing {field}")
    try:
        uuid.UUID(value)
    except ValueError:
        raise PunchmanError("INVALID_QR_PAYLOAD", reason=f"malformed {field}")
    return value
