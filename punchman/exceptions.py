"""Punchman exceptions."""


class BaseError(Exception):
    """
    Structured exception with a stable code.

    Subclasses provide ``_default_messages`` so callers only pass a code.
    Extra keyword arguments are kept in ``data`` for logging and responses.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "data": self.data}


class PunchmanError(BaseError):
    """
    Structured exception for punch card operations.

    Usage:
        try:
            engine.redeem(card_id, caller)
        except PunchmanError as e:
            if e.code == "REWARD_NOT_READY":
                show_progress()
    """

    _default_messages = {
        "INVALID_QR_PAYLOAD": "Invalid QR code",
        "INVALID_USER_ID": "Invalid user id",
        "UNAUTHENTICATED": "Authentication required",
        "FORBIDDEN": "Not allowed",
        "TOKEN_INVALID": "Invalid session token",
        "TOKEN_EXPIRED": "Session token expired",
        "GOOGLE_AUTH_FAILED": "Authentication failed",
        "INVALID_CREDENTIALS": "Invalid credentials",
        "PROGRAM_NOT_FOUND": "Loyalty program not found",
        "PROGRAM_REQUIRED": "Loyalty program is required for this scan",
        "PUNCH_CARD_NOT_FOUND": "Punch card not found",
        "REWARD_ALREADY_READY": "Reward is ready and must be redeemed first",
        "REWARD_NOT_READY": "Reward is not ready yet",
        "STORAGE_UNAVAILABLE": "Storage temporarily unavailable",
        "SERVICE_ERROR": "Service unavailable, try again later",
    }


class TransientStorageError(PunchmanError):
    """Contention or transient database failure; safe to retry."""

    def __init__(self, message: str | None = None, **data):
        super().__init__("STORAGE_UNAVAILABLE", message=message, **data)


class GateError(PunchmanError):
    """Authorization gate failure (see punchman.gates)."""

    def __init__(self, gate_name: str, code: str, message: str | None = None, **data):
        self.gate_name = gate_name
        super().__init__(code, message=message, gate=gate_name, **data)
