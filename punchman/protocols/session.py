"""Session token payload."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionPayload:
    """
    Verified principal carried by a session token.

    Customers have no merchant and no role; merchant users always have both.
    """

    user_id: str
    merchant_id: str | None = None
    role: str | None = None

    @property
    def is_merchant_user(self) -> bool:
        return self.role is not None

    def to_claims(self) -> dict:
        claims = {"userId": self.user_id, "merchantId": self.merchant_id}
        if self.role is not None:
            claims["role"] = self.role
        return claims

    @classmethod
    def from_claims(cls, claims: dict) -> "SessionPayload":
        return cls(
            user_id=claims["userId"],
            merchant_id=claims.get("merchantId"),
            role=claims.get("role"),
        )
