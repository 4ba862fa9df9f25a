"""Punchman models."""

from punchman.models.merchant import Merchant, LoyaltyProgram
from punchman.models.user import User
from punchman.models.merchant_user import MerchantUser, MerchantRole
from punchman.models.punch_card import PunchCard, Punch, PunchCardStatus

__all__ = [
    "Merchant",
    "LoyaltyProgram",
    "User",
    "MerchantUser",
    "MerchantRole",
    "PunchCard",
    "Punch",
    "PunchCardStatus",
]
