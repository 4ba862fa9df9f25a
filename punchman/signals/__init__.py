"""
Punchman signals - public event API.

Emitted signals (after the mutation is committed):
- punch_added: Emitted by PunchEngine.apply_punch(), kwargs result, user_id
- reward_redeemed: Emitted by PunchEngine.redeem(), kwargs result, redeemed_by
"""

from django.dispatch import Signal

punch_added = Signal()  # sender=PunchEngine
reward_redeemed = Signal()  # sender=PunchEngine
