"""Punchman services.

- auth: session tokens (customer and merchant-user login, verify)
- program: ProgramPolicy (read-only reward thresholds)
- punch: PunchEngine (punch/redemption state machine)
- scan: scan dispatcher (token + QR payload)
"""
