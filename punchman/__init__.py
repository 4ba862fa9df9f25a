"""
Django Punchman - Loyalty punch cards.

Usage:
    from punchman import PunchEngine, Gates, PunchmanError
    from punchman.services.punch import get_engine

    engine = get_engine()
    result = engine.apply_punch(program_id, user_id)
    engine.redeem(card_id, caller_payload)

    # Scan flow (token + QR payload)
    from punchman.services.scan import scan
    scan('{"type":"user_id","user_id":"..."}', token, loyalty_program_id=program_id)
"""


def __getattr__(name):
    if name == "PunchEngine":
        from punchman.services.punch import PunchEngine

        return PunchEngine
    if name == "Gates":
        from punchman.gates import Gates

        return Gates
    if name == "PunchmanError":
        from punchman.exceptions import PunchmanError

        return PunchmanError
    if name == "qr":
        import importlib

        return importlib.import_module("punchman.qr")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["PunchEngine", "Gates", "PunchmanError", "qr"]
__version__ = "0.1.0"
