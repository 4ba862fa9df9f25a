"""Punchman adapters (storage and identity provider implementations)."""
