"""HTTP API for the match ledger."""

from api.app import create_app

__all__ = ["create_app"]
