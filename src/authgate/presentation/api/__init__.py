"""HTTP API for AuthGate."""

from authgate.presentation.api.app import create_app

__all__ = ["create_app"]
