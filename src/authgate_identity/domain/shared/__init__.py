"""Shared domain utilities."""

from authgate_identity.domain.shared.time import utc_now

__all__ = ["utc_now"]
