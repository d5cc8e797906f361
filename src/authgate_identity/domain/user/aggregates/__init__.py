from authgate_identity.domain.user.aggregates.user import User, default_name

__all__ = ["User", "default_name"]
