"""Authentication module."""

from app.auth.auth import CurrentCaller, get_current_caller, validate_token

__all__ = ["CurrentCaller", "get_current_caller", "validate_token"]
