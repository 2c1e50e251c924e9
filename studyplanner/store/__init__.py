from .user_state_store import StateValidationError, UserStateStore

__all__ = ["StateValidationError", "UserStateStore"]
