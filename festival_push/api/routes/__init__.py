from . import accounts, notifications

__all__ = ["accounts", "notifications"]
