"""Route modules for the API."""
from . import auth, health, users

__all__ = ["auth", "health", "users"]
