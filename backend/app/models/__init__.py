"""SQLAlchemy models exposed for metadata creation and imports."""
from .role import RoleRecord
from .user import User

__all__ = ["RoleRecord", "User"]
