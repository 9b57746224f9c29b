from .users import Users
from .groups import Groups

__all__ = [
    "Users",
    "Groups",
]
