# Models package (re-export feature modules for stable imports)
from .users.user import User
from .chat.message import Message

__all__ = [
    "User",
    "Message",
]
