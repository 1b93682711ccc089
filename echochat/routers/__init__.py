# Routers package
from . import user_router
from . import message_router

__all__ = [
    "user_router",
    "message_router",
]
