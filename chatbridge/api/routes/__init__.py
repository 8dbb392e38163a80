"""
API Routes module - Endpoint definitions.

- chat.py   : Knowledge-base questions via OpenWebUI
- health.py : Health and readiness checks
- users.py  : User listing and creation
"""
from chatbridge.api.routes.chat import router as chat_router
from chatbridge.api.routes.health import router as health_router
from chatbridge.api.routes.users import router as users_router

__all__ = [
    "chat_router",
    "health_router",
    "users_router",
]
