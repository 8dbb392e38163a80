"""
chatbridge - Users API plus an OpenWebUI knowledge-base client.

Packages:
- api/       : FastAPI routes and HTTP handling
- core/      : Configuration, logging, and exceptions
- services/  : Business logic for users and chat
- llm/       : OpenWebUI client and response normalization
- database/  : Users database access
- models/    : Pydantic request/response schemas
"""
__version__ = "0.1.0"
