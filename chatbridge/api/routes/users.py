"""
User Routes - List and create users.
"""
from typing import Any, Dict, List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from chatbridge.core.exceptions import DatabaseError
from chatbridge.core.logging_config import get_logger
from chatbridge.models.chat import ErrorResponse
from chatbridge.models.user import UserCreate, UserResponse
from chatbridge.services.user_service import UserService, get_user_service

logger = get_logger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)

LIST_USERS_ERROR = "Error occurred while retrieving users."


@router.get(
    "",
    summary="Retrieve all users",
    responses={500: {"description": "The users query failed"}},
)
def list_users(service: UserService = Depends(get_user_service)) -> List[Dict[str, Any]]:
    """Return every row of the Users table."""
    try:
        return service.get_all()
    except DatabaseError as e:
        logger.error(f"Listing users failed: {e.message}")
        return JSONResponse(
            status_code=500,
            content={"message": e.message or LIST_USERS_ERROR},
        )


@router.post(
    "",
    response_model=UserResponse,
    status_code=201,
    summary="Create a user",
    responses={
        400: {"model": ErrorResponse, "description": "Email already registered"},
        503: {"model": ErrorResponse, "description": "Database unavailable"},
    },
)
def create_user(request: UserCreate, service: UserService = Depends(get_user_service)) -> UserResponse:
    """Create a user; errors are rendered by the application exception handlers."""
    user = service.add(request.name, request.email)
    return UserResponse(**user)
