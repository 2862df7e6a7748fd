"""
User endpoints for API v1.

Provide registration, listing, renaming and deletion of users and the
per-user loan history.  Deleting a user also deletes its loan records.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from library_api.app.api.deps import get_user_service
from library_api.app.core.exceptions import NotFoundError
from library_api.app.schemas.user import (
    User,
    UserCreate,
    UserLoanHistoryResponse,
    UserUpdate,
)
from library_api.app.services.user_service import UserService


router = APIRouter()


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def save_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
) -> User:
    return await service.save_user(user.name, user.age)


@router.get("", response_model=List[User])
async def get_users(service: UserService = Depends(get_user_service)) -> List[User]:
    """List all users.  Clients must not rely on the order."""
    return await service.get_users()


@router.put("", response_model=User)
async def update_user_name(
    request: UserUpdate,
    service: UserService = Depends(get_user_service),
) -> User:
    try:
        return await service.update_user_name(request.id, request.name)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    name: str = Query(..., min_length=1, description="Name of the user to delete"),
    service: UserService = Depends(get_user_service),
) -> Response:
    """Delete a user by name together with its loan records."""
    try:
        await service.delete_user(name)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/loan", response_model=List[UserLoanHistoryResponse])
async def get_user_loan_histories(
    service: UserService = Depends(get_user_service),
) -> List[UserLoanHistoryResponse]:
    """Every user with the books they borrowed; users without loans included."""
    return await service.get_user_loan_histories()
