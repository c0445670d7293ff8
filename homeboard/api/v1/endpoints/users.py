"""
User Endpoints
"""
from typing import Any, List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from homeboard.db.database import get_db
from homeboard.schemas.user import UserResponse
from homeboard.services.user_service import UserService

router = APIRouter()


@router.get("/", response_model=List[UserResponse])
async def list_users(db: AsyncSession = Depends(get_db, scope="function")) -> Any:
    """
    List household members, ordered by id.
    """
    return await UserService.list_users(db)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db, scope="function")) -> Any:
    user = await UserService.get_user(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user
