"""User Lookup: read-only view of a user's balance.

Invariants:
    - No create/update endpoints: users are provisioned outside this service
    - Unknown id returns the RESOURCE_NOT_FOUND envelope with 404
"""

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from market.core.errors import ResourceNotFoundError
from market.infrastructure.database import get_db
from market.models.user import User
from market.schemas.market import UserResponse

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: UUID, db: AsyncSession = Depends(get_db)):
    """Current balance, so callers can confirm a purchase independently."""
    user = await db.get(User, user_id)
    if user is None:
        raise ResourceNotFoundError("User", str(user_id))
    return UserResponse(id=user.id, email=user.email, balance=user.balance)
