"""REST endpoints for users."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from lrs.app_context import AppContext
from lrs.middleware.authorization import get_current_user
from lrs.users.models import User

router = APIRouter(prefix="/users", tags=["users"])


class UserResponse(BaseModel):
    """Response for GET /users/me."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    tenant_domain: str
    external_id: str
    name: str | None = None
    email: str | None = None


@router.get("/me", response_model=UserResponse)
async def get_me(user: Annotated[User, Depends(get_current_user)]) -> UserResponse:
    """Get the user authorized for this tenant domain and course."""
    return UserResponse.model_validate(user)


def register(ctx: AppContext) -> None:
    assert ctx.api_router is not None
    ctx.api_router.include_router(router)
