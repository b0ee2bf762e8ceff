"""
User endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from auth0_login.api.deps import get_db
from auth0_login.crud import user as user_crud
from auth0_login.schemas.user import UserResponse

router = APIRouter()


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)) -> UserResponse:
    """Account page; where a successful login lands."""
    user = user_crud.get_user_by_id(db, user_id=user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    response = UserResponse.model_validate(user)
    return response.model_copy(update={"roles": sorted(user.get_roles())})
