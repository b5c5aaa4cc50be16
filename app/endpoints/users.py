from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.schemas.user import User, UserContext
from app.services.user import user_service
from app.utils import deps

router = APIRouter()


@router.get("/", response_model=APIResponse[List[User]])
def get_all_users(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_with_context),
    skip: int = 0,
    limit: int = 100
):
    users = user_service.get_all_users(db, current_user_context=context, skip=skip, limit=limit)
    return APIResponse(message="Users retrieved successfully", data=[User.model_validate(u) for u in users])
