from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.schemas.response import APIResponse
from app.schemas.token import LoginRequest, LoginResponse
from app.schemas.user import User, UserCreate, UserContext
from app.services.auth import auth_service
from app.utils import deps

router = APIRouter()


@router.post("/register", response_model=APIResponse[User], status_code=status.HTTP_201_CREATED)
def register(
    *,
    db: Session = Depends(deps.get_transactional_db),
    user_in: UserCreate,
    context: Optional[UserContext] = Depends(deps.get_optional_user_context)
):
    new_user = auth_service.register(db, user_in=user_in, current_user_context=context)
    return APIResponse(message="User registered successfully", data=User.model_validate(new_user))


@router.post("/login", response_model=APIResponse[LoginResponse])
def login_for_access_token(
    request: LoginRequest,
    db: Session = Depends(deps.get_db)
):
    login_response = auth_service.login(db, username=request.username, password=request.password)
    return APIResponse(message="Login successful", data=login_response)
