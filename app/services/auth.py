from typing import Optional
import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from app.core.constants import RoleEnum
from app.core.security import get_password_hash, verify_password, create_access_token
from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.token import LoginResponse, Token
from app.schemas.user import UserContext, UserCreate, User as UserSchema
from app.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class AuthService:
    def register(self, db: Session, *, user_in: UserCreate,
                 current_user_context: Optional[UserContext] = None) -> User:
        """Create an account. Only an admin may hand out a role other than student."""
        if user_in.role != RoleEnum.STUDENT:
            if current_user_context is None or not permission_helper.is_admin(current_user_context):
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Only admins can register teachers or admins."
                )

        return self._create_user(db, user_in=user_in)

    def create_admin(self, db: Session, *, user_in: UserCreate) -> User:
        """Bootstrap path for the first admin account; not exposed over HTTP."""
        return self._create_user(db, user_in=user_in.model_copy(update={"role": RoleEnum.ADMIN}))

    def _create_user(self, db: Session, *, user_in: UserCreate) -> User:
        if crud_user.get_by_username(db, username=user_in.username):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Username is already taken."
            )

        new_user = crud_user.create(
            db,
            obj_in={
                "username": user_in.username,
                "hashed_password": get_password_hash(user_in.password),
                "full_name": user_in.full_name,
                "role": user_in.role,
            }
        )
        logger.info(f"Registered user {new_user.id} with role {new_user.role.value}")
        return new_user

    def login(self, db: Session, *, username: str, password: str) -> LoginResponse:
        user = crud_user.get_by_username(db, username=username)
        if not user or not verify_password(password, user.hashed_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect username or password",
            )

        access_token = create_access_token(data={"user_id": user.id, "role": user.role.value})
        return LoginResponse(
            token=Token(access_token=access_token, token_type="bearer"),
            user=UserSchema.model_validate(user)
        )


auth_service = AuthService()
