from typing import List

from sqlalchemy.orm import Session

from app.crud.user import user as crud_user
from app.models.user import User
from app.schemas.user import UserContext
from app.utils.permission import PermissionHelper as permission_helper


class UserService:
    def get_all_users(self, db: Session, current_user_context: UserContext,
                      skip: int = 0, limit: int = 100) -> List[User]:
        permission_helper.require_admin(current_user_context)
        return crud_user.get_multi(db, skip=skip, limit=limit)


user_service = UserService()
