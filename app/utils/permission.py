from fastapi import HTTPException, status

from app.schemas.user import UserContext
from app.core.constants import RoleEnum


class PermissionHelper:
    @staticmethod
    def is_admin(context: UserContext) -> bool:
        return context.role == RoleEnum.ADMIN

    @staticmethod
    def is_teacher(context: UserContext) -> bool:
        return context.role == RoleEnum.TEACHER

    @staticmethod
    def is_student(context: UserContext) -> bool:
        return context.role == RoleEnum.STUDENT

    @staticmethod
    def require_admin(context: UserContext, error_message: str = "Only admins can perform this action."):
        if not PermissionHelper.is_admin(context):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error_message)

    @staticmethod
    def require_not_student(context: UserContext, error_message: str = "Students cannot perform this action."):
        if PermissionHelper.is_student(context):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error_message)

    @staticmethod
    def is_owner(context: UserContext, user_id: int) -> bool:
        return context.user.id == user_id
