# eats/schemas/user.py
from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from eats.models.user import User, UserRole
from eats.schemas.common import CamelModel, CoreOutput


class CreateAccountInput(CamelModel):
    """Schema for signing up."""

    email: EmailStr
    password: str = Field(..., min_length=4, max_length=72)
    role: UserRole


class CreateAccountOutput(CoreOutput):
    pass


class LoginInput(CamelModel):
    """Schema for logging in."""

    email: EmailStr
    password: str


class LoginOutput(CoreOutput):
    token: Optional[str] = None


class EditProfileInput(CamelModel):
    """Schema for editing the current user's profile. Unset fields are kept."""

    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=4, max_length=72)


class EditProfileOutput(CoreOutput):
    pass


class VerifyEmailInput(CamelModel):
    code: str = Field(..., min_length=1)


class VerifyEmailOutput(CoreOutput):
    pass


class UserSchema(CamelModel):
    """Schema for user responses."""

    id: int
    email: str
    role: UserRole
    verified: bool
    created_at: datetime

    @classmethod
    def from_orm_user(cls, user: User) -> "UserSchema":
        """
        Create schema from User ORM model.

        Args:
            user: User model instance

        Returns:
            UserSchema instance
        """
        return cls(
            id=user.id,
            email=user.email,
            role=user.role,
            verified=user.verified,
            created_at=user.created_at
        )


class UserProfileOutput(CoreOutput):
    user: Optional[UserSchema] = None
