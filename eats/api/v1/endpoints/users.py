# eats/api/v1/endpoints/users.py
from fastapi import APIRouter, Depends

from eats.api.v1.dependencies.auth import guard
from eats.models.user import User
from eats.schemas.user import (
    CreateAccountInput,
    CreateAccountOutput,
    EditProfileInput,
    EditProfileOutput,
    LoginInput,
    LoginOutput,
    UserProfileOutput,
    VerifyEmailInput,
    VerifyEmailOutput
)
from eats.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=CreateAccountOutput, operation_id="create_account")
async def create_account(
        data: CreateAccountInput,
        _: None = Depends(guard("create_account"))
) -> CreateAccountOutput:
    """Sign up and receive a verification e-mail."""
    return await UserService.create_account(data)


@router.post("/login", response_model=LoginOutput, operation_id="login")
async def login(
        data: LoginInput,
        _: None = Depends(guard("login"))
) -> LoginOutput:
    """
    Exchange e-mail and password for a token.

    The token goes into ``Authorization: Bearer <token>`` on later calls.
    """
    return await UserService.login(data)


@router.get("/me", response_model=UserProfileOutput, operation_id="me")
async def me(current_user: User = Depends(guard("me"))) -> UserProfileOutput:
    return await UserService.find_by_id(current_user.id)


@router.patch("/me", response_model=EditProfileOutput, operation_id="edit_profile")
async def edit_profile(
        data: EditProfileInput,
        current_user: User = Depends(guard("edit_profile"))
) -> EditProfileOutput:
    return await UserService.edit_profile(current_user.id, data)


@router.post("/verify-email", response_model=VerifyEmailOutput, operation_id="verify_email")
async def verify_email(
        data: VerifyEmailInput,
        _: None = Depends(guard("verify_email"))
) -> VerifyEmailOutput:
    return await UserService.verify_email(data.code)


@router.get("/{user_id}", response_model=UserProfileOutput, operation_id="user_profile")
async def user_profile(
        user_id: int,
        _: User = Depends(guard("user_profile"))
) -> UserProfileOutput:
    return await UserService.find_by_id(user_id)
