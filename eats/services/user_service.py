# eats/services/user_service.py
import logging

from tortoise.transactions import in_transaction

from eats.core.security import create_access_token, generate_verification_code
from eats.exceptions.user_exceptions import (
    UserAlreadyExistsError,
    UserNotFoundError,
    VerificationNotFoundError,
    WrongPasswordError
)
from eats.models.user import User, Verification
from eats.schemas.user import (
    CreateAccountInput,
    CreateAccountOutput,
    EditProfileInput,
    EditProfileOutput,
    LoginInput,
    LoginOutput,
    UserProfileOutput,
    UserSchema,
    VerifyEmailOutput
)
from eats.services.envelope import returns_envelope
from eats.services.mail_service import MailService

logger = logging.getLogger(__name__)


class UserService:
    """Service for accounts, login and e-mail verification."""

    @staticmethod
    @returns_envelope(CreateAccountOutput, "Couldn't create account")
    async def create_account(data: CreateAccountInput) -> CreateAccountOutput:
        """
        Sign up a new user and send the verification e-mail.

        Args:
            data: Account data

        Returns:
            Envelope with ok=True on success

        Raises:
            UserAlreadyExistsError: If the e-mail is taken
        """
        if await User.filter(email=data.email).exists():
            raise UserAlreadyExistsError()

        async with in_transaction():
            user = User(email=data.email, role=data.role)
            user.set_password(data.password)
            await user.save()
            verification = await Verification.create(
                user=user,
                code=generate_verification_code()
            )

        logger.info(f"Account created: {user.id} ({user.role.value})")

        await MailService.send_verification_email(user.email, verification.code)

        return CreateAccountOutput(ok=True)

    @staticmethod
    @returns_envelope(LoginOutput, "Can't log user in.")
    async def login(data: LoginInput) -> LoginOutput:
        """
        Check credentials and issue a token.

        Args:
            data: E-mail and password

        Returns:
            Envelope carrying the token

        Raises:
            UserNotFoundError: If the e-mail is unknown
            WrongPasswordError: If the password doesn't match
        """
        user = await User.get_or_none(email=data.email)

        if not user:
            raise UserNotFoundError()

        if not user.check_password(data.password):
            raise WrongPasswordError()

        return LoginOutput(ok=True, token=create_access_token(user.id))

    @staticmethod
    async def get_user(user_id: int) -> User:
        """
        Get user by ID.

        Raises:
            UserNotFoundError: If user doesn't exist
        """
        user = await User.get_or_none(id=user_id)

        if not user:
            raise UserNotFoundError("User Not Found")

        return user

    @staticmethod
    @returns_envelope(UserProfileOutput, "User Not Found")
    async def find_by_id(user_id: int) -> UserProfileOutput:
        user = await UserService.get_user(user_id)
        return UserProfileOutput(ok=True, user=UserSchema.from_orm_user(user))

    @staticmethod
    @returns_envelope(EditProfileOutput, "Could not update profile.")
    async def edit_profile(user_id: int, data: EditProfileInput) -> EditProfileOutput:
        """
        Update e-mail and/or password of a user.

        A new e-mail makes the account unverified again and triggers a
        fresh verification e-mail.

        Args:
            user_id: Identity of the caller
            data: Fields to change

        Returns:
            Envelope with ok=True on success

        Raises:
            UserNotFoundError: If user doesn't exist
            UserAlreadyExistsError: If the new e-mail belongs to someone else
        """
        user = await UserService.get_user(user_id)
        verification = None

        async with in_transaction():
            if data.email is not None and data.email != user.email:
                if await User.filter(email=data.email).exclude(id=user.id).exists():
                    raise UserAlreadyExistsError()

                user.email = data.email
                user.verified = False
                await Verification.filter(user_id=user.id).delete()
                verification = await Verification.create(
                    user=user,
                    code=generate_verification_code()
                )

            if data.password is not None:
                user.set_password(data.password)

            await user.save()

        if verification:
            await MailService.send_verification_email(user.email, verification.code)

        return EditProfileOutput(ok=True)

    @staticmethod
    @returns_envelope(VerifyEmailOutput, "Could not verify email.")
    async def verify_email(code: str) -> VerifyEmailOutput:
        """
        Mark the owner of a verification code as verified.

        Raises:
            VerificationNotFoundError: If the code is unknown
        """
        verification = await Verification.get_or_none(code=code).prefetch_related("user")

        if not verification:
            raise VerificationNotFoundError()

        async with in_transaction():
            user = verification.user
            user.verified = True
            await user.save()
            await verification.delete()

        logger.info(f"E-mail verified for user {user.id}")

        return VerifyEmailOutput(ok=True)
