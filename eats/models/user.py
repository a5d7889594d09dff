# eats/models/user.py
from enum import Enum

from tortoise import Model, fields

from eats.core.security import hash_password, verify_password


class UserRole(str, Enum):
    """Enum for user roles."""

    CLIENT = "Client"
    OWNER = "Owner"
    DELIVERY = "Delivery"


class User(Model):
    """
    User model for authentication and authorization.
    """

    id = fields.IntField(pk=True)
    email = fields.CharField(max_length=255, unique=True, index=True)
    password = fields.CharField(max_length=128)
    role = fields.CharEnumField(UserRole, max_length=20)
    verified = fields.BooleanField(default=False)
    created_at = fields.DatetimeField(auto_now_add=True)
    updated_at = fields.DatetimeField(auto_now=True)

    restaurants: fields.ReverseRelation["Restaurant"]
    orders: fields.ReverseRelation["Order"]
    rides: fields.ReverseRelation["Order"]
    verification: fields.BackwardOneToOneRelation["Verification"]

    class Meta:
        table = "users"
        ordering = ["id"]

    def set_password(self, password: str) -> None:
        """
        Store the hash of a plain password.

        Args:
            password: Plain password
        """
        self.password = hash_password(password)

    def check_password(self, password: str) -> bool:
        """
        Check a plain password against the stored hash.

        Args:
            password: Plain password

        Returns:
            True if the password matches
        """
        return verify_password(password, self.password)

    def __str__(self) -> str:
        return f"User {self.email} ({self.role})"


class Verification(Model):
    """
    E-mail verification code, one per user.
    """

    id = fields.IntField(pk=True)
    code = fields.CharField(max_length=64, unique=True, index=True)
    user = fields.OneToOneField(
        "models.User",
        related_name="verification",
        on_delete=fields.CASCADE
    )
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "verifications"

    def __str__(self) -> str:
        return f"Verification for user {self.user_id}"
