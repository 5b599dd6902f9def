from datetime import timedelta
from sqlalchemy.orm import Session
import logging

from .. import models
from ..auth import (
    authenticate_user as auth_authenticate_user,
    create_user as auth_create_user,
    create_access_token as auth_create_access_token,
    ACCESS_TOKEN_EXPIRE_MINUTES
)
from ..enums import UserRole
from ..exceptions import ConflictError, UnauthorizedError
from ..schemas import RegisterRequest, LoginRequest, AuthResponse, AuthPayload, UserResponse
from .transactions import unit_of_work

logger = logging.getLogger(__name__)


class AuthService:
    """Service for handling authentication business logic."""

    @staticmethod
    def check_user_exists(db: Session, email: str) -> bool:
        """Check if a user with the given email already exists."""
        existing_user = db.query(models.User).filter(models.User.email == email).first()
        return existing_user is not None

    @staticmethod
    def create_access_token_for_user(user: models.User) -> str:
        """Create an access token for the given user."""
        access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
        return auth_create_access_token(
            data={"sub": user.email, "user_id": user.id, "role": UserRole(user.role).value},
            expires_delta=access_token_expires
        )

    @staticmethod
    def register_user(db: Session, request: RegisterRequest) -> AuthResponse:
        """
        Create a new account with the default ``user`` role.

        Args:
            db: Database session
            request: Registration request data

        Returns:
            AuthResponse with the user and an access token

        Raises:
            ConflictError: If the email is already registered
        """
        if AuthService.check_user_exists(db, request.email):
            raise ConflictError("Email already registered")

        with unit_of_work(db, "Failed to create account", conflict_message="Email already registered"):
            user = auth_create_user(
                db=db,
                name=request.name,
                email=request.email,
                password=request.password
            )

        logger.info(f"Registered user {user.id}")

        return AuthResponse(
            message="Registration successful",
            data=AuthPayload(
                user=UserResponse.model_validate(user),
                token=AuthService.create_access_token_for_user(user)
            )
        )

    @staticmethod
    def login_user(db: Session, request: LoginRequest) -> AuthResponse:
        """
        Authenticate user and return login response.

        Raises:
            UnauthorizedError: If authentication fails
        """
        user = auth_authenticate_user(db, request.email, request.password)
        if not user:
            raise UnauthorizedError("Incorrect email or password")

        return AuthResponse(
            message="Login successful",
            data=AuthPayload(
                user=UserResponse.model_validate(user),
                token=AuthService.create_access_token_for_user(user)
            )
        )
