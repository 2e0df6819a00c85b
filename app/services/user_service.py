# app/services/user_service.py
import logging
import uuid

from sqlmodel import Session

from app.core.errors import InvalidInputError, NotFoundError
from app.core.security import create_access_token, hash_password, verify_password
from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.user import AuthResponse, UserLogin, UserRead, UserRegister, UserRoleUpdate

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - registration with unique email + hashed password
      - credential check and token issuing
      - admin role management
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    @staticmethod
    def _auth_response(user: User) -> AuthResponse:
        token = create_access_token(str(user.id), user.role)
        return AuthResponse(token=token, user=UserRead.model_validate(user))

    # ----- Registration / login -----

    def register(self, session: Session, payload: UserRegister) -> AuthResponse:
        """
        Create a customer account and return a token for it.

        Raises:
            InvalidInputError: if the email is already registered.
        """
        if self.repo.get_by_email(session, payload.email) is not None:
            raise InvalidInputError("User already exists")

        user = User(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role="customer",
        )
        user = self.repo.create(session, user)
        logger.info("Registered user %s", user.id)
        return self._auth_response(user)

    def login(self, session: Session, payload: UserLogin) -> AuthResponse:
        """
        Raises:
            InvalidInputError: unknown email or wrong password (same message).
        """
        user = self.repo.get_by_email(session, payload.email)
        if user is None or not verify_password(payload.password, user.password_hash):
            logger.warning("Rejected login for %s", payload.email)
            raise InvalidInputError("Invalid credentials")
        return self._auth_response(user)

    # ----- Admin operations -----

    def list_users(self, session: Session, skip: int, limit: int) -> list[User]:
        """List users with pagination (admin only)."""
        return self.repo.list(session, skip=skip, limit=limit)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Raises:
            NotFoundError: if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change user's role (admin only).

        Role validation is enforced by the schema (Literal).
        """
        user = self.get_user(session, user_id)
        user.role = payload.role
        return self.repo.update(session, user)
