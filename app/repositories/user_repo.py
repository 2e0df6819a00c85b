# app/repositories/user_repo.py
import uuid

from sqlmodel import Session, select

from app.database import store_errors
from app.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No HTTP, no business logic
    """

    # ----- Basic CRUD -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        with store_errors(session, "load user"):
            return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        with store_errors(session, "load user"):
            return session.exec(stmt).first()

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        """
        Paginated user listing.

        Args:
            skip: offset rows (for paging)
            limit: max number of rows returned
        """
        stmt = select(User).offset(skip).limit(limit)
        with store_errors(session, "list users"):
            return session.exec(stmt).all()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        with store_errors(session, "create user"):
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        with store_errors(session, "update user"):
            session.add(user)
            session.commit()
            session.refresh(user)
        return user

    def delete_all(self, session: Session) -> None:
        with store_errors(session, "delete users"):
            for row in session.exec(select(User)).all():
                session.delete(row)
            session.commit()
