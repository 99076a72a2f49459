"""
User persistence: lookups, uniqueness checks and saves over a SQLAlchemy session.
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .exceptions import AlreadyExistsException
from .models import User, UserAuthority, UserRole

# Set up logging
logger = logging.getLogger(__name__)

class UserRepository:
    """
    Repository for User rows.

    Existence checks only consider non-deleted users. The partial unique
    indexes on ``users`` reject a duplicate that slips in between a check
    and the following save.
    """
    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: str) -> Optional[User]:
        """
        Find a user by email, including soft-deleted accounts.

        A live account is preferred over deleted ones sharing the same email.
        """
        return (
            self.db.query(User)
            .filter(User.email == email)
            .order_by(User.deleted.asc(), User.id.desc())
            .first()
        )

    def find_by_email_and_authority(self, email: str, role: UserRole) -> Optional[User]:
        """
        Find a user holding ``role`` by email, including soft-deleted accounts.

        Only rows granted the role are considered; a live one is preferred over
        deleted ones.
        """
        return (
            self.db.query(User)
            .join(User.authority_rows)
            .filter(User.email == email, UserAuthority.authority == role)
            .order_by(User.deleted.asc(), User.id.desc())
            .first()
        )

    def find_by_email_non_deleted(self, email: str) -> Optional[User]:
        return (
            self.db.query(User)
            .filter(User.email == email, User.deleted.is_(False))
            .first()
        )

    def exists_by_email_non_deleted(self, email: str) -> bool:
        return self.find_by_email_non_deleted(email) is not None

    def exists_by_registration_number_non_deleted(self, registration_number: str) -> bool:
        return (
            self.db.query(User.id)
            .filter(User.registration_number == registration_number, User.deleted.is_(False))
            .first()
        ) is not None

    def save(self, user: User) -> User:
        """
        Insert or update a user.

        Args:
            user: User to persist

        Returns:
            The persisted user, refreshed from the database

        Raises:
            AlreadyExistsException: If a unique constraint rejects the row
        """
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Save rejected by unique constraint: {e.orig}")
            raise AlreadyExistsException() from e
        self.db.refresh(user)
        return user
