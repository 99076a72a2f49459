"""
User Model - Stores account identity and credential information for every role.

Accounts are never hard-deleted: the ``deleted`` flag suppresses login while the
row is kept, and email / registration number uniqueness only applies to rows
that are not deleted.
"""
from datetime import datetime
from typing import FrozenSet, Iterable
from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Enum, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum
from ..database import Base

class UserRole(str, enum.Enum):
    """
    Enumeration for the authorities an account can hold.

    Roles:
    - PATIENT: Patients who self-register and take assessments
    - COUNSELOR: Counselors reviewing patient assessments (registration number required)
    - DOCTOR: Doctors handling escalated patients (registration number required)
    - ADMIN: Administrators managing counselor and doctor accounts
    """
    PATIENT = "PATIENT"
    COUNSELOR = "COUNSELOR"
    DOCTOR = "DOCTOR"
    ADMIN = "ADMIN"

    @property
    def is_privileged(self) -> bool:
        """Privileged roles must register with a unique registration number."""
        return self in PRIVILEGED_ROLES


PRIVILEGED_ROLES = frozenset({UserRole.COUNSELOR, UserRole.DOCTOR})


class UserAuthority(Base):
    """One granted authority of a user (user_id, authority) pair."""
    __tablename__ = "user_authorities"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    authority = Column(Enum(UserRole), primary_key=True)

    def __repr__(self):
        return f"<UserAuthority(user_id={self.user_id}, authority={self.authority})>"


class User(Base):
    """
    User Model - Stores all account information in the system

    Fields:
    - id: Primary key for user identification
    - email: Lower-cased email address, unique among non-deleted users
    - password: Password digest (never the plain text password)
    - full_name: User's complete name
    - date_of_birth: User's date of birth
    - city, province, country: User's location
    - phone_number: User's contact number
    - registration_number: Professional registration number (counselors and doctors)
    - created_at: Timestamp when user was created
    - updated_at: Timestamp when user was last updated
    - deleted: Soft-delete flag, blocks login without removing the row
    - password_auto_generated: Whether the current password was generated for the user
    - last_password_reset_date: When the password was last set; older reset tokens are rejected
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, index=True, nullable=False)
    password = Column(String, nullable=False)
    full_name = Column(String, nullable=False)
    date_of_birth = Column(Date, nullable=False)
    city = Column(String, nullable=False)
    province = Column(String, nullable=False)
    country = Column(String, nullable=False)
    phone_number = Column(String, nullable=False)
    registration_number = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True))
    updated_at = Column(DateTime(timezone=True))
    deleted = Column(Boolean, default=False, nullable=False)
    password_auto_generated = Column(Boolean, default=False, nullable=False)
    last_password_reset_date = Column(DateTime(timezone=True))

    authority_rows = relationship(
        "UserAuthority",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self):
        """String representation of the User model"""
        return f"<User(id={self.id}, email='{self.email}', deleted={self.deleted})>"

    @property
    def authorities(self) -> FrozenSet[UserRole]:
        """Authorities granted to the user."""
        return frozenset(row.authority for row in self.authority_rows)

    def grant_authorities(self, roles: Iterable[UserRole]) -> None:
        """
        Assign the user's authorities. Only allowed before the user is persisted.

        Args:
            roles: Authorities to grant, replacing anything already assigned

        Raises:
            ValueError: If the user has already been saved
        """
        if self.id is not None:
            raise ValueError("Authorities cannot change once the user is persisted")
        self.authority_rows = [UserAuthority(authority=role) for role in set(roles)]

    def has_authority(self, role: UserRole) -> bool:
        return role in self.authorities

    def touch(self, now: datetime) -> None:
        self.updated_at = now


# Uniqueness among live accounts; deleted rows keep their values without blocking sign-up
Index(
    "uq_users_email_active",
    User.email,
    unique=True,
    sqlite_where=User.deleted.is_(False),
    postgresql_where=User.deleted.is_(False),
)
Index(
    "uq_users_registration_number_active",
    User.registration_number,
    unique=True,
    sqlite_where=User.deleted.is_(False),
    postgresql_where=User.deleted.is_(False),
)
