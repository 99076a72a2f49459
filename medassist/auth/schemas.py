"""
User Schemas - Pydantic models for request parsing and response serialization.

Request schemas keep every field optional: the authentication service decides
which missing field is reported, in a fixed order, instead of the HTTP layer.
"""
from typing import Optional, FrozenSet
from pydantic import BaseModel, EmailStr, field_validator
from datetime import date, datetime
from .models import UserRole
from ..patients.models import PatientRecordStatus

class LoginRequest(BaseModel):
    """
    Login Schema - Used for authentication

    Fields:
    - email: User's email address (matched case-insensitively)
    - password: User's plain text password
    """
    email: str
    password: str

class UserRequest(BaseModel):
    """
    User Registration Schema - Used when registering a new account

    Fields:
    - email: User's email address
    - password: User's plain text password (will be hashed before storage)
    - full_name: User's full name
    - date_of_birth: User's date of birth
    - city, province, country: User's location
    - phone_number: User's contact number
    - registration_number: Professional registration number (counselors and doctors)
    """
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
    registration_number: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        """Whitespace-only strings count as missing before type parsing."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

class AdminUserRequest(BaseModel):
    """
    Admin Account Creation Schema - Same fields as registration, without a password

    The password is generated by the service and returned once to the admin.
    """
    email: Optional[EmailStr] = None
    full_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    city: Optional[str] = None
    province: Optional[str] = None
    country: Optional[str] = None
    phone_number: Optional[str] = None
    registration_number: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_as_missing(cls, value):
        """Whitespace-only strings count as missing before type parsing."""
        if isinstance(value, str) and not value.strip():
            return None
        return value

class UpdatePasswordRequest(BaseModel):
    """
    Password Update Schema - Used by an authenticated user to set a new password
    """
    password: Optional[str] = None

class UserResponse(BaseModel):
    """
    User Response Schema - Public projection of a user account

    Password digest and the soft-delete flag are never exposed.
    """
    id: int
    email: str
    full_name: str
    date_of_birth: date
    city: str
    province: str
    country: str
    phone_number: str
    registration_number: Optional[str] = None
    authorities: FrozenSet[UserRole]
    password_auto_generated: bool
    created_at: Optional[datetime] = None

    class Config:
        """Configuration for Pydantic model to enable ORM mode"""
        from_attributes = True

class LoginResponse(BaseModel):
    """
    Login Response Schema - Outcome of login and sign-up

    Fields:
    - user: Public user projection (success only)
    - status: Patient record status (success only, None for non-patients)
    - login_success: Whether the user is now authenticated
    - access_token: Bearer token for the session (success only)
    - error_message: Human-readable failure reason (failure only)
    """
    user: Optional[UserResponse] = None
    status: Optional[PatientRecordStatus] = None
    login_success: bool = False
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    error_message: Optional[str] = None

class AdminCreatedUserResponse(BaseModel):
    """
    Response for accounts created by an admin with a generated password
    """
    user: UserResponse
    temporary_password: str

class UpdatePasswordResponse(BaseModel):
    """
    Password Update Response Schema
    """
    success: bool = False
    email: Optional[str] = None

class PasswordResetTokenStatus(BaseModel):
    """
    Result of checking a password reset token
    """
    valid: bool
