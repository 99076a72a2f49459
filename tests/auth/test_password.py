"""
Tests for password updates and password reset token validation.
"""
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from medassist.auth.exceptions import InvalidUserRequestException
from medassist.auth.models import User, UserRole
from medassist.auth.schemas import UpdatePasswordRequest
from medassist.core.security import JwtTokenIssuer


def encode_reset_token(token_issuer, user, issued_at):
    """Reset token with a chosen issue time."""
    return jwt.encode(
        {
            "sub": user.email,
            "type": "reset",
            "iat": int(issued_at.timestamp()),
            "exp": issued_at + timedelta(minutes=30),
        },
        token_issuer.secret_key,
        algorithm=token_issuer.algorithm,
    )


@pytest.fixture
def user(auth_service, db, user_payload):
    auth_service.sign_up(user_payload(registration_number="C-1"), UserRole.COUNSELOR, True)
    return db.query(User).one()


@pytest.mark.parametrize("request_body", [None, UpdatePasswordRequest(), UpdatePasswordRequest(password="")])
def test_missing_password_is_invalid_request(auth_service, user, request_body):
    with pytest.raises(InvalidUserRequestException) as exc_info:
        auth_service.update_password(request_body, user)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Invalid request!"


def test_same_password_is_rejected(auth_service, password_hasher, user):
    original_digest = user.password

    with pytest.raises(InvalidUserRequestException) as exc_info:
        auth_service.update_password(UpdatePasswordRequest(password="Pw1!"), user)

    assert exc_info.value.detail == "new password cannot be the same as the current password"
    assert user.password == original_digest


def test_password_update_replaces_digest(auth_service, password_hasher, db, user):
    previous_reset = user.last_password_reset_date

    result = auth_service.update_password(UpdatePasswordRequest(password="NewPw2!"), user)

    assert result.success is True
    assert result.email == "a@x.com"

    db.refresh(user)
    assert password_hasher.verify("NewPw2!", user.password)
    assert not password_hasher.verify("Pw1!", user.password)
    assert user.password_auto_generated is False
    assert user.last_password_reset_date >= previous_reset
    assert user.updated_at is not None


def test_updated_password_is_used_for_login(auth_service, user):
    auth_service.update_password(UpdatePasswordRequest(password="NewPw2!"), user)

    old = auth_service.login({"email": "a@x.com", "password": "Pw1!"}, UserRole.COUNSELOR)
    new = auth_service.login({"email": "a@x.com", "password": "NewPw2!"}, UserRole.COUNSELOR)

    assert old.error_message == "Wrong credentials!"
    assert new.login_success is True
    assert new.user.password_auto_generated is False


def test_fresh_reset_token_is_valid(auth_service, token_issuer, user):
    token = token_issuer.issue_reset_token(user)

    assert auth_service.validate_password_reset_token(token) is True


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_unreadable_reset_token_is_invalid(auth_service, user, token):
    assert auth_service.validate_password_reset_token(token) is False


def test_access_token_is_not_a_reset_token(auth_service, token_issuer, user):
    token = token_issuer.issue_access_token(user)

    assert auth_service.validate_password_reset_token(token) is False


def test_reset_token_for_unknown_user_is_invalid(auth_service, token_issuer, user):
    stranger = User(email="nobody@x.com")

    assert auth_service.validate_password_reset_token(token_issuer.issue_reset_token(stranger)) is False


def test_reset_token_for_deleted_user_is_invalid(auth_service, token_issuer, db, user):
    token = token_issuer.issue_reset_token(user)
    user.deleted = True
    db.commit()

    assert auth_service.validate_password_reset_token(token) is False


def test_expired_reset_token_is_invalid(auth_service, user):
    expired_issuer = JwtTokenIssuer(secret_key=auth_service.token_issuer.secret_key, reset_token_expire_minutes=-1)

    assert auth_service.validate_password_reset_token(expired_issuer.issue_reset_token(user)) is False


def test_reset_token_signed_with_other_key_is_invalid(auth_service, user):
    foreign_issuer = JwtTokenIssuer(secret_key="some-other-key")

    assert auth_service.validate_password_reset_token(foreign_issuer.issue_reset_token(user)) is False


def test_reset_token_issued_before_last_reset_is_invalid(auth_service, token_issuer, user):
    token = encode_reset_token(token_issuer, user, issued_at=datetime.now(timezone.utc) - timedelta(minutes=5))

    assert auth_service.validate_password_reset_token(token) is False


def test_password_change_invalidates_outstanding_reset_tokens(auth_service, token_issuer, db, user):
    now = datetime.now(timezone.utc)
    user.last_password_reset_date = now - timedelta(minutes=10)
    db.commit()
    token = encode_reset_token(token_issuer, user, issued_at=now - timedelta(minutes=5))
    assert auth_service.validate_password_reset_token(token) is True

    auth_service.update_password(UpdatePasswordRequest(password="NewPw2!"), user)

    assert auth_service.validate_password_reset_token(token) is False
