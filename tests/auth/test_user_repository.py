"""
Tests for UserRepository lookups and the partial unique indexes on users.
"""
from datetime import date

import pytest

from medassist.auth.exceptions import AlreadyExistsException
from medassist.auth.models import User, UserRole
from medassist.auth.repository import UserRepository


def make_user(email="a@x.com", registration_number=None, deleted=False, role=UserRole.PATIENT):
    user = User(
        email=email,
        password="digest",
        full_name="Alex Morgan",
        date_of_birth=date(1990, 4, 12),
        city="Montreal",
        province="Quebec",
        country="Canada",
        phone_number="+1-514-555-0199",
        registration_number=registration_number,
        deleted=deleted,
    )
    user.grant_authorities({role})
    return user


def test_save_assigns_id_and_authorities(user_repository):
    saved = user_repository.save(make_user())

    assert saved.id is not None
    assert saved.authorities == frozenset({UserRole.PATIENT})
    assert saved.password_auto_generated is False


def test_authorities_are_fixed_after_save(user_repository):
    saved = user_repository.save(make_user())

    with pytest.raises(ValueError):
        saved.grant_authorities({UserRole.ADMIN})
    assert saved.authorities == frozenset({UserRole.PATIENT})


def test_duplicate_live_email_is_rejected_by_storage(user_repository, db):
    user_repository.save(make_user())

    with pytest.raises(AlreadyExistsException):
        user_repository.save(make_user())

    assert db.query(User).count() == 1


def test_duplicate_live_registration_number_is_rejected_by_storage(user_repository):
    user_repository.save(make_user(email="c1@x.com", registration_number="R-1", role=UserRole.COUNSELOR))

    with pytest.raises(AlreadyExistsException):
        user_repository.save(make_user(email="c2@x.com", registration_number="R-1", role=UserRole.DOCTOR))


def test_deleted_rows_do_not_block_uniqueness(user_repository, db):
    user_repository.save(make_user(registration_number="R-1", deleted=True))
    user_repository.save(make_user(registration_number="R-1", deleted=True))
    user_repository.save(make_user(registration_number="R-1"))

    assert db.query(User).count() == 3


def test_existence_checks_ignore_deleted_users(user_repository):
    user_repository.save(make_user(registration_number="R-1", deleted=True))

    assert user_repository.exists_by_email_non_deleted("a@x.com") is False
    assert user_repository.exists_by_registration_number_non_deleted("R-1") is False
    assert user_repository.find_by_email_non_deleted("a@x.com") is None
    assert user_repository.find_by_email("a@x.com").deleted is True


def test_existence_checks_find_live_users(user_repository):
    user_repository.save(make_user(registration_number="R-1"))

    assert user_repository.exists_by_email_non_deleted("a@x.com") is True
    assert user_repository.exists_by_registration_number_non_deleted("R-1") is True
    assert user_repository.exists_by_email_non_deleted("b@x.com") is False


def test_find_by_email_prefers_live_account(user_repository):
    deleted = user_repository.save(make_user(deleted=True))
    live = user_repository.save(make_user())
    user_repository.save(make_user(deleted=True))

    found = user_repository.find_by_email("a@x.com")

    assert found.id == live.id
    assert found.id != deleted.id


def test_find_by_email_unknown(db):
    assert UserRepository(db).find_by_email("nobody@x.com") is None


def test_find_by_email_and_authority_only_considers_role_holders(user_repository):
    doctor = user_repository.save(make_user(registration_number="D-1", deleted=True, role=UserRole.DOCTOR))
    patient = user_repository.save(make_user())

    assert user_repository.find_by_email_and_authority("a@x.com", UserRole.DOCTOR).id == doctor.id
    assert user_repository.find_by_email_and_authority("a@x.com", UserRole.PATIENT).id == patient.id
    assert user_repository.find_by_email_and_authority("a@x.com", UserRole.ADMIN) is None


def test_find_by_email_and_authority_prefers_live_account(user_repository):
    user_repository.save(make_user(deleted=True))
    live = user_repository.save(make_user())
    user_repository.save(make_user(deleted=True))

    assert user_repository.find_by_email_and_authority("a@x.com", UserRole.PATIENT).id == live.id
