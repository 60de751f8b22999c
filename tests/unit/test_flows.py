"""
Unit tests for identity flow models.
"""

import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, timezone
from mesh_session.domain.flows import (
    RegisterUser,
    ForgotPassword,
    UserVerificationHash,
    UserVerificationCheck,
    ResetPassword,
    UserPasswordUpdate,
    Valid,
)


EXPIRES = datetime(2030, 5, 17, 12, 30, tzinfo=timezone.utc)


def test_register_user_wire_format():
    """Test RegisterUser serializes with camelCase keys."""
    user = RegisterUser(
        username="alice",
        password="s3cret",
        phone_number="+15555550100",
        email_address="alice@example.com",
    )

    data = user.to_dict()
    assert data["username"] == "alice"
    assert data["password"] == "s3cret"
    assert data["phoneNumber"] == "+15555550100"
    assert data["emailAddress"] == "alice@example.com"
    assert data["firstName"] is None


def test_models_are_immutable():
    """Test that flow records cannot be mutated."""
    user = RegisterUser(username="alice", password="s3cret")

    with pytest.raises(FrozenInstanceError):
        user.username = "bob"


def test_forgot_password_defaults():
    """Test ForgotPassword starts at the first attempt."""
    assert ForgotPassword(username="alice").to_dict() == {"username": "alice", "attempt": 1}


def test_verification_hash_from_dict():
    """Test parsing a server-issued hash, including a Z-suffixed timestamp."""
    verification_hash = UserVerificationHash.from_dict({
        "username": "alice",
        "hash": "abc123",
        "expires": "2030-05-17T12:30:00Z",
        "hint": "***-***-0100",
        "attempt": 2,
    })

    assert verification_hash.username == "alice"
    assert verification_hash.hash == "abc123"
    assert verification_hash.expires == EXPIRES
    assert verification_hash.hint == "***-***-0100"
    assert verification_hash.attempt == 2


def test_verification_check_from_hash():
    """Test pairing a hash with a verification code keeps every field."""
    verification_hash = UserVerificationHash(
        username="alice", hash="abc123", expires=EXPIRES, hint="hint"
    )

    check = UserVerificationCheck.from_hash(verification_hash, "424242")

    assert check.username == "alice"
    assert check.hash == "abc123"
    assert check.expires is EXPIRES
    assert check.hint == "hint"
    assert check.verification_code == "424242"
    assert check.to_dict()["verificationCode"] == "424242"
    assert check.to_dict()["expires"] == "2030-05-17T12:30:00+00:00"


def test_reset_password_from_check():
    """Test building a reset request from a check."""
    check = UserVerificationCheck(
        username="alice",
        hash="abc123",
        verification_code="424242",
        expires=EXPIRES,
        hint="hint",
    )

    reset = ResetPassword.from_check(check, "n3w-pass")

    assert reset.new_password == "n3w-pass"
    assert reset.expires is EXPIRES
    data = reset.to_dict()
    assert data["newPassword"] == "n3w-pass"
    assert data["verificationCode"] == "424242"
    assert data["hash"] == "abc123"


def test_password_update_wire_format():
    """Test UserPasswordUpdate keys."""
    update = UserPasswordUpdate(previous_password="old", new_password="new")

    assert update.to_dict() == {"previousPassword": "old", "newPassword": "new"}


def test_valid_from_dict():
    """Test Valid parsing."""
    assert Valid.from_dict({"isValid": True}).is_valid is True
    assert Valid.from_dict({"isValid": False}).is_valid is False
    assert Valid.from_dict({}).is_valid is False
