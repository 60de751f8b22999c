"""
Flow Models - Registration, verification and password transfer records.

These are immutable payloads posted to the identity API. Field completeness
is the server's concern; nothing here validates.
Wire keys are camelCase.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional
from datetime import datetime


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    # fromisoformat() only accepts a trailing "Z" from 3.11 on
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class RegisterUser:
    """New user with the password they will log in with."""
    username: str
    password: str
    phone_number: Optional[str] = None
    email_address: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to wire dict."""
        return {
            "username": self.username,
            "password": self.password,
            "phoneNumber": self.phone_number,
            "emailAddress": self.email_address,
            "firstName": self.first_name,
            "lastName": self.last_name,
        }


@dataclass(frozen=True)
class ForgotPassword:
    """Request to start a password reset."""
    username: str
    attempt: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to wire dict."""
        return {"username": self.username, "attempt": self.attempt}


@dataclass(frozen=True)
class UserVerificationHash:
    """
    Server-issued hash proving a flow was started for a user.

    The verification code is delivered out of band; the hint tells the
    user where to look for it.
    """
    username: str
    hash: str
    expires: Optional[datetime] = None
    hint: Optional[str] = None
    attempt: int = 1

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to wire dict."""
        return {
            "username": self.username,
            "hash": self.hash,
            "expires": _format_datetime(self.expires),
            "hint": self.hint,
            "attempt": self.attempt,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserVerificationHash":
        """Deserialize from wire dict."""
        return cls(
            username=data["username"],
            hash=data["hash"],
            expires=_parse_datetime(data.get("expires")),
            hint=data.get("hint"),
            attempt=data.get("attempt", 1),
        )


@dataclass(frozen=True)
class UserVerificationCheck:
    """Verification hash plus the code the user received."""
    username: str
    hash: str
    verification_code: str
    expires: Optional[datetime] = None
    hint: Optional[str] = None
    attempt: int = 1

    @classmethod
    def from_hash(
        cls,
        verification_hash: UserVerificationHash,
        verification_code: str,
    ) -> "UserVerificationCheck":
        """Pair a server hash with the code the user entered."""
        return cls(
            username=verification_hash.username,
            hash=verification_hash.hash,
            verification_code=verification_code,
            expires=verification_hash.expires,
            hint=verification_hash.hint,
            attempt=verification_hash.attempt,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to wire dict."""
        return {
            "username": self.username,
            "hash": self.hash,
            "expires": _format_datetime(self.expires),
            "hint": self.hint,
            "attempt": self.attempt,
            "verificationCode": self.verification_code,
        }


@dataclass(frozen=True)
class ResetPassword:
    """Verified hash together with the password to switch to."""
    username: str
    hash: str
    verification_code: str
    new_password: str
    expires: Optional[datetime] = None
    hint: Optional[str] = None
    attempt: int = 1

    @classmethod
    def from_check(cls, check: UserVerificationCheck, new_password: str) -> "ResetPassword":
        """Build a reset request from a verification check."""
        return cls(
            username=check.username,
            hash=check.hash,
            verification_code=check.verification_code,
            new_password=new_password,
            expires=check.expires,
            hint=check.hint,
            attempt=check.attempt,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to wire dict."""
        return {
            "username": self.username,
            "hash": self.hash,
            "expires": _format_datetime(self.expires),
            "hint": self.hint,
            "attempt": self.attempt,
            "verificationCode": self.verification_code,
            "newPassword": self.new_password,
        }


@dataclass(frozen=True)
class UserPasswordUpdate:
    """Password change for the signed-in user."""
    previous_password: str
    new_password: str

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to wire dict."""
        return {
            "previousPassword": self.previous_password,
            "newPassword": self.new_password,
        }


@dataclass(frozen=True)
class Valid:
    """Result of a hash check."""
    is_valid: bool

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Valid":
        """Deserialize from wire dict."""
        return cls(is_valid=bool(data.get("isValid", False)))
