"""
Token Domain Model - Access/refresh token pair bound to an authentication id.
"""

from dataclasses import dataclass
from typing import Dict, Any, Optional
from datetime import datetime, timedelta, timezone

import jwt


@dataclass(frozen=True)
class TokenPair:
    """
    Token pair issued by the identity endpoint.

    Domain rules:
    - access_token is always present
    - refresh_token is optional (some grants do not return one)
    - expires_at is UTC, or None when the lifetime is unknown
    """
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None
    token_type: str = "Bearer"
    scope: Optional[str] = None

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "TokenPair":
        """
        Build a token pair from an identity endpoint response body.

        Lifetime comes from ``expires_in`` when present, otherwise from the
        ``exp`` claim of a JWT access token (read without verifying the
        signature), otherwise it is left unknown.

        Raises:
            KeyError: If access_token is missing
        """
        access_token = data["access_token"]
        now = datetime.now(timezone.utc)

        if data.get("expires_in") is not None:
            expires_at = now + timedelta(seconds=int(data["expires_in"]))
        else:
            expires_at = cls._jwt_expiry(access_token)

        return cls(
            access_token=access_token,
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            token_type=data.get("token_type") or "Bearer",
            scope=data.get("scope"),
        )

    @staticmethod
    def _jwt_expiry(access_token: str) -> Optional[datetime]:
        try:
            claims = jwt.decode(access_token, options={"verify_signature": False})
        except jwt.InvalidTokenError:
            return None

        exp = claims.get("exp")
        if exp is None:
            return None
        return datetime.fromtimestamp(int(exp), tz=timezone.utc)

    def is_expired(self, leeway: int = 0) -> bool:
        """Check if the access token has expired (unknown lifetime never expires)."""
        if self.expires_at is None:
            return False
        return datetime.now(timezone.utc) + timedelta(seconds=leeway) >= self.expires_at

    def seconds_remaining(self) -> Optional[int]:
        """Whole seconds until expiry, None when unknown, 0 when already expired."""
        if self.expires_at is None:
            return None
        remaining = (self.expires_at - datetime.now(timezone.utc)).total_seconds()
        return max(int(remaining), 0)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dict."""
        return {
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
            "token_type": self.token_type,
            "scope": self.scope,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPair":
        """Deserialize from dict."""
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token"),
            expires_at=datetime.fromisoformat(data["expires_at"]) if data.get("expires_at") else None,
            token_type=data.get("token_type", "Bearer"),
            scope=data.get("scope"),
        )
