"""
Settings - Endpoint and client configuration.

Values can be passed directly or read from environment variables:

    MESH_API_URL            Platform API base URL (required)
    MESH_AUTH_URL           Identity endpoint base URL (required)
    MESH_CLIENT_ID          Public client id (required)
    MESH_SCOPE              Requested scope
    MESH_TIMEOUT            HTTP timeout in seconds
    MESH_REVOKE_ON_SIGNOUT  Revoke refresh tokens remotely on signout (1/0)
    MESH_REDIS_URL          Keep token pairs in Redis instead of memory
    MESH_TOKEN_TTL          TTL in seconds for stored token pairs
"""

import os
from dataclasses import dataclass
from typing import Optional, Mapping
from mesh_session.errors import ConfigurationError


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class MeshSettings:
    """Client settings."""
    api_url: str
    auth_url: str
    client_id: str
    scope: str = "mesh.api offline_access"
    timeout: float = 30.0
    revoke_on_signout: bool = True
    redis_url: Optional[str] = None
    token_ttl: Optional[int] = None

    def __post_init__(self):
        for name in ("api_url", "auth_url", "client_id"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} is required")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @property
    def token_url(self) -> str:
        """Identity token endpoint."""
        return f"{self.auth_url.rstrip('/')}/connect/token"

    @property
    def revocation_url(self) -> str:
        """Identity revocation endpoint."""
        return f"{self.auth_url.rstrip('/')}/connect/revocation"

    @classmethod
    def from_env(
        cls,
        prefix: str = "MESH_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> "MeshSettings":
        """
        Load settings from environment variables.

        Args:
            prefix: Variable name prefix (default MESH_)
            environ: Mapping to read instead of os.environ

        Raises:
            ConfigurationError: If a required variable is missing or malformed
        """
        env = os.environ if environ is None else environ

        def read(name: str) -> Optional[str]:
            value = env.get(f"{prefix}{name}")
            return value.strip() if value is not None and value.strip() else None

        kwargs = {
            "api_url": read("API_URL") or "",
            "auth_url": read("AUTH_URL") or "",
            "client_id": read("CLIENT_ID") or "",
            "redis_url": read("REDIS_URL"),
        }

        if read("SCOPE"):
            kwargs["scope"] = read("SCOPE")

        try:
            if read("TIMEOUT"):
                kwargs["timeout"] = float(read("TIMEOUT"))
            if read("TOKEN_TTL"):
                kwargs["token_ttl"] = int(read("TOKEN_TTL"))
        except ValueError as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}")

        revoke = read("REVOKE_ON_SIGNOUT")
        if revoke is not None:
            if revoke.lower() in _TRUE_VALUES:
                kwargs["revoke_on_signout"] = True
            elif revoke.lower() in _FALSE_VALUES:
                kwargs["revoke_on_signout"] = False
            else:
                raise ConfigurationError(f"Invalid {prefix}REVOKE_ON_SIGNOUT: {revoke}")

        return cls(**kwargs)
