"""
Blocking Client - Synchronous convenience over MeshClient.

For scripts and other code without an event loop. Each call runs the
matching MeshClient coroutine to completion on a loop owned by this object.
Do not use from inside a running event loop; await MeshClient directly.
"""

import asyncio
from typing import Optional

from mesh_session.domain.flows import (
    RegisterUser,
    ResetPassword,
    UserVerificationCheck,
    UserVerificationHash,
)
from mesh_session.domain.session import SessionState
from mesh_session.sdk.client import MeshClient


class BlockingMeshClient:
    """
    Synchronous facade over a MeshClient.

    Example:
        with BlockingMeshClient(MeshClient.from_env()) as client:
            client.login_with_password("alice", "s3cret")
            token = client.retrieve_persistance_token()
            client.signout()
    """

    def __init__(self, client: MeshClient):
        self._client = client
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def client(self) -> MeshClient:
        """Underlying async client."""
        return self._client

    @property
    def authentication_id(self) -> Optional[str]:
        return self._client.authentication_id

    @property
    def state(self) -> SessionState:
        return self._client.state

    def _run(self, coro):
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop.run_until_complete(coro)

    def close(self) -> None:
        """Close the private event loop."""
        if self._loop is not None and not self._loop.is_closed():
            self._loop.close()
        self._loop = None

    def __enter__(self) -> "BlockingMeshClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def login_with_password(self, username: str, password: str) -> str:
        return self._run(self._client.login_with_password(username, password))

    def login_anonymously(self, username: Optional[str] = None) -> str:
        return self._run(self._client.login_anonymously(username))

    def login_with_persistance(self, persistance_token: str) -> str:
        return self._run(self._client.login_with_persistance(persistance_token))

    def login_with_refresh_token(self, refresh_token: str) -> str:
        return self._run(self._client.login_with_refresh_token(refresh_token))

    def refresh(self) -> str:
        return self._run(self._client.refresh())

    def retrieve_persistance_token(self) -> str:
        return self._run(self._client.retrieve_persistance_token())

    def update_password(self, previous_password: str, new_password: str) -> None:
        self._run(self._client.update_password(previous_password, new_password))

    def signout(self) -> None:
        self._run(self._client.signout())

    def register(self, user: RegisterUser) -> UserVerificationHash:
        return self._run(self._client.register(user))

    def forgot_password(self, username: str) -> UserVerificationHash:
        return self._run(self._client.forgot_password(username))

    def reset_password(self, reset_password: ResetPassword) -> None:
        self._run(self._client.reset_password(reset_password))

    def verify(self, check: UserVerificationCheck) -> None:
        self._run(self._client.verify(check))

    def check_hash(self, check: UserVerificationCheck) -> bool:
        return self._run(self._client.check_hash(check))
