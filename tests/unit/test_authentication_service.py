"""
Unit tests for AuthenticationService.

Uses InMemoryTokenService and RecordingRequestAdapter in place of the
identity endpoint and platform API.
"""

import asyncio
import pytest
import secrets
from datetime import datetime, timezone
from mesh_session.adapters import InMemoryTokenService, RecordingRequestAdapter
from mesh_session.domain.flows import (
    ForgotPassword,
    RegisterUser,
    ResetPassword,
    UserPasswordUpdate,
    UserVerificationCheck,
    UserVerificationHash,
    Valid,
)
from mesh_session.errors import AuthenticationError, NotFoundError, ValidationError
from mesh_session.ports.request_port import RequestDataFormat
from mesh_session.services.authentication import AuthenticationService


def random_string(length: int = 10) -> str:
    return secrets.token_hex(length)[:length]


HASH_REPLY = {
    "username": "alice",
    "hash": "abc123",
    "expires": "2030-01-01T00:00:00+00:00",
    "hint": "***0100",
}


class TestLogin:
    """Test login variants delegate to the token service."""

    def setup_method(self):
        """Set up test fixtures."""
        self.tokens = InMemoryTokenService()
        self.requests = RecordingRequestAdapter()
        self.service = AuthenticationService(self.tokens, self.requests)

    @pytest.mark.asyncio
    async def test_login_with_password(self):
        """Test credentials reach the token service untouched."""
        username = random_string()
        password = random_string()

        authentication_id = await self.service.login_with_password(username, password)

        assert authentication_id
        assert self.tokens.presented == [(username, password)]
        assert self.requests.requests == []

    @pytest.mark.asyncio
    async def test_login_with_password_rejected(self):
        """Test rejected credentials surface as AuthenticationError."""
        service = AuthenticationService(
            InMemoryTokenService(users={"alice": "right"}),
            self.requests,
        )

        with pytest.raises(AuthenticationError):
            await service.login_with_password("alice", "wrong")

    @pytest.mark.asyncio
    async def test_login_anonymously_uses_sentinel_password(self):
        """Test anonymous login always presents "nopassword"."""
        username = random_string(5)

        await self.service.login_anonymously(username)

        assert self.tokens.presented == [(username, "nopassword")]

    @pytest.mark.asyncio
    async def test_login_anonymously_without_username(self):
        """Test a username is generated when none is given."""
        await self.service.login_anonymously()
        await self.service.login_anonymously()

        (first, first_password), (second, second_password) = self.tokens.presented
        assert first and second and first != second
        assert first_password == second_password == "nopassword"

    @pytest.mark.asyncio
    async def test_login_with_refresh_token(self):
        """Test the refresh token reaches the token service."""
        original_id = await self.service.login_with_password("alice", "s3cret")
        refresh_token = await self.service.retrieve_persistance_token(original_id)

        authentication_id = await self.service.login_with_refresh_token(refresh_token)

        assert authentication_id != original_id
        assert self.tokens.presented_refresh_tokens == [refresh_token]

    @pytest.mark.asyncio
    async def test_login_with_persistance(self):
        """Test persistance login is the refresh token path."""
        original_id = await self.service.login_with_password("alice", "s3cret")
        persistance_token = await self.service.retrieve_persistance_token(original_id)

        authentication_id = await self.service.login_with_persistance(persistance_token)

        assert await self.tokens.get_access_token(authentication_id)
        assert self.tokens.presented_refresh_tokens == [persistance_token]


class TestSessionTokens:
    """Test persistance token retrieval, refresh and signout."""

    def setup_method(self):
        """Set up test fixtures."""
        self.tokens = InMemoryTokenService()
        self.service = AuthenticationService(self.tokens, RecordingRequestAdapter())

    @pytest.mark.asyncio
    async def test_retrieve_persistance_token(self):
        """Test the exported token is the bound refresh token."""
        authentication_id = await self.service.login_with_password("alice", "s3cret")

        token = await self.service.retrieve_persistance_token(authentication_id)

        assert token == await self.tokens.get_refresh_token(authentication_id)

    @pytest.mark.asyncio
    async def test_retrieve_persistance_token_after_signout(self):
        """Test retrieval fails with NotFoundError once signed out."""
        authentication_id = await self.service.login_with_password("alice", "s3cret")
        await self.service.signout(authentication_id)

        with pytest.raises(NotFoundError):
            await self.service.retrieve_persistance_token(authentication_id)

    @pytest.mark.asyncio
    async def test_persistance_token_rejected_after_signout(self):
        """Test a persistance token cannot be redeemed after its session signs out."""
        authentication_id = await self.service.login_with_password("alice", "s3cret")
        token = await self.service.retrieve_persistance_token(authentication_id)
        await self.service.signout(authentication_id)

        with pytest.raises(AuthenticationError):
            await self.service.login_with_persistance(token)

    @pytest.mark.asyncio
    async def test_signout_is_idempotent(self):
        """Test signing out twice is not an error."""
        authentication_id = await self.service.login_with_password("alice", "s3cret")

        await self.service.signout(authentication_id)
        await self.service.signout(authentication_id)
        await self.service.signout("never-issued")

    @pytest.mark.asyncio
    async def test_refresh_keeps_id(self):
        """Test refresh rebinds the same id to a new pair."""
        authentication_id = await self.service.login_with_password("alice", "s3cret")
        old_access = await self.tokens.get_access_token(authentication_id)
        old_refresh = await self.tokens.get_refresh_token(authentication_id)

        refreshed_id = await self.service.refresh(authentication_id)

        assert refreshed_id == authentication_id
        assert await self.tokens.get_access_token(authentication_id) != old_access
        assert self.tokens.is_revoked(old_refresh)

    @pytest.mark.asyncio
    async def test_concurrent_logins_get_distinct_ids(self):
        """Test concurrent logins yield independent sessions."""
        ids = await asyncio.gather(*[
            self.service.login_with_password(f"user{i}", f"pass{i}")
            for i in range(5)
        ])

        assert len(set(ids)) == 5
        access_tokens = [await self.tokens.get_access_token(i) for i in ids]
        assert len(set(access_tokens)) == 5


class TestIdentityFlows:
    """Test one-shot POST flows."""

    def setup_method(self):
        """Set up test fixtures."""
        self.tokens = InMemoryTokenService()
        self.requests = RecordingRequestAdapter()
        self.service = AuthenticationService(self.tokens, self.requests)

    @pytest.mark.asyncio
    async def test_register(self):
        """Test register posts the user unchanged and returns the hash."""
        self.requests.responses["users/register"] = HASH_REPLY
        user = RegisterUser(
            username=random_string(5),
            password=random_string(5),
            phone_number="+15555550100",
        )

        result = await self.service.register(user)

        request = self.requests.last
        assert request.method == "POST"
        assert request.path == "users/register"
        assert request.body.username == user.username
        assert request.body.phone_number == user.phone_number
        assert request.data_format == RequestDataFormat.JSON
        assert isinstance(result, UserVerificationHash)
        assert result.hash == "abc123"
        # Registration does not authenticate
        assert self.tokens.presented == []

    @pytest.mark.asyncio
    async def test_forgot_password(self):
        """Test forgot password posts the username."""
        self.requests.responses["users/forgotpassword"] = HASH_REPLY
        username = random_string(5)

        result = await self.service.forgot_password(username)

        request = self.requests.last
        assert request.path == "users/forgotpassword"
        assert isinstance(request.body, ForgotPassword)
        assert request.body.username == username
        assert result.hint == "***0100"

    @pytest.mark.asyncio
    async def test_reset_password(self):
        """Test reset posts every field verbatim."""
        data = ResetPassword(
            username=random_string(5),
            hash=random_string(5),
            verification_code=random_string(5),
            new_password=random_string(5),
            expires=datetime.now(timezone.utc),
            hint=random_string(5),
        )

        result = await self.service.reset_password(data)

        request = self.requests.last
        assert result is None
        assert request.path == "users/resetpassword"
        assert request.body.username == data.username
        assert request.body.expires == data.expires
        assert request.body.hash == data.hash
        assert request.body.hint == data.hint
        assert request.body.new_password == data.new_password

    @pytest.mark.asyncio
    async def test_verify(self):
        """Test verify posts the check."""
        data = UserVerificationCheck(
            username=random_string(5),
            hash=random_string(5),
            verification_code=random_string(5),
            expires=datetime.now(timezone.utc),
            hint=random_string(5),
        )

        await self.service.verify(data)

        request = self.requests.last
        assert request.path == "users/verify"
        assert request.body.username == data.username
        assert request.body.expires == data.expires
        assert request.body.hash == data.hash
        assert request.body.hint == data.hint

    @pytest.mark.asyncio
    async def test_check_hash(self):
        """Test check hash posts the check and unwraps Valid."""
        self.requests.responses["users/checkhash"] = {"isValid": True}
        data = UserVerificationCheck(
            username=random_string(5),
            hash=random_string(5),
            verification_code=random_string(5),
            expires=datetime.now(timezone.utc),
            hint=random_string(5),
        )

        valid = await self.service.check_hash(data)

        request = self.requests.last
        assert valid is True
        assert request.path == "users/checkhash"
        assert request.response_type is Valid
        assert request.body.username == data.username
        assert request.body.expires == data.expires

    @pytest.mark.asyncio
    async def test_check_hash_invalid(self):
        """Test an invalid or empty reply is False."""
        check = UserVerificationCheck(username="a", hash="h", verification_code="c")

        self.requests.responses["users/checkhash"] = {"isValid": False}
        assert await self.service.check_hash(check) is False

        self.requests.responses["users/checkhash"] = None
        assert await self.service.check_hash(check) is False

    @pytest.mark.asyncio
    async def test_update_password(self):
        """Test update password issues exactly one POST with both passwords."""
        previous = random_string()
        new = random_string()

        await self.service.update_password(previous, new)

        assert len(self.requests.requests) == 1
        request = self.requests.last
        assert request.path == "users/me/password"
        assert isinstance(request.body, UserPasswordUpdate)
        assert request.body.previous_password == previous
        assert request.body.new_password == new

    @pytest.mark.asyncio
    async def test_flow_errors_propagate(self):
        """Test server rejections are not swallowed."""
        self.requests.responses["users/resetpassword"] = ValidationError("bad hash", status_code=400)
        data = ResetPassword(
            username="alice", hash="bad", verification_code="0", new_password="x"
        )

        with pytest.raises(ValidationError):
            await self.service.reset_password(data)
