"""Tests for the bcrypt password hasher."""

import asyncio

import pytest

from src.domain.services.auth.password_hasher import PasswordHasher


@pytest.fixture
def hasher():
    service = PasswordHasher(work_factor=4, max_workers=2)
    yield service
    service.shutdown()


class TestPasswordHasher:
    @pytest.mark.asyncio
    async def test_hash_then_verify_round_trips(self, hasher):
        digest = await hasher.hash("Secur3Pass")

        assert digest.startswith("$2b$04$")
        assert await hasher.verify("Secur3Pass", digest) is True

    @pytest.mark.asyncio
    async def test_wrong_password_does_not_verify(self, hasher):
        digest = await hasher.hash("Secur3Pass")

        assert await hasher.verify("Secur3Pasz", digest) is False

    @pytest.mark.asyncio
    async def test_same_password_hashes_differently(self, hasher):
        """Each hash carries its own salt."""
        first, second = await asyncio.gather(hasher.hash("Secur3Pass"), hasher.hash("Secur3Pass"))

        assert first != second

    @pytest.mark.asyncio
    @pytest.mark.parametrize("digest", [None, ""])
    async def test_missing_digest_never_verifies(self, hasher, digest):
        assert await hasher.verify("Secur3Pass", digest) is False

    @pytest.mark.asyncio
    async def test_corrupted_digest_is_treated_as_mismatch(self, hasher):
        assert await hasher.verify("Secur3Pass", "not-a-bcrypt-digest") is False
