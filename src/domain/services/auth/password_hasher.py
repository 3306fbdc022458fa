"""bcrypt password hashing on a bounded worker pool.

bcrypt is CPU-bound and deliberately slow, so hashing and verification are
dispatched to a ``ThreadPoolExecutor`` instead of running on the event loop.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

from passlib.context import CryptContext
from structlog import get_logger

from src.core.config.settings import settings
from src.domain.interfaces.services import IPasswordHasher

logger = get_logger(__name__)


class PasswordHasher(IPasswordHasher):
    """Salted bcrypt hashing with constant-effort verification.

    Attributes:
        work_factor (int): bcrypt cost; 12 gives roughly 250ms per hash.
    """

    def __init__(
        self,
        work_factor: int = settings.BCRYPT_WORK_FACTOR,
        max_workers: int = settings.PASSWORD_HASH_WORKERS,
    ):
        self.work_factor = work_factor
        self._context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=work_factor)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="password-hasher")

    async def hash(self, plaintext: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self._context.hash, plaintext)

    async def verify(self, plaintext: str, digest: Optional[str]) -> bool:
        """Verifies ``plaintext`` against ``digest``.

        When ``digest`` is absent (unknown email, OAuth-only account) a dummy
        verification is run so the call costs the same as a real mismatch, and
        the result is always False.
        """
        loop = asyncio.get_running_loop()
        if not digest:
            await loop.run_in_executor(self._executor, self._context.dummy_verify)
            return False
        try:
            return await loop.run_in_executor(self._executor, self._context.verify, plaintext, digest)
        except ValueError:
            # Unrecognized or corrupted digest
            logger.warning("password_digest_unrecognized")
            await loop.run_in_executor(self._executor, self._context.dummy_verify)
            return False

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False)
