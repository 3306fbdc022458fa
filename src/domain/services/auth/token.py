from datetime import timedelta
from typing import Optional
from uuid import UUID

from jwt import PyJWTError
from jwt import decode as jwt_decode
from jwt import encode as jwt_encode
from structlog import get_logger

from src.core.config.settings import settings
from src.core.exceptions import InvalidTokenError
from src.domain.interfaces.services import ITokenIssuer
from src.domain.value_objects.auth_session import AuthSession, IssuedToken
from src.utils.clock import utc_now

logger = get_logger(__name__)


class TokenService(ITokenIssuer):
    """Service for issuing and validating stateless bearer tokens.

    Tokens are JWTs signed with a symmetric secret (HS256 by default) and carry
    exactly the claims ``{sub, email, iat, exp}``. Nothing is stored
    server-side, so a token stays valid until it expires.

    The TTL is chosen by the caller: the orchestrator uses
    ``ACCESS_TOKEN_EXPIRE_SECONDS`` for standard sessions and
    ``REMEMBER_ME_TOKEN_EXPIRE_SECONDS`` for "remember me" sessions.

    Attributes:
        algorithm (str): JWT signing algorithm.
    """

    REQUIRED_CLAIMS = ["sub", "email", "iat", "exp"]

    def __init__(self, secret: Optional[str] = None, algorithm: str = settings.JWT_ALGORITHM):
        self._secret = secret or settings.JWT_SECRET.get_secret_value()
        self.algorithm = algorithm

    def issue(self, account_id: UUID, email: str, ttl_seconds: int) -> IssuedToken:
        """Create a signed bearer token.

        Args:
            account_id (UUID): Subject of the token.
            email (str): Account email embedded as a claim.
            ttl_seconds (int): Lifetime of the token.

        Returns:
            IssuedToken: The encoded token and its decoded session.
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        issued_at = utc_now().replace(microsecond=0)
        session = AuthSession(
            subject=account_id,
            email=email,
            issued_at=issued_at,
            expires_at=issued_at + timedelta(seconds=ttl_seconds),
        )
        token = jwt_encode(session.to_claims(), self._secret, algorithm=self.algorithm)
        logger.debug("access_token_issued", account_id=str(account_id), ttl_seconds=ttl_seconds)
        return IssuedToken(token=token, session=session)

    def validate(self, token: str) -> AuthSession:
        """Verify a bearer token and return its claims.

        The signature is checked before any claim is trusted.

        Raises:
            InvalidTokenError: If the signature is bad, the payload is
                malformed or the token has expired.
        """
        if not token:
            raise InvalidTokenError()

        try:
            claims = jwt_decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": self.REQUIRED_CLAIMS},
            )
        except PyJWTError as exc:
            logger.debug("access_token_rejected", reason=exc.__class__.__name__)
            raise InvalidTokenError() from exc

        try:
            return AuthSession.from_claims(claims)
        except ValueError as exc:
            logger.debug("access_token_rejected", reason="malformed_claims")
            raise InvalidTokenError() from exc
