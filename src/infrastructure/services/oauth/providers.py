"""External identity providers.

Each provider implements `IOAuthProvider`: it builds the authorization URL the
browser is sent to and exchanges the returned code for a verified
`OAuthAssertion`. Everything provider-specific (endpoints, scopes, profile
field names) stays in here.
"""

from typing import Any, Dict

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from src.core.config.settings import Settings, settings as app_settings
from src.core.exceptions import OAuthProviderError
from src.domain.interfaces.services import IOAuthProvider
from src.domain.value_objects.oauth_assertion import OAuthAssertion

logger = get_logger(__name__)


class GoogleOAuthProvider(IOAuthProvider):
    """Google OpenID Connect provider.

    Attributes:
        client_id (str): OAuth client id.
        redirect_uri (str): Callback URL registered with Google.
    """

    name = "google"

    AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
    SCOPE = "openid email profile"

    def __init__(self, client_id: str, client_secret: str, redirect_uri: str, timeout: float = 10.0):
        self.client_id = client_id
        self._client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout

    def _client(self) -> AsyncOAuth2Client:
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self._client_secret,
            redirect_uri=self.redirect_uri,
            scope=self.SCOPE,
            timeout=self.timeout,
        )

    def authorization_url(self, state: str) -> str:
        client = self._client()
        url, _ = client.create_authorization_url(self.AUTHORIZE_URL, state=state, access_type="online")
        return url

    async def exchange_code(self, code: str) -> OAuthAssertion:
        """Exchange an authorization code for the account's Google identity.

        Raises:
            OAuthProviderError: If Google rejects the code, is unreachable, or
                returns an unusable or unverified profile.
        """
        try:
            token = await self._fetch_token(code)
            profile = await self._fetch_userinfo(token)
        except (AuthlibBaseError, httpx.HTTPError) as exc:
            logger.warning("oauth_code_exchange_failed", provider=self.name, error_type=type(exc).__name__)
            raise OAuthProviderError() from exc

        return self._to_assertion(profile)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _fetch_token(self, code: str) -> Dict[str, Any]:
        async with self._client() as client:
            return await client.fetch_token(self.TOKEN_URL, code=code)

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_fixed(1),
        retry=retry_if_exception_type(httpx.TransportError),
        reraise=True,
    )
    async def _fetch_userinfo(self, token: Dict[str, Any]) -> Dict[str, Any]:
        async with self._client() as client:
            client.token = token
            response = await client.get(self.USERINFO_URL)
            response.raise_for_status()
            return response.json()

    def _to_assertion(self, profile: Dict[str, Any]) -> OAuthAssertion:
        if profile.get("email_verified") is False:
            logger.warning("oauth_unverified_email", provider=self.name)
            raise OAuthProviderError()

        try:
            return OAuthAssertion(
                provider=self.name,
                subject_id=str(profile.get("sub") or profile.get("id") or ""),
                email=profile.get("email") or "",
                first_name=profile.get("given_name") or "",
                last_name=profile.get("family_name") or "",
                avatar_url=profile.get("picture"),
            )
        except ValueError as exc:
            logger.warning("oauth_profile_incomplete", provider=self.name, error=str(exc))
            raise OAuthProviderError() from exc


def build_oauth_providers(settings: Settings = app_settings) -> Dict[str, IOAuthProvider]:
    """Returns the configured providers keyed by name.

    Providers without client credentials are left out, so their routes answer
    as unsupported.
    """
    providers: Dict[str, IOAuthProvider] = {}
    if settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET.get_secret_value():
        providers[GoogleOAuthProvider.name] = GoogleOAuthProvider(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET.get_secret_value(),
            redirect_uri=settings.GOOGLE_REDIRECT_URI,
        )
    logger.debug("oauth_providers_configured", providers=sorted(providers))
    return providers
