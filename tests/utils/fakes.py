"""In-memory collaborators for tests."""

from dataclasses import dataclass, field
from typing import List, Optional

from src.core.exceptions import EmailServiceError
from src.domain.interfaces.services import IEmailDispatcher, IOAuthProvider
from src.domain.value_objects.oauth_assertion import OAuthAssertion


@dataclass
class SentEmail:
    kind: str
    recipient: str
    display_name: str
    language: str
    reset_secret: Optional[str] = None


@dataclass
class FakeEmailDispatcher(IEmailDispatcher):
    """Records every email instead of sending it.

    Set ``fail`` to make each send raise ``EmailServiceError``.
    """

    sent: List[SentEmail] = field(default_factory=list)
    fail: bool = False

    async def send_password_reset(
        self, recipient_email: str, reset_secret: str, display_name: str, language: str = "en"
    ) -> None:
        if self.fail:
            raise EmailServiceError()
        self.sent.append(SentEmail("password_reset", recipient_email, display_name, language, reset_secret))

    async def send_welcome(self, recipient_email: str, display_name: str, language: str = "en") -> None:
        if self.fail:
            raise EmailServiceError()
        self.sent.append(SentEmail("welcome", recipient_email, display_name, language))

    def last_reset_secret(self) -> Optional[str]:
        resets = [mail for mail in self.sent if mail.kind == "password_reset"]
        return resets[-1].reset_secret if resets else None


class FakeOAuthProvider(IOAuthProvider):
    """Provider whose code exchange returns a canned assertion."""

    name = "google"

    def __init__(self, assertion: OAuthAssertion):
        self.assertion = assertion
        self.exchanged_codes: List[str] = []

    def authorization_url(self, state: str) -> str:
        return f"https://accounts.example.com/authorize?state={state}"

    async def exchange_code(self, code: str) -> OAuthAssertion:
        self.exchanged_codes.append(code)
        return self.assertion
