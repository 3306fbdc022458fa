"""Domain Value Objects for the identity domain.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .auth_session import AuthSession, IssuedToken
from .oauth_assertion import OAuthAssertion
from .reset_secret import ResetSecret

__all__ = ["AuthSession", "IssuedToken", "OAuthAssertion", "ResetSecret"]
