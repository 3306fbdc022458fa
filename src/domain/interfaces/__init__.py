"""Domain Interfaces for dependency inversion.

These interfaces define contracts that the infrastructure layer implements,
ensuring the identity services depend on abstractions, not concretions.
"""

from .repositories import ICredentialRepository
from .services import IEmailDispatcher, IOAuthProvider, IPasswordHasher, ITokenIssuer

__all__ = [
    "ICredentialRepository",
    "IEmailDispatcher",
    "IOAuthProvider",
    "IPasswordHasher",
    "ITokenIssuer",
]
