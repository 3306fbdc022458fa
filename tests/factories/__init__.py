"""Faker-backed builders for test data."""

from .account import create_fake_account, strong_password
from .oauth import create_fake_assertion

__all__ = ["create_fake_account", "create_fake_assertion", "strong_password"]
