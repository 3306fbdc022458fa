import re

from src.utils.i18n import get_translated_message


class PasswordPolicyValidator:
    """Validates passwords against the account password policy.

    Passwords need at least ``min_length`` characters, one uppercase letter
    and one digit. Violations raise ``ValueError`` so request models surface
    them as field validation errors.
    """

    def __init__(self, min_length: int = 8):
        self.min_length = min_length

    def validate(self, password: str) -> str:
        if len(password) < self.min_length:
            raise ValueError(get_translated_message("password_too_short", "en"))

        if not re.search(r"[A-Z]", password):
            raise ValueError(get_translated_message("password_requires_uppercase", "en"))

        if not re.search(r"\d", password):
            raise ValueError(get_translated_message("password_requires_digit", "en"))

        return password


password_policy = PasswordPolicyValidator()
