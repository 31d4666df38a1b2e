"""
Analytics Installer Validators

Input validation for the .env form.
"""

from typing import Tuple

from analytics_installer.wizard.exceptions import ValidationError


def validate_openai_key(key: str) -> Tuple[bool, str]:
    """Validate OpenAI API key format.

    Args:
        key: The API key to validate

    Returns:
        Tuple of (is_valid, message)
    """
    if not key.strip():
        return False, "OpenAI API Key is required!"

    # OpenAI keys start with sk-
    if not key.startswith("sk-"):
        return False, "Invalid OpenAI API Key format (should start with 'sk-')"

    return True, "Valid OpenAI API key format"


def require_openai_key(key: str) -> str:
    """Return the key unchanged, or raise ValidationError."""
    valid, message = validate_openai_key(key)
    if not valid:
        raise ValidationError(message, field="OpenAI API Key", expected_format="sk-...")
    return key
