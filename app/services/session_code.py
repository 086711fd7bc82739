"""Generate short session join codes.

Codes are SESSION_CODE_LENGTH characters drawn uniformly from A-Z0-9
(36^6 ~ 2.2e9 combinations). Uniqueness is NOT guaranteed here; callers must
check the code against existing sessions before committing it.
"""

from __future__ import annotations

import secrets
import string

SESSION_CODE_ALPHABET = string.ascii_uppercase + string.digits
SESSION_CODE_LENGTH = 6


def generate_session_code(length: int = SESSION_CODE_LENGTH) -> str:
    if length < 1:
        raise ValueError("length must be positive")
    return "".join(secrets.choice(SESSION_CODE_ALPHABET) for _ in range(length))


def normalize_session_code(code: str) -> str:
    """Join codes are case-insensitive; store and compare them uppercased."""
    return code.strip().upper()


def is_valid_session_code(code: str, length: int = SESSION_CODE_LENGTH) -> bool:
    return len(code) == length and all(ch in SESSION_CODE_ALPHABET for ch in code)


__all__ = [
    "SESSION_CODE_ALPHABET",
    "SESSION_CODE_LENGTH",
    "generate_session_code",
    "normalize_session_code",
    "is_valid_session_code",
]
