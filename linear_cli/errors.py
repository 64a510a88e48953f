"""
Error classification: map any failure onto the closed error-code taxonomy.

Everything that reaches the user as an error goes through ``classify``.
Typed ``CliError`` failures keep their code; anything else is matched on its
message text, because the transport's error wording is not a stable contract.
"""

from dataclasses import dataclass
from typing import Any

from linear_cli.envelope import build_error
from linear_cli.exceptions import (
    API_ERROR,
    INVALID_API_KEY,
    NOT_FOUND,
    RATE_LIMITED,
    UNKNOWN_ERROR,
    CliError,
    exit_code_for,
)

INVALID_API_KEY_MESSAGE = "Invalid or expired API key"
RATE_LIMITED_MESSAGE = "Rate limit exceeded. Please wait before retrying."
UNKNOWN_ERROR_MESSAGE = "An unexpected error occurred"


@dataclass(frozen=True)
class ErrorInfo:
    code: str
    message: str
    details: Any = None

    @property
    def exit_code(self):
        return exit_code_for(self.code)


@dataclass(frozen=True)
class _Pattern:
    markers: tuple
    code: str
    message: str | None  # None keeps the source message


# First match wins. The auth > not-found > rate-limit order has no documented
# rationale; kept for compatibility with existing scripts.
_PATTERNS = (
    _Pattern(("401", "Unauthorized"), INVALID_API_KEY, INVALID_API_KEY_MESSAGE),
    _Pattern(("404", "not found"), NOT_FOUND, None),
    _Pattern(("429", "rate limit"), RATE_LIMITED, RATE_LIMITED_MESSAGE),
)


def _match_pattern(message):
    for pattern in _PATTERNS:
        if any(marker in message for marker in pattern.markers):
            return pattern
    return None


def classify(failure):
    """Return the ErrorInfo for *failure* (any raised value or object)."""
    if isinstance(failure, CliError):
        return ErrorInfo(failure.code, failure.message, failure.details)

    if isinstance(failure, BaseException):
        message = str(failure)
        details = getattr(failure, "details", None)
        if message:
            pattern = _match_pattern(message)
            if pattern:
                return ErrorInfo(pattern.code, pattern.message or message, details)
            return ErrorInfo(API_ERROR, message, details)

    return ErrorInfo(UNKNOWN_ERROR, UNKNOWN_ERROR_MESSAGE)


def error_response(failure):
    """Classify *failure* and wrap it in an error envelope."""
    info = classify(failure)
    return build_error(info.code, info.message, info.details)
