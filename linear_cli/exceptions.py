"""
linear-cli exception hierarchy and error-code taxonomy.

All custom exceptions live here to avoid circular imports.
"""

# ---------------------------------------------------------------------------
# Error codes (closed set; scripts branch on these, never on messages)
# ---------------------------------------------------------------------------

NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
INVALID_API_KEY = "INVALID_API_KEY"
NOT_FOUND = "NOT_FOUND"
ALREADY_EXISTS = "ALREADY_EXISTS"
INVALID_INPUT = "INVALID_INPUT"
MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
API_ERROR = "API_ERROR"
RATE_LIMITED = "RATE_LIMITED"
CONFIG_ERROR = "CONFIG_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

ERROR_CODES = frozenset(
    {
        NOT_AUTHENTICATED,
        INVALID_API_KEY,
        NOT_FOUND,
        ALREADY_EXISTS,
        INVALID_INPUT,
        MISSING_REQUIRED_FIELD,
        API_ERROR,
        RATE_LIMITED,
        CONFIG_ERROR,
        UNKNOWN_ERROR,
    }
)

# Codes that mean "fix your credentials/config first".
SETUP_CODES = frozenset({NOT_AUTHENTICATED, INVALID_API_KEY, CONFIG_ERROR})


def exit_code_for(code):
    """Process exit code for an error code."""
    return 2 if code in SETUP_CODES else 1


class CliError(Exception):
    """Typed failure carrying its final error code."""

    def __init__(self, message, code=API_ERROR, details=None):
        super().__init__(message)
        if code not in ERROR_CODES:
            raise ValueError(f"Unknown error code: {code!r}")
        self.code = code
        self.message = message
        self.details = details

    @property
    def exit_code(self):
        return exit_code_for(self.code)


class SetupError(CliError):
    """Credential or config failure; defaults to NOT_AUTHENTICATED."""

    def __init__(self, message, code=NOT_AUTHENTICATED, details=None):
        super().__init__(message, code, details)


class InvalidReferenceError(CliError):
    """A reference is neither a UUID nor a TEAM-123 style identifier."""

    def __init__(self, reference, entity="issue"):
        super().__init__(
            f"Invalid {entity} ID or identifier: {reference}. "
            "Expected UUID or format like ENG-123.",
            INVALID_INPUT,
        )
        self.reference = reference


class HTTPError(Exception):
    """Raised by _http_request for non-2xx responses."""

    def __init__(self, code, reason, body, headers=None):
        super().__init__(f"Request failed with status {code}: {reason}")
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
        self.details = None


class GraphQLError(Exception):
    """The API answered with a GraphQL ``errors`` array."""

    def __init__(self, message, errors=None, status=None):
        super().__init__(message)
        self.errors = errors or []
        self.status = status
