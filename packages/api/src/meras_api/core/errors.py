# This project was developed with assistance from AI tools.
"""Typed access failures.

Raised by the auth core, the scope loader, the delete guard and the entity
store. They carry no FastAPI dependency; ``main.py`` renders them into the
``{"success": false, "error": ...}`` envelope.
"""


class AccessError(Exception):
    """Base class for failures that map onto an HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AccessError):
    """Missing, invalid or expired credential, or an unknown / inactive user."""

    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AccessError):
    """Valid credential but insufficient role, capability or scope."""

    status_code = 403
    default_message = "Forbidden"


class NotFound(AccessError):
    """Entity absent or outside the caller's scope. The two are indistinguishable."""

    status_code = 404
    default_message = "Not found"


class StoreError(AccessError):
    """I/O failure in the credential, entity or audit store. Never a deny."""

    status_code = 500
    default_message = "Internal server error"
