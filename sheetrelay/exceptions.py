class SheetRelayError(Exception):
    """Base class for errors that are reported back to the caller.

    ``plain_text`` marks the legacy responses whose body is the bare message
    instead of a JSON ``{"error": ...}`` object.
    """

    def __init__(self, message: str, *, plain_text: bool = False):
        super().__init__(message)
        self.message = message
        self.plain_text = plain_text


class MissingParameter(SheetRelayError):
    """Raised when a required request field is absent."""


class InvalidInput(SheetRelayError):
    """Raised when a request field or body is present but malformed."""


class NotFound(SheetRelayError):
    """Raised when a referenced sheet does not exist."""


class UpstreamError(SheetRelayError):
    """Raised when a remote call fails. Carries only a generic message."""


class MethodNotAllowed(SheetRelayError):
    """Raised when a route receives an HTTP method it does not serve."""


class AuthenticationError(Exception):
    """Raised when service account credentials are missing or rejected."""


class IntegrationError(Exception):
    """Raised when a Google API call fails."""
