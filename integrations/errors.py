class IntegrationError(Exception):
    """Base class for errors raised by external service clients."""


class ExternalServiceError(IntegrationError):
    """Raised when a remote service cannot be reached or answers with an error."""

    def __init__(self, service, message, status_code=None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class NotFoundError(IntegrationError):
    """Raised when a requested remote entity does not exist."""
