"""Schema-related exceptions."""


class NetworkLoadError(Exception):
    """Raised when a network file cannot be loaded."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class NetworkValidationError(Exception):
    """Raised when a network description fails validation."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        self.errors = errors or []
        super().__init__(message)
