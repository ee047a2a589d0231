"""Exception classes for serialization."""


class SerializationError(Exception):
    """Raised when a traversal tree cannot be written or read back."""

    def __init__(self, message: str, node_id: str | None = None):
        self.node_id = node_id
        super().__init__(message)
