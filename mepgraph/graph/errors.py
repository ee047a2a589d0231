"""Exception classes for network traversal."""


class TraversalError(Exception):
    """Base exception for traversal errors."""

    def __init__(self, message: str, network_id: str | None = None):
        self.network_id = network_id
        super().__init__(message)


class InvalidRootError(TraversalError):
    """Raised when the root is missing or not part of the network."""

    def __init__(
        self,
        message: str,
        root_id: str | None = None,
        network_id: str | None = None,
    ):
        self.root_id = root_id
        super().__init__(message, network_id)


class DegenerateNetworkError(TraversalError):
    """Raised when the root has no connections and single nodes are refused."""

    pass


class TraversalBudgetError(TraversalError):
    """Raised when a traversal discovers more nodes than allowed."""

    def __init__(self, message: str, limit: int, network_id: str | None = None):
        self.limit = limit
        super().__init__(message, network_id)
