class ReasoningError(Exception):
    """Raised when the reasoning backend returns an unusable reply."""


class ReasoningNetworkError(ReasoningError):
    """Raised when the backend call fails due to network/infrastructure issues."""


class ReasoningTimeoutError(ReasoningNetworkError):
    """Raised when the backend does not answer within the configured timeout."""
