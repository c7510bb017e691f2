class PostureError(Exception):
    """Base exception for posture analysis."""


class PostureConfigurationError(PostureError):
    """Raised when posture model configuration is invalid."""


class PostureAnalysisError(PostureError):
    """Raised when a posture analysis request fails."""
