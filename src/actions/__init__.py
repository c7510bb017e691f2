"""Request wrappers around the posture model and speech synthesis.

Both wrappers log the underlying failure and re-raise a single, serializable
:class:`ActionError` whose message is safe to show in the dashboard.
"""

from .errors import ActionError
from .posture import (
    ANALYZE_POSTURE_DELAY_SECONDS,
    ANALYZE_POSTURE_ERROR_MESSAGE,
    analyze_posture_action,
)
from .speech import TEXT_TO_SPEECH_ERROR_MESSAGE, text_to_speech_action

__all__ = [
    "ANALYZE_POSTURE_DELAY_SECONDS",
    "ANALYZE_POSTURE_ERROR_MESSAGE",
    "ActionError",
    "TEXT_TO_SPEECH_ERROR_MESSAGE",
    "analyze_posture_action",
    "text_to_speech_action",
]
