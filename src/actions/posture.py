from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Protocol

from posture import PostureAnalysis

from .errors import ActionError

ANALYZE_POSTURE_DELAY_SECONDS = 1.5
ANALYZE_POSTURE_ERROR_MESSAGE = "Failed to analyze posture. Please try again."


class PostureAnalyzerLike(Protocol):
    def analyze(self, photo_data_uri: str) -> PostureAnalysis:
        ...


def analyze_posture_action(
    analyzer: PostureAnalyzerLike,
    photo_data_uri: str,
    *,
    sleep_fn: Callable[[float], None] = time.sleep,
    logger: Optional[logging.Logger] = None,
) -> PostureAnalysis:
    """Analyze a photo after a fixed delay that keeps the loading state visible."""
    logger = logger or logging.getLogger("actions")
    sleep_fn(ANALYZE_POSTURE_DELAY_SECONDS)
    try:
        return analyzer.analyze(photo_data_uri)
    except Exception as error:
        logger.error("Error in analyze_posture_action: %s", error, exc_info=True)
        raise ActionError(ANALYZE_POSTURE_ERROR_MESSAGE) from None
