"""Background posture analysis requests with last-write-wins results."""

from __future__ import annotations

import concurrent.futures
import logging
import time
from typing import Callable, Optional

from actions import ANALYZE_POSTURE_ERROR_MESSAGE, ActionError, analyze_posture_action
from actions.posture import PostureAnalyzerLike
from contracts.ui_protocol import (
    POSTURE_ANALYZING,
    POSTURE_COMPLETED,
    POSTURE_FAILED,
    POSTURE_RESET,
)
from posture import PostureAnalysis

from .ui import RuntimeUIPublisher

POSTURE_UNAVAILABLE_MESSAGE = "Posture analysis is not available."


class PostureRequests:
    """Runs posture analysis off the tick thread.

    Requests are never cancelled. Each one gets a generation number and only
    the result of the newest generation is published; a reset also bumps the
    generation so an in-flight result is dropped when it resolves.
    """

    def __init__(
        self,
        analyzer: Optional[PostureAnalyzerLike],
        ui: RuntimeUIPublisher,
        *,
        sleep_fn: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
        executor: Optional[concurrent.futures.Executor] = None,
    ):
        self._analyzer = analyzer
        self._ui = ui
        self._sleep_fn = sleep_fn
        self._logger = logger or logging.getLogger("posture")
        self._executor = executor or concurrent.futures.ThreadPoolExecutor(
            max_workers=1,
            thread_name_prefix="posture",
        )
        self._generation = 0
        self._pending: list[tuple[int, concurrent.futures.Future[PostureAnalysis]]] = []

    @property
    def available(self) -> bool:
        return self._analyzer is not None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def submit(self, photo_data_uri: str) -> Optional[int]:
        if self._analyzer is None:
            self._ui.publish_posture(POSTURE_FAILED, error=POSTURE_UNAVAILABLE_MESSAGE)
            return None

        self._generation += 1
        request_id = self._generation
        self._ui.publish_posture(POSTURE_ANALYZING, request_id=request_id)
        try:
            future = self._executor.submit(
                analyze_posture_action,
                self._analyzer,
                photo_data_uri,
                sleep_fn=self._sleep_fn,
                logger=self._logger,
            )
        except RuntimeError as error:
            self._logger.error("Failed to submit posture analysis: %s", error)
            self._ui.publish_posture(
                POSTURE_FAILED,
                request_id=request_id,
                error=ANALYZE_POSTURE_ERROR_MESSAGE,
            )
            return None

        self._pending.append((request_id, future))
        self._logger.info("Posture analysis request %d submitted", request_id)
        return request_id

    def reset(self) -> None:
        self._generation += 1
        self._ui.publish_posture(POSTURE_RESET)

    def finalize(self) -> None:
        """Publish the outcome of finished requests; called from the runtime loop."""
        still_pending = []
        for request_id, future in self._pending:
            if not future.done():
                still_pending.append((request_id, future))
                continue
            self._finalize_one(request_id, future)
        self._pending = still_pending

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
        self._pending = []

    def _finalize_one(
        self,
        request_id: int,
        future: concurrent.futures.Future[PostureAnalysis],
    ) -> None:
        if future.cancelled():
            return
        if request_id != self._generation:
            self._logger.info("Discarding stale posture result %d", request_id)
            return

        error = future.exception()
        if isinstance(error, ActionError):
            self._ui.publish_posture(POSTURE_FAILED, request_id=request_id, error=error.message)
            return
        if error is not None:
            self._logger.error("Posture worker failed: %s", error, exc_info=error)
            self._ui.publish_posture(
                POSTURE_FAILED,
                request_id=request_id,
                error=ANALYZE_POSTURE_ERROR_MESSAGE,
            )
            return

        self._ui.publish_posture(
            POSTURE_COMPLETED,
            request_id=request_id,
            analysis=future.result(),
        )
