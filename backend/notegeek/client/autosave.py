from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class DebouncedSaver:
    """Call ``save`` once edits stop arriving for ``delay`` seconds.

    Only the latest payload is saved. There is no retry: a failed save is logged
    and kept on ``last_error`` until the next successful one.
    """

    def __init__(self, save: Callable[[Any], Any], delay: float = 1.0) -> None:
        self._save = save
        self._delay = delay
        self._timer: threading.Timer | None = None
        self._pending: Any = None
        self._has_pending = False
        self._lock = threading.Lock()
        self.last_error: Exception | None = None
        self.save_count = 0

    @property
    def has_pending(self) -> bool:
        return self._has_pending

    def schedule(self, payload: Any) -> None:
        with self._lock:
            self._pending = payload
            self._has_pending = True
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._delay, self.flush)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Save the pending payload now, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            if not self._has_pending:
                return
            payload = self._pending
            self._pending = None
            self._has_pending = False

        try:
            self._save(payload)
        except Exception as err:
            logger.error("Auto-save failed: %s", err)
            self.last_error = err
            return
        self.last_error = None
        self.save_count += 1

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
            self._has_pending = False
