"""
Status callbacks used to report split progress.
"""

from typing import Callable, Dict
import logging

logger = logging.getLogger(__name__)

StatusCallback = Callable[[str], None]


class StatusBroadcaster:
    """
    Registry of named status callbacks.

    Callbacks run synchronously on the caller's thread, once per status.
    A slow callback stalls the caller, and an exception raised by a
    callback propagates to it.
    """

    def __init__(self) -> None:
        self._callbacks: Dict[str, StatusCallback] = {}

    def register(self, observer_id: str, callback: StatusCallback) -> None:
        """Register ``callback`` under ``observer_id``, replacing any earlier one."""
        if observer_id in self._callbacks:
            logger.debug(f"Replacing status callback '{observer_id}'")
        self._callbacks[observer_id] = callback

    def dispatch(self, status: str) -> None:
        logger.debug(status)
        for callback in list(self._callbacks.values()):
            callback(status)
