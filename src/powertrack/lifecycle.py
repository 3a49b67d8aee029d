"""
App lifecycle events and the activity counter that produces them.
"""

import logging
from enum import Enum
from threading import Lock

log = logging.getLogger(__name__)


class LifecycleEvent(Enum):
    ENTERED_FOREGROUND = "entered_foreground"
    ENTERED_BACKGROUND = "entered_background"


class ActivityCounter:
    """
    Turns per-activity start/stop callbacks into edge-triggered events.

    Listeners (anything with on_lifecycle_event) hear ENTERED_FOREGROUND
    when the count of started activities goes 0 -> 1 and
    ENTERED_BACKGROUND when it goes 1 -> 0, so an activity restarting
    inside one episode does not end the session.
    """

    def __init__(self, *listeners):
        self._lock = Lock()
        self._started = 0
        # Counting starts with the app visible, matching the trackers
        self._visible = True
        self._listeners = list(listeners)

    @property
    def started(self) -> int:
        return self._started

    def add_listener(self, listener) -> None:
        self._listeners.append(listener)

    def activity_started(self) -> None:
        with self._lock:
            self._started += 1
            fire = self._started == 1 and not self._visible
            if fire:
                self._visible = True
        if fire:
            self._emit(LifecycleEvent.ENTERED_FOREGROUND)

    def activity_stopped(self) -> None:
        with self._lock:
            if self._started == 0:
                log.debug("Ignoring stop with no started activities")
                return
            self._started -= 1
            fire = self._started == 0 and self._visible
            if fire:
                self._visible = False
        if fire:
            self._emit(LifecycleEvent.ENTERED_BACKGROUND)

    def _emit(self, event: LifecycleEvent) -> None:
        log.debug("Lifecycle: %s", event.value)
        for listener in self._listeners:
            listener.on_lifecycle_event(event)
