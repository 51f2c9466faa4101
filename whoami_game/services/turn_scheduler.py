"""
Turn Scheduler

Keeps at most one pending timeout per room. Arming a room replaces whatever
was pending for it; the replaced task notices its stale token at its next
wake-up and exits without firing.
"""

import itertools
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..utils.game_logger import game_logger


@dataclass
class PendingTimer:
    token: int
    delay: float
    callback: Callable[[], None]
    label: str = "timeout"


class TurnScheduler:
    """
    Room-keyed single-slot timer.

    ``start_task`` and ``sleep`` are normally ``socketio.start_background_task``
    and ``socketio.sleep`` so timers run on whatever async mode the server
    uses. Tasks sleep in ``poll_interval`` slices, so a cancelled or replaced
    timer holds its task for at most one slice. With ``enabled`` False nothing
    is started and pending timers only fire through :meth:`fire`.
    """

    def __init__(self, start_task: Callable, sleep: Callable[[float], None], enabled: bool = True,
                 poll_interval: float = 1.0):
        self._start_task = start_task
        self._sleep = sleep
        self.enabled = enabled
        self.poll_interval = poll_interval
        self._pending: Dict[str, PendingTimer] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.Lock()

    def arm(self, room_id: str, delay: float, callback: Callable[[], None], label: str = "timeout") -> int:
        """Replace the room's pending timer. Returns the new token."""
        with self._lock:
            token = next(self._tokens)
            self._pending[room_id] = PendingTimer(token, delay, callback, label)

        game_logger.logger.debug(f"[timer-set] room={room_id} label={label} delay={delay}s token={token}")
        if self.enabled:
            self._start_task(self._run, room_id, token, delay)
        return token

    def cancel(self, room_id: str) -> bool:
        with self._lock:
            timer = self._pending.pop(room_id, None)
        if timer:
            game_logger.logger.debug(f"[timer-cancel] room={room_id} label={timer.label} token={timer.token}")
        return timer is not None

    def is_armed(self, room_id: str) -> bool:
        with self._lock:
            return room_id in self._pending

    def pending(self, room_id: str) -> Optional[PendingTimer]:
        with self._lock:
            return self._pending.get(room_id)

    def fire(self, room_id: str, token: Optional[int] = None) -> bool:
        """
        Run the room's pending callback now.

        With a token, only fires if that token is still the pending one.
        Returns whether a callback ran.
        """
        with self._lock:
            timer = self._pending.get(room_id)
            if timer is None or (token is not None and timer.token != token):
                return False
            del self._pending[room_id]

        game_logger.logger.debug(f"[timer-fire] room={room_id} label={timer.label} token={timer.token}")
        timer.callback()
        return True

    def _is_current(self, room_id: str, token: int) -> bool:
        with self._lock:
            timer = self._pending.get(room_id)
            return timer is not None and timer.token == token

    def _run(self, room_id: str, token: int, delay: float) -> None:
        remaining = delay
        while remaining > 0:
            step = min(self.poll_interval, remaining)
            self._sleep(step)
            remaining -= step
            if not self._is_current(room_id, token):
                return
        try:
            self.fire(room_id, token)
        except Exception as e:
            game_logger.log_error(e, 'timer_fire', room_id=room_id)
