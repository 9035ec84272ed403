"""Failed-login tracking per email address."""
import time
from threading import Lock
from typing import Callable, Dict, Tuple

from fitmeal.utilities import config


class LoginThrottle:
    """After ``max_attempts`` failures an email is locked until ``lockout_seconds``
    have passed since its last failed attempt."""

    def __init__(self, max_attempts: int = config.LOGIN_MAX_ATTEMPTS,
                 lockout_seconds: int = config.LOGIN_LOCKOUT_MINUTES * 60,
                 clock: Callable[[], float] = time.monotonic):
        self.max_attempts = max_attempts
        self.lockout_seconds = lockout_seconds
        self._clock = clock
        self._attempts: Dict[str, Tuple[int, float]] = {}
        self._lock = Lock()

    def allowed(self, email: str) -> bool:
        with self._lock:
            entry = self._attempts.get(email)
            if entry is None:
                return True
            count, last = entry
            if self._clock() - last > self.lockout_seconds:
                del self._attempts[email]
                return True
            return count < self.max_attempts

    def record_failure(self, email: str) -> None:
        with self._lock:
            count, _ = self._attempts.get(email, (0, 0.0))
            self._attempts[email] = (count + 1, self._clock())

    def reset(self, email: str) -> None:
        with self._lock:
            self._attempts.pop(email, None)

    def clear(self) -> None:
        with self._lock:
            self._attempts.clear()
