"""Cooperative cancellation token shared by a call, its interceptors and the transport."""

from __future__ import annotations

import time

from botkit.errors import AbortError


class AbortSignal:
    def __init__(self, *, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._aborted = False
        self._reason: object = None

    @classmethod
    def timeout(cls, seconds: float) -> AbortSignal:
        return cls(deadline=time.monotonic() + seconds)

    @property
    def aborted(self) -> bool:
        if not self._aborted and self._deadline is not None and time.monotonic() >= self._deadline:
            self._aborted = True
            self._reason = TimeoutError("signal timed out")
        return self._aborted

    @property
    def reason(self) -> object:
        return self._reason if self.aborted else None

    def abort(self, reason: object = None) -> None:
        if self.aborted:
            return
        self._aborted = True
        self._reason = reason if reason is not None else AbortError()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, None when the signal has no deadline."""
        if self.aborted:
            return 0.0
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def throw_if_aborted(self) -> None:
        if self.aborted:
            raise AbortError(f"operation aborted: {self._reason}", reason=self._reason)
