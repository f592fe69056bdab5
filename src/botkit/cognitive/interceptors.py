"""Ordered async transforms applied to requests and responses."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Generic, TypeVar

from botkit.cognitive.signal import AbortSignal

T = TypeVar("T")

Interceptor = Callable[[T, AbortSignal], Awaitable[T]]


class InterceptorManager(Generic[T]):
    def __init__(self) -> None:
        self._interceptors: dict[int, Interceptor[T]] = {}
        self._next_id = 0

    def __len__(self) -> int:
        return len(self._interceptors)

    def use(self, interceptor: Interceptor[T]) -> int:
        interceptor_id = self._next_id
        self._next_id += 1
        self._interceptors[interceptor_id] = interceptor
        return interceptor_id

    def eject(self, interceptor_id: int) -> None:
        self._interceptors.pop(interceptor_id, None)

    def clear(self) -> None:
        self._interceptors.clear()

    async def run(self, value: T, signal: AbortSignal) -> T:
        for interceptor in list(self._interceptors.values()):
            signal.throw_if_aborted()
            value = await interceptor(value, signal)
        return value
