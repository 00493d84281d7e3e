"""
Flow State - per-flow pending flag and latest-request-wins bookkeeping.

Every independent flow (image analysis, search, geocoding) gets its own
FlowState, so a pending search never blocks an analysis and vice versa.

Rules:
- Each run() gets a new generation number
- Starting a run abandons the in-flight one (cancel_stale=True)
- A result is only stored if its generation is still the newest, so a late
  response can never overwrite newer state
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class FlowOutcome(Generic[T]):
    """
    Result of one run().

    current is False when a newer request superseded this one; value is then
    whatever this request produced (None if it was abandoned before finishing).
    """
    value: Optional[T]
    current: bool


class FlowState(Generic[T]):

    def __init__(self, name: str, cancel_stale: bool = True):
        self.name = name
        self.cancel_stale = cancel_stale
        self.latest: Optional[T] = None
        self._generation = 0
        self._task: Optional[asyncio.Future] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def generation(self) -> int:
        return self._generation

    async def run(self, operation: Callable[[], Awaitable[T]]) -> FlowOutcome[T]:
        self._generation += 1
        generation = self._generation

        previous = self._task
        if self.cancel_stale and previous is not None and not previous.done():
            logger.info(f"Abandoning stale '{self.name}' request")
            previous.cancel()

        task = asyncio.ensure_future(operation())
        self._task = task

        try:
            value = await task
        except asyncio.CancelledError:
            if task.cancelled() and generation != self._generation:
                # Abandoned in favour of a newer request
                return FlowOutcome(value=None, current=False)
            raise

        if generation != self._generation:
            logger.info(f"Discarding late '{self.name}' response (superseded)")
            return FlowOutcome(value=value, current=False)

        self.latest = value
        return FlowOutcome(value=value, current=True)
