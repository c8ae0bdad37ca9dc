"""single-threaded event queue with cancelable deferred tasks."""

import asyncio
import heapq
import itertools
import time
from collections import deque
from typing import Any, Callable, Deque, List, Optional, Tuple


class ManualClock:
    """a clock that only moves when told to. used by replaying hosts and tests."""

    def __init__(self, start: float = 0.0):
        self._now = start

    def __call__(self) -> float:
        return self._now

    def advance(self, seconds: float):
        self._now += seconds


class DeferredTask:
    """a callback scheduled to run at a given clock time."""

    def __init__(self, due: float, callback: Callable, args: Tuple[Any, ...]):
        self.due = due
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.done = False

    def cancel(self):
        self.cancelled = True

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.done)

    def _run(self):
        self.done = True
        self.callback(*self.args)


class EventQueue:
    """
    one logical event queue.

    handlers posted with post() run in FIFO order, each to completion before the
    next starts. call_later() schedules a DeferredTask which runs once its due
    time has passed; a task can be cancelled until then.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.clock = clock or time.monotonic
        self._events: Deque[Tuple[Callable, Tuple[Any, ...]]] = deque()
        self._timers: List[Tuple[float, int, DeferredTask]] = []
        self._seq = itertools.count()
        self._running = False
        self._stopped = False

    def now(self) -> float:
        return self.clock()

    def post(self, callback: Callable, *args):
        self._events.append((callback, args))

    def call_later(self, delay: float, callback: Callable, *args) -> DeferredTask:
        task = DeferredTask(self.now() + delay, callback, args)
        heapq.heappush(self._timers, (task.due, next(self._seq), task))
        return task

    @property
    def idle(self) -> bool:
        return not self._events and not any(t.pending for _, _, t in self._timers)

    def run_pending(self) -> int:
        """
        run posted handlers and every deferred task that is due.

        handlers posted while draining run in the same call. returns the number
        of callbacks executed.
        """
        if self._running:
            # re-entrant call from inside a handler, the outer loop drains
            return 0
        self._running = True
        count = 0
        try:
            while True:
                if self._events:
                    callback, args = self._events.popleft()
                    callback(*args)
                    count += 1
                    continue
                task = self._pop_due()
                if task is None:
                    break
                task._run()
                count += 1
        finally:
            self._running = False
        return count

    def _pop_due(self) -> Optional[DeferredTask]:
        now = self.now()
        while self._timers:
            due, _, task = self._timers[0]
            if task.cancelled:
                heapq.heappop(self._timers)
                continue
            if due > now:
                return None
            heapq.heappop(self._timers)
            return task
        return None

    def stop(self):
        self._stopped = True

    async def run_forever(self, poll_interval: float = 0.005):
        """drive the queue from an asyncio loop until stop() is called."""
        self._stopped = False
        while not self._stopped:
            self.run_pending()
            await asyncio.sleep(poll_interval)


class Throttle:
    """
    rate-limit a callback to once per interval.

    the first call in a quiet period runs at once; calls inside the window are
    coalesced and the latest arguments run when the window closes.
    """

    def __init__(self, queue: EventQueue, interval: float, callback: Callable):
        self.queue = queue
        self.interval = interval
        self.callback = callback
        self._window: Optional[DeferredTask] = None
        self._pending: Optional[Tuple[Any, ...]] = None

    def __call__(self, *args):
        if self._window is not None and self._window.pending:
            self._pending = args
            return
        self._fire(args)

    def _fire(self, args: Tuple[Any, ...]):
        self._pending = None
        self._window = self.queue.call_later(self.interval, self._close_window)
        self.callback(*args)

    def _close_window(self):
        self._window = None
        if self._pending is not None:
            self._fire(self._pending)

    def cancel(self):
        if self._window is not None:
            self._window.cancel()
        self._window = None
        self._pending = None
