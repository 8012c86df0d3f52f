"""Named, cancelable polling loops.

Each named task runs as a single asyncio task that awaits one cycle, then
sleeps for the interval, then re-checks its flags. Cycles of the same name
therefore never overlap, and the effective period is "cycle duration plus
interval" rather than a fixed wall-clock tick.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any

_logger = logging.getLogger(__name__)

PollFn = Callable[[], Awaitable[Any] | Any]
SleepFn = Callable[[float], Awaitable[Any]]


@dataclass(slots=True, eq=False)
class PollTask:
    """Bookkeeping for one named loop.

    ``remaining_budget`` is ``None`` for an unbounded loop. It is decremented
    once per executed cycle (failed cycles included); ticks skipped while
    paused do not count.
    """

    name: str
    fn: PollFn
    interval_millis: int
    remaining_budget: int | None = None
    paused: bool = False
    stop_requested: bool = False
    exhausted: bool = False
    cycles: int = 0
    failures: int = 0
    runner: asyncio.Task[None] | None = field(default=None, repr=False)

    @property
    def interval_seconds(self) -> float:
        return self.interval_millis / 1000.0


class PollingScheduler:
    """Owns zero or more independently named repeating tasks.

    Parameters
    ----------
    sleep
        Awaitable delay used between cycles. Defaults to
        :func:`asyncio.sleep`; tests inject a virtual clock here.
    on_error
        Called as ``on_error(name, exc)`` when a cycle raises. The loop keeps
        going either way.
    on_exhausted
        Called as ``on_exhausted(name)`` after a bounded task has run its
        last cycle.
    """

    def __init__(
        self,
        *,
        sleep: SleepFn = asyncio.sleep,
        on_error: Callable[[str, Exception], None] | None = None,
        on_exhausted: Callable[[str], None] | None = None,
    ) -> None:
        self._sleep = sleep
        self._on_error = on_error
        self._on_exhausted = on_exhausted
        self._tasks: dict[str, PollTask] = {}

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(
        self,
        name: str,
        fn: PollFn,
        interval_millis: int,
        budget: int | None = None,
    ) -> PollTask:
        """Start (or restart) the loop called ``name``.

        A loop already registered under ``name`` is cancelled first, so at
        most one loop per name is ever running. Must be called from inside
        a running event loop.
        """
        if interval_millis <= 0:
            raise ValueError(f"interval_millis must be positive, got {interval_millis}")
        if budget is not None and budget <= 0:
            raise ValueError(f"budget must be positive or None, got {budget}")

        previous = self._tasks.pop(name, None)
        if previous is not None:
            _logger.debug("Restarting poller %s", name)
            self._cancel(previous)

        poll = PollTask(name=name, fn=fn, interval_millis=interval_millis, remaining_budget=budget)
        self._tasks[name] = poll
        poll.runner = asyncio.get_running_loop().create_task(self._run(poll), name=f"poll:{name}")
        _logger.info("Started poller %s every %dms (budget=%s)", name, interval_millis, budget)
        return poll

    def stop(self, name: str) -> None:
        """Let the in-flight cycle finish, then schedule nothing further.

        The task stays registered until its loop unwinds, so a later
        :meth:`start` under the same name still cancels it.
        """
        poll = self._active(name)
        if poll is None:
            return
        poll.stop_requested = True
        _logger.info("Stopping poller %s after %d cycles", name, poll.cycles)

    def pause(self, name: str) -> None:
        poll = self._active(name)
        if poll is not None:
            poll.paused = True

    def resume(self, name: str) -> None:
        poll = self._active(name)
        if poll is not None:
            poll.paused = False

    async def aclose(self) -> None:
        """Cancel every loop and wait for them to unwind."""
        polls = list(self._tasks.values())
        self._tasks.clear()
        runners = [p.runner for p in polls if p.runner is not None]
        for poll in polls:
            self._cancel(poll)
        if runners:
            await asyncio.gather(*runners, return_exceptions=True)

    async def wait(self, name: str) -> None:
        """Wait until the loop called ``name`` ends by stop or exhaustion."""
        poll = self._tasks.get(name)
        if poll is None or poll.runner is None:
            return
        await asyncio.wait({poll.runner})

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def _active(self, name: str) -> PollTask | None:
        poll = self._tasks.get(name)
        if poll is None or poll.stop_requested:
            return None
        return poll

    def get(self, name: str) -> PollTask | None:
        return self._active(name)

    def names(self) -> list[str]:
        return [name for name, poll in self._tasks.items() if not poll.stop_requested]

    def is_running(self, name: str) -> bool:
        return self._active(name) is not None

    def is_paused(self, name: str) -> bool:
        poll = self._active(name)
        return poll is not None and poll.paused

    def remaining_budget(self, name: str) -> int | None:
        poll = self._active(name)
        return poll.remaining_budget if poll is not None else None

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    @staticmethod
    def _cancel(poll: PollTask) -> None:
        poll.stop_requested = True
        if poll.runner is not None and not poll.runner.done():
            poll.runner.cancel()

    async def _run(self, poll: PollTask) -> None:
        try:
            while not poll.stop_requested:
                if not poll.paused:
                    await self._run_cycle(poll)
                    if poll.remaining_budget is not None:
                        poll.remaining_budget -= 1
                        if poll.remaining_budget <= 0 and not poll.stop_requested:
                            poll.exhausted = True
                            poll.stop_requested = True
                            break
                if poll.stop_requested:
                    break
                await self._sleep(poll.interval_seconds)
        finally:
            if self._tasks.get(poll.name) is poll:
                del self._tasks[poll.name]

        if poll.exhausted:
            _logger.info("Poller %s exhausted its budget after %d cycles", poll.name, poll.cycles)
            if self._on_exhausted is not None:
                try:
                    self._on_exhausted(poll.name)
                except Exception:
                    _logger.debug("on_exhausted callback failed", exc_info=True)

    async def _run_cycle(self, poll: PollTask) -> None:
        poll.cycles += 1
        try:
            result = poll.fn()
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            poll.failures += 1
            _logger.warning("Poller %s cycle %d failed: %s", poll.name, poll.cycles, exc)
            if self._on_error is not None:
                try:
                    self._on_error(poll.name, exc)
                except Exception:
                    _logger.debug("on_error callback failed", exc_info=True)
