"""Logical clocks for delayed callbacks.

Everything that happens "later" in a session (note-on, note-off, the end
of a playback run, the auto-play after generating) goes through a
:class:`Clock`.  Two implementations are provided:

- :class:`AsyncioClock` schedules real delayed callbacks on the running
  asyncio event loop.  Callbacks run on the loop thread one at a time, so
  nothing here needs a lock.
- :class:`ManualClock` keeps virtual time and fires callbacks only when
  :meth:`ManualClock.advance` is called, which makes playback fully
  deterministic in tests.
"""

import asyncio
import dataclasses
import heapq
import itertools
import logging
import typing


logger = logging.getLogger(__name__)


Action = typing.Callable[[], typing.Any]


@typing.runtime_checkable
class Clock (typing.Protocol):

	"""
	Protocol for anything that can run an action after a delay.
	"""

	def schedule_at (self, offset_ms: float, action: Action) -> typing.Any:

		"""Run ``action`` ``offset_ms`` milliseconds from now and return a cancel handle."""

		...


	def cancel (self, handle: typing.Any) -> None:

		"""Prevent a pending action from running. Unknown or spent handles are ignored."""

		...


class AsyncioClock:

	"""
	Clock backed by ``loop.call_later`` on an asyncio event loop.
	"""

	def __init__ (self, loop: typing.Optional[asyncio.AbstractEventLoop] = None) -> None:

		"""Bind to ``loop``, or to the running loop on first use when omitted."""

		self._loop = loop


	@property
	def loop (self) -> asyncio.AbstractEventLoop:

		if self._loop is None:
			self._loop = asyncio.get_running_loop()

		return self._loop


	def schedule_at (self, offset_ms: float, action: Action) -> asyncio.TimerHandle:

		if offset_ms < 0:
			raise ValueError("Schedule offset cannot be negative")

		return self.loop.call_later(offset_ms / 1000.0, action)


	def cancel (self, handle: typing.Any) -> None:

		if handle is not None:
			handle.cancel()


@dataclasses.dataclass (order=True)
class ScheduledAction:

	"""
	An action waiting in a :class:`ManualClock` queue.
	"""

	time_ms: float
	counter: int
	action: Action = dataclasses.field(compare=False)
	cancelled: bool = dataclasses.field(compare=False, default=False)


class ManualClock:

	"""Virtual-time clock for deterministic scheduling.

	Actions fire in time order; actions due at the same instant fire in the
	order they were scheduled.  Actions scheduled while the clock is
	advancing are picked up in the same advance if they fall due within it.

	Example::

		clock = ManualClock()
		clock.schedule_at(600, lambda: print("second note"))
		clock.advance(599)   # nothing yet
		clock.advance(1)     # prints "second note"
	"""

	def __init__ (self) -> None:

		self.now_ms: float = 0.0
		self._queue: typing.List[ScheduledAction] = []
		self._counter = itertools.count()


	@property
	def pending (self) -> int:

		"""Number of actions still waiting to fire."""

		return sum(1 for scheduled in self._queue if not scheduled.cancelled)


	def schedule_at (self, offset_ms: float, action: Action) -> ScheduledAction:

		if offset_ms < 0:
			raise ValueError("Schedule offset cannot be negative")

		scheduled = ScheduledAction(
			time_ms = self.now_ms + offset_ms,
			counter = next(self._counter),
			action = action
		)

		heapq.heappush(self._queue, scheduled)

		return scheduled


	def cancel (self, handle: typing.Any) -> None:

		if isinstance(handle, ScheduledAction):
			handle.cancelled = True


	def advance (self, ms: float) -> None:

		"""Move virtual time forward by ``ms``, firing every action that falls due."""

		if ms < 0:
			raise ValueError("Cannot advance a clock backwards")

		target = self.now_ms + ms

		while self._queue and self._queue[0].time_ms <= target:

			scheduled = heapq.heappop(self._queue)
			self.now_ms = scheduled.time_ms

			if scheduled.cancelled:
				continue

			logger.debug(f"Firing action at {scheduled.time_ms:.1f} ms")
			scheduled.action()

		self.now_ms = target


	def run_all (self) -> None:

		"""Advance until the queue is empty."""

		while self._queue:
			self.advance(self._queue[0].time_ms - self.now_ms)
