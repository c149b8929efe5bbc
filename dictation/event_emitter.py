import asyncio
import inspect
import logging
import typing


logger = logging.getLogger(__name__)


CallbackType = typing.Callable[..., typing.Any]


class EventEmitter:

	"""
	A simple event emitter for session and playback notifications.

	Sync listeners run immediately, in registration order.  Async listeners
	are started as tasks on the running event loop.
	"""

	def __init__ (self) -> None:

		"""
		Initialize an empty event registry.
		"""

		self._listeners: typing.Dict[str, typing.List[CallbackType]] = {}
		self._tasks: typing.Set[asyncio.Task] = set()


	def on (self, event_name: str, callback: CallbackType) -> None:

		"""
		Register a callback for an event name.
		"""

		self._listeners.setdefault(event_name, []).append(callback)


	def off (self, event_name: str, callback: CallbackType) -> None:

		"""
		Unregister a previously registered callback.

		Raises ``ValueError`` if the callback is not registered for the event.
		"""

		if event_name not in self._listeners or callback not in self._listeners[event_name]:
			raise ValueError(f"Callback not registered for event {event_name!r}")

		self._listeners[event_name].remove(callback)


	def emit (self, event_name: str, *args: typing.Any, **kwargs: typing.Any) -> None:

		"""
		Emit an event to every listener registered for it.

		Async listeners need a running event loop; emitting to one without a
		loop raises ``RuntimeError``.
		"""

		for callback in list(self._listeners.get(event_name, [])):

			if inspect.iscoroutinefunction(callback):
				loop = asyncio.get_running_loop()
				task = loop.create_task(callback(*args, **kwargs))
				self._tasks.add(task)
				task.add_done_callback(self._on_task_done)

			else:
				callback(*args, **kwargs)


	def _on_task_done (self, task: asyncio.Task) -> None:

		"""Forget a finished async listener and log its exception, if any."""

		self._tasks.discard(task)

		if task.cancelled():
			return

		exc = task.exception()

		if exc is not None:
			logger.error(f"Error in async event listener {task.get_coro().__qualname__}", exc_info=exc)
