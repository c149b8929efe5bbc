"""Single-keystroke input for the terminal front end.

Provides a background thread that reads individual keystrokes from stdin
without requiring the user to press Enter, and hands each one to a
callback on the asyncio event loop.  Session state is therefore only ever
touched from the loop thread.

**Platform support:** Linux and macOS.  Requires :mod:`tty` and
:mod:`termios`, which are only available on POSIX systems, and a real TTY
on stdin.  Elsewhere the listener does not start; the console falls back
to reading whole lines.
"""

import asyncio
import logging
import select
import sys
import threading
import typing


logger = logging.getLogger(__name__)


def keystrokes_supported () -> typing.Tuple[bool, typing.Optional[str]]:

	"""Return ``(supported, reason)`` for single-keystroke input on this terminal.

	``reason`` is a short explanation when unsupported, else ``None``.
	"""

	try:
		import termios  # noqa: PLC0415
		import tty  # noqa: PLC0415, F401
	except ImportError:
		return False, (
			"The 'tty' and 'termios' modules are not available on this platform. "
			"Single-key input requires a POSIX operating system (Linux or macOS)."
		)

	try:
		if not sys.stdin.isatty():
			return False, "stdin is not a TTY (running in a pipe or non-interactive context)"

		fd = sys.stdin.fileno()
		saved = termios.tcgetattr(fd)
		termios.tcsetattr(fd, termios.TCSADRAIN, saved)

	except (OSError, ValueError) as e:
		return False, f"Single-key input requires an interactive terminal: {e}"

	return True, None


class KeystrokeListener:

	"""Background daemon thread that forwards single keystrokes to the event loop.

	Puts stdin into *cbreak* mode so each keypress is delivered immediately.
	Each character is passed to ``callback`` via
	``loop.call_soon_threadsafe``.  Terminal settings are always restored
	when the thread exits.

	Example::

		listener = KeystrokeListener(app.handle_key, asyncio.get_running_loop())
		listener.start()
		...
		listener.stop()
	"""

	def __init__ (self, callback: typing.Callable[[str], typing.Any], loop: asyncio.AbstractEventLoop) -> None:

		self.callback = callback
		self.loop = loop
		self._thread: typing.Optional[threading.Thread] = None
		self._running: bool = False

		#: ``True`` after a successful :meth:`start` on a supported terminal.
		self.active: bool = False


	def start (self) -> bool:

		"""Start listening. Returns False (and logs why) when the terminal cannot support it."""

		if self._running:
			return True

		supported, reason = keystrokes_supported()

		if not supported:
			logger.warning(f"Single-key input unavailable - falling back to line input. {reason}")
			return False

		self._running = True
		self.active = True
		self._thread = threading.Thread(
			target = self._listen,
			name   = "dictation-keystroke-listener",
			daemon = True,
		)
		self._thread.start()

		return True


	def stop (self) -> None:

		"""Signal the listener to stop; the thread exits within one poll interval."""

		self._running = False


	def _listen (self) -> None:

		import termios  # noqa: PLC0415
		import tty  # noqa: PLC0415

		fd = sys.stdin.fileno()
		old_settings = termios.tcgetattr(fd)

		try:
			tty.setcbreak(fd)

			while self._running:
				ready, _, _ = select.select([sys.stdin], [], [], 0.1)
				if ready:
					char = sys.stdin.read(1)
					if char:
						self.loop.call_soon_threadsafe(self.callback, char)

		except Exception:
			logger.exception("Keystroke listener stopped unexpectedly")

		finally:
			termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
			self.active = False
			self._running = False
