"""Terminal front end for a dictation session.

Maps single keystrokes onto session operations and prints the state the
user needs between them: selections, note buttons, score and feedback.
Notation is drawn by the session's renderer, normally to the same stream.
The key bindings are listed in ``HELP_TEXT``.
"""

import asyncio
import logging
import sys
import typing

import dictation.intervals
import dictation.keystroke
import dictation.pitch
import dictation.playback
import dictation.session


logger = logging.getLogger(__name__)


NOTE_KEYS = "1234567890-="

KEY_CHOICES: typing.List[str] = list(dictation.pitch.PC_TO_NOTE_NAME)

HELP_TEXT = """\
  1 2 3 4 5 6 7 8 9 0 - =   enter the n-th note of the current scale
  g   generate a new sequence       p / r   play / replay
  s   submit (Enter also submits)   c       clear the attempt
  k K next / previous key           m       next scale
  t   next tempo                    [ ]     shorter / longer sequence
  ?   show this help                q       quit"""


def _next_in (choices: typing.Sequence[str], current: str, step: int = 1) -> str:

	"""Return the choice ``step`` places after ``current``, wrapping around."""

	if current not in choices:
		return choices[0]

	return choices[(list(choices).index(current) + step) % len(choices)]


class ConsoleApp:

	"""Keyboard-driven input surface for a :class:`~dictation.session.Session`."""

	def __init__ (self, session: dictation.session.Session, stream: typing.Optional[typing.TextIO] = None) -> None:

		self.session = session
		self.stream = stream if stream is not None else sys.stderr
		self.running = False

		self._stopped: typing.Optional[asyncio.Event] = None

		self._actions: typing.Dict[str, typing.Callable[[], typing.Any]] = {
			"g": self.session.generate,
			"p": self.session.play,
			"r": self.session.replay,
			"s": self.session.submit,
			"\n": self.session.submit,
			"\r": self.session.submit,
			"c": self.session.clear,
			"k": lambda: self._cycle_key(1),
			"K": lambda: self._cycle_key(-1),
			"m": self._cycle_scale,
			"t": self._cycle_tempo,
			"[": lambda: self.session.set_length(self.session.length - 1),
			"]": lambda: self.session.set_length(self.session.length + 1),
			"?": self.show_help,
			"q": self.quit,
		}

		session.events.on("scale_changed", lambda notes: self.show_buttons())
		session.events.on("feedback", self._on_feedback)
		session.events.on("playback_start", lambda: self._write("Playing..."))
		session.events.on("playback_stop", lambda: self._write("Ready."))


	# ------------------------------------------------------------------
	# Output
	# ------------------------------------------------------------------

	def status_line (self) -> str:

		"""Current selections and score on one line."""

		session = self.session

		return (
			f"Key: {dictation.pitch.display_key_name(session.key)}  "
			f"Scale: {session.scale}  "
			f"Length: {session.length}  "
			f"Tempo: {session.tempo}  "
			f"Score: {session.score}"
		)


	def button_line (self) -> str:

		"""The note buttons for the current scale with the key that enters each."""

		notes = self.session.available_notes[:len(NOTE_KEYS)]

		return "  ".join(f"{key}:{note}" for key, note in zip(NOTE_KEYS, notes))


	def show_status (self) -> None:

		self._write(self.status_line())


	def show_buttons (self) -> None:

		self._write(self.button_line())


	def show_help (self) -> None:

		self._write(HELP_TEXT)


	def _on_feedback (self, is_correct: bool, message: str, score: int) -> None:

		self._write(f"{message}  Score: {score}")


	def _write (self, text: str) -> None:

		self.stream.write(text + "\n")
		self.stream.flush()


	# ------------------------------------------------------------------
	# Input
	# ------------------------------------------------------------------

	def handle_key (self, char: str) -> None:

		"""Run the action bound to one keystroke. Unbound keys are ignored."""

		if char and char in NOTE_KEYS:
			index = NOTE_KEYS.index(char)
			notes = self.session.available_notes

			if index < len(notes):
				self.session.add_note(notes[index])

			return

		action = self._actions.get(char)

		if action is None:
			logger.debug(f"Unbound key {char!r}")
			return

		action()

		if char in "kKmt[]":
			self.show_status()


	def quit (self) -> None:

		self.running = False

		if self._stopped is not None:
			self._stopped.set()


	async def run (self) -> None:

		"""Read keys until ``q`` (or end of input in line mode)."""

		loop = asyncio.get_running_loop()

		self.running = True
		self._stopped = asyncio.Event()

		self.show_help()
		self.show_status()
		self.show_buttons()

		listener = dictation.keystroke.KeystrokeListener(self.handle_key, loop)

		try:
			if listener.start():
				await self._stopped.wait()
			else:
				await self._run_line_mode(loop)
		finally:
			listener.stop()
			self.running = False


	async def _run_line_mode (self, loop: asyncio.AbstractEventLoop) -> None:

		"""Fallback input: each line typed is handled character by character."""

		while self.running:

			line = await loop.run_in_executor(None, sys.stdin.readline)

			if not line:
				break

			for char in line.rstrip("\n") or "\n":
				self.handle_key(char)
				if not self.running:
					break


	def _cycle_key (self, step: int) -> None:

		self.session.select_key(_next_in(KEY_CHOICES, self.session.key, step))


	def _cycle_scale (self) -> None:

		self.session.select_scale(_next_in(dictation.intervals.scale_names(), self.session.scale))


	def _cycle_tempo (self) -> None:

		self.session.set_tempo(_next_in(list(dictation.playback.TEMPOS), self.session.tempo))
