"""Sequence playback with fixed inter-onset timing.

The scheduler turns a note sequence into delayed note-on actions on a
:class:`~dictation.clock.Clock`.  Note ``i`` sounds at ``i * tempo_ms``
for ``0.8 * tempo_ms``; one full ``tempo_ms`` after the last note-on the
scheduler returns to idle.

Only one playback run can be in flight.  A ``play()`` request made while
a run is sounding is dropped, not queued, which is what keeps a user from
stacking overlapping copies of the sequence by clicking repeatedly.

Events (see :class:`~dictation.event_emitter.EventEmitter`):

- ``"start"`` ``(sequence, tempo_ms)`` when a run begins
- ``"note"`` ``(index, note)`` as each note is sent to the player
- ``"stop"`` ``(cancelled)`` when the scheduler returns to idle
"""

import enum
import logging
import typing

import dictation.clock
import dictation.event_emitter
import dictation.pitch


logger = logging.getLogger(__name__)


TEMPOS: typing.Dict[str, int] = {
	"slow": 1000,
	"medium": 600,
	"fast": 350,
}

DEFAULT_TEMPO = "medium"

NOTE_LENGTH_RATIO = 0.8


def resolve_tempo (tempo: typing.Union[str, int, float, None]) -> int:

	"""Return the inter-onset interval in milliseconds for a tempo selection.

	Named tempos are looked up in :data:`TEMPOS`; a positive number is
	taken as milliseconds.  Anything else falls back to ``"medium"``.

	Example:
		```python
		resolve_tempo("fast")     # → 350
		resolve_tempo("presto")   # → 600
		resolve_tempo(800)        # → 800
		```
	"""

	if isinstance(tempo, str):
		return TEMPOS.get(tempo, TEMPOS[DEFAULT_TEMPO])

	if isinstance(tempo, (int, float)) and not isinstance(tempo, bool) and tempo > 0:
		return int(tempo)

	return TEMPOS[DEFAULT_TEMPO]


class PlaybackState (enum.Enum):

	"""Whether a playback run is in flight."""

	IDLE = "idle"
	PLAYING = "playing"


class NotePlayer (typing.Protocol):

	"""The part of an audio player the scheduler needs."""

	def play_note (self, note: dictation.pitch.Note, duration_ms: float) -> None:

		...


class PlaybackScheduler:

	"""Plays note sequences through an audio player on a logical clock.

	State moves ``IDLE → PLAYING → IDLE``.  Runs complete on their own;
	:meth:`cancel` is available for callers that explicitly want to cut a
	run short.

	Example::

		clock = dictation.clock.ManualClock()
		scheduler = PlaybackScheduler(player, clock)
		scheduler.play([Note("C"), Note("E")], 600)
		clock.advance(1200)
		scheduler.state  # → PlaybackState.IDLE
	"""

	def __init__ (self, player: NotePlayer, clock: dictation.clock.Clock) -> None:

		self.player = player
		self.clock = clock
		self.state = PlaybackState.IDLE
		self.events = dictation.event_emitter.EventEmitter()

		self._handles: typing.List[typing.Any] = []


	@property
	def is_playing (self) -> bool:

		return self.state is PlaybackState.PLAYING


	def play (self, sequence: typing.Sequence[dictation.pitch.Note], tempo_ms: float) -> bool:

		"""Start playing ``sequence`` with ``tempo_ms`` between note onsets.

		Returns:
			True if a run was started, False if the request was dropped
			because the sequence is empty or a run is already playing.
		"""

		if not sequence:
			logger.debug("Nothing to play")
			return False

		if tempo_ms <= 0:
			raise ValueError("Tempo interval must be positive")

		# Check and set in one step; callbacks never interleave on the clock.
		if self.state is PlaybackState.PLAYING:
			logger.debug("Playback already in progress - request dropped")
			return False

		self.state = PlaybackState.PLAYING

		notes = list(sequence)
		duration_ms = tempo_ms * NOTE_LENGTH_RATIO
		last_index = len(notes) - 1

		logger.info(f"Playing {len(notes)} notes at {tempo_ms} ms per note")

		for index, note in enumerate(notes):
			handle = self.clock.schedule_at(
				index * tempo_ms,
				self._make_note_action(index, note, duration_ms, tempo_ms, index == last_index)
			)
			self._handles.append(handle)

		self._emit("start", notes, tempo_ms)

		return True


	def cancel (self) -> bool:

		"""Drop every pending action of the current run and return to idle.

		Notes already sent to the player are not silenced here.

		Returns:
			True if a run was cancelled, False if nothing was playing.
		"""

		if self.state is PlaybackState.IDLE:
			return False

		for handle in self._handles:
			self.clock.cancel(handle)

		logger.info("Playback cancelled")
		self._finish(cancelled=True)

		return True


	def _make_note_action (
		self,
		index: int,
		note: dictation.pitch.Note,
		duration_ms: float,
		tempo_ms: float,
		is_last: bool
	) -> dictation.clock.Action:

		"""Build the clock action that sounds one note of the run."""

		def action () -> None:

			try:
				self.player.play_note(note, duration_ms)
			except Exception:
				logger.exception(f"Error playing note {note}")

			if is_last:
				self._handles.append(self.clock.schedule_at(tempo_ms, self._on_run_complete))

			self._emit("note", index, note)

		return action


	def _on_run_complete (self) -> None:

		self._finish(cancelled=False)


	def _finish (self, cancelled: bool) -> None:

		self._handles = []
		self.state = PlaybackState.IDLE
		self._emit("stop", cancelled)


	def _emit (self, event_name: str, *args: typing.Any) -> None:

		"""Notify listeners. A failing listener is logged and cannot stall the run."""

		try:
			self.events.emit(event_name, *args)
		except Exception:
			logger.exception(f"Error in playback '{event_name}' listener")
