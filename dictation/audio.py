"""Audio output for exercises.

The session only needs two things from an audio player: a way to get the
output ready before the first note, and a way to sound one note for a
duration.  :class:`MidiAudioPlayer` does this over MIDI with mido, so
any hardware or software synth can voice the exercise.

Players must not block: ``play_note`` sends the note-on immediately and
leaves the note-off to the clock.
"""

import logging
import typing

import mido

import dictation.clock
import dictation.midi_utils
import dictation.pitch


logger = logging.getLogger(__name__)


@typing.runtime_checkable
class AudioPlayer (typing.Protocol):

	"""
	Protocol for the audio collaborator used by a session.
	"""

	def ensure_ready (self) -> None:

		"""Prepare the output. Safe to call any number of times."""

		...


	def play_note (self, note: dictation.pitch.Note, duration_ms: float) -> None:

		"""Sound ``note`` for roughly ``duration_ms`` milliseconds without blocking."""

		...


class MidiAudioPlayer:

	"""Plays notes as MIDI note-on/note-off pairs on an output port.

	The port is opened on the first :meth:`ensure_ready` call.  If no port
	can be opened, notes are dropped with a debug log and the exercise
	carries on silently.

	Re-triggering a pitch that is still sounding restarts it; the earlier
	note-off is then ignored so it cannot cut the new note short.
	"""

	def __init__ (
		self,
		clock: dictation.clock.Clock,
		output_device_name: typing.Optional[str] = None,
		channel: int = 0,
		velocity: int = 100,
		octave: int = dictation.pitch.DEFAULT_OCTAVE,
		interactive: bool = True
	) -> None:

		"""
		Parameters:
			clock: Clock used to schedule note-offs.
			output_device_name: MIDI output name. When omitted the only
				available port is used, or the user is asked to choose.
			channel: MIDI channel (0-15).
			velocity: Note-on velocity (1-127).
			octave: Octave every note is played in (4 = middle C octave).
			interactive: Allow a console prompt when several ports exist.
		"""

		if not 0 <= channel <= 15:
			raise ValueError("MIDI channel must be between 0 and 15")

		if not 1 <= velocity <= 127:
			raise ValueError("MIDI velocity must be between 1 and 127")

		self.clock = clock
		self.output_device_name = output_device_name
		self.channel = channel
		self.velocity = velocity
		self.octave = octave
		self.interactive = interactive

		self.midi_out: typing.Any = None
		self._ready = False
		self._sounding: typing.Dict[int, int] = {}
		self._generation = 0


	@property
	def ready (self) -> bool:

		return self._ready


	def ensure_ready (self) -> None:

		"""Open the MIDI output once. Later calls do nothing."""

		if self._ready:
			return

		self._ready = True

		device_name, midi_out = dictation.midi_utils.select_output_device(self.output_device_name, self.interactive)

		if device_name:
			self.output_device_name = device_name
			self.midi_out = midi_out


	def play_note (self, note: dictation.pitch.Note, duration_ms: float) -> None:

		"""Send a note-on now and schedule its note-off after ``duration_ms``."""

		if not self._ready:
			self.ensure_ready()

		if self.midi_out is None:
			logger.debug(f"No MIDI output - skipping {note}")
			return

		pitch = note.midi_pitch(self.octave)

		if pitch in self._sounding:
			self._send("note_off", pitch)

		self._generation += 1
		generation = self._generation
		self._sounding[pitch] = generation

		self._send("note_on", pitch, self.velocity)
		self.clock.schedule_at(duration_ms, lambda: self._release(pitch, generation))


	def close (self) -> None:

		"""Silence sounding notes and close the output port."""

		if self.midi_out is None:
			return

		for pitch in list(self._sounding):
			try:
				self._send("note_off", pitch)
			except Exception:
				logger.exception(f"Failed to release MIDI note {pitch}")

		self._sounding = {}
		self.midi_out.close()
		self.midi_out = None
		self._ready = False


	def _release (self, pitch: int, generation: int) -> None:

		"""Clock action: end a note unless it has been re-triggered since."""

		if self._sounding.get(pitch) != generation or self.midi_out is None:
			return

		del self._sounding[pitch]

		try:
			self._send("note_off", pitch)
		except Exception:
			logger.exception(f"Failed to release MIDI note {pitch}")


	def _send (self, message_type: str, pitch: int, velocity: int = 0) -> None:

		self.midi_out.send(mido.Message(message_type, channel=self.channel, note=pitch, velocity=velocity))
