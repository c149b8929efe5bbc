"""One user's exercise session.

A :class:`Session` owns everything that changes while someone practises:
the selected key, scale, length and tempo, the current answer sequence,
the notes entered so far, the score and the playback state.  It talks to
the outside world only through three collaborators - an audio player, a
notation renderer and a clock - so several sessions can run side by side
and tests can drive one without sound or wall-clock time.

A round looks like this::

	session.generate()        # new sequence, first note shown, auto-play after 500 ms
	session.add_note("E")     # user enters notes one by one
	session.add_note("C")
	session.submit()          # → True / False, score +10 when correct

Events (see :class:`~dictation.event_emitter.EventEmitter`):

- ``"scale_changed"`` ``(notes)`` whenever the key or scale changes
- ``"generated"`` ``(sequence)`` after each new sequence
- ``"attempt_changed"`` ``(attempt)`` after a note is entered or the attempt is cleared
- ``"feedback"`` ``(is_correct, message, score)`` after each submit
- ``"playback_start"`` ``()`` / ``"playback_stop"`` ``()`` around each playback run
"""

import logging
import random
import typing

import dictation.audio
import dictation.clock
import dictation.config
import dictation.event_emitter
import dictation.generator
import dictation.intervals
import dictation.notation
import dictation.pitch
import dictation.playback
import dictation.scales
import dictation.score
import dictation.verifier


logger = logging.getLogger(__name__)


TARGET_SURFACE = "notation"
ATTEMPT_SURFACE = "attempt"

CORRECT_MESSAGE = "Correct!"
INCORRECT_MESSAGE = "Try Again!"


class Session:

	"""Explicit state and operations for a melodic dictation session."""

	def __init__ (
		self,
		settings: typing.Optional[dictation.config.Settings] = None,
		player: typing.Optional[dictation.audio.AudioPlayer] = None,
		renderer: typing.Optional[dictation.notation.NotationRenderer] = None,
		clock: typing.Optional[dictation.clock.Clock] = None,
		rng: typing.Optional[random.Random] = None
	) -> None:

		"""Create a session.

		Parameters:
			settings: Initial selections and timing. Defaults to :class:`~dictation.config.Settings`.
			player: Audio collaborator. Defaults to a non-interactive
				:class:`~dictation.audio.MidiAudioPlayer` configured from ``settings``.
			renderer: Notation collaborator. Defaults to a :class:`~dictation.notation.TextStaffRenderer`.
			clock: Clock for delayed actions. Defaults to an :class:`~dictation.clock.AsyncioClock`.
			rng: Random source for sequences. Defaults to ``random.Random(settings.seed)``.
		"""

		if settings is None:
			settings = dictation.config.Settings()

		settings.validate()

		if clock is None:
			clock = dictation.clock.AsyncioClock()

		if player is None:
			player = dictation.audio.MidiAudioPlayer(
				clock,
				output_device_name = settings.output_device,
				channel = settings.channel,
				velocity = settings.velocity,
				octave = settings.octave,
				interactive = False
			)

		if renderer is None:
			renderer = dictation.notation.TextStaffRenderer()

		self.settings = settings
		self.player = player
		self.renderer = renderer
		self.clock = clock
		self.rng = rng if rng is not None else random.Random(settings.seed)
		self.events = dictation.event_emitter.EventEmitter()

		self.scheduler = dictation.playback.PlaybackScheduler(player, clock)
		self.scheduler.events.on("start", lambda notes, tempo_ms: self.events.emit("playback_start"))
		self.scheduler.events.on("stop", lambda cancelled: self.events.emit("playback_stop"))

		self.score_tracker = dictation.score.ScoreTracker()

		self.key = settings.key
		self.scale = settings.scale
		self.length = dictation.generator.clamp_length(settings.length, settings.min_length, settings.max_length)
		self.tempo = settings.tempo
		self.feedback = ""

		self._sequence: typing.List[dictation.pitch.Note] = []
		self._attempt: typing.List[dictation.pitch.Note] = []
		self._available_notes = dictation.scales.scale_notes(self.key, self.scale)
		self._auto_play_handle: typing.Any = None


	# ------------------------------------------------------------------
	# Read-only state
	# ------------------------------------------------------------------

	@property
	def sequence (self) -> typing.List[dictation.pitch.Note]:

		"""The current answer sequence (a copy)."""

		return list(self._sequence)

	@property
	def attempt (self) -> typing.List[dictation.pitch.Note]:

		"""Notes the user has entered since the last generate or clear (a copy)."""

		return list(self._attempt)

	@property
	def available_notes (self) -> typing.List[dictation.pitch.Note]:

		"""The note buttons for the selected key and scale."""

		return list(self._available_notes)

	@property
	def score (self) -> int:

		return self.score_tracker.score

	@property
	def tempo_ms (self) -> int:

		return dictation.playback.resolve_tempo(self.tempo)

	@property
	def is_playing (self) -> bool:

		return self.scheduler.is_playing

	@property
	def can_play (self) -> bool:

		"""Whether the play and replay controls should be enabled."""

		return bool(self._sequence) and not self.scheduler.is_playing

	@property
	def can_submit (self) -> bool:

		return bool(self._sequence) and bool(self._attempt)

	@property
	def can_clear (self) -> bool:

		return bool(self._attempt)


	# ------------------------------------------------------------------
	# Selections
	# ------------------------------------------------------------------

	def select_key (self, key: str) -> typing.List[dictation.pitch.Note]:

		"""Change the tonic and return the new set of note buttons."""

		dictation.pitch.key_name_to_pc(key)

		self.key = key

		return self._refresh_available_notes()


	def select_scale (self, scale: str) -> typing.List[dictation.pitch.Note]:

		"""Change the scale type and return the new set of note buttons."""

		dictation.intervals.get_intervals(scale)

		self.scale = scale

		return self._refresh_available_notes()


	def set_length (self, length: int) -> int:

		"""Set the length of future sequences, clamped into the configured range."""

		self.length = dictation.generator.clamp_length(length, self.settings.min_length, self.settings.max_length)

		return self.length


	def set_tempo (self, tempo: str) -> int:

		"""Select a named tempo and return its interval in milliseconds."""

		if tempo not in dictation.playback.TEMPOS:
			logger.warning(f"Unknown tempo {tempo!r} - using {dictation.playback.DEFAULT_TEMPO!r}")

		self.tempo = tempo

		return self.tempo_ms


	# ------------------------------------------------------------------
	# Exercise flow
	# ------------------------------------------------------------------

	def generate (self) -> typing.List[dictation.pitch.Note]:

		"""Start a new round.

		Draws a fresh sequence, shows only its first note, clears the
		attempt and feedback, then plays the whole sequence after
		``auto_play_delay_ms``.
		"""

		self._ensure_audio()

		self._sequence = dictation.generator.generate(
			self.key,
			self.scale,
			self.length,
			rng = self.rng,
			minimum = self.settings.min_length,
			maximum = self.settings.max_length
		)

		logger.info(f"New {len(self._sequence)}-note sequence in {self.key} {self.scale}")
		logger.debug(f"Sequence: {self._names(self._sequence)}")

		self._render(self._sequence[:1], TARGET_SURFACE)

		self._attempt = []
		self._render([], ATTEMPT_SURFACE)
		self.feedback = ""

		self.events.emit("generated", self.sequence)
		self.events.emit("attempt_changed", self.attempt)

		if self._auto_play_handle is not None:
			self.clock.cancel(self._auto_play_handle)

		self._auto_play_handle = self.clock.schedule_at(self.settings.auto_play_delay_ms, self._auto_play)

		return self.sequence


	def play (self) -> bool:

		"""Play the current sequence. Returns False when there is nothing to play or playback is busy."""

		return self.scheduler.play(self._sequence, self.tempo_ms)


	def replay (self) -> bool:

		"""Play the current sequence again."""

		return self.play()


	def add_note (self, note: dictation.pitch.NoteLike) -> typing.List[dictation.pitch.Note]:

		"""Append a note to the attempt, draw it and let the user hear it.

		Raises:
			ValueError: If the note is not one of the current note buttons.
		"""

		note = dictation.pitch.as_note(note)

		if note not in self._available_notes:
			raise ValueError(f"{note} is not in {self.key} {self.scale}: {self._names(self._available_notes)}")

		self._ensure_audio()

		self._attempt.append(note)
		self._render(self._attempt, ATTEMPT_SURFACE)
		self._audition(note)

		self.events.emit("attempt_changed", self.attempt)

		return self.attempt


	def clear (self) -> None:

		"""Throw away the notes entered so far."""

		self._attempt = []
		self._render([], ATTEMPT_SURFACE)
		self.feedback = ""

		self.events.emit("attempt_changed", self.attempt)


	def submit (self) -> bool:

		"""Check the attempt against the sequence and update the score.

		A correct answer scores ``POINTS_PER_CORRECT`` and reveals the whole
		sequence on the notation surface.  Submitting before any sequence
		has been generated is ignored.
		"""

		if not self._sequence:
			logger.warning("Nothing to check - generate a sequence first")
			return False

		is_correct = dictation.verifier.check(self._attempt, self._sequence)
		score = self.score_tracker.record_result(is_correct)

		self.feedback = CORRECT_MESSAGE if is_correct else INCORRECT_MESSAGE

		logger.info(f"Answer {self._names(self._attempt)} {'correct' if is_correct else 'incorrect'} - score {score}")

		if is_correct:
			self._render(self._sequence, TARGET_SURFACE)

		self.events.emit("feedback", is_correct, self.feedback, score)

		return is_correct


	# ------------------------------------------------------------------
	# Collaborator boundaries
	# ------------------------------------------------------------------

	def _auto_play (self) -> None:

		self._auto_play_handle = None
		self.play()


	def _refresh_available_notes (self) -> typing.List[dictation.pitch.Note]:

		self._available_notes = dictation.scales.scale_notes(self.key, self.scale)
		self.events.emit("scale_changed", self.available_notes)

		return self.available_notes


	def _ensure_audio (self) -> None:

		try:
			self.player.ensure_ready()
		except Exception:
			logger.exception("Audio output could not be prepared - continuing without sound")


	def _audition (self, note: dictation.pitch.Note) -> None:

		try:
			self.player.play_note(note, self.settings.user_note_ms)
		except Exception:
			logger.exception(f"Error playing note {note}")


	def _render (self, sequence: typing.Sequence[dictation.pitch.Note], target: str) -> None:

		try:
			self.renderer.render(list(sequence), target)
		except Exception:
			logger.exception(f"Error rendering notation on {target!r}. Sequence that caused error: {self._names(sequence)}")


	@staticmethod
	def _names (notes: typing.Sequence[dictation.pitch.Note]) -> typing.List[str]:

		return [str(note) for note in notes]
