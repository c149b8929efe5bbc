import typing

import mido
import pytest

import dictation.clock
import dictation.pitch


class FakeMidiOut:

	"""MIDI output stub that keeps every message it is sent."""

	def __init__ (self, name: str = "Dummy MIDI") -> None:

		self.name = name
		self.sent: typing.List[mido.Message] = []
		self.closed = False


	def send (self, message: mido.Message) -> None:

		"""Record an outgoing MIDI message."""

		self.sent.append(message)


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


class RecordingPlayer:

	"""Audio player stub that records what it was asked to play and when."""

	def __init__ (self, clock: typing.Optional[dictation.clock.ManualClock] = None, fail: bool = False) -> None:

		self.clock = clock
		self.fail = fail
		self.ready_calls = 0
		self.played: typing.List[typing.Tuple[float, str, float]] = []


	def ensure_ready (self) -> None:

		self.ready_calls += 1


	def play_note (self, note: dictation.pitch.Note, duration_ms: float) -> None:

		if self.fail:
			raise RuntimeError("audio device unavailable")

		now = self.clock.now_ms if self.clock is not None else 0.0
		self.played.append((now, str(note), duration_ms))


	@property
	def names (self) -> typing.List[str]:

		return [name for _, name, _ in self.played]


class RecordingRenderer:

	"""Notation renderer stub that keeps the last sequence drawn on each surface."""

	def __init__ (self) -> None:

		self.surfaces: typing.Dict[str, typing.List[str]] = {}
		self.calls: typing.List[typing.Tuple[str, typing.List[str]]] = []


	def render (self, sequence: typing.Sequence[dictation.pitch.Note], target: str) -> None:

		names = [str(note) for note in sequence]
		self.surfaces[target] = names
		self.calls.append((target, names))


# Module-level reference so tests can inspect the most recently opened FakeMidiOut.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> list[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return ["Dummy MIDI"]


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	fake = FakeMidiOut(name)
	_current_fake_output = fake
	return fake


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use a fake MIDI output for tests that open a port."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)


@pytest.fixture
def clock () -> dictation.clock.ManualClock:

	"""A fresh virtual-time clock."""

	return dictation.clock.ManualClock()


@pytest.fixture
def player (clock: dictation.clock.ManualClock) -> RecordingPlayer:

	"""A recording audio player stamped with the test clock's time."""

	return RecordingPlayer(clock)


@pytest.fixture
def renderer () -> RecordingRenderer:

	"""A recording notation renderer."""

	return RecordingRenderer()
