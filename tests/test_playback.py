import logging

import pytest

import conftest
import dictation.clock
import dictation.playback
from dictation.pitch import Note


def _notes (*names: str) -> list[Note]:

	return [Note(name) for name in names]


# ---------------------------------------------------------------------------
# Tempo
# ---------------------------------------------------------------------------

def test_resolve_named_tempos () -> None:

	assert dictation.playback.resolve_tempo("slow") == 1000
	assert dictation.playback.resolve_tempo("medium") == 600
	assert dictation.playback.resolve_tempo("fast") == 350


def test_resolve_tempo_falls_back_to_medium () -> None:

	assert dictation.playback.resolve_tempo("presto") == 600
	assert dictation.playback.resolve_tempo(None) == 600
	assert dictation.playback.resolve_tempo(0) == 600
	assert dictation.playback.resolve_tempo(True) == 600


def test_resolve_tempo_accepts_milliseconds () -> None:

	assert dictation.playback.resolve_tempo(800) == 800


# ---------------------------------------------------------------------------
# Scheduling
# ---------------------------------------------------------------------------

def test_notes_are_spaced_by_tempo (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	"""Note i sounds at i * tempo for 80% of the tempo."""

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	assert scheduler.play(_notes("E", "C", "G"), 600)

	clock.run_all()

	assert [(t, name) for t, name, _ in player.played] == [(0, "E"), (600, "C"), (1200, "G")]
	assert all(duration == pytest.approx(480) for _, _, duration in player.played)


def test_state_returns_to_idle_one_tempo_after_last_note (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	assert scheduler.state is dictation.playback.PlaybackState.IDLE

	scheduler.play(_notes("C", "D", "E"), 600)
	assert scheduler.state is dictation.playback.PlaybackState.PLAYING

	clock.advance(1799)
	assert scheduler.is_playing
	assert len(player.played) == 3

	clock.advance(1)
	assert scheduler.state is dictation.playback.PlaybackState.IDLE


def test_single_note_run (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	scheduler.play(_notes("A"), 350)

	clock.advance(349)
	assert scheduler.is_playing

	clock.advance(1)
	assert not scheduler.is_playing
	assert player.played[0][2] == pytest.approx(280)


def test_play_while_playing_is_dropped (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	"""A second play request during a run neither replays nor changes state."""

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	assert scheduler.play(_notes("C", "E"), 1000)
	clock.advance(500)

	assert not scheduler.play(_notes("G", "G", "G"), 350)
	assert scheduler.is_playing

	clock.run_all()

	assert player.names == ["C", "E"]
	assert not scheduler.is_playing


def test_play_again_after_completion (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	scheduler.play(_notes("C"), 600)
	clock.run_all()

	assert scheduler.play(_notes("D"), 600)
	clock.run_all()

	assert player.names == ["C", "D"]


def test_empty_sequence_is_a_no_op (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	assert not scheduler.play([], 600)
	assert scheduler.state is dictation.playback.PlaybackState.IDLE
	assert clock.pending == 0


def test_non_positive_tempo_raises (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	with pytest.raises(ValueError):
		scheduler.play(_notes("C"), 0)

	assert not scheduler.is_playing


def test_events_are_emitted_in_order (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)
	events: list[tuple] = []

	scheduler.events.on("start", lambda notes, tempo: events.append(("start", len(notes), tempo)))
	scheduler.events.on("note", lambda index, note: events.append(("note", index, str(note))))
	scheduler.events.on("stop", lambda cancelled: events.append(("stop", cancelled)))

	scheduler.play(_notes("F", "Bb"), 600)
	clock.run_all()

	assert events == [
		("start", 2, 600),
		("note", 0, "F"),
		("note", 1, "Bb"),
		("stop", False),
	]


def test_audio_failure_does_not_stop_the_run (clock: dictation.clock.ManualClock, caplog: pytest.LogCaptureFixture) -> None:

	"""Player errors are logged and the run still completes."""

	player = conftest.RecordingPlayer(clock, fail=True)
	scheduler = dictation.playback.PlaybackScheduler(player, clock)
	notes_seen: list[int] = []

	scheduler.events.on("note", lambda index, note: notes_seen.append(index))

	with caplog.at_level(logging.ERROR, logger="dictation.playback"):
		scheduler.play(_notes("C", "D"), 600)
		clock.run_all()

	assert notes_seen == [0, 1]
	assert not scheduler.is_playing
	assert "Error playing note" in caplog.text


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------

def test_cancel_drops_pending_notes (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)
	stops: list[bool] = []

	scheduler.events.on("stop", stops.append)

	scheduler.play(_notes("C", "D", "E", "F"), 600)
	clock.advance(600)

	assert scheduler.cancel()
	assert not scheduler.is_playing

	clock.run_all()

	assert player.names == ["C", "D"]
	assert stops == [True]


def test_cancel_after_last_note_drops_completion (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	"""Cancelling during the trailing wait must not emit a second stop later."""

	scheduler = dictation.playback.PlaybackScheduler(player, clock)
	stops: list[bool] = []

	scheduler.events.on("stop", stops.append)

	scheduler.play(_notes("C"), 600)
	clock.advance(100)
	scheduler.cancel()
	clock.run_all()

	assert stops == [True]


def test_cancel_when_idle (clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer) -> None:

	scheduler = dictation.playback.PlaybackScheduler(player, clock)

	assert not scheduler.cancel()


# ---------------------------------------------------------------------------
# Listener failures
# ---------------------------------------------------------------------------

def _raise_os_error (*args) -> None:

	raise OSError("stderr closed")


@pytest.mark.parametrize("event_name", ["start", "note", "stop"])
def test_failing_listener_does_not_lock_playback (event_name: str, clock: dictation.clock.ManualClock, player: conftest.RecordingPlayer, caplog: pytest.LogCaptureFixture) -> None:

	"""The run still finishes and a later play still starts."""

	scheduler = dictation.playback.PlaybackScheduler(player, clock)
	scheduler.events.on(event_name, _raise_os_error)

	with caplog.at_level(logging.ERROR, logger="dictation.playback"):
		assert scheduler.play(_notes("C", "D"), 600)
		clock.run_all()

	assert not scheduler.is_playing
	assert player.names == ["C", "D"]
	assert f"Error in playback '{event_name}' listener" in caplog.text

	assert scheduler.play(_notes("E"), 600)
	clock.run_all()

	assert player.names == ["C", "D", "E"]
