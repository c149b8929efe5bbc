import pytest

import dictation.pitch


def test_note_name_wraps_modulo_12 () -> None:

	"""Semitone indices outside 0-11 wrap onto the sharp-spelled table."""

	assert dictation.pitch.note_name(0) == "C"
	assert dictation.pitch.note_name(1) == "C#"
	assert dictation.pitch.note_name(11) == "B"
	assert dictation.pitch.note_name(14) == "D"


def test_enharmonic_equivalent_with_flats () -> None:

	"""Black keys and theoretical spellings map to their flat/natural form."""

	expected = {
		"C#": "Db",
		"D#": "Eb",
		"F#": "Gb",
		"G#": "Ab",
		"A#": "Bb",
		"E#": "F",
		"B#": "C",
		"Fb": "E",
		"Cb": "B",
	}

	for sharp, flat in expected.items():
		assert dictation.pitch.enharmonic_equivalent(sharp, True) == flat


def test_enharmonic_equivalent_leaves_other_names () -> None:

	"""Naturals pass through, and nothing changes when flats are not wanted."""

	assert dictation.pitch.enharmonic_equivalent("D", True) == "D"
	assert dictation.pitch.enharmonic_equivalent("Bb", True) == "Bb"
	assert dictation.pitch.enharmonic_equivalent("C#", False) == "C#"


def test_display_key_name () -> None:

	"""Black-key tonal centres are labelled with flats."""

	assert dictation.pitch.display_key_name("A#") == "Bb"
	assert dictation.pitch.display_key_name("F#") == "Gb"
	assert dictation.pitch.display_key_name("E") == "E"


def test_key_name_to_pc () -> None:

	"""Sharp, flat and theoretical spellings all resolve to a pitch class."""

	assert dictation.pitch.key_name_to_pc("C") == 0
	assert dictation.pitch.key_name_to_pc("F#") == 6
	assert dictation.pitch.key_name_to_pc("Bb") == 10
	assert dictation.pitch.key_name_to_pc("Cb") == 11
	assert dictation.pitch.key_name_to_pc("B#") == 0


def test_key_name_to_pc_rejects_unknown () -> None:

	with pytest.raises(ValueError, match="Unknown key name"):
		dictation.pitch.key_name_to_pc("H")


def test_parse_note () -> None:

	"""The letter is upper-cased and the accidental kept as written."""

	assert dictation.pitch.parse_note("C") == ("C", "")
	assert dictation.pitch.parse_note("bb") == ("B", "b")
	assert dictation.pitch.parse_note("F##") == ("F", "##")


def test_notes_compare_by_spelling () -> None:

	"""Enharmonic equivalents are different notes."""

	assert dictation.pitch.Note("C#") == dictation.pitch.Note("C#")
	assert dictation.pitch.Note("C#") != dictation.pitch.Note("Db")
	assert dictation.pitch.Note("C#").pitch_class == dictation.pitch.Note("Db").pitch_class


def test_note_parts () -> None:

	note = dictation.pitch.Note("Ebb")

	assert note.base == "E"
	assert note.accidental == "bb"
	assert note.pitch_class == 2
	assert str(note) == "Ebb"


def test_note_rejects_unknown_letter () -> None:

	with pytest.raises(ValueError):
		dictation.pitch.Note("X#")

	with pytest.raises(ValueError):
		dictation.pitch.Note("")


def test_midi_pitch_in_fixed_octave () -> None:

	"""Octave 4 puts C at 60; the octave follows the letter for Cb and B#."""

	assert dictation.pitch.Note("C").midi_pitch() == 60
	assert dictation.pitch.Note("A").midi_pitch() == 69
	assert dictation.pitch.Note("Bb").midi_pitch() == 70
	assert dictation.pitch.Note("Cb").midi_pitch() == 59
	assert dictation.pitch.Note("B#").midi_pitch() == 72
	assert dictation.pitch.Note("C").midi_pitch(octave=5) == 72


def test_unsupported_accidental_counts_as_natural () -> None:

	note = dictation.pitch.Note("Gx")

	assert note.accidental == "x"
	assert note.pitch_class == 7
	assert note.midi_pitch() == 67


def test_as_note () -> None:

	note = dictation.pitch.Note("E")

	assert dictation.pitch.as_note(note) is note
	assert dictation.pitch.as_note("E") == note
