"""Scale derivation with key-aware enharmonic spelling.

A scale is built in three steps: find the key's semitone index, add each
interval of the scale type modulo 12, then respell the sharp names with
flats when the key prefers them.  The flat preference is decided once per
key and applied to every note, so a single scale never mixes sharps and
flats.
"""

import typing

import dictation.intervals
import dictation.pitch


FLAT_KEYS: typing.Tuple[str, ...] = ("F", "Bb", "Eb", "Ab", "Db", "Gb", "Cb")


def uses_flats (key: str) -> bool:

	"""Return True when ``key`` (or its flat-spelled dual) is a flat key.

	Example:
		```python
		uses_flats("F")   # → True
		uses_flats("A#")  # → True  (labelled Bb)
		uses_flats("F#")  # → True  (labelled Gb)
		uses_flats("G")   # → False
		```
	"""

	return key in FLAT_KEYS or dictation.pitch.PREFERRED_KEY_NAMES.get(key) in FLAT_KEYS


def scale_notes (key: str, scale_type: str) -> typing.List[dictation.pitch.Note]:

	"""
	Return the spelled notes of ``scale_type`` built on ``key``.

	Parameters:
		key: Tonic name in sharp or flat spelling (``"C"``, ``"F#"``, ``"Bb"``).
		scale_type: A name registered in :data:`dictation.intervals.SCALE_INTERVALS`.

	Returns:
		Notes ascending from the tonic in the order of the scale's intervals.

	Raises:
		ValueError: If the key or scale type is unknown.

	Example:
		```python
		[str(n) for n in scale_notes("C", "major")]
		# → ["C", "D", "E", "F", "G", "A", "B"]

		[str(n) for n in scale_notes("F", "major")]
		# → ["F", "G", "A", "Bb", "C", "D", "E"]
		```
	"""

	key_index = dictation.pitch.key_name_to_pc(key)
	intervals = dictation.intervals.get_intervals(scale_type)
	use_flats = uses_flats(key)

	names = [dictation.pitch.note_name(key_index + interval) for interval in intervals]

	return [
		dictation.pitch.Note(dictation.pitch.enharmonic_equivalent(name, use_flats))
		for name in names
	]
