"""Pitch class table, enharmonic spelling and the spelled ``Note`` type.

Module-level constants:
- `PC_TO_NOTE_NAME`: Canonical sharp spelling for each pitch class (0-11)
- `NOTE_NAME_TO_PC`: Maps any supported spelling (e.g. `"C#"`, `"Db"`, `"E#"`, `"Fbb"`) to its pitch class
- `ENHARMONIC_FLATS`: Sharp (or theoretical) spellings that have a preferred flat/natural respelling
- `PREFERRED_KEY_NAMES`: How black-key tonal centres are labelled in a key selector

Module-level helpers:
- `note_name(index)`: Canonical sharp name for a semitone index (taken modulo 12).
- `enharmonic_equivalent(name, use_flats)`: Flat respelling of a sharp name.
- `key_name_to_pc(key_name)`: Validate a key name and return its pitch class.

Notes compare by spelling, not by pitch: ``Note("C#") != Note("Db")``.
"""

import dataclasses
import typing


PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]

BASE_PITCH_CLASSES: typing.Dict[str, int] = {
	"C": 0,
	"D": 2,
	"E": 4,
	"F": 5,
	"G": 7,
	"A": 9,
	"B": 11,
}

ACCIDENTAL_OFFSETS: typing.Dict[str, int] = {
	"": 0,
	"#": 1,
	"b": -1,
	"##": 2,
	"bb": -2,
}

NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	base + accidental: (pc + offset) % 12
	for base, pc in BASE_PITCH_CLASSES.items()
	for accidental, offset in ACCIDENTAL_OFFSETS.items()
}

ENHARMONIC_FLATS: typing.Dict[str, str] = {
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

PREFERRED_KEY_NAMES: typing.Dict[str, str] = {
	"C#": "Db",
	"D#": "Eb",
	"F#": "Gb",
	"G#": "Ab",
	"A#": "Bb",
}

DEFAULT_OCTAVE = 4


def note_name (index: int) -> str:

	"""Return the canonical sharp-spelled name for a semitone index.

	Example:
		```python
		note_name(1)   # → "C#"
		note_name(14)  # → "D"
		```
	"""

	return PC_TO_NOTE_NAME[index % 12]


def enharmonic_equivalent (name: str, use_flats: bool) -> str:

	"""Respell a sharp name with flats when ``use_flats`` is set.

	Names without a mapping (naturals, or anything already flat) are
	returned unchanged, as is every name when ``use_flats`` is false.
	"""

	if not use_flats:
		return name

	return ENHARMONIC_FLATS.get(name, name)


def display_key_name (key_name: str) -> str:

	"""Return the label a key selector shows for a sharp-spelled key."""

	return PREFERRED_KEY_NAMES.get(key_name, key_name)


def key_name_to_pc (key_name: str) -> int:

	"""Validate a key name and return its pitch class (0–11).

	Parameters:
		key_name: Note name (e.g. ``"C"``, ``"F#"``, ``"Bb"``).

	Returns:
		Pitch class integer (0–11).

	Raises:
		ValueError: If the key name is not recognised.
	"""

	if key_name not in NOTE_NAME_TO_PC:
		raise ValueError(
			f"Unknown key name: {key_name!r}. Expected e.g. 'C', 'F#', 'Bb'."
		)

	return NOTE_NAME_TO_PC[key_name]


def parse_note (name: str) -> typing.Tuple[str, str]:

	"""Split a spelled note name into its base letter and accidental.

	The base letter is upper-cased; the accidental is returned exactly as
	written, so unsupported marks survive for the caller to ignore.

	Example:
		```python
		parse_note("bb")   # → ("B", "b")
		parse_note("F##")  # → ("F", "##")
		```
	"""

	if not name:
		raise ValueError("Note name cannot be empty")

	return name[0].upper(), name[1:]


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A spelled pitch name at the session's fixed octave.

	Two notes are equal only when their spellings match exactly.
	"""

	name: str


	def __post_init__ (self) -> None:

		base, _ = parse_note(self.name)

		if base not in BASE_PITCH_CLASSES:
			raise ValueError(f"Unknown note letter in {self.name!r}")


	def __str__ (self) -> str:

		return self.name


	@property
	def base (self) -> str:

		"""The note letter, ``A`` to ``G``."""

		return parse_note(self.name)[0]


	@property
	def accidental (self) -> str:

		"""The accidental as written (``""``, ``"#"``, ``"b"``, ``"##"``, ``"bb"`` or anything else)."""

		return parse_note(self.name)[1]


	@property
	def pitch_class (self) -> int:

		"""Pitch class of the note. Unsupported accidentals count as naturals."""

		offset = ACCIDENTAL_OFFSETS.get(self.accidental, 0)

		return (BASE_PITCH_CLASSES[self.base] + offset) % 12


	def midi_pitch (self, octave: int = DEFAULT_OCTAVE) -> int:

		"""Return the MIDI note number for this note in ``octave`` (C4 = 60).

		The octave follows the letter, so ``Cb`` sits just below ``C`` and
		``B#`` just above ``B``.
		"""

		offset = ACCIDENTAL_OFFSETS.get(self.accidental, 0)

		return (octave + 1) * 12 + BASE_PITCH_CLASSES[self.base] + offset


NoteLike = typing.Union[Note, str]


def as_note (value: NoteLike) -> Note:

	"""Coerce a note name or ``Note`` into a ``Note``."""

	if isinstance(value, Note):
		return value

	return Note(value)
