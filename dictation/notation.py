"""Text notation for exercise sequences.

Renders notes on a plain-text treble staff at the session's fixed octave,
one column per note.  Middle C gets its own short ledger line::

	treble
	  |-------------------------
	  |
	  |-------------------------
	  |
	  |----------------------o--
	  |
	  |----------o--------------
	  |
	  |-------------------------
	                    #o
	    ---o--

The picture above shows ``C``, ``G``, ``D#``, ``B``.  Only ``#``, ``b``,
``##`` and ``bb`` are drawn as accidentals; any other mark is dropped and
the bare notehead is shown.
"""

import logging
import typing

import dictation.pitch


logger = logging.getLogger(__name__)


# Diatonic staff steps in the fixed octave, counted up from the bottom line (E4).
_STAFF_STEPS: typing.Dict[str, int] = {
	"C": -2,
	"D": -1,
	"E": 0,
	"F": 1,
	"G": 2,
	"A": 3,
	"B": 4,
}

_TOP_STEP = 8
_BOTTOM_STEP = -2
_LEDGER_STEP = -2

_DRAWN_ACCIDENTALS = ("#", "b", "##", "bb")

_CELL_WIDTH = 6


@typing.runtime_checkable
class NotationRenderer (typing.Protocol):

	"""
	Protocol for the notation collaborator used by a session.
	"""

	def render (self, sequence: typing.Sequence[dictation.pitch.Note], target: str) -> None:

		"""Draw ``sequence`` on surface ``target``. An empty sequence clears it."""

		...


def drawn_accidental (accidental: str) -> str:

	"""Return the mark to draw for an accidental, or ``""`` when unsupported."""

	return accidental if accidental in _DRAWN_ACCIDENTALS else ""


def staff_lines (sequence: typing.Sequence[dictation.pitch.Note]) -> typing.List[str]:

	"""Build the text rows of a treble staff showing ``sequence``.

	Returns an empty list for an empty sequence.
	"""

	if not sequence:
		return []

	placed = [(_STAFF_STEPS[note.base], drawn_accidental(note.accidental)) for note in sequence]

	lines = ["treble"]

	for step in range(_TOP_STEP, _BOTTOM_STEP - 1, -1):

		on_staff = 0 <= step <= _TOP_STEP
		is_line = step % 2 == 0 and on_staff
		row_fill = "-" if is_line else " "
		cells: typing.List[str] = []

		for note_step, mark in placed:

			fill = "-" if step == _LEDGER_STEP == note_step else row_fill

			if note_step == step:
				cells.append(fill + mark.rjust(2, fill) + "o" + fill * 2)
			else:
				cells.append(row_fill * _CELL_WIDTH)

		prefix = "  |" if on_staff else "   "
		lines.append((prefix + row_fill + "".join(cells)).rstrip())

	return lines


class TextStaffRenderer:

	"""Keeps one text staff per target surface.

	Surfaces are kept in :attr:`surfaces` by target id.  When a stream is
	given, each render also writes the surface to it, headed by the target
	name.
	"""

	def __init__ (self, stream: typing.Optional[typing.TextIO] = None) -> None:

		self.stream = stream
		self.surfaces: typing.Dict[str, typing.List[str]] = {}


	def render (self, sequence: typing.Sequence[dictation.pitch.Note], target: str) -> None:

		"""Redraw ``target`` with ``sequence``; the surface is only replaced once fully built."""

		lines = staff_lines(sequence)
		self.surfaces[target] = lines

		logger.debug(f"Rendered {len(sequence)} notes on {target!r}")

		if self.stream is not None:
			self.stream.write(f"[{target}]\n")
			self.stream.write("\n".join(lines) + ("\n" if lines else ""))
			self.stream.flush()


	def text (self, target: str) -> str:

		"""Return the current contents of ``target`` as one string (empty when cleared)."""

		return "\n".join(self.surfaces.get(target, []))
