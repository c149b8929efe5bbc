import typing

import dictation.pitch


def check (attempt: typing.Sequence[dictation.pitch.NoteLike], sequence: typing.Sequence[dictation.pitch.NoteLike]) -> bool:

	"""Return True when ``attempt`` reproduces ``sequence`` exactly.

	Lengths must match and every position must carry the same spelling;
	``C#`` does not match ``Db``.  There is no partial credit.

	Example:
		```python
		check(["C", "E", "G"], ["C", "E", "G"])  # → True
		check(["C", "E"], ["C", "E", "G"])       # → False
		```
	"""

	if len(attempt) != len(sequence):
		return False

	return all(
		dictation.pitch.as_note(given) == dictation.pitch.as_note(expected)
		for given, expected in zip(attempt, sequence)
	)
