import typing


SCALE_INTERVALS: typing.Dict[str, typing.List[int]] = {
	"chromatic": [0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11],
	"major": [0, 2, 4, 5, 7, 9, 11],
	"minor": [0, 2, 3, 5, 7, 8, 10],
	"pentatonic": [0, 2, 4, 7, 9],
	"blues": [0, 3, 5, 6, 7, 10],
}


def get_intervals (name: str) -> typing.List[int]:

	"""
	Return a named scale's semitone offsets from the registry.
	"""

	if name not in SCALE_INTERVALS:
		raise ValueError(f"Unknown scale: {name!r}. Available: {sorted(SCALE_INTERVALS)}")

	return list(SCALE_INTERVALS[name])


def scale_names () -> typing.List[str]:

	"""
	Return the registered scale names in registration order.
	"""

	return list(SCALE_INTERVALS)


def register_scale (name: str, intervals: typing.List[int]) -> None:

	"""Register a custom scale for use in exercises.

	Parameters:
		name: Scale name, used as the scale selection (e.g. ``"dorian"``).
		intervals: Ascending semitone offsets from the tonic, starting at 0
		           and staying within one octave (0–11).

	Raises:
		ValueError: If the intervals are empty, do not start at 0, fall
		            outside 0–11 or are not strictly ascending.

	Example:
		```python
		dictation.register_scale("dorian", [0, 2, 3, 5, 7, 9, 10])
		dictation.scales.scale_notes("D", "dorian")
		```
	"""

	if not intervals:
		raise ValueError("intervals cannot be empty")

	if intervals[0] != 0:
		raise ValueError("intervals must start with 0")

	if any(i < 0 or i > 11 for i in intervals):
		raise ValueError("intervals must be between 0 and 11")

	if any(b <= a for a, b in zip(intervals, intervals[1:])):
		raise ValueError("intervals must be strictly ascending")

	SCALE_INTERVALS[name] = list(intervals)
