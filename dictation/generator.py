import logging
import random
import typing

import dictation.pitch
import dictation.scales


logger = logging.getLogger(__name__)


MIN_LENGTH = 1
MAX_LENGTH = 16


def clamp_length (length: int, minimum: int = MIN_LENGTH, maximum: int = MAX_LENGTH) -> int:

	"""Clamp a requested sequence length into ``[minimum, maximum]``.

	Out-of-range requests are logged and clamped rather than rejected, so a
	zero or negative length still yields a one-note exercise.
	"""

	if minimum < 1:
		raise ValueError("Minimum sequence length must be at least 1")

	if maximum < minimum:
		raise ValueError(f"Maximum sequence length ({maximum}) is below the minimum ({minimum})")

	clamped = max(minimum, min(maximum, int(length)))

	if clamped != length:
		logger.warning(f"Sequence length {length} out of range {minimum}-{maximum}, using {clamped}")

	return clamped


def generate (
	key: str,
	scale_type: str,
	length: int,
	rng: typing.Optional[random.Random] = None,
	minimum: int = MIN_LENGTH,
	maximum: int = MAX_LENGTH,
) -> typing.List[dictation.pitch.Note]:

	"""Draw a random note sequence from a scale.

	Each note is chosen independently and uniformly from
	``scale_notes(key, scale_type)``, so repeats (adjacent or otherwise)
	are expected.

	Parameters:
		key: Tonic name (e.g. ``"C"``, ``"F#"``).
		scale_type: Registered scale name (e.g. ``"major"``, ``"blues"``).
		length: Number of notes; clamped into ``[minimum, maximum]``.
		rng: Random number generator. Pass ``random.Random(seed)`` for a
		     repeatable exercise.

	Example:
		```python
		generate("C", "major", 3, random.Random(42))
		# → e.g. [Note("A"), Note("C"), Note("C")]
		```
	"""

	if rng is None:
		rng = random.Random()

	count = clamp_length(length, minimum, maximum)
	pool = dictation.scales.scale_notes(key, scale_type)

	return [rng.choice(pool) for _ in range(count)]
