POINTS_PER_CORRECT = 10


class ScoreTracker:

	"""
	Running score for one session. Starts at zero and only ever grows.
	"""

	def __init__ (self) -> None:

		self._score = 0


	@property
	def score (self) -> int:

		"""Points earned so far."""

		return self._score


	def record_result (self, is_correct: bool) -> int:

		"""Add ``POINTS_PER_CORRECT`` for a correct answer and return the new score."""

		if is_correct:
			self._score += POINTS_PER_CORRECT

		return self._score
