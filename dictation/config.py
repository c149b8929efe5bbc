"""Session settings and YAML configuration loading.

A config file is optional.  Settings may be given flat or grouped under
``session:`` and ``midi:`` sections::

	session:
	  key: "F"
	  scale: major
	  length: 4
	  tempo: slow
	  seed: 42
	midi:
	  output_device: "FluidSynth virtual port"
	  channel: 0
"""

import dataclasses
import logging
import os
import typing

import yaml

import dictation.generator
import dictation.intervals
import dictation.pitch
import dictation.playback


logger = logging.getLogger(__name__)


DEFAULT_CONFIG_PATH = "dictation.yaml"

_SECTIONS = ("session", "midi")


@dataclasses.dataclass
class Settings:

	"""Everything a session needs to know before the first exercise.

	Attributes:
		key: Initial tonic, sharp-spelled as the key selector offers it.
		scale: Initial scale type.
		length: Initial sequence length.
		tempo: Initial tempo name (``slow``, ``medium``, ``fast``).
		octave: Octave every note is played and drawn in.
		min_length: Shortest sequence a user may ask for.
		max_length: Longest sequence a user may ask for.
		auto_play_delay_ms: Pause between generating and the automatic first playback.
		user_note_ms: How long a note sounds when the user enters it.
		output_device: MIDI output port name; ``None`` auto-selects.
		channel: MIDI channel (0-15).
		velocity: MIDI note-on velocity.
		seed: Random seed for repeatable exercises; ``None`` for fresh ones.
	"""

	key: str = "C"
	scale: str = "major"
	length: int = 4
	tempo: str = dictation.playback.DEFAULT_TEMPO
	octave: int = dictation.pitch.DEFAULT_OCTAVE
	min_length: int = dictation.generator.MIN_LENGTH
	max_length: int = dictation.generator.MAX_LENGTH
	auto_play_delay_ms: int = 500
	user_note_ms: int = 300
	output_device: typing.Optional[str] = None
	channel: int = 0
	velocity: int = 100
	seed: typing.Optional[int] = None


	def validate (self) -> None:

		"""Raise ``ValueError`` for settings no session can run with."""

		dictation.pitch.key_name_to_pc(self.key)
		dictation.intervals.get_intervals(self.scale)

		if self.min_length < 1 or self.max_length < self.min_length:
			raise ValueError(f"Invalid length range {self.min_length}-{self.max_length}")

		if self.auto_play_delay_ms < 0 or self.user_note_ms <= 0:
			raise ValueError("Delays must be positive")

		if self.tempo not in dictation.playback.TEMPOS:
			logger.warning(f"Unknown tempo {self.tempo!r} - falling back to {dictation.playback.DEFAULT_TEMPO!r}")
			self.tempo = dictation.playback.DEFAULT_TEMPO


def settings_from_dict (data: typing.Optional[typing.Dict[str, typing.Any]]) -> Settings:

	"""Build validated :class:`Settings` from a parsed config mapping."""

	if not data:
		return Settings()

	if not isinstance(data, dict):
		raise ValueError("Config must be a mapping")

	known = {field.name for field in dataclasses.fields(Settings)}
	values: typing.Dict[str, typing.Any] = {}

	for name, value in data.items():

		if name in _SECTIONS and isinstance(value, dict):
			items = list(value.items())
		else:
			items = [(name, value)]

		for field_name, field_value in items:
			if field_name in known:
				values[field_name] = field_value
			else:
				logger.warning(f"Ignoring unknown config key {field_name!r}")

	settings = Settings(**values)
	settings.validate()

	return settings


def load_config (config_path: str = DEFAULT_CONFIG_PATH) -> Settings:

	"""
	Load settings from a YAML file, using defaults when the file is missing.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return Settings()

	with open(config_path, 'r') as f:
		return settings_from_dict(yaml.safe_load(f))
