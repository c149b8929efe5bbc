import asyncio
import logging
import os
import sys

import dictation.audio
import dictation.clock
import dictation.config
import dictation.console
import dictation.notation
import dictation.session


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def open_player (settings: dictation.config.Settings, clock: dictation.clock.Clock) -> dictation.audio.MidiAudioPlayer:

	"""
	Create the MIDI player and open its port.

	Must run before the event loop and the keystroke listener start: with
	several outputs and none configured, the user is asked to choose on stdin.
	"""

	player = dictation.audio.MidiAudioPlayer(
		clock,
		output_device_name = settings.output_device,
		channel = settings.channel,
		velocity = settings.velocity,
		octave = settings.octave
	)

	player.ensure_ready()

	return player


async def run (
	settings: dictation.config.Settings,
	player: dictation.audio.MidiAudioPlayer,
	clock: dictation.clock.AsyncioClock
) -> None:

	"""
	Build a session on the running event loop and drive it from the terminal.
	"""

	session = dictation.session.Session(
		settings,
		player = player,
		renderer = dictation.notation.TextStaffRenderer(sys.stderr),
		clock = clock
	)

	app = dictation.console.ConsoleApp(session, sys.stderr)

	await app.run()


def main () -> None:

	"""
	Main entry point for the dictation trainer.
	"""

	logger.info("Dictation starting...")

	settings = dictation.config.load_config(os.environ.get("DICTATION_CONFIG", dictation.config.DEFAULT_CONFIG_PATH))

	# The clock binds to the running loop on first use.
	clock = dictation.clock.AsyncioClock()
	player = open_player(settings, clock)

	try:
		asyncio.run(run(settings, player, clock))
	except KeyboardInterrupt:
		logger.info("Stopping...")
	finally:
		player.close()


if __name__ == "__main__":
	main()
