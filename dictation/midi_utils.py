import logging
import typing

import mido


logger = logging.getLogger(__name__)


def choose_output_name (
	outputs: typing.Sequence[str],
	requested: typing.Optional[str] = None,
	interactive: bool = True,
	ask: typing.Optional[typing.Callable[[str], str]] = None
) -> typing.Optional[str]:

	"""Pick which MIDI output the trainer should play through.

	A ``requested`` name must match one of ``outputs`` exactly.  Without one,
	a single output is taken as-is; with several, the user is asked to pick
	by number (through ``ask``, default :func:`input`) when
	``interactive``, otherwise the first is used.  End of
	input at the prompt also picks the first.

	Returns ``None`` when there is nothing suitable.
	"""

	if not outputs:
		logger.error("No MIDI output devices found - exercises will run without sound.")
		return None

	if requested is not None:

		if requested not in outputs:
			logger.error(f"MIDI output device '{requested}' not found. Available devices: {list(outputs)}")
			return None

		return requested

	if len(outputs) == 1 or not interactive:
		return outputs[0]

	print("\nAvailable MIDI output devices:\n")

	for number, name in enumerate(outputs, 1):
		print(f"  {number}. {name}")

	print()

	if ask is None:
		ask = input

	while True:

		try:
			reply = ask(f"Play exercises through which device? (1-{len(outputs)}): ")
		except EOFError:
			return outputs[0]

		if reply.strip().isdigit() and 1 <= int(reply) <= len(outputs):
			break

		print(f"Enter a number between 1 and {len(outputs)}.")

	chosen = outputs[int(reply) - 1]

	print("\nTip: To skip this prompt next time, add to dictation.yaml:\n")
	print("  midi:")
	print(f"    output_device: \"{chosen}\"\n")

	return chosen


def select_output_device (device_name: typing.Optional[str] = None, interactive: bool = True) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:

	"""Choose and open a MIDI output port.

	Returns:
		``(name, port)``, or ``(None, None)`` when no port could be opened.
	"""

	try:
		outputs = mido.get_output_names()
		logger.info(f"Available MIDI outputs: {outputs}")

		name = choose_output_name(outputs, device_name, interactive)

		if name is None:
			return None, None

		port = mido.open_output(name)

	except Exception as e:
		logger.error(f"Failed to open MIDI output: {e}")
		return None, None

	logger.info(f"Playing through MIDI output '{name}'")

	return name, port
