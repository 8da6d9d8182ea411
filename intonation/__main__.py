"""Command-line tuner.

Map frequencies given as arguments::

	python -m intonation 440 466.16 --flat

or stream estimates from a pitch detector, one per line on stdin (``none``,
``-`` and blank lines mean no pitch was found)::

	my-estimator | python -m intonation --live --osc
"""

import argparse
import asyncio
import logging
import sys
import threading
import typing

import intonation.config
import intonation.display
import intonation.osc
import intonation.pitch
import intonation.tuner


logger = logging.getLogger(__name__)

NO_PITCH_TOKENS = ("", "-", "none", "null", "nan")


def parse_frequency (token: str) -> typing.Optional[float]:

	"""Parse one estimator token; ``None`` means no pitch was detected.

	Raises:
		ValueError: If the token is neither a number nor a no-pitch marker.
	"""

	token = token.strip()

	if token.lower() in NO_PITCH_TOKENS:
		return None

	return float(token)


def build_parser () -> argparse.ArgumentParser:

	"""Build the argument parser for the tuner CLI."""

	parser = argparse.ArgumentParser(prog="intonation", description="Map detected frequencies to the nearest equal-tempered pitch")
	parser.add_argument("frequencies", nargs="*", help="Frequencies in Hz (default: read one per line from stdin)")
	parser.add_argument("--flat", action="store_true", default=None, help="Spell accidentals as flats")
	parser.add_argument("--sharp", dest="flat", action="store_false", help="Spell accidentals as sharps")
	parser.add_argument("--reference", type=float, default=None, help="Frequency of A4 in Hz (default: 440)")
	parser.add_argument("--accuracy", type=float, default=None, help="In-tune band in cents either side (default: 10)")
	parser.add_argument("--config", default=None, help="YAML config file")
	parser.add_argument("--live", action="store_true", help="Show a redrawing status line instead of one line per reading")
	parser.add_argument("--ascii", action="store_true", help="Use # and b instead of Unicode accidentals")
	parser.add_argument("--osc", action="store_true", default=None, help="Publish readings and accept control messages over OSC")
	parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

	return parser


def resolve_config (args: argparse.Namespace) -> intonation.config.TunerConfig:

	"""Load the config file (if any) and apply command-line overrides."""

	if args.config:
		config = intonation.config.load_config(args.config)
	else:
		config = intonation.config.TunerConfig()

	if args.flat is not None:
		config.accidental = intonation.pitch.AccidentalMode.FLAT if args.flat else intonation.pitch.AccidentalMode.SHARP

	if args.reference is not None:
		config.reference = args.reference

	if args.accuracy is not None:
		config.accuracy = args.accuracy

	if args.osc:
		config.osc_enabled = True

	return config


def feed_token (tuner: intonation.tuner.Tuner, token: str) -> typing.Optional[intonation.pitch.PitchedNote]:

	"""Parse a token and feed it to the tuner, logging anything unparseable."""

	try:
		frequency = parse_frequency(token)
	except ValueError:
		logger.warning(f"Ignoring unparseable frequency {token.strip()!r}")
		return None

	return tuner.feed(frequency)


def start_reader (stream: typing.TextIO, loop: asyncio.AbstractEventLoop, queue: "asyncio.Queue[typing.Optional[str]]") -> threading.Thread:

	"""Read ``stream`` line by line on a daemon thread, posting each line to ``queue``.

	``None`` is posted at end of input.  The thread is a daemon so a blocked
	``readline()`` never holds up interpreter shutdown after Ctrl-C.
	"""

	def post (item: typing.Optional[str]) -> bool:
		try:
			loop.call_soon_threadsafe(queue.put_nowait, item)
		except RuntimeError:
			# The loop has closed; the CLI is exiting.
			return False
		return True

	def read_lines () -> None:
		for line in iter(stream.readline, ""):
			if not post(line):
				return
		post(None)

	thread = threading.Thread(target=read_lines, name="intonation-stdin", daemon=True)
	thread.start()

	return thread


async def run (args: argparse.Namespace, config: intonation.config.TunerConfig, stdin: typing.Optional[typing.TextIO] = None, stdout: typing.Optional[typing.TextIO] = None) -> None:

	"""Drive a tuner from the command-line frequencies or from ``stdin``."""

	input_stream = stdin if stdin is not None else sys.stdin
	output_stream = stdout if stdout is not None else sys.stdout

	tuner = intonation.tuner.Tuner(mode=config.accidental, reference=config.reference, accuracy=config.accuracy)

	display: typing.Optional[intonation.display.Display] = None
	server: typing.Optional[intonation.osc.OscServer] = None

	def print_reading (note: intonation.pitch.PitchedNote) -> None:
		output_stream.write(intonation.display.format_reading(note, tuner.accuracy, ascii_only=args.ascii) + "\n")
		output_stream.flush()

	if args.live:
		display = intonation.display.Display(tuner, ascii_only=args.ascii)
		display.start()
	else:
		tuner.on_note(print_reading)

	try:
		if config.osc_enabled:
			server = intonation.osc.OscServer(
				tuner,
				receive_port = config.osc_receive_port,
				send_port = config.osc_send_port,
				send_host = config.osc_send_host
			)
			await server.start()

		if args.frequencies:
			for token in args.frequencies:
				feed_token(tuner, token)

		else:
			lines: "asyncio.Queue[typing.Optional[str]]" = asyncio.Queue()
			start_reader(input_stream, asyncio.get_running_loop(), lines)

			while True:
				line = await lines.get()

				if line is None:
					break

				feed_token(tuner, line)

	finally:
		if server is not None:
			await server.stop()

		if display is not None:
			display.stop()


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the intonation command-line tuner.
	"""

	args = build_parser().parse_args(argv)

	logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.INFO))

	try:
		config = resolve_config(args)
		asyncio.run(run(args, config))
	except ValueError as e:
		logger.error(f"{e}")
		return 2
	except KeyboardInterrupt:
		logger.info("Stopping...")

	return 0


if __name__ == "__main__":
	sys.exit(main())
