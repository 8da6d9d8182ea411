"""Live terminal dashboard for a running tuner.

Provides a persistent status line showing the detected note, its deviation in
cents, the input frequency and an ASCII needle.  Log messages scroll above the
status line without disruption.

```python
display = intonation.display.Display(tuner)
display.start()
...
display.stop()
```

The status line redraws on every reading and looks like::

	A♯4   -23.4 cents   462.17 Hz  [    *     |          ]
	E2     +2.1 cents    82.51 Hz  [          O          ]  in tune
"""

import logging
import shutil
import sys
import typing

import intonation.needle
import intonation.pitch

if typing.TYPE_CHECKING:
	from intonation.tuner import Tuner


_MIN_TERMINAL_WIDTH = 40
_MAX_GAUGE_WIDTH = 41


def format_reading (
	note: intonation.pitch.PitchedNote,
	accuracy: float,
	gauge_width: int = 21,
	ascii_only: bool = False
) -> str:

	"""Render one reading as a single line.

	Parameters:
		note: The reading to show.
		accuracy: In-tune band half-width in cents.
		gauge_width: Width of the needle gauge; ``0`` omits it.
		ascii_only: Use ``#``/``b`` instead of ``♯``/``♭``.
	"""

	name = note.ascii_name if ascii_only else note.name
	parts = [f"{name:<4}", f"{note.cents:+6.1f} cents", f"{note.frequency:8.2f} Hz"]

	if gauge_width:
		parts.append(intonation.needle.render_gauge(note.cents, gauge_width, accuracy))

	if intonation.needle.is_in_tune(note.cents, accuracy):
		parts.append("in tune")

	return "  ".join(parts)


class DisplayLogHandler (logging.Handler):

	"""Logging handler that clears and redraws the status line around log output.

	Installed by ``Display.start()`` and removed by ``Display.stop()``.
	"""

	def __init__ (self, display: "Display") -> None:

		"""Store reference to the display for clear/redraw calls."""

		super().__init__()
		self._display = display

	def emit (self, record: logging.LogRecord) -> None:

		"""Clear the status line, write the log message, then redraw."""

		try:
			self._display.clear_line()

			msg = self.format(record)
			self._display.stream.write(msg + "\n")
			self._display.stream.flush()

			self._display.draw()

		except Exception:
			self.handleError(record)


class Display:

	"""Single-line tuner readout written to a terminal stream.

	Subscribes to the tuner's note updates while active.  A custom
	``DisplayLogHandler`` ensures log messages scroll cleanly above the line.
	"""

	def __init__ (
		self,
		tuner: "Tuner",
		stream: typing.Optional[typing.TextIO] = None,
		ascii_only: bool = False
	) -> None:

		"""Store the tuner and output stream.

		Parameters:
			tuner: The ``Tuner`` to read from.
			stream: Where to draw, defaults to ``sys.stderr``.
			ascii_only: Use ``#``/``b`` accidentals for terminals without Unicode.
		"""

		self._tuner = tuner
		self.stream: typing.TextIO = stream if stream is not None else sys.stderr
		self._ascii_only = ascii_only
		self._active: bool = False
		self._handler: typing.Optional[DisplayLogHandler] = None
		self._saved_handlers: typing.List[logging.Handler] = []
		self._last_line: str = ""

	@property
	def active (self) -> bool:

		"""True between ``start()`` and ``stop()``."""

		return self._active

	def start (self) -> None:

		"""Install the log handler, subscribe to the tuner and draw the current reading."""

		if self._active:
			return

		self._active = True

		root_logger = logging.getLogger()

		# Save existing handlers so we can restore them on stop.
		self._saved_handlers = list(root_logger.handlers)

		self._handler = DisplayLogHandler(self)

		if self._saved_handlers and self._saved_handlers[0].formatter:
			self._handler.setFormatter(self._saved_handlers[0].formatter)
		else:
			self._handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))

		root_logger.handlers.clear()
		root_logger.addHandler(self._handler)

		self._tuner.on_note(self.update)
		self.update(self._tuner.note)

	def stop (self) -> None:

		"""Clear the status line, unsubscribe and restore original log handlers."""

		if not self._active:
			return

		self.clear_line()
		self._active = False

		self._tuner.off_note(self.update)

		root_logger = logging.getLogger()
		root_logger.handlers.clear()

		for handler in self._saved_handlers:
			root_logger.addHandler(handler)

		self._saved_handlers = []
		self._handler = None

	def update (self, note: intonation.pitch.PitchedNote) -> None:

		"""Rebuild and redraw the status line for a new reading."""

		if not self._active:
			return

		self._last_line = self._format_status(note)
		self.draw()

	def draw (self) -> None:

		"""Write the current status line to the terminal."""

		if not self._active or not self._last_line:
			return

		# No trailing newline - the cursor stays on the status line.
		self.stream.write(f"\r\033[K{self._last_line}")
		self.stream.flush()

	def clear_line (self) -> None:

		"""Erase the status line."""

		if not self._active:
			return

		self.stream.write("\r\033[K")
		self.stream.flush()

	def _gauge_width (self) -> int:

		term_width = shutil.get_terminal_size(fallback=(80, 24)).columns

		if term_width < _MIN_TERMINAL_WIDTH:
			return 0

		# Name, cents, frequency and "in tune" take about 45 columns.
		width = min(_MAX_GAUGE_WIDTH, term_width - 47)

		return width if width >= 3 else 0

	def _format_status (self, note: intonation.pitch.PitchedNote) -> str:

		"""Build the status string for a reading."""

		return format_reading(note, self._tuner.accuracy, self._gauge_width(), self._ascii_only)
