"""Needle position and colour derived from a cents reading.

These are presentation helpers layered on top of ``PitchedNote.cents``.  None
of them feed back into the pitch mapping.

- ``is_in_tune()`` - inside the "close enough" band?
- ``deflection()`` - needle position in ``[-1, 1]``, locked to centre when in tune
- ``colour()`` - RGB triple fading from green (in tune) to red (a quarter tone out)
- ``render_gauge()`` - ASCII needle for terminal output
"""

import math
import typing

import intonation.constants


GOOD_COLOUR: typing.Tuple[int, int, int] = (0, 255, 125)


def check_accuracy (accuracy: float) -> float:

	"""Validate an in-tune band half-width in cents and return it as a float."""

	accuracy = float(accuracy)

	if not 0 <= accuracy <= intonation.constants.MAX_CENTS:
		raise ValueError(f"Accuracy must be between 0 and {intonation.constants.MAX_CENTS} cents, got {accuracy}")

	return accuracy


def is_in_tune (cents: float, accuracy: float = intonation.constants.ACCURACY_GOOD) -> bool:

	"""Return True when ``cents`` is strictly inside ``±accuracy``."""

	accuracy = check_accuracy(accuracy)

	return -accuracy < cents < accuracy


def deflection (cents: float, accuracy: float = intonation.constants.ACCURACY_GOOD) -> float:

	"""Needle offset from centre, ``-1.0`` (flat) to ``1.0`` (sharp).

	Readings inside the in-tune band snap the needle to ``0.0`` so it does not
	jitter around the centre mark.
	"""

	if is_in_tune(cents, accuracy):
		return 0.0

	return max(-1.0, min(1.0, cents / intonation.constants.MAX_CENTS))


def colour (cents: float, accuracy: float = intonation.constants.ACCURACY_GOOD) -> typing.Tuple[int, int, int]:

	"""Return an ``(r, g, b)`` colour for the needle.

	In tune is a fixed green.  Outside the band the red channel rises from 200
	to 250 and the green channel falls from 255 to 0 as the reading drifts
	towards a quarter tone; blue stays at 50.
	"""

	if is_in_tune(cents, accuracy):
		return GOOD_COLOUR

	ratio = min(abs(cents), intonation.constants.MAX_CENTS) / intonation.constants.MAX_CENTS

	red = math.floor(ratio * 50) + 200
	green = math.floor((1 - ratio) * 255)

	return red, green, 50


def render_gauge (cents: float, width: int = 21, accuracy: float = intonation.constants.ACCURACY_GOOD) -> str:

	"""Draw the needle as a single line of ASCII.

	The gauge is ``width`` characters between brackets, with ``|`` at the
	centre and ``*`` at the needle.  When in tune the centre mark itself
	becomes ``O``.

	Example:
		```python
		render_gauge(0.0, width=11)   # "[     O     ]"
		render_gauge(50.0, width=11)  # "[     |    *]"
		```
	"""

	if width < 3:
		raise ValueError(f"Gauge width must be at least 3, got {width}")

	# Odd widths keep the centre mark on a single cell.
	if width % 2 == 0:
		width += 1

	half = width // 2
	cells = [" "] * width

	if is_in_tune(cents, accuracy):
		cells[half] = "O"
	else:
		position = round(deflection(cents, accuracy) * half)

		# Out of tune never draws on the centre mark.
		if position == 0:
			position = 1 if cents > 0 else -1

		cells[half] = "|"
		cells[half + position] = "*"

	return "[" + "".join(cells) + "]"
