"""Frequency to pitch mapping on the 12-tone equal-tempered scale.

Converts a detected fundamental frequency into the nearest equal-tempered
pitch and the signed deviation from it in cents:

```python
import intonation.pitch

note = intonation.pitch.get_pitched_note(466.16, intonation.pitch.AccidentalMode.FLAT)
note.name   # "B♭4"
note.cents  # ≈ -0.01
```

The scale is anchored at A4 (440 Hz by default).  Offsets are rounded to the
nearest semitone with exact ties going to the lower semitone, so ``cents`` always
lies in the half-open range ``(-50, 50]``.

Everything here is a pure function of its arguments - there is no module state
and the functions are safe to call from any thread.
"""

import dataclasses
import enum
import math
import numbers
import typing

import intonation.constants


class InvalidFrequency (ValueError):

	"""Raised when a frequency is zero, negative, NaN or infinite."""


class Accidental (str, enum.Enum):

	"""Modifier attached to a letter name."""

	NATURAL = "natural"
	SHARP = "sharp"
	FLAT = "flat"


class AccidentalMode (str, enum.Enum):

	"""
	Spelling preference for the five non-natural pitch classes.

	Only the name changes - ``SHARP`` gives ``A♯`` where ``FLAT`` gives ``B♭``
	for the same semitone.
	"""

	SHARP = "sharp"
	FLAT = "flat"


	@classmethod
	def parse (cls, value: typing.Union[str, "AccidentalMode"]) -> "AccidentalMode":

		"""Accept an ``AccidentalMode`` or a case-insensitive ``"sharp"`` / ``"flat"`` string.

		Raises:
			ValueError: If the value names neither mode.
		"""

		if isinstance(value, cls):
			return value

		try:
			return cls(str(value).strip().lower())
		except ValueError:
			raise ValueError(f"Unknown accidental mode: {value!r} (expected 'sharp' or 'flat')") from None


	def toggled (self) -> "AccidentalMode":

		"""Return the other mode."""

		return AccidentalMode.FLAT if self is AccidentalMode.SHARP else AccidentalMode.SHARP


ACCIDENTAL_SYMBOLS: typing.Dict[Accidental, str] = {
	Accidental.NATURAL: "",
	Accidental.SHARP: "♯",
	Accidental.FLAT: "♭",
}

ACCIDENTAL_ASCII: typing.Dict[Accidental, str] = {
	Accidental.NATURAL: "",
	Accidental.SHARP: "#",
	Accidental.FLAT: "b",
}

# Semitones above C for each natural letter.
LETTER_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"D": 2,
	"E": 4,
	"F": 5,
	"G": 7,
	"A": 9,
	"B": 11,
}

_Spelling = typing.Tuple[str, Accidental]

# Indexed by semitones above A.  Each entry is (sharp spelling, flat spelling).
PITCH_CLASS_NAMES: typing.List[typing.Tuple[_Spelling, _Spelling]] = [
	(("A", Accidental.NATURAL), ("A", Accidental.NATURAL)),
	(("A", Accidental.SHARP), ("B", Accidental.FLAT)),
	(("B", Accidental.NATURAL), ("B", Accidental.NATURAL)),
	(("C", Accidental.NATURAL), ("C", Accidental.NATURAL)),
	(("C", Accidental.SHARP), ("D", Accidental.FLAT)),
	(("D", Accidental.NATURAL), ("D", Accidental.NATURAL)),
	(("D", Accidental.SHARP), ("E", Accidental.FLAT)),
	(("E", Accidental.NATURAL), ("E", Accidental.NATURAL)),
	(("F", Accidental.NATURAL), ("F", Accidental.NATURAL)),
	(("F", Accidental.SHARP), ("G", Accidental.FLAT)),
	(("G", Accidental.NATURAL), ("G", Accidental.NATURAL)),
	(("G", Accidental.SHARP), ("A", Accidental.FLAT)),
]

# Semitones from C4 up to A4.
_A_ABOVE_C = 9


@dataclasses.dataclass(frozen=True)
class PitchedNote:

	"""
	The nearest equal-tempered pitch to a frequency, and the deviation from it.

	Attributes:
		note: Natural letter name, ``"A"`` to ``"G"``.
		accidental: Natural, sharp or flat.
		octave: Scientific pitch notation octave (middle C is C4).
		frequency: The input frequency in Hz, unchanged.
		cents: Signed deviation from the nearest pitch, in ``(-50, 50]``.
	"""

	note: str
	accidental: Accidental
	octave: int
	frequency: float
	cents: float


	@property
	def name (self) -> str:

		"""Display name with a proper accidental glyph, e.g. ``"A♯4"``."""

		return f"{self.note}{ACCIDENTAL_SYMBOLS[self.accidental]}{self.octave}"


	@property
	def ascii_name (self) -> str:

		"""Name using ``#`` and ``b``, e.g. ``"A#4"`` or ``"Bb4"``."""

		return f"{self.note}{ACCIDENTAL_ASCII[self.accidental]}{self.octave}"


	@property
	def midi_note (self) -> int:

		"""MIDI note number of the nearest pitch (A4 = 69, C4 = 60)."""

		pc = LETTER_TO_PC[self.note]

		if self.accidental is Accidental.SHARP:
			pc += 1
		elif self.accidental is Accidental.FLAT:
			pc -= 1

		return (self.octave + 1) * 12 + pc


def _check_positive (value: float, label: str) -> float:

	if not isinstance(value, numbers.Real):
		raise TypeError(f"{label} must be a real number, got {type(value).__name__}")

	value = float(value)

	if not math.isfinite(value) or value <= 0:
		raise InvalidFrequency(f"{label} must be a finite positive number of Hz, got {value!r}")

	return value


def nearest_semitone (offset: float) -> typing.Tuple[int, float]:

	"""Split a continuous semitone offset into the nearest semitone and the cents left over.

	Exact ties round down, so an offset of ``0.5`` gives ``(0, 50.0)`` and ``-0.5``
	gives ``(-1, 50.0)``.  The returned cents are always in ``(-50, 50]``.

	Parameters:
		offset: Semitones relative to the reference pitch (may be fractional).

	Returns:
		``(semitone, cents)``
	"""

	semitone = math.ceil(offset - 0.5)

	# offset - semitone is at least one ulp above -0.5, which scaled by 100
	# still rounds above -50.
	return semitone, (offset - semitone) * 100.0


def semitone_frequency (semitone: int, reference: float = intonation.constants.REFERENCE_FREQUENCY) -> float:

	"""Return the equal-tempered frequency ``semitone`` steps away from the reference."""

	reference = _check_positive(reference, "Reference frequency")

	return reference * 2.0 ** (semitone / 12.0)


def spell (semitone: int, mode: AccidentalMode = AccidentalMode.SHARP) -> typing.Tuple[str, Accidental, int]:

	"""Name a semitone offset from A4 as ``(letter, accidental, octave)``.

	Example:
		```python
		spell(0)                       # ("A", Accidental.NATURAL, 4)
		spell(1, AccidentalMode.FLAT)  # ("B", Accidental.FLAT, 4)
		spell(-10)                     # ("B", Accidental.NATURAL, 3)
		```
	"""

	sharp_name, flat_name = PITCH_CLASS_NAMES[semitone % 12]
	letter, accidental = flat_name if AccidentalMode.parse(mode) is AccidentalMode.FLAT else sharp_name

	# Octaves change at C, which sits 9 semitones below A.
	octave = intonation.constants.REFERENCE_OCTAVE + (semitone + _A_ABOVE_C) // 12

	return letter, accidental, octave


def get_pitched_note (
	frequency: float,
	mode: AccidentalMode = AccidentalMode.SHARP,
	reference: float = intonation.constants.REFERENCE_FREQUENCY
) -> PitchedNote:

	"""Map a frequency onto the nearest equal-tempered pitch.

	Parameters:
		frequency: Detected fundamental frequency in Hz.  Callers should drop
			"no pitch" estimates before calling rather than passing zero.
		mode: Spelling used for non-natural pitch classes.
		reference: Frequency of A4 in Hz.

	Returns:
		A ``PitchedNote`` echoing ``frequency`` with the nearest pitch and its
		deviation in cents.

	Raises:
		InvalidFrequency: If ``frequency`` or ``reference`` is zero, negative,
			NaN or infinite.
	"""

	checked = _check_positive(frequency, "Frequency")
	reference = _check_positive(reference, "Reference frequency")

	offset = 12.0 * math.log2(checked / reference)
	semitone, cents = nearest_semitone(offset)
	letter, accidental, octave = spell(semitone, mode)

	return PitchedNote(
		note = letter,
		accidental = accidental,
		octave = octave,
		frequency = frequency,
		cents = cents
	)
