"""Tuner session: the state a tuning UI keeps around the pure pitch mapper.

A ``Tuner`` receives one estimate per audio buffer from an external pitch
estimator, discards "no pitch" results, maps the rest and tells listeners
about the new note:

```python
tuner = intonation.tuner.Tuner()
tuner.on_note(lambda note: print(note.name, round(note.cents)))

for estimate in estimator_results:   # floats, or None when nothing was found
	tuner.feed(estimate)
```

The accidental preference can be flipped at any time with ``toggle_accidental()``;
the current reading is re-spelled immediately so the display follows the toggle
without waiting for the next estimate.
"""

import logging
import math
import typing

import intonation.constants
import intonation.needle
import intonation.pitch


logger = logging.getLogger(__name__)

NoteCallback = typing.Callable[[intonation.pitch.PitchedNote], typing.Any]


class Tuner:

	"""
	Holds the accidental mode, reference pitch, in-tune band and latest reading.
	"""

	def __init__ (
		self,
		mode: typing.Union[str, intonation.pitch.AccidentalMode] = intonation.pitch.AccidentalMode.SHARP,
		reference: float = intonation.constants.REFERENCE_FREQUENCY,
		accuracy: float = intonation.constants.ACCURACY_GOOD
	) -> None:

		"""Create a tuner showing the default A4 reading.

		Parameters:
			mode: Accidental spelling, ``"sharp"`` or ``"flat"``.
			reference: Frequency of A4 in Hz.
			accuracy: Half-width of the in-tune band in cents.
		"""

		self._mode = intonation.pitch.AccidentalMode.parse(mode)
		self._reference = intonation.pitch.semitone_frequency(0, reference)
		self._listeners: typing.List[NoteCallback] = []

		self.accuracy = accuracy

		self._frequency: float = intonation.constants.DEFAULT_FREQUENCY
		self._note = self.map(self._frequency)


	# ------------------------------------------------------------------
	# Settings
	# ------------------------------------------------------------------

	@property
	def mode (self) -> intonation.pitch.AccidentalMode:

		"""Current accidental spelling."""

		return self._mode

	@mode.setter
	def mode (self, value: typing.Union[str, intonation.pitch.AccidentalMode]) -> None:

		mode = intonation.pitch.AccidentalMode.parse(value)

		if mode is self._mode:
			return

		self._mode = mode
		logger.info(f"Accidental mode set to {mode.value}")
		self._remap()

	def toggle_accidental (self) -> intonation.pitch.AccidentalMode:

		"""Switch between sharp and flat spelling and return the new mode."""

		self.mode = self._mode.toggled()
		return self._mode

	@property
	def reference (self) -> float:

		"""Frequency of A4 in Hz."""

		return self._reference

	@reference.setter
	def reference (self, value: float) -> None:

		# semitone_frequency(0, ...) validates and returns the reference itself.
		self._reference = intonation.pitch.semitone_frequency(0, value)
		logger.info(f"Reference set to A4 = {self._reference:.2f} Hz")
		self._remap()

	@property
	def accuracy (self) -> float:

		"""Half-width of the in-tune band in cents."""

		return self._accuracy

	@accuracy.setter
	def accuracy (self, value: float) -> None:

		self._accuracy = intonation.needle.check_accuracy(value)


	# ------------------------------------------------------------------
	# Readings
	# ------------------------------------------------------------------

	@property
	def note (self) -> intonation.pitch.PitchedNote:

		"""The most recent valid reading (A4 before anything is detected)."""

		return self._note

	@property
	def in_tune (self) -> bool:

		"""Whether the current reading is inside the in-tune band."""

		return intonation.needle.is_in_tune(self._note.cents, self._accuracy)

	def map (self, frequency: float) -> intonation.pitch.PitchedNote:

		"""Map a frequency with this tuner's settings, without changing its state.

		Raises:
			InvalidFrequency: For zero, negative or non-finite input.
		"""

		return intonation.pitch.get_pitched_note(frequency, self._mode, self._reference)

	def feed (self, frequency: typing.Optional[float]) -> typing.Optional[intonation.pitch.PitchedNote]:

		"""Accept one estimate from the pitch estimator.

		``None``, zero, negative and non-finite estimates mean nothing was
		detected; they are dropped and the previous reading stays current.

		Returns:
			The new ``PitchedNote``, or ``None`` if the estimate was dropped.
		"""

		if frequency is None or not math.isfinite(frequency) or frequency <= 0:
			logger.debug(f"No pitch in estimate {frequency!r}")
			return None

		self._frequency = frequency
		self._note = self.map(frequency)
		self._notify()

		return self._note

	def _remap (self) -> None:

		self._note = self.map(self._frequency)
		self._notify()


	# ------------------------------------------------------------------
	# Listeners
	# ------------------------------------------------------------------

	def on_note (self, callback: NoteCallback) -> None:

		"""Call ``callback(note)`` whenever the current reading changes."""

		self._listeners.append(callback)

	def off_note (self, callback: NoteCallback) -> None:

		"""
		Unregister a callback added with ``on_note()``.

		Raises ``ValueError`` if the callback is not registered.
		"""

		if callback not in self._listeners:
			raise ValueError("Callback not registered for note updates")

		self._listeners.remove(callback)

	def _notify (self) -> None:

		for callback in list(self._listeners):
			callback(self._note)
