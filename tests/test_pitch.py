import dataclasses
import math
import typing

import pytest

import intonation
import intonation.pitch


SHARP = intonation.pitch.AccidentalMode.SHARP
FLAT = intonation.pitch.AccidentalMode.FLAT
NATURAL = intonation.pitch.Accidental.NATURAL


def _sweep (low: float = 16.0, high: float = 8000.0, steps: int = 2000) -> typing.List[float]:

	"""Geometrically spaced frequencies between low and high."""

	ratio = (high / low) ** (1.0 / (steps - 1))
	return [low * ratio ** i for i in range(steps)]


def test_reference_pitch_is_a4 () -> None:

	"""440 Hz should be exactly A4 with zero cents in either mode."""

	for mode in (SHARP, FLAT):
		note = intonation.pitch.get_pitched_note(440.0, mode)

		assert note.note == "A"
		assert note.accidental == NATURAL
		assert note.octave == 4
		assert note.cents == 0.0
		assert note.frequency == 440.0


def test_middle_c () -> None:

	"""261.6256 Hz should be C4 within rounding tolerance."""

	for mode in (SHARP, FLAT):
		note = intonation.pitch.get_pitched_note(261.6256, mode)

		assert (note.note, note.accidental, note.octave) == ("C", NATURAL, 4)
		assert note.cents == pytest.approx(0.0, abs=0.01)


def test_sharp_and_flat_spelling_of_same_pitch () -> None:

	"""466.16 Hz is A♯4 when sharp and B♭4 when flat, with identical cents."""

	sharp = intonation.pitch.get_pitched_note(466.16, SHARP)
	flat = intonation.pitch.get_pitched_note(466.16, FLAT)

	assert (sharp.note, sharp.accidental, sharp.octave) == ("A", intonation.pitch.Accidental.SHARP, 4)
	assert (flat.note, flat.accidental, flat.octave) == ("B", intonation.pitch.Accidental.FLAT, 4)

	assert sharp.cents == flat.cents
	assert sharp.cents == pytest.approx(0.0, abs=0.05)

	assert sharp.name == "A♯4"
	assert flat.name == "B♭4"
	assert sharp.ascii_name == "A#4"
	assert flat.ascii_name == "Bb4"


@pytest.mark.parametrize("frequency,expected", [
	(16.35, "C0"),
	(27.5, "A0"),
	(82.41, "E2"),
	(110.0, "A2"),
	(246.94, "B3"),
	(329.63, "E4"),
	(493.88, "B4"),
	(523.25, "C5"),
	(4186.01, "C8"),
])
def test_known_pitches (frequency: float, expected: str) -> None:

	"""Standard equal-tempered frequencies should map to their names."""

	assert intonation.pitch.get_pitched_note(frequency).ascii_name == expected


def test_octave_4_spellings () -> None:

	"""Every pitch class from C4 to B4 should be spelled correctly in both modes."""

	sharp_names = ["C4", "C#4", "D4", "D#4", "E4", "F4", "F#4", "G4", "G#4", "A4", "A#4", "B4"]
	flat_names = ["C4", "Db4", "D4", "Eb4", "E4", "F4", "Gb4", "G4", "Ab4", "A4", "Bb4", "B4"]

	for index, semitone in enumerate(range(-9, 3)):
		frequency = intonation.pitch.semitone_frequency(semitone)

		sharp = intonation.pitch.get_pitched_note(frequency, SHARP)
		flat = intonation.pitch.get_pitched_note(frequency, FLAT)

		assert sharp.ascii_name == sharp_names[index]
		assert flat.ascii_name == flat_names[index]
		assert sharp.cents == pytest.approx(0.0, abs=1e-9)


def test_octave_boundary_falls_between_b_and_c () -> None:

	"""Just below the B3/C4 midpoint is B3; just above and at middle C is C4."""

	below = intonation.pitch.get_pitched_note(250.0)
	just_below = intonation.pitch.get_pitched_note(254.0)
	just_above = intonation.pitch.get_pitched_note(254.4)
	at_c = intonation.pitch.get_pitched_note(261.63)

	assert (below.note, below.octave) == ("B", 3)
	assert (just_below.note, just_below.octave) == ("B", 3)
	assert just_below.cents == pytest.approx(48.8, abs=0.1)

	assert (just_above.note, just_above.octave) == ("C", 4)
	assert just_above.cents == pytest.approx(-48.5, abs=0.1)

	assert (at_c.note, at_c.accidental, at_c.octave) == ("C", NATURAL, 4)


def test_octave_does_not_change_at_a () -> None:

	"""G♯4 and A4 share an octave; G♯3 is an octave below."""

	assert intonation.pitch.get_pitched_note(415.30).ascii_name == "G#4"
	assert intonation.pitch.get_pitched_note(440.0).ascii_name == "A4"
	assert intonation.pitch.get_pitched_note(207.65).ascii_name == "G#3"


@pytest.mark.parametrize("semitone,expected", [
	(0, ("A", NATURAL, 4)),
	(3, ("C", NATURAL, 5)),
	(-9, ("C", NATURAL, 4)),
	(-10, ("B", NATURAL, 3)),
	(-21, ("C", NATURAL, 3)),
	(14, ("B", NATURAL, 5)),
	(15, ("C", NATURAL, 6)),
])
def test_spell_octave_formula (semitone: int, expected: typing.Tuple[str, intonation.pitch.Accidental, int]) -> None:

	"""Semitone offsets from A4 should land in the right octave."""

	assert intonation.pitch.spell(semitone) == expected


def test_spell_accepts_mode_strings () -> None:

	"""spell() should accept "flat" as well as the enum."""

	assert intonation.pitch.spell(1, "flat") == ("B", intonation.pitch.Accidental.FLAT, 4)


def test_cents_always_in_half_open_range () -> None:

	"""Cents should lie in (-50, 50] across the audible range."""

	for frequency in _sweep():
		for mode in (SHARP, FLAT):
			cents = intonation.pitch.get_pitched_note(frequency, mode).cents
			assert -50.0 < cents <= 50.0


def test_cents_and_semitone_agree () -> None:

	"""The chosen pitch shifted by the reported cents should reproduce the input."""

	for frequency in _sweep(steps=500):
		note = intonation.pitch.get_pitched_note(frequency)
		target = intonation.pitch.semitone_frequency(note.midi_note - 69)

		assert target * 2.0 ** (note.cents / 1200.0) == pytest.approx(frequency, rel=1e-9)


def test_mode_changes_only_spelling () -> None:

	"""Switching mode never changes octave, cents or the underlying semitone."""

	for frequency in _sweep(steps=500):
		sharp = intonation.pitch.get_pitched_note(frequency, SHARP)
		flat = intonation.pitch.get_pitched_note(frequency, FLAT)

		assert sharp.octave == flat.octave
		assert sharp.cents == flat.cents
		assert sharp.midi_note == flat.midi_note

		if sharp.accidental == NATURAL:
			assert sharp == flat
		else:
			assert sharp.accidental == intonation.pitch.Accidental.SHARP
			assert flat.accidental == intonation.pitch.Accidental.FLAT


def test_cents_increase_within_a_semitone_then_wrap () -> None:

	"""Rising frequency raises cents until the next semitone takes over at the midpoint."""

	readings = [intonation.pitch.get_pitched_note(440.0 * 2.0 ** (c / 1200.0)) for c in range(-45, 50, 5)]

	for previous, current in zip(readings, readings[1:]):
		assert current.cents > previous.cents
		assert current.ascii_name == "A4"

	before = intonation.pitch.get_pitched_note(440.0 * 2.0 ** (49.5 / 1200.0))
	after = intonation.pitch.get_pitched_note(440.0 * 2.0 ** (50.5 / 1200.0))

	assert before.ascii_name == "A4"
	assert before.cents == pytest.approx(49.5, abs=1e-6)
	assert after.ascii_name == "A#4"
	assert after.cents == pytest.approx(-49.5, abs=1e-6)


def test_nearest_semitone_ties_round_down () -> None:

	"""Exact half-semitone offsets go to the lower semitone with +50 cents."""

	assert intonation.pitch.nearest_semitone(0.5) == (0, 50.0)
	assert intonation.pitch.nearest_semitone(-0.5) == (-1, 50.0)
	assert intonation.pitch.nearest_semitone(2.5) == (2, 50.0)
	assert intonation.pitch.nearest_semitone(-11.5) == (-12, 50.0)


def test_nearest_semitone_rounds_to_closest () -> None:

	"""Non-tie offsets round to the closest integer."""

	assert intonation.pitch.nearest_semitone(0.0) == (0, 0.0)

	semitone, cents = intonation.pitch.nearest_semitone(0.49)
	assert semitone == 0
	assert cents == pytest.approx(49.0)

	semitone, cents = intonation.pitch.nearest_semitone(0.51)
	assert semitone == 1
	assert cents == pytest.approx(-49.0)

	semitone, cents = intonation.pitch.nearest_semitone(-0.49)
	assert semitone == 0
	assert cents == pytest.approx(-49.0)

	semitone, cents = intonation.pitch.nearest_semitone(-3.75)
	assert semitone == -4
	assert cents == pytest.approx(25.0)


def test_midi_note_numbers () -> None:

	"""midi_note should follow A4 = 69, C4 = 60."""

	assert intonation.pitch.get_pitched_note(440.0).midi_note == 69
	assert intonation.pitch.get_pitched_note(261.63).midi_note == 60
	assert intonation.pitch.get_pitched_note(246.94).midi_note == 59
	assert intonation.pitch.get_pitched_note(466.16, FLAT).midi_note == 70
	assert intonation.pitch.get_pitched_note(277.18, FLAT).midi_note == 61
	assert intonation.pitch.get_pitched_note(27.5).midi_note == 21


def test_custom_reference () -> None:

	"""A different A4 moves the whole scale."""

	at_432 = intonation.pitch.get_pitched_note(432.0, reference=432.0)
	assert at_432.ascii_name == "A4"
	assert at_432.cents == 0.0

	against_432 = intonation.pitch.get_pitched_note(440.0, reference=432.0)
	assert against_432.ascii_name == "A4"
	assert against_432.cents == pytest.approx(1200.0 * math.log2(440.0 / 432.0))


def test_semitone_frequency () -> None:

	"""semitone_frequency should give equal-tempered targets."""

	assert intonation.pitch.semitone_frequency(0) == 440.0
	assert intonation.pitch.semitone_frequency(12) == pytest.approx(880.0)
	assert intonation.pitch.semitone_frequency(-9) == pytest.approx(261.6256, abs=1e-4)
	assert intonation.pitch.semitone_frequency(-12, reference=432.0) == pytest.approx(216.0)


@pytest.mark.parametrize("frequency", [-10, 0, 0.0, -0.0, float("nan"), float("inf"), float("-inf")])
def test_invalid_frequency (frequency: float) -> None:

	"""Non-positive and non-finite frequencies should be rejected."""

	with pytest.raises(intonation.pitch.InvalidFrequency):
		intonation.pitch.get_pitched_note(frequency, SHARP)


def test_invalid_frequency_is_a_value_error () -> None:

	"""InvalidFrequency should be catchable as ValueError."""

	with pytest.raises(ValueError, match="positive"):
		intonation.get_pitched_note(-10, intonation.AccidentalMode.SHARP)


def test_invalid_reference () -> None:

	"""A bad reference should be rejected the same way."""

	with pytest.raises(intonation.pitch.InvalidFrequency):
		intonation.pitch.get_pitched_note(440.0, reference=0.0)


def test_non_numeric_frequency () -> None:

	"""Strings and None are type errors, not frequencies."""

	with pytest.raises(TypeError):
		intonation.pitch.get_pitched_note("440")  # type: ignore[arg-type]

	with pytest.raises(TypeError):
		intonation.pitch.get_pitched_note(None)  # type: ignore[arg-type]


def test_integer_frequency_is_echoed () -> None:

	"""The input frequency should come back unchanged."""

	note = intonation.pitch.get_pitched_note(440)

	assert note.frequency == 440
	assert note.ascii_name == "A4"


def test_deterministic () -> None:

	"""Identical inputs should give identical outputs."""

	for frequency in (27.5, 123.456, 466.16, 1234.5):
		first = intonation.pitch.get_pitched_note(frequency, FLAT)
		second = intonation.pitch.get_pitched_note(frequency, FLAT)

		assert first == second
		assert first.cents.hex() == second.cents.hex()


def test_pitched_note_is_immutable () -> None:

	"""PitchedNote should be frozen."""

	note = intonation.pitch.get_pitched_note(440.0)

	with pytest.raises(dataclasses.FrozenInstanceError):
		note.cents = 1.0  # type: ignore[misc]


def test_accidental_mode_parse () -> None:

	"""parse() should accept enum values and case-insensitive names."""

	assert intonation.pitch.AccidentalMode.parse(FLAT) is FLAT
	assert intonation.pitch.AccidentalMode.parse("Sharp") is SHARP
	assert intonation.pitch.AccidentalMode.parse(" flat ") is FLAT

	with pytest.raises(ValueError, match="Unknown accidental mode"):
		intonation.pitch.AccidentalMode.parse("natural")


def test_accidental_mode_toggled () -> None:

	"""toggled() should flip between the two modes."""

	assert SHARP.toggled() is FLAT
	assert FLAT.toggled() is SHARP


def test_nearest_semitone_one_ulp_from_ties () -> None:

	"""Offsets a single ulp either side of a tie stay in range and consistent."""

	for tie in (-11.5, -2.5, -0.5, 0.5, 1.5, 7.5, 63.5):
		for offset in (math.nextafter(tie, -math.inf), tie, math.nextafter(tie, math.inf)):
			semitone, cents = intonation.pitch.nearest_semitone(offset)

			assert -50.0 < cents <= 50.0
			assert semitone + cents / 100.0 == pytest.approx(offset, abs=1e-12)

	semitone, cents = intonation.pitch.nearest_semitone(math.nextafter(0.5, math.inf))

	assert semitone == 1
	assert -50.0 < cents < -49.99999999999


def test_nearest_semitone_just_below_negative_tie () -> None:

	"""The smallest step above -0.5 still reports a cents value inside the range."""

	semitone, cents = intonation.pitch.nearest_semitone(math.nextafter(-0.5, math.inf))

	assert semitone in (-1, 0)
	assert -50.0 < cents <= 50.0
