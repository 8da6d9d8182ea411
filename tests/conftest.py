import typing

import pytest

import intonation.pitch
import intonation.tuner


class NoteRecorder:

	"""Collects every note a tuner announces."""

	def __init__ (self) -> None:

		"""Start with no notes."""

		self.notes: typing.List[intonation.pitch.PitchedNote] = []

	def __call__ (self, note: intonation.pitch.PitchedNote) -> None:

		"""Record a note."""

		self.notes.append(note)

	@property
	def names (self) -> typing.List[str]:

		"""ASCII names of the recorded notes, in order."""

		return [note.ascii_name for note in self.notes]


@pytest.fixture
def tuner () -> intonation.tuner.Tuner:

	"""A tuner with default settings."""

	return intonation.tuner.Tuner()


@pytest.fixture
def recorder (tuner: intonation.tuner.Tuner) -> NoteRecorder:

	"""A recorder subscribed to the ``tuner`` fixture."""

	rec = NoteRecorder()
	tuner.on_note(rec)
	return rec
