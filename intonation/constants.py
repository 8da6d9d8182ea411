"""Constants for intonation.

Reference pitch, in-tune band and the audio format the capture side is
expected to deliver.  Convention: **A4 = 440 Hz**, octaves in scientific pitch
notation (middle C is C4).
"""

# Scale anchor.
REFERENCE_FREQUENCY = 440.0
REFERENCE_NOTE = "A"
REFERENCE_OCTAVE = 4

# Readings within this many cents either side of a pitch count as in tune.
ACCURACY_GOOD = 10.0

# Half a semitone - the largest possible deviation from the nearest pitch.
MAX_CENTS = 50.0

# Reading shown before the first pitch has been detected.
DEFAULT_FREQUENCY = REFERENCE_FREQUENCY

# Audio format for the capture/estimator collaborators.
SAMPLE_RATE = 22050
BUFFER_SIZE = 4096

# OSC defaults.
OSC_RECEIVE_PORT = 9000
OSC_SEND_PORT = 9001
OSC_SEND_HOST = "127.0.0.1"
