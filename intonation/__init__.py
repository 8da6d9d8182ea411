"""
Intonation - chromatic tuner core for Python.

Maps a detected fundamental frequency onto the nearest pitch of the 12-tone
equal-tempered scale and reports how far off it is, in cents:

```python
import intonation

note = intonation.get_pitched_note(466.16, intonation.AccidentalMode.FLAT)

note.note        # "B"
note.accidental  # Accidental.FLAT
note.octave      # 4
note.cents       # ≈ -0.01
```

The mapper is a pure function with no state.  Around it sit the pieces a
tuning application needs:

- **Tuner session.** ``intonation.Tuner`` takes raw estimates from any
  pitch detector (``None`` when nothing was found), keeps the latest reading
  and notifies listeners.  The sharp/flat preference toggles live.
- **Needle helpers.** ``intonation.needle`` turns cents into an in-tune flag,
  a needle position that locks to centre inside the in-tune band, and a
  green-to-red colour.
- **Terminal display.** A persistent status line with an ASCII needle; log
  messages scroll above it.
- **OSC bridge.** Publish every reading to visualisers or lighting, and
  accept estimates and settings from other processes.
- **CLI.** ``python -m intonation 440 261.63`` or pipe estimates on stdin.

Audio capture and frequency estimation are deliberately left to other
libraries - anything that yields one frequency per buffer can drive a
``Tuner``.

Package-level exports: ``Accidental``, ``AccidentalMode``, ``InvalidFrequency``,
``PitchedNote``, ``Tuner``, ``get_pitched_note``.
"""

import intonation.pitch
import intonation.tuner


Accidental = intonation.pitch.Accidental
AccidentalMode = intonation.pitch.AccidentalMode
InvalidFrequency = intonation.pitch.InvalidFrequency
PitchedNote = intonation.pitch.PitchedNote
Tuner = intonation.tuner.Tuner
get_pitched_note = intonation.pitch.get_pitched_note
