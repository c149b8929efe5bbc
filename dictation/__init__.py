"""
Dictation - a melodic dictation ear-trainer.

Dictation plays a short random melody in a chosen key and scale and asks
you to write it back down, one note at a time.  Get every note right, in
order and with the right spelling, and you score ten points.

What it does:

- **Correct spelling.** Scales are spelled the way the key wants them:
  F major has a ``Bb``, not an ``A#``.  Flat keys (F, Bb, Eb, Ab, Db, Gb,
  Cb) use flats throughout; every other key uses sharps.
- **Five scale types** out of the box (``chromatic``, ``major``,
  ``minor``, ``pentatonic``, ``blues``), plus ``register_scale()`` for
  your own.
- **Steady playback.** Notes are sent at a fixed tempo (slow 1000 ms,
  medium 600 ms, fast 350 ms) over MIDI, so any synth can voice them.
  Only one playback runs at a time.
- **Deterministic when you want it.** Pass ``seed=`` in the config for a
  repeatable run, and drive a session from a ``ManualClock`` to test it
  without waiting for real time.

Minimal example:

    ```python
    import dictation

    session = dictation.Session(clock=dictation.ManualClock(), player=my_player)
    session.generate()
    for note in session.sequence:
        session.add_note(note)
    session.submit()   # → True
    session.score      # → 10
    ```

Run ``python -m dictation`` to practise in a terminal.

Package-level exports: ``Session``, ``Settings``, ``Note``, ``ManualClock``,
``scale_notes``, ``register_scale``.
"""

import dictation.clock
import dictation.config
import dictation.intervals
import dictation.pitch
import dictation.scales
import dictation.session


Session = dictation.session.Session
Settings = dictation.config.Settings
Note = dictation.pitch.Note
ManualClock = dictation.clock.ManualClock
scale_notes = dictation.scales.scale_notes
register_scale = dictation.intervals.register_scale
