"""TabComposer: fretboard-driven alphaTex tablature composer."""

__version__ = "0.1.0"
