"""Pitch classes and note-name normalization.

Every note name entering the engine passes through ``to_pitch_class`` so
that enharmonic spellings ("C#", "Db", "B##") compare equal as integers.
Display names are produced separately and are never used for comparison.
"""

from __future__ import annotations

import re
from enum import Enum, unique
from typing import Dict, NewType, Optional, Tuple

from fretmap.base import MatchException, NoteNameException

PitchClass = NewType("PitchClass", int)
"""A note's identity modulo octave (0-11, C = 0)."""

MAX_NOTES = 12
"""Number of distinct pitch classes in the chromatic scale."""


@unique
class Spelling(Enum):
    """Preferred accidental for display names."""

    Sharp = "sharp"
    Flat = "flat"


SHARP_NAMES: Tuple[str, ...] = (
    "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B",
)  # fmt: skip
FLAT_NAMES: Tuple[str, ...] = (
    "C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B",
)  # fmt: skip

_LETTER_TO_SEMITONE: Dict[str, int] = {
    "c": 0,
    "d": 2,
    "e": 4,
    "f": 5,
    "g": 7,
    "a": 9,
    "b": 11,
}

_ACCIDENTAL_TO_STEPS: Dict[str, int] = {
    "#": 1,
    "♯": 1,  # sharp sign
    "x": 2,  # double sharp
    "\U0001d12a": 2,  # double sharp sign
    "b": -1,
    "♭": -1,  # flat sign
    "\U0001d12b": -2,  # double flat sign
}

_NOTE_PATTERN = re.compile(
    r"^\s*([A-Ga-g])([#x♯\U0001d12ab♭\U0001d12b]*)(-?\d+)?\s*$"
)


def add_steps(pc: int, steps: int) -> PitchClass:
    """Transpose a pitch class by a number of semitones, wrapping at 12."""
    return PitchClass((pc + steps) % MAX_NOTES)


def _split_note(name: str) -> Tuple[int, Optional[int]]:
    """Split a note name into its unwrapped semitone offset and octave.

    The semitone offset is not reduced modulo 12, so "B#4" yields 12 and
    "Cb4" yields -1; callers fold or combine with the octave as needed.

    Raises:
        NoteNameException: If the name is not a recognized spelling.
    """
    if not isinstance(name, str):
        raise NoteNameException(name)
    m = _NOTE_PATTERN.match(name)
    if m is None:
        raise NoteNameException(name)
    letter, accidentals, octave_str = m.groups()
    semitone = _LETTER_TO_SEMITONE[letter.lower()]
    for acc in accidentals:
        semitone += _ACCIDENTAL_TO_STEPS[acc]
    octave = int(octave_str) if octave_str is not None else None
    return semitone, octave


def to_pitch_class(name: str) -> PitchClass:
    """Resolve a note name to its pitch class.

    Accepts a letter A-G in either case followed by any run of accidentals
    ("#", "b", "x" for double sharp, or the unicode signs) and an optional
    octave number, which is ignored.

    Examples:
        "C"   -> 0
        "Db"  -> 1
        "C#4" -> 1
        "Bbb" -> 9   # double flat, same as A
        "Fx"  -> 7   # double sharp, same as G

    Args:
        name: The note name to resolve.

    Returns:
        The pitch class of the note.

    Raises:
        NoteNameException: If the name is not a recognized spelling.
    """
    semitone, _ = _split_note(name)
    return PitchClass(semitone % MAX_NOTES)


def to_display_name(pc: int, spelling: Spelling = Spelling.Sharp) -> str:
    """Render a pitch class as a note name.

    This is purely cosmetic; the result round-trips through
    ``to_pitch_class`` but is never used for comparison.

    Args:
        pc: The pitch class (reduced modulo 12).
        spelling: Whether to prefer sharps or flats for black keys.

    Returns:
        The note name without octave.
    """
    if spelling == Spelling.Sharp:
        return SHARP_NAMES[pc % MAX_NOTES]
    elif spelling == Spelling.Flat:
        return FLAT_NAMES[pc % MAX_NOTES]
    else:
        raise MatchException(spelling)


def parse_note(name: str) -> int:
    """Parse a note name with octave into a MIDI note number.

    Uses scientific pitch notation where middle C is C4 = 60 and A4 = 69.
    Accidentals may carry the note across an octave boundary ("B#3" is the
    same MIDI note as "C4").

    Args:
        name: Note name with an octave number, e.g. "E2" or "F#3".

    Returns:
        The MIDI note number.

    Raises:
        NoteNameException: If the name is malformed or has no octave.
    """
    semitone, octave = _split_note(name)
    if octave is None:
        raise NoteNameException(name)
    return (octave + 1) * MAX_NOTES + semitone


def note_display_name(note: int, spelling: Spelling = Spelling.Sharp) -> str:
    """Render a MIDI note number as a name with octave, e.g. 60 -> "C4"."""
    return f"{to_display_name(note, spelling)}{note // MAX_NOTES - 1}"
