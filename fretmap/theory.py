"""Chord and scale resolution into ordered tone sets.

A tone set is the ordered sequence of pitch classes of a chord (root first)
or a scale (tonic first, ascending). This module resolves declarative chord
symbols and scale names into tone sets; the search modules only ever see
the resulting pitch classes.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, NewType, Optional, Tuple, cast

from fretmap.base import ToneSetException
from fretmap.pitch import MAX_NOTES, PitchClass, add_steps, to_pitch_class

ToneSet = Tuple[PitchClass, ...]
"""Ordered pitch classes of a chord or scale, root first."""

Chord = NewType("Chord", str)


_CHORD_MAP = cast(
    Dict[str, Chord],
    {
        # Major variants
        "": "maj",
        "major": "maj",
        "maj": "maj",
        "M": "maj",
        # Augmented
        "aug": "aug",
        "+": "aug",
        "plus": "aug",
        "sharp5": "aug",
        # Sixth chords
        "6": "6",
        "six": "6",
        "M6": "6",
        "maj6": "6",
        "69": "69",
        "6/9": "69",
        # Major seventh and extensions
        "major7": "maj7",
        "maj7": "maj7",
        "M7": "maj7",
        "Δ": "maj7",
        "Δ7": "maj7",
        "maj9": "maj9",
        "M9": "maj9",
        "add9": "add9",
        "major11": "maj11",
        "maj11": "maj11",
        "M11": "maj11",
        "major13": "maj13",
        "maj13": "maj13",
        "M13": "maj13",
        # Dominant chords
        "7": "dom7",
        "dom7": "dom7",
        "dom": "dom7",
        "7b5": "7f5",
        "7f5": "7f5",
        "7#5": "7s5",
        "7s5": "7s5",
        "7b9": "7f9",
        "7f9": "7f9",
        "7#9": "7s9",
        "7s9": "7s9",
        "9": "9",
        "11": "11",
        "13": "13",
        # Minor chords
        "minor": "min",
        "min": "min",
        "m": "min",
        "-": "min",
        "diminished": "dim",
        "dim": "dim",
        "°": "dim",
        "m6": "min6",
        "min6": "min6",
        "minor7": "min7",
        "min7": "min7",
        "m7": "min7",
        "-7": "min7",
        "m7b5": "min7f5",
        "min7b5": "min7f5",
        "m7f5": "min7f5",
        "min7f5": "min7f5",
        "ø": "min7f5",
        "ø7": "min7f5",
        "halfdim": "min7f5",
        "diminished7": "dim7",
        "dim7": "dim7",
        "°7": "dim7",
        "m9": "min9",
        "min9": "min9",
        "m11": "min11",
        "min11": "min11",
        "mmaj7": "mmaj7",
        "mM7": "mmaj7",
        "minmaj7": "mmaj7",
        # Other chords
        "5": "5",
        "sus2": "sus2",
        "sus4": "sus4",
        "sus": "sus4",
        "7sus2": "7sus2",
        "7sus4": "7sus4",
    },
)


# Chord note intervals (semitones from root)
_CHORD_INTERVALS = cast(
    Dict[Chord, List[int]],
    {
        # Major chords
        "maj": [0, 4, 7],
        "aug": [0, 4, 8],
        "6": [0, 4, 7, 9],
        "69": [0, 4, 7, 9, 14],
        "maj7": [0, 4, 7, 11],
        "maj9": [0, 4, 7, 11, 14],
        "add9": [0, 4, 7, 14],
        "maj11": [0, 4, 7, 11, 14, 17],
        "maj13": [0, 4, 7, 11, 14, 21],
        # Dominant chords
        "dom7": [0, 4, 7, 10],
        "7f5": [0, 4, 6, 10],
        "7s5": [0, 4, 8, 10],
        "7f9": [0, 4, 7, 10, 13],
        "7s9": [0, 4, 7, 10, 15],
        "9": [0, 4, 7, 10, 14],
        "11": [0, 4, 7, 10, 14, 17],
        "13": [0, 4, 7, 10, 14, 17, 21],
        # Minor chords
        "min": [0, 3, 7],
        "dim": [0, 3, 6],
        "min6": [0, 3, 7, 9],
        "min7": [0, 3, 7, 10],
        "min7f5": [0, 3, 6, 10],
        "dim7": [0, 3, 6, 9],
        "min9": [0, 3, 7, 10, 14],
        "min11": [0, 3, 7, 10, 14, 17],
        "mmaj7": [0, 3, 7, 11],
        # Other chords
        "5": [0, 7],
        "sus2": [0, 2, 7],
        "sus4": [0, 5, 7],
        "7sus2": [0, 2, 7, 10],
        "7sus4": [0, 5, 7, 10],
    },
)


@dataclass(frozen=True)
class Scale:
    """Represents a musical scale with its name and interval pattern.

    The intervals list always starts with 0 (the root) and contains the
    ascending semitone offsets for all notes in the scale.
    """

    name: str
    """The human-readable name of this scale."""
    intervals: Tuple[int, ...]
    """Ascending semitone offsets from the root, starting with 0."""

    def to_tone_set(self, root: PitchClass) -> ToneSet:
        """Spell this scale from a root as an ordered tone set.

        Raises:
            AssertionError: If the scale definition is not strictly
                ascending within one octave.
        """
        assert self.intervals[0] == 0
        last_steps = -1
        tones: List[PitchClass] = []
        for steps in self.intervals:
            assert steps >= 0 and steps < MAX_NOTES
            assert steps > last_steps
            last_steps = steps
            tones.append(add_steps(root, steps))
        return tuple(tones)


SCALES: List[Scale] = [
    Scale("Major", (0, 2, 4, 5, 7, 9, 11)),
    Scale("Dorian", (0, 2, 3, 5, 7, 9, 10)),
    Scale("Phrygian", (0, 1, 3, 5, 7, 8, 10)),
    Scale("Lydian", (0, 2, 4, 6, 7, 9, 11)),
    Scale("Mixolydian", (0, 2, 4, 5, 7, 9, 10)),
    Scale("Minor", (0, 2, 3, 5, 7, 8, 10)),
    Scale("Locrian", (0, 1, 3, 5, 6, 8, 10)),
    Scale("Harmonic Minor", (0, 2, 3, 5, 7, 8, 11)),
    Scale("Phrygian Dominant", (0, 1, 4, 5, 7, 8, 10)),
    Scale("Melodic Minor", (0, 2, 3, 5, 7, 9, 11)),
    Scale("Lydian Dominant", (0, 2, 4, 6, 7, 9, 10)),
    Scale("Altered", (0, 1, 3, 4, 6, 8, 10)),
    Scale("Minor Pentatonic", (0, 3, 5, 7, 10)),
    Scale("Major Pentatonic", (0, 2, 4, 7, 9)),
    Scale("Blues", (0, 3, 5, 6, 7, 10)),
    Scale("Whole Tone", (0, 2, 4, 6, 8, 10)),
    Scale("Diminished", (0, 1, 3, 4, 6, 7, 9, 10)),
    Scale("Whole-Half Diminished", (0, 2, 3, 5, 6, 8, 9, 11)),
    Scale("Chromatic", (0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11)),
]
"""Scales available to the resolver, keyed by name in ``SCALE_LOOKUP``."""


def _scale_key(name: str) -> str:
    return re.sub(r"[\s_\-]+", " ", name.strip().lower())


_SCALE_ALIASES: Dict[str, str] = {
    "ionian": "Major",
    "aeolian": "Minor",
    "natural minor": "Minor",
    "super locrian": "Altered",
    "minor blues": "Blues",
    "half whole diminished": "Diminished",
    "pentatonic": "Major Pentatonic",
}

SCALE_LOOKUP: Dict[str, Scale] = {_scale_key(s.name): s for s in SCALES}
"""Lookup from normalized scale name (lowercase, single spaces) to Scale."""


def parse_chord_name(name: str) -> Optional[Chord]:
    """Parse a chord quality string into a canonical chord name.

    Args:
        name: The chord quality (e.g. "maj7", "m7b5", "7").

    Returns:
        Canonical chord name if found, None otherwise.
    """
    # Exact first so that "M7" and "m7" stay distinct
    if name in _CHORD_MAP:
        return _CHORD_MAP[name]
    # A lone capital M means major; lowercasing would read it as minor
    if name[:1] == "M" and not name[1:2].isalpha():
        return None
    return _CHORD_MAP.get(name.lower())


def get_chord_intervals(chord: Chord) -> List[int]:
    """Get the semitone intervals for a canonical chord name."""
    return list(_CHORD_INTERVALS[chord])


def find_scale(name: str) -> Optional[Scale]:
    """Find a scale by name, accepting mode aliases such as "aeolian".

    Matching ignores case and treats hyphens, underscores and runs of
    whitespace as single spaces.
    """
    key = _scale_key(name)
    alias = _SCALE_ALIASES.get(key)
    if alias is not None:
        key = _scale_key(alias)
    return SCALE_LOOKUP.get(key)


def tone_set_from_intervals(root: PitchClass, intervals: Iterable[int]) -> ToneSet:
    """Build a tone set from a root and semitone intervals.

    Compound intervals (9ths, 11ths, 13ths) fold into the octave. A pitch
    class that repeats keeps only its first occurrence so that each tone
    appears once with the root first.
    """
    tones: List[PitchClass] = []
    for interval in intervals:
        pc = add_steps(root, interval)
        if pc not in tones:
            tones.append(pc)
    return tuple(tones)


def tone_set_from_names(names: Iterable[str]) -> ToneSet:
    """Normalize externally spelled note names into a tone set.

    The spelling supplied by the caller is never trusted for equality;
    every name is resolved to a pitch class first.

    Raises:
        NoteNameException: If any name is not a recognized spelling.
    """
    tones: List[PitchClass] = []
    for name in names:
        pc = to_pitch_class(name)
        if pc not in tones:
            tones.append(pc)
    return tuple(tones)


def resolve_chord(root: str, symbol: str) -> ToneSet:
    """Resolve a root note and chord quality into a tone set.

    Args:
        root: Root note name, e.g. "C" or "F#".
        symbol: Chord quality, e.g. "maj7", "m7", "7", "dim7".

    Returns:
        The chord's tone set, root first.

    Raises:
        NoteNameException: If the root is not a valid note name.
        ToneSetException: If the chord quality is not known.
    """
    root_pc = to_pitch_class(root)
    chord = parse_chord_name(symbol)
    if chord is None:
        raise ToneSetException("chord", symbol)
    return tone_set_from_intervals(root_pc, get_chord_intervals(chord))


def resolve_scale(root: str, name: str) -> ToneSet:
    """Resolve a root note and scale name into a tone set.

    Args:
        root: Tonic note name.
        name: Scale or mode name, e.g. "minor pentatonic", "dorian".

    Returns:
        The scale's tone set, tonic first and ascending.

    Raises:
        NoteNameException: If the root is not a valid note name.
        ToneSetException: If the scale name is not known.
    """
    root_pc = to_pitch_class(root)
    scale = find_scale(name)
    if scale is None:
        raise ToneSetException("scale", name)
    return scale.to_tone_set(root_pc)


_CHORD_SYMBOL_PATTERN = re.compile(r"^\s*([A-Ga-g][#x♯♭b]*)(.*?)\s*$")


def parse_chord_symbol(symbol: str) -> Tuple[str, str]:
    """Split a chord symbol such as "Bbm7" into root and quality.

    A "b" directly after the root letter is read as a flat; the quality
    may be empty, meaning a major triad.

    Raises:
        ToneSetException: If the symbol does not start with a note letter.
    """
    m = _CHORD_SYMBOL_PATTERN.match(symbol)
    if m is None:
        raise ToneSetException("chord", symbol)
    return m.group(1), m.group(2)


def resolve_chord_symbol(symbol: str) -> ToneSet:
    """Resolve a full chord symbol such as "Cmaj7" or "F#m7b5"."""
    root, quality = parse_chord_symbol(symbol)
    return resolve_chord(root, quality)
