"""Fretboard geometry: string positions, tunings and tone scans.

This module is the shared substrate for the position searches. It resolves
a (string, fret) coordinate to the pitch class it sounds under a tuning, and
scans rectangular regions of the neck for positions sounding any of a set of
pitch classes. Everything here is pure; tunings are immutable and every scan
builds a fresh result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Collection, Generator, List, Optional, Sequence, Tuple

from fretmap import constants
from fretmap.base import GeometryException
from fretmap.pitch import MAX_NOTES, PitchClass, parse_note, to_pitch_class
from fretmap.theory import ToneSet


@dataclass(frozen=True, order=True)
class StringPos:
    """Represents a position on the fretboard as a string and fret combination.

    Ordering is by string and then fret, which is the order every scan
    produces positions in. Two positions are distinct if either coordinate
    differs, even when they sound the same pitch class.
    """

    str_index: int
    """The string number (0-based index into the tuning, 0 is the lowest string)."""
    fret: int
    """The fret number (semitone offset from the open string, 0 is open)."""

    def __str__(self) -> str:
        return f"{self.str_index}:{self.fret}"


@dataclass(frozen=True)
class StringBounds:
    """Defines a rectangular region of the fretboard.

    Both corners are inclusive. Iteration yields positions string by string,
    each string from its lowest fret upwards.
    """

    low: StringPos
    """The minimum string position (lowest string, lowest fret)."""
    high: StringPos
    """The maximum string position (highest string, highest fret)."""

    @classmethod
    def neck(cls, string_count: int, max_fret: int) -> StringBounds:
        """Bounds covering every string from the open position to ``max_fret``."""
        return cls(StringPos(0, 0), StringPos(string_count - 1, max_fret))

    def __iter__(self) -> Generator[StringPos, None, None]:
        for str_index in range(self.low.str_index, self.high.str_index + 1):
            for fret in range(self.low.fret, self.high.fret + 1):
                yield StringPos(str_index=str_index, fret=fret)

    def __contains__(self, cand: StringPos) -> bool:
        return (
            cand.str_index >= self.low.str_index
            and cand.str_index <= self.high.str_index
            and cand.fret >= self.low.fret
            and cand.fret <= self.high.fret
        )


@dataclass(frozen=True)
class Tuning:
    """An instrument tuning: one open-string pitch class per string.

    Index 0 is the lowest-pitched string. When the tuning was built from
    note names that carry octaves, the open-string MIDI note numbers are kept
    as well so that shapes can be turned into playable notes.
    """

    pitch_classes: Tuple[PitchClass, ...]
    """Open-string pitch classes, lowest string first."""
    notes: Optional[Tuple[int, ...]] = None
    """Open-string MIDI note numbers, if the tuning names had octaves."""

    @classmethod
    def from_names(cls, names: Sequence[str]) -> Tuning:
        """Build a tuning from open-string note names.

        Args:
            names: Note names lowest string first, e.g. ("E2", "A2", ...).
                Octaves are optional but must be given for every string or
                for none of them to retain MIDI notes.

        Raises:
            NoteNameException: If any name is not a recognized spelling.
        """
        pcs = tuple(to_pitch_class(n) for n in names)
        try:
            notes: Optional[Tuple[int, ...]] = tuple(parse_note(n) for n in names)
        except ValueError:
            notes = None
        return cls(pitch_classes=pcs, notes=notes)

    @classmethod
    def from_pitch_classes(cls, pcs: Sequence[int]) -> Tuning:
        return cls(pitch_classes=tuple(PitchClass(pc % MAX_NOTES) for pc in pcs))

    @classmethod
    def named(cls, name: str) -> Tuning:
        """Look up one of the tunings in ``constants.TUNINGS``.

        Raises:
            KeyError: If there is no tuning with that name.
        """
        return cls.from_names(constants.TUNINGS[name])

    @property
    def string_count(self) -> int:
        return len(self.pitch_classes)

    def __len__(self) -> int:
        return len(self.pitch_classes)

    def __getitem__(self, str_index: int) -> PitchClass:
        return self.pitch_classes[str_index]


def pitch_at(pos: StringPos, tuning: Tuning) -> PitchClass:
    """Get the pitch class sounded at a fretboard position.

    Args:
        pos: The string position.
        tuning: The instrument tuning.

    Returns:
        ``(tuning[string] + fret) mod 12``.

    Raises:
        GeometryException: If the string is outside the tuning or the fret
            is negative.
    """
    if pos.str_index < 0 or pos.str_index >= len(tuning):
        raise GeometryException(f"String {pos.str_index} outside tuning of {len(tuning)}")
    if pos.fret < 0:
        raise GeometryException(f"Negative fret: {pos.fret}")
    return PitchClass((tuning[pos.str_index] + pos.fret) % MAX_NOTES)


def note_at(pos: StringPos, tuning: Tuning) -> Optional[int]:
    """Get the MIDI note sounded at a position, if the tuning carries octaves."""
    if tuning.notes is None:
        return None
    pitch_at(pos, tuning)
    return tuning.notes[pos.str_index] + pos.fret


def check_geometry(tuning: Tuning, string_count: int, max_fret: int) -> None:
    """Validate caller-supplied geometry.

    Raises:
        GeometryException: For negative counts or more strings than the
            tuning describes.
    """
    if string_count < 0:
        raise GeometryException(f"Negative string count: {string_count}")
    if max_fret < 0:
        raise GeometryException(f"Negative max fret: {max_fret}")
    if string_count > len(tuning):
        raise GeometryException(
            f"String count {string_count} exceeds tuning of {len(tuning)} strings"
        )


def scan_bounds(
    pcs: Collection[int], tuning: Tuning, bounds: StringBounds
) -> List[StringPos]:
    """Find every position in a region sounding any of the given pitch classes.

    Args:
        pcs: Pitch classes to look for.
        tuning: The instrument tuning.
        bounds: The region to scan; must lie within the tuning's strings and
            at or above the open position.

    Returns:
        Matching positions in increasing (string, fret) order.
    """
    return [pos for pos in bounds if pitch_at(pos, tuning) in pcs]


def scan_string(
    pcs: Collection[int], tuning: Tuning, str_index: int, max_fret: int
) -> List[int]:
    """Find the frets on one string sounding any of the given pitch classes."""
    bounds = StringBounds(StringPos(str_index, 0), StringPos(str_index, max_fret))
    return [pos.fret for pos in scan_bounds(pcs, tuning, bounds)]


def scan_for_tone_set(
    tone_set: ToneSet, tuning: Tuning, string_count: int, max_fret: int
) -> List[List[StringPos]]:
    """Find every position sounding each tone of a tone set.

    Args:
        tone_set: The ordered tones to locate.
        tuning: The instrument tuning.
        string_count: Number of strings to scan, starting from the lowest.
        max_fret: Highest fret to scan (inclusive).

    Returns:
        A list indexed like ``tone_set``; entry ``i`` holds the positions
        sounding ``tone_set[i]`` in increasing (string, fret) order.

    Raises:
        GeometryException: If the geometry is malformed.
    """
    check_geometry(tuning, string_count, max_fret)
    found: List[List[StringPos]] = [[] for _ in tone_set]
    if string_count == 0:
        return found
    for pos in StringBounds.neck(string_count, max_fret):
        pc = pitch_at(pos, tuning)
        for index, tone in enumerate(tone_set):
            if tone == pc:
                found[index].append(pos)
    return found
