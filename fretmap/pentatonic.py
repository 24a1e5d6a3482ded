"""Pentatonic boxes and their extension to larger scales.

A pentatonic box is the familiar two-notes-per-string fingering of a
five-note scale. Box ``n`` is anchored at the ``n``-th scale tone at or
above the first root on the lowest string. Extending a box adds the tones
of a larger target scale (the parent mode, harmonic minor, and so on) that
fall within the box's fret window, and hides box tones foreign to the
target.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, List, Optional, Tuple

from fretmap import constants
from fretmap.base import MatchException
from fretmap.fretboard import (
    StringBounds,
    StringPos,
    Tuning,
    check_geometry,
    pitch_at,
    scan_bounds,
    scan_string,
)
from fretmap.pitch import MAX_NOTES, PitchClass
from fretmap.theory import ToneSet, find_scale


@dataclass(frozen=True)
class PentatonicBox:
    """A two-positions-per-string fingering of a five-note scale.

    Order carries no meaning; positions are kept sorted by string and fret
    so that equal boxes compare equal.
    """

    box_index: int
    """Which scale-tone occurrence (0-4) from the lowest-string root anchors the box."""
    anchor_fret: int
    """The lowest-string fret the box is built around, after octave folding."""
    positions: Tuple[StringPos, ...]
    """Selected positions, sorted by string and then fret."""

    @property
    def min_fret(self) -> int:
        return min(p.fret for p in self.positions)

    @property
    def max_fret(self) -> int:
        return max(p.fret for p in self.positions)

    def frets_on(self, str_index: int) -> List[int]:
        """The frets the box uses on one string (empty if it has none there)."""
        return [p.fret for p in self.positions if p.str_index == str_index]

    def __contains__(self, pos: StringPos) -> bool:
        return pos in self.positions

    def __len__(self) -> int:
        return len(self.positions)


def _select_pair(frets: List[int], anchor: int) -> Optional[Tuple[int, int]]:
    """Choose the adjacent pair of scale frets on a string that best fits a box.

    Prefers pairs inside the strict window (first fret at least one below
    the anchor, second at most four above), nearest the anchor. Otherwise
    falls back to any pair spanning at most five frets whose midpoint is
    nearest ``anchor + 1.5``.
    """
    pairs = list(zip(frets, frets[1:]))
    best_pair: Optional[Tuple[int, int]] = None
    best_score = 0.0
    for low, high in pairs:
        if (
            low >= anchor - constants.BOX_STRICT_BELOW
            and high <= anchor + constants.BOX_STRICT_ABOVE
        ):
            score = float(abs(low - anchor))
            if best_pair is None or score < best_score:
                best_score = score
                best_pair = (low, high)
    if best_pair is not None:
        return best_pair
    target = anchor + constants.BOX_RELAXED_CENTER_OFFSET
    for low, high in pairs:
        if high - low <= constants.BOX_RELAXED_SPAN:
            score = abs((low + high) / 2 - target)
            if best_pair is None or score < best_score:
                best_score = score
                best_pair = (low, high)
    return best_pair


def get_pentatonic_box(
    tone_set: ToneSet, tuning: Tuning, string_count: int, box_index: int
) -> Optional[PentatonicBox]:
    """Locate a pentatonic box on the fretboard.

    Both the anchor search and the per-string pair search scan frets up to
    ``constants.BOX_SCAN_MAX_FRET`` regardless of any configured maximum.
    An anchor above fret 12 is folded down an octave. A string on which no
    pair fits contributes no positions rather than failing the box.

    Args:
        tone_set: The five scale tones, root first.
        tuning: The instrument tuning.
        string_count: Number of strings in use.
        box_index: Which box (0-4) to build.

    Returns:
        The box, or None if the tone set is not five tones, the box index is
        out of range, the root is absent from the lowest string, or there
        are not enough scale tones above the root to reach the box.

    Raises:
        GeometryException: If the geometry is malformed.
    """
    check_geometry(tuning, string_count, constants.BOX_SCAN_MAX_FRET)
    if len(tone_set) != constants.BOX_SIZE or string_count == 0:
        return None
    if box_index < 0 or box_index >= constants.BOX_SIZE:
        return None

    root = tone_set[0]
    low_bounds = StringBounds(StringPos(0, 0), StringPos(0, constants.BOX_SCAN_MAX_FRET))
    low_positions = scan_bounds(tone_set, tuning, low_bounds)
    root_index = next(
        (i for i, p in enumerate(low_positions) if pitch_at(p, tuning) == root), None
    )
    if root_index is None:
        return None
    anchor_index = root_index + box_index
    if anchor_index >= len(low_positions):
        return None

    anchor = low_positions[anchor_index].fret
    if anchor > constants.BOX_FOLD_FRET:
        anchor -= constants.BOX_FOLD_FRET

    positions: List[StringPos] = []
    for str_index in range(string_count):
        frets = scan_string(tone_set, tuning, str_index, constants.BOX_SCAN_MAX_FRET)
        pair = _select_pair(frets, anchor)
        if pair is None:
            logging.debug("Box %d has no pair on string %d", box_index, str_index)
            continue
        positions.extend(StringPos(str_index, fret) for fret in pair)

    return PentatonicBox(box_index=box_index, anchor_fret=anchor, positions=tuple(positions))


@dataclass(frozen=True)
class ModeExtension:
    """The tones that turn a pentatonic box into a larger target scale."""

    extension_pitch_classes: Tuple[PitchClass, ...]
    """Target tones missing from the pentatonic, in target order."""
    conflict_pitch_classes: Tuple[PitchClass, ...]
    """Pentatonic tones foreign to the target, in pentatonic order."""
    extension_positions: Tuple[StringPos, ...]
    """Positions of extension tones within the box window, by string and fret."""
    box_positions: Tuple[StringPos, ...]
    """The box's positions with any conflicting tones removed."""

    @property
    def is_subset(self) -> bool:
        """Whether the pentatonic lies wholly within the target scale."""
        return len(self.conflict_pitch_classes) == 0


def resolve_extension(
    box: PentatonicBox,
    pentatonic: ToneSet,
    target: ToneSet,
    tuning: Tuning,
    string_count: int,
) -> ModeExtension:
    """Work out how a pentatonic box extends to a target scale.

    Extension tones are located on every string from one fret below the
    box's lowest fret (never below the nut) to one fret above its highest.

    Args:
        box: A box located with ``get_pentatonic_box``.
        pentatonic: The tone set the box was built from.
        target: The larger scale to extend towards.
        tuning: The instrument tuning.
        string_count: Number of strings in use.

    Returns:
        The extension and conflict pitch classes with their positions.
        When the pentatonic already covers the target there are no
        extension positions.

    Raises:
        GeometryException: If the geometry is malformed.
    """
    extension = tuple(pc for pc in target if pc not in pentatonic)
    conflicts = tuple(pc for pc in pentatonic if pc not in target)

    box_positions = box.positions
    if len(conflicts) > 0:
        box_positions = tuple(p for p in box.positions if pitch_at(p, tuning) not in conflicts)

    extension_positions: Tuple[StringPos, ...] = ()
    if len(extension) > 0 and len(box.positions) > 0 and string_count > 0:
        low = max(0, box.min_fret - constants.EXTENSION_MARGIN)
        high = box.max_fret + constants.EXTENSION_MARGIN
        check_geometry(tuning, string_count, high)
        bounds = StringBounds(StringPos(0, low), StringPos(string_count - 1, high))
        extension_positions = tuple(scan_bounds(extension, tuning, bounds))

    return ModeExtension(
        extension_pitch_classes=extension,
        conflict_pitch_classes=conflicts,
        extension_positions=extension_positions,
        box_positions=box_positions,
    )


@unique
class PentatonicType(Enum):
    """The two common pentatonic scales and how their boxes map to modes."""

    Minor = "minor"
    Major = "major"

    @classmethod
    def of(cls, tone_set: ToneSet) -> Optional[PentatonicType]:
        """Recognize a tone set, root first, as one of the pentatonic types."""
        if len(tone_set) == 0:
            return None
        root = tone_set[0]
        intervals = tuple((pc - root) % MAX_NOTES for pc in tone_set)
        for pentatonic_type in cls:
            scale = find_scale(pentatonic_type.scale_name)
            if scale is not None and scale.intervals == intervals:
                return pentatonic_type
        return None

    @property
    def scale_name(self) -> str:
        return f"{self.value} pentatonic"

    @property
    def parent_scale_name(self) -> str:
        """The seven-note scale sharing the pentatonic's root."""
        if self == PentatonicType.Minor:
            return "aeolian"
        elif self == PentatonicType.Major:
            return "major"
        else:
            raise MatchException(self)


MODE_NAMES: Tuple[str, ...] = (
    "Ionian",
    "Dorian",
    "Phrygian",
    "Lydian",
    "Mixolydian",
    "Aeolian",
    "Locrian",
)
"""Diatonic modes indexed by the major-scale degree (0-based) they start on."""

# Parent major-scale degree (0-based) each box's starting tone sits on
_BOX_MODE_INDICES: Dict[PentatonicType, Tuple[int, ...]] = {
    PentatonicType.Minor: (5, 0, 1, 2, 4),
    PentatonicType.Major: (0, 1, 2, 4, 5),
}


def box_mode_name(pentatonic_type: PentatonicType, box_index: int) -> str:
    """Name the diatonic mode heard when a box is extended from its start tone.

    For the minor pentatonic, boxes 1-5 yield Aeolian, Ionian, Dorian,
    Phrygian and Mixolydian; for the major pentatonic, Ionian, Dorian,
    Phrygian, Mixolydian and Aeolian.

    Raises:
        IndexError: If the box index is outside 0-4.
    """
    if box_index < 0:
        raise IndexError(box_index)
    return MODE_NAMES[_BOX_MODE_INDICES[pentatonic_type][box_index]]
