"""Arpeggio shape search across consecutive strings.

An arpeggio shape places one position per chord tone, tone ``i`` on string
``starting_string + i``, so that the tones can be swept in order. Two
searches are provided: a greedy search for the single tightest shape, and an
exhaustive enumeration of every shape within the playable fret span, sorted
by neck position. Shapes can then be bucketed into named neck regions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from fretmap import constants
from fretmap.base import GeometryException
from fretmap.fretboard import StringPos, Tuning, scan_for_tone_set
from fretmap.theory import ToneSet


@dataclass(frozen=True)
class ArpeggioShape:
    """One fretboard position per tone across consecutive strings.

    ``positions[i]`` sounds the tone at index ``i`` of the tone set the shape
    was built from and sits on string ``starting_string + i``.
    """

    positions: Tuple[StringPos, ...]
    """The positions in tone order, lowest string first."""

    @property
    def starting_string(self) -> int:
        """The string of the first (root) position."""
        return self.positions[0].str_index

    @property
    def min_fret(self) -> int:
        return min(p.fret for p in self.positions)

    @property
    def max_fret(self) -> int:
        return max(p.fret for p in self.positions)

    @property
    def fret_span(self) -> int:
        """Distance in frets between the lowest and highest positions."""
        return self.max_fret - self.min_fret

    def __len__(self) -> int:
        return len(self.positions)


def _candidates_by_string(
    found: List[List[StringPos]], starting_string: int
) -> Optional[List[List[StringPos]]]:
    """Restrict each tone's positions to the string it must be played on.

    Returns None if any tone has no position on its string.
    """
    candidates: List[List[StringPos]] = []
    for index, positions in enumerate(found):
        on_string = [p for p in positions if p.str_index == starting_string + index]
        if len(on_string) == 0:
            return None
        candidates.append(on_string)
    return candidates


def _starting_strings(tone_count: int, string_count: int) -> range:
    # Empty when the tones cannot fit on consecutive strings
    return range(0, string_count - tone_count + 1)


def best_arpeggio_path(
    tone_set: ToneSet, tuning: Tuning, string_count: int, max_fret: int
) -> Optional[ArpeggioShape]:
    """Find the single tightest arpeggio shape for a tone set.

    For each starting string and each position of the first tone on it,
    every later tone takes the position on its string nearest in fret to
    the first tone's fret (ties go to the lower fret, which comes first in
    scan order). The path with the smallest fret span over all starting
    strings wins; ties go to the first found.

    Args:
        tone_set: The chord tones, root first.
        tuning: The instrument tuning.
        string_count: Number of strings in use.
        max_fret: Highest fret to consider (inclusive).

    Returns:
        The best shape, or None if the tone set is empty or no starting
        string has a position for every tone.

    Raises:
        GeometryException: If the geometry is malformed.
    """
    found = scan_for_tone_set(tone_set, tuning, string_count, max_fret)
    if len(tone_set) == 0:
        return None
    best_path: Optional[List[StringPos]] = None
    best_span = 0
    for starting_string in _starting_strings(len(tone_set), string_count):
        candidates = _candidates_by_string(found, starting_string)
        if candidates is None:
            continue
        for first in candidates[0]:
            path = [first]
            for cands in candidates[1:]:
                # min() keeps the earliest of equally close candidates
                path.append(min(cands, key=lambda p: abs(p.fret - first.fret)))
            frets = [p.fret for p in path]
            span = max(frets) - min(frets)
            if best_path is None or span < best_span:
                best_span = span
                best_path = path
    if best_path is None:
        logging.debug("No arpeggio path for %d tones on %d strings", len(tone_set), string_count)
        return None
    return ArpeggioShape(tuple(best_path))


def all_arpeggio_shapes(
    tone_set: ToneSet,
    tuning: Tuning,
    string_count: int,
    max_fret: int,
    span_limit: int = constants.SPAN_LIMIT,
) -> List[ArpeggioShape]:
    """Enumerate every playable arpeggio shape for a tone set.

    A depth-first search picks one position per tone on consecutive strings.
    Any candidate more than ``span_limit`` frets from the first chosen fret
    is pruned as soon as it is reached, and completed shapes whose span
    exceeds ``span_limit`` are discarded. Identical shapes reached along
    different branches are kept once.

    Args:
        tone_set: The chord tones, root first.
        tuning: The instrument tuning.
        string_count: Number of strings in use.
        max_fret: Highest fret to consider (inclusive).
        span_limit: Largest allowed fret span of a shape.

    Returns:
        Shapes sorted by lowest fret and then starting string. Empty if the
        tone set is empty or cannot be placed on consecutive strings.

    Raises:
        GeometryException: If the geometry is malformed or the span limit
            is negative.
    """
    if span_limit < 0:
        raise GeometryException(f"Negative span limit: {span_limit}")
    found = scan_for_tone_set(tone_set, tuning, string_count, max_fret)
    if len(tone_set) == 0:
        return []

    seen: Set[Tuple[StringPos, ...]] = set()
    shapes: List[ArpeggioShape] = []

    def search(candidates: List[List[StringPos]], path: List[StringPos]) -> None:
        depth = len(path)
        if depth == len(candidates):
            shape = ArpeggioShape(tuple(path))
            if shape.fret_span <= span_limit and shape.positions not in seen:
                seen.add(shape.positions)
                shapes.append(shape)
            return
        for cand in candidates[depth]:
            if depth > 0 and abs(cand.fret - path[0].fret) > span_limit:
                continue
            path.append(cand)
            search(candidates, path)
            path.pop()

    for starting_string in _starting_strings(len(tone_set), string_count):
        candidates = _candidates_by_string(found, starting_string)
        if candidates is not None:
            search(candidates, [])

    shapes.sort(key=lambda s: (s.min_fret, s.starting_string))
    logging.debug("Found %d arpeggio shapes for %d tones", len(shapes), len(tone_set))
    return shapes


@dataclass(frozen=True)
class PositionRegion:
    """A named range of frets used to group shapes by neck position."""

    label: str
    low: int
    """Lowest fret of the region (inclusive)."""
    high: int
    """Highest fret of the region (inclusive)."""

    def __contains__(self, fret: int) -> bool:
        return self.low <= fret <= self.high


POSITION_REGIONS: Tuple[PositionRegion, ...] = (
    PositionRegion("Open Position", 0, 3),
    PositionRegion("5th Position", 4, 7),
    PositionRegion("9th Position", 8, 10),
    PositionRegion("12th Position", 11, 14),
    PositionRegion("Upper Frets", 15, 24),
)
"""Neck regions in order; a shape belongs to the first containing its lowest fret."""


def region_label(
    min_fret: int, regions: Tuple[PositionRegion, ...] = POSITION_REGIONS
) -> str:
    """Label the neck region a shape starting at ``min_fret`` belongs to.

    Falls back to "fret N" when no region contains the fret.
    """
    for region in regions:
        if min_fret in region:
            return region.label
    return f"fret {min_fret}"


def group_shapes(
    shapes: List[ArpeggioShape],
    regions: Tuple[PositionRegion, ...] = POSITION_REGIONS,
) -> Dict[str, List[ArpeggioShape]]:
    """Bucket shapes by neck region.

    Groups appear in the order their first shape appears, so a list sorted
    by ``all_arpeggio_shapes`` yields groups in neck order. Shapes keep
    their relative order within a group.
    """
    groups: Dict[str, List[ArpeggioShape]] = {}
    for shape in shapes:
        groups.setdefault(region_label(shape.min_fret, regions), []).append(shape)
    return groups
