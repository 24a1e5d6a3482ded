"""Configuration for fretboard searches.

A ``Config`` bundles the instrument geometry and search bounds supplied by a
caller. It is read-only; use ``dataclasses.replace`` to derive variants.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from fretmap import constants
from fretmap.base import GeometryException, PlaybackException
from fretmap.fretboard import Tuning
from fretmap.pitch import Spelling


@unique
class SearchMode(Enum):
    """Which search to run for a tone set."""

    Path = "path"  # Single tightest arpeggio path
    Shapes = "shapes"  # Every arpeggio shape, in neck order
    Box = "box"  # Pentatonic box by index


@dataclass(frozen=True)
class Config:
    """Instrument geometry and search bounds for a single query."""

    tuning_name: str  # Name of the tuning (e.g., "standard-6", "bass-4")
    tuning: Tuning  # Open-string pitches, lowest string first
    string_count: int  # Number of strings in use, at most len(tuning)
    max_fret: int  # Highest fret scanned by arpeggio searches
    span_limit: int  # Largest fret span of an enumerated shape
    spelling: Spelling  # Accidental preference for display names
    midi_channel: int  # MIDI channel (0-15) for playback messages
    velocity: int  # MIDI velocity for playback note-ons


def init_config(
    tuning_name: str = constants.DEFAULT_TUNING_NAME,
    max_fret: int = constants.DEFAULT_MAX_FRET,
    span_limit: int = constants.SPAN_LIMIT,
    spelling: Spelling = Spelling.Sharp,
    midi_channel: int = 0,
    velocity: int = 100,
) -> Config:
    """Initialize a configuration from a named tuning.

    Args:
        tuning_name: A key of ``constants.TUNINGS``.
        max_fret: Highest fret for arpeggio searches.
        span_limit: Largest fret span of an enumerated shape.
        spelling: Accidental preference for display names.
        midi_channel: MIDI channel (0-15) for playback messages.
        velocity: MIDI velocity (1-127) for playback note-ons.

    Returns:
        A Config using every string of the named tuning.

    Raises:
        GeometryException: If the tuning is unknown or a bound is negative.
        PlaybackException: If the MIDI channel or velocity is out of range.
    """
    if tuning_name not in constants.TUNINGS:
        raise GeometryException(f"Unknown tuning: {tuning_name}")
    if max_fret < 0:
        raise GeometryException(f"Negative max fret: {max_fret}")
    if span_limit < 0:
        raise GeometryException(f"Negative span limit: {span_limit}")
    if midi_channel < 0 or midi_channel > 15:
        raise PlaybackException(f"Invalid MIDI channel: {midi_channel}")
    if velocity < 1 or velocity > 127:
        raise PlaybackException(f"Invalid velocity: {velocity}")
    tuning = Tuning.named(tuning_name)
    return Config(
        tuning_name=tuning_name,
        tuning=tuning,
        string_count=tuning.string_count,
        max_fret=max_fret,
        span_limit=span_limit,
        spelling=spelling,
        midi_channel=midi_channel,
        velocity=velocity,
    )
