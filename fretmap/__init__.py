from fretmap.arpeggio import (
    ArpeggioShape,
    all_arpeggio_shapes,
    best_arpeggio_path,
    group_shapes,
)
from fretmap.fretboard import StringPos, Tuning, pitch_at, scan_for_tone_set
from fretmap.pentatonic import (
    ModeExtension,
    PentatonicBox,
    get_pentatonic_box,
    resolve_extension,
)
from fretmap.pitch import PitchClass, to_display_name, to_pitch_class
from fretmap.theory import ToneSet, resolve_chord, resolve_scale

__all__ = [
    "ArpeggioShape",
    "ModeExtension",
    "PentatonicBox",
    "PitchClass",
    "StringPos",
    "ToneSet",
    "Tuning",
    "all_arpeggio_shapes",
    "best_arpeggio_path",
    "get_pentatonic_box",
    "group_shapes",
    "pitch_at",
    "resolve_chord",
    "resolve_extension",
    "resolve_scale",
    "scan_for_tone_set",
    "to_display_name",
    "to_pitch_class",
]
