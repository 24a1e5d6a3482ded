"""Constants for fretboard geometry and position search.

The pentatonic window constants were tuned on standard six-string guitar
geometry; treat them as tunable rather than load-bearing on exotic tunings.
"""

from typing import Dict, Tuple

DEFAULT_MAX_FRET = 22
"""Default highest fret considered by scans when none is configured."""

SPAN_LIMIT = 5
"""Largest fret span of a playable arpeggio shape."""

BOX_SCAN_MAX_FRET = 22
"""Highest fret scanned when anchoring and filling a pentatonic box.

Independent of the configured maximum fret so that box anchoring always
searches the full practical range.
"""

BOX_FOLD_FRET = 12
"""Box anchors above this fret are folded down an octave."""

BOX_SIZE = 5
"""Number of tones in a pentatonic scale, and so the number of boxes."""

BOX_STRICT_BELOW = 1
"""Frets below the anchor the first note of a strict-window pair may sit."""

BOX_STRICT_ABOVE = 4
"""Frets above the anchor the second note of a strict-window pair may sit."""

BOX_RELAXED_SPAN = 5
"""Largest span of a fallback pair when no strict-window pair exists."""

BOX_RELAXED_CENTER_OFFSET = 1.5
"""Fallback pairs are scored by midpoint distance from anchor plus this."""

EXTENSION_MARGIN = 1
"""Frets of margin on each side of a box when scanning for extension tones."""

TUNINGS: Dict[str, Tuple[str, ...]] = {
    "standard-6": ("E2", "A2", "D3", "G3", "B3", "E4"),
    "standard-7": ("B1", "E2", "A2", "D3", "G3", "B3", "E4"),
    "drop-d-6": ("D2", "A2", "D3", "G3", "B3", "E4"),
    "drop-a-7": ("A1", "E2", "A2", "D3", "G3", "B3", "E4"),
    "bass-4": ("E1", "A1", "D2", "G2"),
    "bass-5": ("B0", "E1", "A1", "D2", "G2"),
}
"""Named tunings as open-string note names, lowest string first."""

DEFAULT_TUNING_NAME = "standard-6"
"""Tuning used when none is specified."""
