"""Single entry point dispatching a tone set to one of the searches."""

from __future__ import annotations

from typing import List, Optional, Union

from fretmap.arpeggio import ArpeggioShape, all_arpeggio_shapes, best_arpeggio_path
from fretmap.base import MatchException
from fretmap.config import Config, SearchMode
from fretmap.pentatonic import PentatonicBox, get_pentatonic_box
from fretmap.theory import ToneSet

SearchResult = Union[Optional[ArpeggioShape], List[ArpeggioShape], Optional[PentatonicBox]]


def search(
    config: Config, tone_set: ToneSet, mode: SearchMode, box_index: int = 0
) -> SearchResult:
    """Run the search selected by ``mode`` over the configured geometry.

    Args:
        config: Instrument geometry and bounds.
        tone_set: The chord or scale tones, root first.
        mode: Which search to run.
        box_index: The box to locate in ``SearchMode.Box``; ignored otherwise.

    Returns:
        ``SearchMode.Path``: the best shape or None.
        ``SearchMode.Shapes``: every shape in neck order.
        ``SearchMode.Box``: the pentatonic box or None.

    Raises:
        MatchException: If the mode is not recognized.
    """
    if mode == SearchMode.Path:
        return best_arpeggio_path(
            tone_set, config.tuning, config.string_count, config.max_fret
        )
    elif mode == SearchMode.Shapes:
        return all_arpeggio_shapes(
            tone_set,
            config.tuning,
            config.string_count,
            config.max_fret,
            config.span_limit,
        )
    elif mode == SearchMode.Box:
        return get_pentatonic_box(tone_set, config.tuning, config.string_count, box_index)
    else:
        raise MatchException(mode)
