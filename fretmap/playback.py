"""Playback sequences for arpeggio shapes.

An arpeggio is played up through its tones and back down again. This module
derives that order and renders a shape as MIDI note messages for an audio
collaborator to schedule. It does no timing and produces no sound itself.
"""

from __future__ import annotations

from typing import List, cast

from mido.frozen import FrozenMessage

from fretmap.arpeggio import ArpeggioShape
from fretmap.base import GeometryException
from fretmap.fretboard import Tuning, note_at


def is_note_on_msg(msg: FrozenMessage) -> bool:
    """Check whether a message sounds a note (note_on with nonzero velocity)."""
    return cast(bool, msg.type == "note_on" and msg.velocity > 0)


def sounded_notes(msgs: List[FrozenMessage]) -> List[int]:
    """The notes a message sequence sounds, in order, ignoring releases."""
    return [msg.note for msg in msgs if is_note_on_msg(msg)]


def playback_order(tone_count: int) -> List[int]:
    """Indices of tones played ascending then descending.

    The top tone is played once: four tones give ``[0, 1, 2, 3, 2, 1, 0]``.
    """
    up = list(range(tone_count))
    return up + up[-2::-1] if tone_count > 1 else up


def shape_notes(shape: ArpeggioShape, tuning: Tuning) -> List[int]:
    """MIDI note numbers of a shape's positions in tone order.

    Raises:
        GeometryException: If the tuning was built without octaves.
    """
    notes: List[int] = []
    for pos in shape.positions:
        note = note_at(pos, tuning)
        if note is None:
            raise GeometryException("Tuning has no octave information for playback")
        notes.append(note)
    return notes


def playback_messages(
    shape: ArpeggioShape, tuning: Tuning, channel: int = 0, velocity: int = 100
) -> List[FrozenMessage]:
    """Render a shape as note-on/note-off pairs in playback order.

    Args:
        shape: The arpeggio shape to play.
        tuning: The tuning the shape was found on; must carry octaves.
        channel: MIDI channel (0-15).
        velocity: Note-on velocity (1-127).

    Returns:
        Alternating note_on and note_off messages, one pair per played tone.
    """
    notes = shape_notes(shape, tuning)
    msgs: List[FrozenMessage] = []
    for index in playback_order(len(notes)):
        note = notes[index]
        msgs.append(
            FrozenMessage(type="note_on", channel=channel, note=note, velocity=velocity)
        )
        msgs.append(FrozenMessage(type="note_off", channel=channel, note=note))
    return msgs
