import pytest
from mido.frozen import FrozenMessage

from fretmap.arpeggio import ArpeggioShape
from fretmap.base import GeometryException
from fretmap.fretboard import StringPos, Tuning
from fretmap.playback import (
    is_note_on_msg,
    playback_messages,
    playback_order,
    shape_notes,
    sounded_notes,
)

STANDARD = Tuning.named("standard-6")
C_MAJ7_SHAPE = ArpeggioShape(
    (StringPos(1, 3), StringPos(2, 2), StringPos(3, 0), StringPos(4, 0))
)


@pytest.mark.parametrize(
    "tone_count, expected",
    [
        (0, []),
        (1, [0]),
        (2, [0, 1, 0]),
        (3, [0, 1, 2, 1, 0]),
        (4, [0, 1, 2, 3, 2, 1, 0]),
    ],
)
def test_playback_order(tone_count: int, expected: list[int]) -> None:
    assert playback_order(tone_count) == expected


def test_shape_notes() -> None:
    assert shape_notes(C_MAJ7_SHAPE, STANDARD) == [48, 52, 55, 59]


def test_shape_notes_requires_octaves() -> None:
    bare = Tuning.from_names(["E", "A", "D", "G", "B", "E"])
    with pytest.raises(GeometryException):
        shape_notes(C_MAJ7_SHAPE, bare)


def test_playback_messages() -> None:
    msgs = playback_messages(C_MAJ7_SHAPE, STANDARD, channel=2, velocity=90)
    assert len(msgs) == 14
    assert sounded_notes(msgs) == [48, 52, 55, 59, 55, 52, 48]
    assert all(m.channel == 2 for m in msgs)
    # Each note is released before the next one sounds
    for on, off in zip(msgs[::2], msgs[1::2]):
        assert on.type == "note_on" and on.velocity == 90
        assert off.type == "note_off"
        assert on.note == off.note


def test_sounded_notes_skips_releases() -> None:
    msgs = [
        FrozenMessage("note_on", note=60, velocity=1),
        FrozenMessage("note_on", note=62, velocity=0),
        FrozenMessage("note_off", note=60),
        FrozenMessage("control_change", control=7, value=0),
        FrozenMessage("note_on", note=64, velocity=127),
    ]
    assert [is_note_on_msg(m) for m in msgs] == [True, False, False, False, True]
    assert sounded_notes(msgs) == [60, 64]
