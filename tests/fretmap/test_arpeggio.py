from typing import List

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fretmap.arpeggio import (
    POSITION_REGIONS,
    ArpeggioShape,
    all_arpeggio_shapes,
    best_arpeggio_path,
    group_shapes,
    region_label,
)
from fretmap.base import GeometryException
from fretmap.constants import SPAN_LIMIT, TUNINGS
from fretmap.fretboard import StringPos, Tuning, pitch_at
from fretmap.pitch import PitchClass
from fretmap.theory import ToneSet, resolve_chord
from tests.fretmap.hypo import configure_hypo

configure_hypo()

STANDARD = Tuning.named("standard-6")
BASS = Tuning.named("bass-4")
C_MAJ7 = resolve_chord("C", "maj7")


def tones(*pcs: int) -> ToneSet:
    return tuple(PitchClass(pc) for pc in pcs)


def assert_valid_shape(shape: ArpeggioShape, tone_set: ToneSet, tuning: Tuning) -> None:
    assert len(shape) == len(tone_set)
    for index, pos in enumerate(shape.positions):
        assert pos.str_index == shape.starting_string + index
        assert pitch_at(pos, tuning) == tone_set[index]


def test_best_path_c_major_seven() -> None:
    assert C_MAJ7 == (0, 4, 7, 11)
    shape = best_arpeggio_path(C_MAJ7, STANDARD, 6, 12)
    assert shape is not None
    assert_valid_shape(shape, C_MAJ7, STANDARD)
    assert shape.fret_span <= 4
    # The first tightest path found starts on the A string
    assert shape.positions == (
        StringPos(1, 3),
        StringPos(2, 2),
        StringPos(3, 0),
        StringPos(4, 0),
    )
    assert shape.starting_string == 1
    assert (shape.min_fret, shape.max_fret, shape.fret_span) == (0, 3, 3)


def test_best_path_infeasible() -> None:
    # Seven tones cannot sit on four consecutive strings
    assert best_arpeggio_path(tones(0, 2, 4, 5, 7, 9, 11), BASS, 4, 12) is None
    assert best_arpeggio_path((), STANDARD, 6, 12) is None
    assert best_arpeggio_path(C_MAJ7, STANDARD, 3, 12) is None


def test_best_path_malformed() -> None:
    with pytest.raises(GeometryException):
        best_arpeggio_path(C_MAJ7, STANDARD, -1, 12)


def test_all_shapes_single_tone() -> None:
    shapes = all_arpeggio_shapes(tones(0), STANDARD, 6, 12)
    assert [s.positions for s in shapes] == [
        (StringPos(4, 1),),
        (StringPos(1, 3),),
        (StringPos(3, 5),),
        (StringPos(0, 8),),
        (StringPos(5, 8),),
        (StringPos(2, 10),),
    ]


def test_all_shapes_zero_span() -> None:
    # C on the G string and E on the B string share fret 5
    shapes = all_arpeggio_shapes(tones(0, 4), STANDARD, 6, 12, span_limit=0)
    assert [s.positions for s in shapes] == [(StringPos(3, 5), StringPos(4, 5))]


def test_all_shapes_scenario_bass_five_tones() -> None:
    assert all_arpeggio_shapes(resolve_chord("C", "9"), BASS, 4, 24) == []


def test_all_shapes_empty_and_malformed() -> None:
    assert all_arpeggio_shapes((), STANDARD, 6, 12) == []
    with pytest.raises(GeometryException):
        all_arpeggio_shapes(C_MAJ7, STANDARD, 6, 12, span_limit=-1)
    with pytest.raises(GeometryException):
        all_arpeggio_shapes(C_MAJ7, STANDARD, 6, -3)


def test_all_shapes_c_major_seven() -> None:
    shapes = all_arpeggio_shapes(C_MAJ7, STANDARD, 6, 12)
    assert len(shapes) > 0
    for shape in shapes:
        assert_valid_shape(shape, C_MAJ7, STANDARD)
        assert shape.fret_span <= SPAN_LIMIT
    best = best_arpeggio_path(C_MAJ7, STANDARD, 6, 12)
    assert best in shapes


tone_sets = st.lists(
    st.integers(min_value=0, max_value=11), min_size=1, max_size=5, unique=True
).map(lambda pcs: tuple(PitchClass(pc) for pc in pcs))


@given(tone_sets, st.sampled_from(sorted(TUNINGS)), st.integers(min_value=0, max_value=15))
def test_all_shapes_properties(tone_set: ToneSet, tuning_name: str, max_fret: int) -> None:
    tuning = Tuning.named(tuning_name)
    string_count = len(tuning)
    shapes = all_arpeggio_shapes(tone_set, tuning, string_count, max_fret)

    keys = [(s.min_fret, s.starting_string) for s in shapes]
    assert keys == sorted(keys)
    assert len({s.positions for s in shapes}) == len(shapes)
    for shape in shapes:
        assert_valid_shape(shape, tone_set, tuning)
        assert shape.fret_span <= SPAN_LIMIT
        assert shape.max_fret <= max_fret

    # Deterministic
    again = all_arpeggio_shapes(tone_set, tuning, string_count, max_fret)
    assert again == shapes

    best = best_arpeggio_path(tone_set, tuning, string_count, max_fret)
    if best is None:
        assert shapes == []
    else:
        assert_valid_shape(best, tone_set, tuning)
        if best.fret_span <= SPAN_LIMIT:
            assert best in shapes
        # Nothing enumerated is tighter than the greedy best
        if len(shapes) > 0 and len(tone_set) <= 2:
            assert best.fret_span <= min(s.fret_span for s in shapes)


@pytest.mark.parametrize(
    "min_fret, label",
    [
        (0, "Open Position"),
        (3, "Open Position"),
        (4, "5th Position"),
        (7, "5th Position"),
        (8, "9th Position"),
        (10, "9th Position"),
        (11, "12th Position"),
        (14, "12th Position"),
        (15, "Upper Frets"),
        (24, "Upper Frets"),
        (25, "fret 25"),
    ],
)
def test_region_label(min_fret: int, label: str) -> None:
    assert region_label(min_fret) == label


def test_region_table_is_contiguous() -> None:
    for prev, cur in zip(POSITION_REGIONS, POSITION_REGIONS[1:]):
        assert cur.low == prev.high + 1


def test_group_shapes() -> None:
    shapes = all_arpeggio_shapes(tones(0), STANDARD, 6, 12)
    groups = group_shapes(shapes)
    assert list(groups) == ["Open Position", "5th Position", "9th Position"]
    grouped: List[List[StringPos]] = [
        [s.positions[0] for s in group] for group in groups.values()
    ]
    assert grouped == [
        [StringPos(4, 1), StringPos(1, 3)],
        [StringPos(3, 5)],
        [StringPos(0, 8), StringPos(5, 8), StringPos(2, 10)],
    ]
    assert group_shapes([]) == {}
