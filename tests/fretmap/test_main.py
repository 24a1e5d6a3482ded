from typing import List

import pytest

from fretmap.main import main


def run_cli(capsys: pytest.CaptureFixture[str], argv: List[str]) -> tuple[int, List[str]]:
    status = main(argv)
    return status, capsys.readouterr().out.splitlines()


def test_path(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(capsys, ["--max-fret", "12", "path", "C", "maj7"])
    assert status == 0
    assert lines == ["1:3 2:2 3:0 4:0 (span 3)"]


def test_shapes_grouped(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(capsys, ["--max-fret", "12", "shapes", "C", "maj7"])
    assert status == 0
    assert lines[0] == "Open Position"
    assert "  1:3 2:2 3:0 4:0 (span 3)" in lines


def test_shapes_infeasible(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(capsys, ["--tuning", "bass-4", "shapes", "C", "9"])
    assert status == 2
    assert lines == ["no shapes"]


def test_path_from_scale(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(
        capsys, ["--strings", "3", "path", "C", "major", "--scale"]
    )
    assert status == 2
    assert lines == ["no path"]


def test_box_extended(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(
        capsys, ["box", "A", "minor pentatonic", "--extend", "harmonic minor"]
    )
    assert status == 0
    assert lines[0] == "box 1 at fret 5"
    assert "extension: B F G#" in lines
    assert "hidden: G" in lines
    assert len([line for line in lines if line.startswith("  string ")]) == 6


def test_box_flats(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(
        capsys,
        ["--flats", "box", "A", "minor pentatonic", "--extend", "harmonic minor"],
    )
    assert status == 0
    assert "extension: B F Ab" in lines


def test_box_plain(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(capsys, ["box", "A", "minor pentatonic", "--index", "5"])
    assert status == 0
    assert lines[:2] == ["box 5 at fret 3", "mode: Mixolydian"]
    assert not any(line.startswith("extension") for line in lines)


def test_box_not_found(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(capsys, ["box", "A", "aeolian"])
    assert status == 2
    assert lines == ["no box"]


@pytest.mark.parametrize(
    "argv",
    [
        ["path", "H", "maj7"],
        ["path", "C", "nope"],
        ["box", "A", "bebop"],
        ["--max-fret", "-1", "path", "C", "maj"],
        ["--strings", "7", "path", "C", "maj"],
    ],
)
def test_malformed_input(capsys: pytest.CaptureFixture[str], argv: List[str]) -> None:
    status, lines = run_cli(capsys, argv)
    assert status == 1
    assert lines == []


def test_unknown_tuning_rejected_by_parser() -> None:
    with pytest.raises(SystemExit):
        main(["--tuning", "banjo-5", "path", "C", "maj"])


def test_path_play(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(
        capsys, ["--max-fret", "12", "path", "C", "maj7", "--play"]
    )
    assert status == 0
    assert lines == ["1:3 2:2 3:0 4:0 (span 3)", "play: C3 E3 G3 B3 G3 E3 C3"]


def test_shapes_play(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(
        capsys, ["--max-fret", "12", "--flats", "shapes", "C", "7", "--play"]
    )
    assert status == 0
    plays = [line for line in lines if line.startswith("    play: ")]
    assert len(plays) > 0
    assert all("Bb" in line for line in plays)


@pytest.mark.parametrize(
    "index, header",
    [
        ("1", ["box 1 at fret 5", "mode: Aeolian"]),
        ("2", ["box 2 at fret 8", "mode: Ionian"]),
        ("5", ["box 5 at fret 3", "mode: Mixolydian"]),
    ],
)
def test_box_index_counts_from_one(
    capsys: pytest.CaptureFixture[str], index: str, header: List[str]
) -> None:
    status, lines = run_cli(capsys, ["box", "A", "minor pentatonic", "--index", index])
    assert status == 0
    assert lines[:2] == header


@pytest.mark.parametrize("index", ["0", "6"])
def test_box_index_out_of_range(index: str) -> None:
    with pytest.raises(SystemExit):
        main(["box", "A", "minor pentatonic", "--index", index])


def test_box_parent(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(capsys, ["box", "C", "major pentatonic", "--parent"])
    assert status == 0
    assert lines[1] == "mode: Ionian"
    assert "extension: F B" in lines
    assert not any(line.startswith("hidden") for line in lines)


def test_box_parent_requires_pentatonic(capsys: pytest.CaptureFixture[str]) -> None:
    status, lines = run_cli(capsys, ["box", "A", "blues", "--parent"])
    assert status == 1
    assert lines == []


def test_box_extend_and_parent_exclusive() -> None:
    with pytest.raises(SystemExit):
        main(["box", "A", "minor pentatonic", "--parent", "--extend", "dorian"])


@pytest.mark.parametrize(
    "argv",
    [
        ["--channel", "16", "path", "C", "maj"],
        ["--velocity", "0", "path", "C", "maj"],
    ],
)
def test_bad_playback_settings(
    capsys: pytest.CaptureFixture[str], argv: List[str]
) -> None:
    status, lines = run_cli(capsys, argv)
    assert status == 1
    assert lines == []
