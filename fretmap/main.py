"""Command-line entry point for fretmap.

Prints arpeggio paths (optionally with their playback notes), every
arpeggio shape grouped by neck region, or a pentatonic box with its mode and
its extension towards a larger scale. Positions are printed as
``string:fret`` with string 0 the lowest.
"""

import logging
import sys
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from typing import List, Optional, Sequence

from fretmap import constants
from fretmap.arpeggio import ArpeggioShape, group_shapes
from fretmap.base import FretmapException, ToneSetException
from fretmap.config import Config, SearchMode, init_config
from fretmap.engine import search
from fretmap.fretboard import StringPos, pitch_at
from fretmap.pentatonic import (
    PentatonicBox,
    PentatonicType,
    box_mode_name,
    resolve_extension,
)
from fretmap.pitch import Spelling, note_display_name, to_display_name
from fretmap.playback import playback_messages, sounded_notes
from fretmap.theory import ToneSet, resolve_chord, resolve_scale


def make_parser() -> ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        An ArgumentParser with one subcommand per search mode.
    """
    parser = ArgumentParser(prog="fretmap")
    parser.add_argument("--log-level", default="WARNING")
    parser.add_argument(
        "--tuning",
        default=constants.DEFAULT_TUNING_NAME,
        choices=sorted(constants.TUNINGS),
    )
    parser.add_argument("--strings", type=int, default=None)
    parser.add_argument("--max-fret", type=int, default=constants.DEFAULT_MAX_FRET)
    parser.add_argument("--span-limit", type=int, default=constants.SPAN_LIMIT)
    parser.add_argument("--flats", action="store_true")
    parser.add_argument("--channel", type=int, default=0, help="MIDI channel, 0-15")
    parser.add_argument("--velocity", type=int, default=100, help="MIDI velocity, 1-127")
    subparsers = parser.add_subparsers(dest="mode", required=True)

    for mode in (SearchMode.Path, SearchMode.Shapes):
        sub = subparsers.add_parser(mode.value)
        sub.add_argument("root")
        sub.add_argument("quality", help="chord quality, or scale name with --scale")
        sub.add_argument("--scale", action="store_true")
        sub.add_argument(
            "--play", action="store_true", help="print the up-and-down playback notes"
        )

    box = subparsers.add_parser(SearchMode.Box.value)
    box.add_argument("root")
    box.add_argument("scale", help="five-note scale name, e.g. 'minor pentatonic'")
    box.add_argument(
        "--index", type=int, default=1, choices=range(1, 6), help="box number, 1-5"
    )
    target = box.add_mutually_exclusive_group()
    target.add_argument("--extend", default=None, help="target scale to extend towards")
    target.add_argument(
        "--parent", action="store_true", help="extend towards the parent diatonic scale"
    )
    return parser


def configure_logging(log_level: str) -> None:
    """Configure the logging system with the specified log level.

    Args:
        log_level: The logging level (e.g., 'DEBUG', 'INFO', 'WARNING').
    """
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(filename)s:%(lineno)d -- %(message)s",
        level=log_level,
    )


def config_from_args(args: Namespace) -> Config:
    spelling = Spelling.Flat if args.flats else Spelling.Sharp
    config = init_config(
        args.tuning,
        args.max_fret,
        args.span_limit,
        spelling,
        midi_channel=args.channel,
        velocity=args.velocity,
    )
    if args.strings is not None:
        config = replace(config, string_count=args.strings)
    return config


def format_positions(positions: Sequence[StringPos]) -> str:
    return " ".join(str(p) for p in positions)


def format_tones(tone_set: ToneSet, spelling: Spelling) -> str:
    return " ".join(to_display_name(pc, spelling) for pc in tone_set)


def format_shape(shape: ArpeggioShape) -> str:
    return f"{format_positions(shape.positions)} (span {shape.fret_span})"


def format_playback(config: Config, shape: ArpeggioShape) -> str:
    msgs = playback_messages(shape, config.tuning, config.midi_channel, config.velocity)
    notes = sounded_notes(msgs)
    return "play: " + " ".join(note_display_name(n, config.spelling) for n in notes)


def extension_target(
    root: str, tone_set: ToneSet, extend: Optional[str], parent: bool
) -> Optional[ToneSet]:
    """The scale a box should be extended towards, if any was requested.

    Raises:
        ToneSetException: If ``parent`` is set but the box's scale is not a
            minor or major pentatonic.
    """
    if extend is not None:
        return resolve_scale(root, extend)
    if parent:
        pentatonic_type = PentatonicType.of(tone_set)
        if pentatonic_type is None:
            raise ToneSetException("pentatonic", format_tones(tone_set, Spelling.Sharp))
        return resolve_scale(root, pentatonic_type.parent_scale_name)
    return None


def print_box(
    config: Config, tone_set: ToneSet, box: PentatonicBox, target: Optional[ToneSet]
) -> None:
    print(f"box {box.box_index + 1} at fret {box.anchor_fret}")
    pentatonic_type = PentatonicType.of(tone_set)
    if pentatonic_type is not None:
        print(f"mode: {box_mode_name(pentatonic_type, box.box_index)}")
    positions = box.positions
    if target is not None:
        ext = resolve_extension(box, tone_set, target, config.tuning, config.string_count)
        positions = ext.box_positions
        print(f"extension: {format_tones(ext.extension_pitch_classes, config.spelling)}")
        if not ext.is_subset:
            print(f"hidden: {format_tones(ext.conflict_pitch_classes, config.spelling)}")
        print(f"extension positions: {format_positions(ext.extension_positions)}")
    for str_index in range(config.string_count):
        frets = [p for p in positions if p.str_index == str_index]
        names = [to_display_name(pitch_at(p, config.tuning), config.spelling) for p in frets]
        print(f"  string {str_index}: {format_positions(frets)}  {' '.join(names)}")


def run(args: Namespace) -> int:
    """Run one search from parsed arguments and print the result.

    Box numbers on the command line and in the output count from 1.

    Returns:
        The process exit status: 0 if a result was found, 2 if the request
        was well formed but nothing fits the geometry.
    """
    config = config_from_args(args)
    mode = SearchMode(args.mode)
    if mode == SearchMode.Box:
        tone_set = resolve_scale(args.root, args.scale)
    elif args.scale:
        tone_set = resolve_scale(args.root, args.quality)
    else:
        tone_set = resolve_chord(args.root, args.quality)
    logging.info("Tones: %s", format_tones(tone_set, config.spelling))

    if mode == SearchMode.Path:
        shape = search(config, tone_set, mode)
        if shape is None:
            print("no path")
            return 2
        assert isinstance(shape, ArpeggioShape)
        print(format_shape(shape))
        if args.play:
            print(format_playback(config, shape))
    elif mode == SearchMode.Shapes:
        shapes = search(config, tone_set, mode)
        assert isinstance(shapes, list)
        if len(shapes) == 0:
            print("no shapes")
            return 2
        for label, group in group_shapes(shapes).items():
            print(label)
            for shape in group:
                print(f"  {format_shape(shape)}")
                if args.play:
                    print(f"    {format_playback(config, shape)}")
    else:
        target = extension_target(args.root, tone_set, args.extend, args.parent)
        box = search(config, tone_set, mode, args.index - 1)
        if box is None:
            print("no box")
            return 2
        assert isinstance(box, PentatonicBox)
        print_box(config, tone_set, box, target)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the fretmap command.

    Parses command-line arguments, configures logging, and runs the
    requested search. Malformed input is logged and reported with exit
    status 1.
    """
    parser = make_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    try:
        return run(args)
    except FretmapException as e:
        logging.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
