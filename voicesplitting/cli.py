#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Command line interface for running, evaluating and tuning the voice
separation on MIDI files.
"""
import argparse
import logging
import os

from voicesplitting.evaluation import evaluate
from voicesplitting.io import load_midi, save_voices_midi, voices_to_text
from voicesplitting.parameters import (
    VoiceSplittingParameters,
    BEAM_SIZE_DEFAULT,
    NEW_VOICE_PROBABILITY_DEFAULT,
    PITCH_HISTORY_LENGTH_DEFAULT,
    GAP_STD_MICROS_DEFAULT,
    PITCH_STD_DEFAULT,
    MIN_GAP_SCORE_DEFAULT,
)
from voicesplitting.tuning import tune
from voicesplitting.utils import find_files

__all__ = ["main", "build_parser"]

LOGGER = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description="Separate the notes of MIDI files into monophonic voices"
    )
    parser.add_argument(
        "files", nargs="+", help="MIDI files, or directories searched recursively"
    )

    group = parser.add_argument_group("running")
    group.add_argument(
        "-t",
        dest="tune_steps",
        type=int,
        nargs="?",
        const=5,
        default=None,
        metavar="STEPS",
        help=(
            "tune the parameters, optionally setting the number of steps "
            "within each parameter range (default: 5)"
        ),
    )
    group.add_argument(
        "-r", dest="run", action="store_true", help="run voice separation"
    )
    group.add_argument(
        "-e",
        dest="extract",
        action="store_true",
        help=(
            "print the separated voices as lines of: songID noteID voiceID "
            "onsetTime offsetTime pitch velocity (times in microseconds)"
        ),
    )
    group.add_argument(
        "-w",
        dest="out_dir",
        metavar="DIR",
        help="write the separated voices to MIDI files in DIR",
    )
    group.add_argument(
        "-v", dest="verbose", action="store_true", help="verbose logging"
    )
    group.add_argument(
        "-T",
        dest="use_tracks",
        action="store_true",
        help="use tracks as gold standard voices (instead of channels)",
    )

    group = parser.add_argument_group("parameters")
    group.add_argument(
        "-b",
        dest="beam_size",
        type=int,
        default=BEAM_SIZE_DEFAULT,
        help="beam size (default: %(default)s)",
    )
    group.add_argument(
        "-n",
        dest="new_voice_probability",
        type=float,
        default=NEW_VOICE_PROBABILITY_DEFAULT,
        help="new voice probability (default: %(default)s)",
    )
    group.add_argument(
        "-H",
        dest="pitch_history_length",
        type=int,
        default=PITCH_HISTORY_LENGTH_DEFAULT,
        help="pitch history length (default: %(default)s)",
    )
    group.add_argument(
        "-g",
        dest="gap_std_micros",
        type=float,
        default=GAP_STD_MICROS_DEFAULT,
        help="gap std in microseconds (default: %(default)s)",
    )
    group.add_argument(
        "-p",
        dest="pitch_std",
        type=float,
        default=PITCH_STD_DEFAULT,
        help="pitch std in semitones (default: %(default)s)",
    )
    group.add_argument(
        "-m",
        dest="min_gap_score",
        type=float,
        default=MIN_GAP_SCORE_DEFAULT,
        help="min gap score (default: %(default)s)",
    )
    group.add_argument(
        "--strict-overlap",
        dest="symmetric_overlap",
        action="store_false",
        help=(
            "only tolerate overlaps of up to half the duration of the "
            "last note of a voice"
        ),
    )
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.tune_steps is None and not (args.run or args.extract or args.out_dir):
        parser.error("Neither -t, -r, -w, nor -e selected")

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)

    filenames = []
    for path in args.files:
        if not os.path.exists(path):
            parser.error("File not found: {0}".format(path))
        filenames.extend(find_files(path))

    try:
        params = VoiceSplittingParameters(
            args.beam_size,
            args.new_voice_probability,
            args.pitch_history_length,
            args.gap_std_micros,
            args.pitch_std,
            args.min_gap_score,
            args.symmetric_overlap,
        )
    except ValueError as e:
        parser.error(str(e))

    songs = [load_midi(fn, use_channel=not args.use_tracks) for fn in filenames]

    if args.tune_steps is not None:
        best = tune(songs, args.tune_steps, symmetric_overlap=args.symmetric_overlap)
        if best.params is not None:
            params = best.params

    if args.run or args.extract or args.out_dir:

        def handle_song(song_index, song, voices):
            if args.extract:
                print(voices_to_text(voices, song_index))

            if args.out_dir:
                os.makedirs(args.out_dir, exist_ok=True)
                out_fn = os.path.join(args.out_dir, os.path.basename(song.name))
                save_voices_midi(
                    voices,
                    out_fn,
                    tempo_map=song.tempo_map,
                    meta_events=song.meta_events,
                )
                LOGGER.info("Output successfully written to %s", out_fn)

        result = evaluate(songs, params, callback=handle_song)

        if args.run:
            print(result)

    return 0
