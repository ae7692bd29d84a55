#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains methods for exporting separated voices as MIDI
files
"""
from collections import defaultdict

from mido import MidiFile, MidiTrack, Message, MetaMessage

from voicesplitting.io.timing import TempoMap

__all__ = ["save_voices_midi"]

DEFAULT_PPQ = 480

# order of the events on one tick: note offs of earlier notes, note ons,
# note offs of notes starting on that tick
_RANK_OFF = 0
_RANK_ON = 1
_RANK_ZERO_LENGTH_OFF = 2


def _note_ticks(note, tempo_map):
    on = note.onset_tick
    off = note.offset_tick
    if on is None:
        on = tempo_map.time_to_tick(note.onset_time)
    if off is None:
        off = tempo_map.time_to_tick(note.offset_time)
    return on, off


def save_voices_midi(voices, out=None, tempo_map=None, meta_events=()):
    """Save separated voices as a MIDI file

    Track 0 holds the meta events (tempo, time and key signatures). The
    notes of voice `i` are written to track `i + 1`, on MIDI channel
    `i` modulo 16.

    Parameters
    ----------
    voices : list of Voice
        The voices to be saved
    out : str or file-like object, optional
        Either a filename or a file-like object to write the MIDI data
        to.
    tempo_map : TempoMap, optional
        Used for the ticks per beat of the file, for the tempo events
        when `meta_events` has none, and for computing the ticks of
        notes that have none. Defaults to a map with 480 ticks per beat
        and a constant tempo of 120 BPM.
    meta_events : iterable of mido.MetaMessage, optional
        Meta messages with `time` set to their absolute tick (see
        :attr:`~voicesplitting.io.importmidi.MidiSong.meta_events`).

    Returns
    -------
    None or MidiFile
        If no output is specified using `out`, the function returns
        a `MidiFile` object. Otherwise, the function returns None.
    """
    if tempo_map is None:
        tempo_map = TempoMap(DEFAULT_PPQ)

    meta_events = list(meta_events)
    if not any(msg.type == "set_tempo" for msg in meta_events):
        meta_events = [
            MetaMessage("set_tempo", tempo=tempo, time=tick)
            for tick, tempo in tempo_map.changes
        ] + meta_events

    # per track and tick: (rank, message), written in order of rank
    track_events = defaultdict(lambda: defaultdict(list))

    for msg in meta_events:
        track_events[0][msg.time].append((_RANK_OFF, msg))

    for i, voice in enumerate(voices):
        ch = i % 16
        for note in voice.notes:
            t_on, t_off = _note_ticks(note, tempo_map)
            track_events[i + 1][t_on].append(
                (
                    _RANK_ON,
                    Message(
                        "note_on", note=note.pitch, velocity=note.velocity, channel=ch
                    ),
                )
            )
            # zero length notes are closed after they are opened
            off_rank = _RANK_ZERO_LENGTH_OFF if t_off == t_on else _RANK_OFF
            track_events[i + 1][t_off].append(
                (
                    off_rank,
                    Message("note_off", note=note.pitch, velocity=0, channel=ch),
                )
            )

    mf = MidiFile(type=1, ticks_per_beat=tempo_map.ticks_per_beat)

    for i in range(len(voices) + 1):
        track = MidiTrack()
        mf.tracks.append(track)
        t = 0
        for t_msg in sorted(track_events[i].keys()):
            t_delta = t_msg - t
            for _, msg in sorted(track_events[i][t_msg], key=lambda e: e[0]):
                track.append(msg.copy(time=t_delta))
                t_delta = 0
            t = t_msg

    if out is not None:
        if hasattr(out, "write"):
            mf.save(file=out)
        else:
            mf.save(out)
    else:
        return mf
