#!/usr/bin/env python
# -*- coding: utf-8 -*-
# pylint: skip-file
"""
This module contains tests.
"""
from collections import defaultdict

import mido

from voicesplitting.note import Note
from voicesplitting.voice import Voice


def make_note(pitch, onset, offset, channel=0, velocity=64, note_id=None):
    # times in microseconds
    return Note(
        pitch, velocity, onset, offset_time=offset, channel=channel, note_id=note_id
    )


def make_voice(*notes):
    voice = Voice()
    for note in notes:
        voice = voice.extend(note)
    return voice


def pitches(voice):
    return [note.pitch for note in voice.notes]


def fill_track(track, notes, divs, vel=64):
    # add on/off events for the (onset, offset, pitch, channel) tuples in `notes`
    onoffs = defaultdict(list)
    for on, off, pitch, ch in notes:
        on = int(divs * on)
        off = int(divs * off)
        onoffs[on].append(("note_on", pitch, ch))
        onoffs[off].append(("note_off", pitch, ch))

    times = sorted(onoffs.keys())
    prev = 0
    for t in times:
        dt = t - prev
        for msg, pitch, ch in onoffs[t]:
            track.append(
                mido.Message(msg, note=pitch, velocity=vel, channel=ch, time=dt)
            )
            dt = 0
        prev = t


def make_midi(track_notes, divs=480):
    # one track per list of (on, off, pitch, channel) tuples, times in
    # quarters
    mid = mido.MidiFile(ticks_per_beat=divs)
    for notes in track_notes:
        track = mido.MidiTrack()
        mid.tracks.append(track)
        fill_track(track, notes, divs)
    return mid


# two voices in two channels of one track: a melody above a bass line
TWO_VOICE_NOTES = [
    (0, 1, 72, 0),
    (1, 2, 74, 0),
    (2, 3, 76, 0),
    (0, 1, 48, 1),
    (1, 2, 50, 1),
    (2, 3, 52, 1),
]
