#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains methods for importing MIDI files as lists of notes
for the voice separation.
"""
import logging
from collections import defaultdict, deque

import mido

from voicesplitting.io.timing import TempoMap
from voicesplitting.model import group_by_onset
from voicesplitting.note import Note
from voicesplitting.ordering import sort_notes
from voicesplitting.utils import partition

__all__ = ["load_midi", "load_midi_batches", "MidiSong"]

LOGGER = logging.getLogger(__name__)

# meta messages that are copied to the exported voices
KEPT_META_TYPES = ("set_tempo", "time_signature", "key_signature")


class MidiSong(object):
    """Notes of a MIDI file, with their gold standard voices

    Attributes
    ----------
    notes : list of Note
        All closed notes, sorted
    gold_standard : dict
        Mapping of gold labels (channel or track index) to the sorted
        notes with that label
    tempo_map : TempoMap
        The tempo map of the file
    meta_events : list of mido.MetaMessage
        Tempo, time signature and key signature messages, with `time`
        set to the absolute tick
    ticks_per_beat : int
        Parts per quarter of the file
    name : str or None
        Name of the file, if known
    """

    def __init__(
        self,
        notes,
        gold_standard,
        tempo_map,
        meta_events=(),
        ticks_per_beat=None,
        name=None,
    ):
        self.notes = notes
        self.gold_standard = gold_standard
        self.tempo_map = tempo_map
        self.meta_events = list(meta_events)
        self.ticks_per_beat = (
            ticks_per_beat if ticks_per_beat is not None else tempo_map.ticks_per_beat
        )
        self.name = name

    def batches(self):
        """The notes grouped into batches of simultaneous onsets"""
        return group_by_onset(self.notes)

    def __repr__(self):
        return "<MidiSong {0}: {1} notes, {2} gold voices>".format(
            self.name, len(self.notes), len(self.gold_standard)
        )


def _iter_absolute(track):
    tick = 0
    for msg in track:
        tick += msg.time
        yield tick, msg


def load_midi(filename, use_channel=True):
    """Load the notes of a MIDI file.

    Parameters
    ----------
    filename : str, file-like object or mido.MidiFile
        The MIDI file
    use_channel : bool, optional
        When True the gold standard voice of a note is its MIDI channel,
        otherwise it is the index of its track. Defaults to True.

    Returns
    -------
    MidiSong
        The notes of the file. Notes that are never closed are dropped.
    """
    if isinstance(filename, mido.MidiFile):
        mid = filename
    elif hasattr(filename, "read"):
        mid = mido.MidiFile(file=filename)
    else:
        mid = mido.MidiFile(filename)

    ppq = mid.ticks_per_beat

    tempo_changes = []
    meta_events = []
    for track in mid.tracks:
        for tick, msg in _iter_absolute(track):
            if msg.type in KEPT_META_TYPES:
                meta_events.append(msg.copy(time=tick))
                if msg.type == "set_tempo":
                    tempo_changes.append((tick, msg.tempo))

    tempo_map = TempoMap(ppq, tempo_changes)
    meta_events.sort(key=lambda msg: msg.time)

    notes = []
    for i, track in enumerate(mid.tracks):
        # open notes per (label, pitch), oldest first
        sounding_notes = defaultdict(deque)

        for tick, msg in _iter_absolute(track):
            note_on = msg.type == "note_on"
            note_off = msg.type == "note_off"

            if not (note_on or note_off):
                continue

            label = msg.channel if use_channel else i
            key = (label, msg.note)

            if note_on and msg.velocity > 0:
                note = Note(
                    msg.note,
                    msg.velocity,
                    tempo_map.tick_to_time(tick),
                    onset_tick=tick,
                    channel=label,
                )
                sounding_notes[key].append(note)
                notes.append(note)

            else:
                if len(sounding_notes[key]) == 0:
                    LOGGER.debug("ignoring unmatched MIDI message %s", msg)
                    continue

                note = sounding_notes[key].popleft()
                note.close(tempo_map.tick_to_time(tick), tick)

    num_open = sum(note.is_active for note in notes)
    if num_open > 0:
        LOGGER.warning("dropping %d notes without note off", num_open)

    notes = sort_notes(note for note in notes if not note.is_active)

    for i, note in enumerate(notes):
        note.id = i

    gold_standard = partition(lambda note: note.channel, notes)

    name = filename if isinstance(filename, str) else getattr(mid, "filename", None)

    return MidiSong(
        notes,
        gold_standard,
        tempo_map,
        meta_events=meta_events,
        ticks_per_beat=ppq,
        name=name,
    )


def load_midi_batches(filename, use_channel=True):
    """Load a MIDI file as batches of simultaneous notes (see
    :func:`load_midi`)"""
    return load_midi(filename, use_channel).batches()
