#!/usr/bin/python
# -*- coding: utf-8 -*-
"""
This module contains methods for reading notes from MIDI files and for
writing separated voices.
"""
from .timing import TempoMap
from .importmidi import load_midi, load_midi_batches, MidiSong
from .exportmidi import save_voices_midi
from .exporttext import voices_to_text, save_voices_text

__all__ = [
    "TempoMap",
    "load_midi",
    "load_midi_batches",
    "MidiSong",
    "save_voices_midi",
    "voices_to_text",
    "save_voices_text",
]
