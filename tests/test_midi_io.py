#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains tests for reading notes from MIDI files and for
writing separated voices.
"""
import io
import unittest

import mido

from voicesplitting.io import (
    TempoMap,
    load_midi,
    load_midi_batches,
    save_voices_midi,
    save_voices_text,
    voices_to_text,
)
from voicesplitting.model import split_voices
from tests import TWO_VOICE_NOTES, fill_track, make_midi, make_note, make_voice


class TestTempoMap(unittest.TestCase):
    def test_default_tempo(self):
        tempo_map = TempoMap(480)
        self.assertEqual(tempo_map.tick_to_time(960), 1000000)
        self.assertEqual(tempo_map.time_to_tick(1000000), 960)
        self.assertEqual(tempo_map.changes, [(0, 500000)])

    def test_tempo_change(self):
        tempo_map = TempoMap(480, [(480, 1000000)])
        self.assertEqual(tempo_map.tick_to_time(480), 500000)
        self.assertEqual(tempo_map.tick_to_time(720), 1000000)
        self.assertEqual(tempo_map.time_to_tick(1000000), 720)
        self.assertEqual(tempo_map.time_to_tick(250000), 240)
        self.assertEqual(tempo_map.tempo_at_tick(479), 500000)
        self.assertEqual(tempo_map.tempo_at_tick(480), 1000000)

    def test_last_change_at_tick_wins(self):
        tempo_map = TempoMap(480, [(0, 600000), (0, 1000000)])
        self.assertEqual(tempo_map.tempo_at_tick(0), 1000000)

    def test_truncation(self):
        tempo_map = TempoMap(3)
        self.assertEqual(tempo_map.tick_to_time(1), 166666)
        self.assertEqual(tempo_map.time_to_tick(166666), 0)

    def test_invalid_ppq(self):
        with self.assertRaises(ValueError):
            TempoMap(0)


class TestLoadMidi(unittest.TestCase):
    def test_notes_and_gold_standard(self):
        song = load_midi(make_midi([TWO_VOICE_NOTES]))

        self.assertEqual(song.ticks_per_beat, 480)
        self.assertEqual([n.pitch for n in song.notes], [48, 72, 50, 74, 52, 76])
        self.assertEqual([n.id for n in song.notes], list(range(6)))
        self.assertEqual(sorted(song.gold_standard.keys()), [0, 1])
        self.assertEqual([n.pitch for n in song.gold_standard[0]], [72, 74, 76])
        self.assertEqual([n.pitch for n in song.gold_standard[1]], [48, 50, 52])

        first = song.notes[0]
        self.assertEqual((first.onset_tick, first.offset_tick), (0, 480))
        self.assertEqual((first.onset_time, first.offset_time), (0, 500000))

        batches = song.batches()
        self.assertEqual([len(b) for b in batches], [2, 2, 2])
        other_batches = load_midi_batches(make_midi([TWO_VOICE_NOTES]))
        self.assertEqual(
            [[n.pitch for n in b] for b in other_batches],
            [[n.pitch for n in b] for b in batches],
        )

    def test_track_labels(self):
        mid = make_midi([[(0, 1, 72, 0)], [(0, 1, 48, 0)]])

        self.assertEqual(list(load_midi(mid).gold_standard.keys()), [0])
        by_track = load_midi(mid, use_channel=False).gold_standard
        self.assertEqual(sorted(by_track.keys()), [0, 1])
        self.assertEqual([n.pitch for n in by_track[1]], [48])

    def test_note_on_with_zero_velocity(self):
        mid = mido.MidiFile(ticks_per_beat=480)
        track = mido.MidiTrack()
        mid.tracks.append(track)
        track.append(mido.Message("note_on", note=60, velocity=80, time=0))
        track.append(mido.Message("note_on", note=60, velocity=0, time=480))

        song = load_midi(mid)
        self.assertEqual(len(song.notes), 1)
        self.assertEqual(song.notes[0].offset_tick, 480)
        self.assertEqual(song.notes[0].velocity, 80)

    def test_repeated_pitch_closes_earliest_note(self):
        mid = mido.MidiFile(ticks_per_beat=480)
        track = mido.MidiTrack()
        mid.tracks.append(track)
        track.append(mido.Message("note_on", note=60, velocity=80, time=0))
        track.append(mido.Message("note_on", note=60, velocity=70, time=240))
        track.append(mido.Message("note_off", note=60, velocity=0, time=240))
        track.append(mido.Message("note_off", note=60, velocity=0, time=240))

        notes = load_midi(mid).notes
        self.assertEqual(
            [(n.onset_tick, n.offset_tick) for n in notes], [(0, 480), (240, 720)]
        )

    def test_unmatched_and_unclosed_notes(self):
        mid = mido.MidiFile(ticks_per_beat=480)
        track = mido.MidiTrack()
        mid.tracks.append(track)
        track.append(mido.Message("note_off", note=62, velocity=0, time=0))
        track.append(mido.Message("note_on", note=60, velocity=64, time=0))
        track.append(mido.Message("note_off", note=60, velocity=0, time=480))
        track.append(mido.Message("note_on", note=64, velocity=64, time=0))

        with self.assertLogs("voicesplitting.io.importmidi", level="DEBUG") as cm:
            song = load_midi(mid)

        self.assertEqual([n.pitch for n in song.notes], [60])
        self.assertTrue(any("WARNING" in line for line in cm.output))

    def test_tempo_and_meta_events(self):
        mid = mido.MidiFile(ticks_per_beat=480)
        meta = mido.MidiTrack()
        mid.tracks.append(meta)
        meta.append(
            mido.MetaMessage("time_signature", numerator=3, denominator=4, time=0)
        )
        meta.append(mido.MetaMessage("set_tempo", tempo=1000000, time=480))
        notes = mido.MidiTrack()
        mid.tracks.append(notes)
        fill_track(notes, [(2, 3, 60, 0)], 480)

        song = load_midi(mid)
        note = song.notes[0]
        self.assertEqual((note.onset_time, note.offset_time), (1500000, 2500000))
        self.assertEqual(
            [(msg.type, msg.time) for msg in song.meta_events],
            [("time_signature", 0), ("set_tempo", 480)],
        )


class TestSaveVoices(unittest.TestCase):
    def setUp(self):
        self.song = load_midi(make_midi([TWO_VOICE_NOTES]))
        self.voices = split_voices(self.song.notes)

    def test_tracks_and_channels(self):
        mf = save_voices_midi(
            self.voices,
            tempo_map=self.song.tempo_map,
            meta_events=self.song.meta_events,
        )
        self.assertEqual(len(mf.tracks), 3)
        self.assertEqual(mf.ticks_per_beat, 480)
        self.assertIn("set_tempo", [msg.type for msg in mf.tracks[0]])

        for i, track in enumerate(mf.tracks[1:]):
            ons = [msg for msg in track if msg.type == "note_on"]
            self.assertEqual(len(ons), 3)
            self.assertTrue(all(msg.channel == i for msg in ons))
        self.assertEqual(
            [msg.note for msg in mf.tracks[1] if msg.type == "note_on"], [48, 50, 52]
        )

    def test_reload(self):
        out = io.BytesIO()
        self.assertIsNone(
            save_voices_midi(self.voices, out, tempo_map=self.song.tempo_map)
        )
        out.seek(0)

        song = load_midi(out)
        self.assertEqual(
            [(n.pitch, n.onset_time, n.offset_time) for n in song.notes],
            [(n.pitch, n.onset_time, n.offset_time) for n in self.song.notes],
        )
        # voice 0 (the bass) is written to channel 0
        self.assertEqual([n.pitch for n in song.gold_standard[0]], [48, 50, 52])

    def test_notes_without_ticks(self):
        voice = make_voice(make_note(60, 0, 500000), make_note(62, 500000, 1000000))
        mf = save_voices_midi([voice])

        ticks = []
        t = 0
        for msg in mf.tracks[1]:
            t += msg.time
            if msg.type == "note_on":
                ticks.append(t)
        self.assertEqual(ticks, [0, 480])

    def test_zero_length_note(self):
        song = load_midi(make_midi([[(0, 1, 60, 0), (1, 1, 62, 0)]]))
        self.assertEqual(len(song.notes), 2)

        voices = split_voices(song.notes)
        out = io.BytesIO()
        save_voices_midi(voices, out, tempo_map=song.tempo_map)
        out.seek(0)

        events = []
        for track in mido.MidiFile(file=out).tracks[1:]:
            t = 0
            for msg in track:
                t += msg.time
                if msg.type in ("note_on", "note_off"):
                    events.append((t, msg.type, msg.note))
        self.assertLess(
            events.index((480, "note_on", 62)), events.index((480, "note_off", 62))
        )

        out.seek(0)
        reloaded = load_midi(out)
        self.assertEqual(
            [(n.pitch, n.onset_tick, n.offset_tick) for n in reloaded.notes],
            [(60, 0, 480), (62, 480, 480)],
        )

    def test_meta_events_are_kept(self):
        mid = make_midi([TWO_VOICE_NOTES])
        mid.tracks[0].insert(
            0, mido.MetaMessage("time_signature", numerator=3, denominator=4, time=0)
        )
        song = load_midi(mid)
        mf = save_voices_midi(
            split_voices(song.notes),
            tempo_map=song.tempo_map,
            meta_events=song.meta_events,
        )
        types = [msg.type for msg in mf.tracks[0]]
        self.assertIn("time_signature", types)
        self.assertIn("set_tempo", types)

    def test_text(self):
        lines = voices_to_text(self.voices, song_id=3).split("\n")

        self.assertEqual(len(lines), 6)
        self.assertEqual(lines[0], "3 0 0 0 500000 48 64")
        self.assertEqual(lines[1], "3 1 1 0 500000 72 64")
        self.assertEqual(lines[-1], "3 5 1 1000000 1500000 76 64")

        out = io.StringIO()
        save_voices_text(self.voices, out, song_id=3)
        self.assertEqual(out.getvalue(), "\n".join(lines) + "\n")


if __name__ == "__main__":
    unittest.main()
