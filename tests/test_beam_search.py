#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains tests for the beam search voice separation.
"""
import threading
import unittest

import numpy as np

from voicesplitting.model import (
    BeamSearchModel,
    EmptyHypothesesException,
    NoteOrderException,
    estimate_voices,
    group_by_onset,
    prepare_note_array,
    split_voices,
)
from voicesplitting.parameters import VoiceSplittingParameters
from voicesplitting.voice import Voice
from tests import make_note, pitches

RNG = np.random.RandomState(1984)


def random_notes(n_notes=40):
    notes = []
    for i in range(n_notes):
        onset = int(RNG.randint(0, 20)) * 100000
        duration = int(RNG.randint(1, 7)) * 100000
        pitch = int(RNG.randint(40, 80))
        notes.append(make_note(pitch, onset, onset + duration, note_id=i))
    return notes


def voice_signature(voices):
    return [[(n.pitch, n.onset_time) for n in voice.notes] for voice in voices]


class TestBeamSearchScenarios(unittest.TestCase):
    def test_two_repeated_dyads(self):
        notes = [
            make_note(60, 0, 500),
            make_note(64, 0, 500),
            make_note(60, 600, 1000),
            make_note(64, 600, 1000),
        ]
        voices = split_voices(notes)
        self.assertEqual([pitches(v) for v in voices], [[60, 60], [64, 64]])

    def test_distant_pitches_start_new_voices(self):
        notes = [
            make_note(pitch, i * 10**6, i * 10**6 + 100000)
            for i, pitch in enumerate([21, 45, 69, 93])
        ]
        voices = split_voices(notes)
        self.assertEqual(len(voices), len(notes))

    def test_alternating_pitches(self):
        notes = [
            make_note(pitch, i * 10**6, i * 10**6 + 100000)
            for i, pitch in enumerate([40, 90, 40, 90])
        ]
        voices = split_voices(notes)
        self.assertEqual([pitches(v) for v in voices], [[40, 40], [90, 90]])

    def test_overlapping_same_pitch(self):
        notes = [make_note(60, 0, 1000), make_note(60, 10, 1000)]
        voices = split_voices(notes)
        self.assertEqual(len(voices), 2)

    def test_melody(self):
        notes = [
            make_note(pitch, i * 500000, (i + 1) * 500000)
            for i, pitch in enumerate([60, 62, 64, 65, 67])
        ]
        voices = split_voices(notes)
        self.assertEqual(len(voices), 1)
        self.assertEqual(voices[0].notes, notes)

    def test_melody_and_bass(self):
        melody = [
            make_note(p, i * 500000, (i + 1) * 500000)
            for i, p in enumerate([72, 74, 76])
        ]
        bass = [
            make_note(p, i * 500000, (i + 1) * 500000)
            for i, p in enumerate([48, 50, 52])
        ]
        voices = split_voices(melody + bass)

        self.assertEqual(len(voices), 2)
        self.assertEqual(voices[0].notes, bass)
        self.assertEqual(voices[1].notes, melody)
        self.assertTrue(all(n.voice == 0 for n in bass))
        self.assertTrue(all(n.voice == 1 for n in melody))


class TestBeamSearchProperties(unittest.TestCase):
    def setUp(self):
        self.notes = random_notes()
        self.params = VoiceSplittingParameters(beam_size=5)

    def test_notes_are_conserved(self):
        voices = split_voices(self.notes, self.params)
        assigned = [note for voice in voices for note in voice.notes]

        self.assertEqual(len(assigned), len(self.notes))
        self.assertEqual(set(map(id, assigned)), set(map(id, self.notes)))

    def test_voices_are_monophonic(self):
        voices = split_voices(self.notes, self.params)

        for voice in voices:
            for prev, note in voice.iter_links():
                self.assertTrue(prev.onset_time < note.onset_time)
                self.assertTrue(
                    Voice(prev).can_extend(note.onset_time, note.duration_time)
                )

    def test_deterministic(self):
        first = split_voices(self.notes, self.params)
        second = split_voices(list(reversed(self.notes)), self.params)
        self.assertEqual(voice_signature(first), voice_signature(second))

    def test_beam_and_monotonic_log_prob(self):
        model = BeamSearchModel(self.params)
        best_log_prob = model.best.log_prob

        for batch in group_by_onset(self.notes):
            model.handle_batch(batch)
            self.assertTrue(1 <= len(model.hypotheses) <= self.params.beam_size)
            self.assertTrue(model.best.log_prob <= best_log_prob)
            best_log_prob = model.best.log_prob

            log_probs = [state.log_prob for state in model.hypotheses]
            self.assertEqual(log_probs, sorted(log_probs, reverse=True))

    def test_strict_overlap(self):
        params = VoiceSplittingParameters(beam_size=5, symmetric_overlap=False)
        voices = split_voices(self.notes, params)

        for voice in voices:
            for prev, note in voice.iter_links():
                self.assertTrue(
                    Voice(prev).can_extend(
                        note.onset_time, note.duration_time, symmetric=False
                    )
                )


class TestBeamSearchModel(unittest.TestCase):
    def test_group_by_onset(self):
        notes = [
            make_note(64, 500, 1000),
            make_note(60, 0, 500),
            make_note(67, 500, 700),
        ]
        batches = group_by_onset(notes)
        self.assertEqual([[n.pitch for n in b] for b in batches], [[60], [67, 64]])

    def test_decreasing_onset(self):
        model = BeamSearchModel()
        model.handle_batch([make_note(60, 1000, 2000)])
        with self.assertRaises(NoteOrderException):
            model.handle_batch([make_note(62, 500, 2000)])

    def test_equal_onset_across_batches(self):
        model = BeamSearchModel()
        model.handle_batch([make_note(60, 1000, 2000)])
        model.handle_batch([make_note(72, 1000, 2000)])
        self.assertEqual(model.best.num_notes, 2)

    def test_invalid_batches(self):
        model = BeamSearchModel()
        with self.assertRaises(NoteOrderException):
            model.handle_batch([])
        with self.assertRaises(NoteOrderException):
            model.handle_batch([make_note(60, 0, 100), make_note(62, 10, 100)])
        open_note = make_note(60, 0, 100)
        open_note.offset_time = None
        with self.assertRaises(NoteOrderException):
            model.handle_batch([open_note])
        self.assertIsInstance(NoteOrderException(), ValueError)

    def test_no_hypotheses(self):
        model = BeamSearchModel()
        model.hypotheses = []
        with self.assertRaises(EmptyHypothesesException):
            model.best

    def test_cancel(self):
        notes = [make_note(60 + i, i * 1000, (i + 1) * 1000) for i in range(5)]
        stop = threading.Event()
        stop.set()
        self.assertIsNone(split_voices(notes, should_stop=stop.is_set))

        calls = []

        def should_stop():
            calls.append(None)
            return len(calls) > 2

        model = BeamSearchModel()
        self.assertFalse(model.run(group_by_onset(notes), should_stop=should_stop))
        self.assertEqual(model.num_batches, 2)

    def test_f1(self):
        bass = [
            make_note(p, i * 500000, (i + 1) * 500000, channel=1)
            for i, p in enumerate([48, 50])
        ]
        melody = [
            make_note(p, i * 500000, (i + 1) * 500000, channel=0)
            for i, p in enumerate([72, 74])
        ]

        model = BeamSearchModel()
        model.run(group_by_onset(bass + melody))
        self.assertEqual(model.f1({0: melody, 1: bass}), 1.0)


class TestEstimateVoices(unittest.TestCase):
    def test_seconds(self):
        note_array = np.array(
            [
                (72, 0.0, 0.5),
                (48, 0.0, 0.5),
                (74, 0.5, 0.5),
                (50, 0.5, 0.5),
            ],
            dtype=[("pitch", "i4"), ("onset_sec", "f4"), ("duration_sec", "f4")],
        )
        voices = estimate_voices(note_array)
        self.assertEqual(voices.tolist(), [1, 0, 1, 0])

    def test_numbered_by_winning_hypothesis(self):
        notes = random_notes(30)
        note_array = np.array(
            [(n.pitch, n.onset_time / 1e6, n.duration_time / 1e6) for n in notes],
            dtype=[("pitch", "i4"), ("onset_sec", "f8"), ("duration_sec", "f8")],
        )

        model = BeamSearchModel()
        model.run(group_by_onset(prepare_note_array(note_array)))
        expected = np.full(len(notes), -1, dtype=int)
        for i, voice in enumerate(model.voices):
            for note in voice.notes:
                expected[note.id] = i

        self.assertEqual(estimate_voices(note_array).tolist(), expected.tolist())

    def test_generic_time_units(self):
        note_array = np.array(
            [(60, 0, 1), (62, 1, 1), (64, 2, 1)],
            dtype=[("pitch", "i4"), ("onset", "f4"), ("duration", "f4")],
        )
        voices = estimate_voices(note_array, seconds_per_unit=0.5)
        self.assertEqual(voices.tolist(), [0, 0, 0])

    def test_invalid_input(self):
        with self.assertRaises(ValueError):
            estimate_voices(np.array([1, 2, 3]))
        with self.assertRaises(ValueError):
            estimate_voices(
                np.array(
                    [(0.0, 1.0)],
                    dtype=[("onset_sec", "f4"), ("duration_sec", "f4")],
                )
            )

    def test_empty(self):
        note_array = np.array(
            [], dtype=[("pitch", "i4"), ("onset_sec", "f4"), ("duration_sec", "f4")]
        )
        self.assertEqual(len(estimate_voices(note_array)), 0)


if __name__ == "__main__":
    unittest.main()
