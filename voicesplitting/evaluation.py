#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains methods to evaluate separated voices against a
gold standard (usually the MIDI channels or tracks of the notes).

The evaluation is link based: a link is a pair of consecutive notes in
a voice. A link is correct if the two notes are also consecutive in a
gold standard voice.
"""
import logging
from collections import namedtuple

import numpy as np

from voicesplitting.model import BeamSearchModel, group_by_onset

__all__ = [
    "f1_score",
    "evaluate_song",
    "evaluate",
    "SongEvaluation",
    "EvaluationResult",
]

LOGGER = logging.getLogger(__name__)


def _ratio(num, den):
    return num / den if den != 0 else 0.0


def _f1(precision, recall):
    return _ratio(2 * precision * recall, precision + recall)


def f1_score(voices, gold_standard):
    """F1 score of the links in `voices`

    Parameters
    ----------
    voices : list of Voice
        The estimated voices
    gold_standard : dict or list
        Mapping of gold labels to the chronologically sorted notes with
        that label.

    Returns
    -------
    float
        The F1 score, or 0.0 if it is undefined.
    """
    if isinstance(gold_standard, dict):
        gold_voices = gold_standard.values()
    else:
        gold_voices = gold_standard

    total_positives = sum(len(gv) - 1 for gv in gold_voices if len(gv) > 0)

    true_positives = 0
    false_positives = 0
    for voice in voices:
        voice_true_positives = voice.num_links_correct(gold_standard)
        true_positives += voice_true_positives
        false_positives += voice.num_notes - 1 - voice_true_positives

    false_negatives = total_positives - true_positives

    precision = _ratio(true_positives, true_positives + false_positives)
    recall = _ratio(true_positives, true_positives + false_negatives)

    return _f1(precision, recall)


class SongEvaluation(
    namedtuple(
        "SongEvaluation",
        "true_positives false_positives false_negatives voice_consistency",
    )
):
    """Evaluation of the voices of a single song"""

    __slots__ = ()

    @property
    def precision(self):
        return _ratio(self.true_positives, self.true_positives + self.false_positives)

    @property
    def recall(self):
        return _ratio(self.true_positives, self.true_positives + self.false_negatives)

    @property
    def f1(self):
        return _f1(self.precision, self.recall)


def evaluate_song(voices, gold_standard):
    """Evaluate the voices of a song.

    Parameters
    ----------
    voices : list of Voice
        The estimated voices
    gold_standard : dict or list
        Mapping of gold labels to the chronologically sorted notes with
        that label.

    Returns
    -------
    SongEvaluation
        Link counts and the voice consistency, i.e. the average
        proportion of notes in a voice that share its most common gold
        label.
    """
    labels = set()
    num_notes = 0
    true_positives = 0
    false_positives = 0
    consistencies = []

    for voice in voices:
        voice_num_notes = voice.num_notes
        voice_correct = voice.num_notes_correct()
        voice_true_positives = voice.num_links_correct(gold_standard)

        labels.update(note.channel for note in voice.notes)
        num_notes += voice_num_notes
        true_positives += voice_true_positives
        false_positives += voice_num_notes - 1 - voice_true_positives
        consistencies.append(voice_correct / voice_num_notes)

        LOGGER.debug(
            "%d / %d = %g",
            voice_correct,
            voice_num_notes,
            voice_correct / voice_num_notes,
        )

    false_negatives = num_notes - len(labels) - true_positives

    voice_consistency = float(np.mean(consistencies)) if consistencies else 0.0

    return SongEvaluation(
        true_positives, false_positives, false_negatives, voice_consistency
    )


class EvaluationResult(object):
    """Evaluation of a set of parameters on a collection of songs

    Parameters
    ----------
    params : VoiceSplittingParameters or None
        The evaluated parameters
    voice_consistency : float
        Average voice consistency
    precision : float
        Average precision
    recall : float
        Average recall

    Notes
    -----
    ``EvaluationResult()`` is the "empty" result, with all scores equal
    to negative infinity. Every real result compares better.
    """

    def __init__(
        self,
        params=None,
        voice_consistency=-np.inf,
        precision=-np.inf,
        recall=-np.inf,
    ):
        self.params = params
        self.voice_consistency = voice_consistency
        self.precision = precision
        self.recall = recall

    @property
    def f1(self):
        if self.precision == -np.inf:
            return -np.inf
        return _f1(self.precision, self.recall)

    def __str__(self):
        return "{0} = V={1} P={2} R={3} F1={4}".format(
            self.params, self.voice_consistency, self.precision, self.recall, self.f1
        )

    def __repr__(self):
        return "<EvaluationResult {0}>".format(self)


def evaluate(songs, params=None, callback=None):
    """Run the voice separation on several songs and average the scores.

    Parameters
    ----------
    songs : iterable
        Objects with `notes` (list of Note) and `gold_standard`
        attributes, e.g. :class:`~voicesplitting.io.MidiSong`.
    params : VoiceSplittingParameters, optional
        The model parameters
    callback : callable, optional
        Called as ``callback(song_index, song, voices)`` after the voices
        of each song have been separated.

    Returns
    -------
    EvaluationResult
        Scores averaged over the songs.
    """
    evaluations = []
    model_params = None

    for i, song in enumerate(songs):
        model = BeamSearchModel(params)
        model_params = model.params
        model.run(group_by_onset(song.notes))
        voices = model.voices

        if callback is not None:
            callback(i, song, voices)

        evaluation = evaluate_song(voices, song.gold_standard)
        evaluations.append(evaluation)

        LOGGER.debug(
            "%s: P=%g R=%g F1=%g",
            getattr(song, "name", i),
            evaluation.precision,
            evaluation.recall,
            evaluation.f1,
        )

    if len(evaluations) == 0:
        return EvaluationResult(model_params)

    return EvaluationResult(
        model_params,
        voice_consistency=float(np.mean([e.voice_consistency for e in evaluations])),
        precision=float(np.mean([e.precision for e in evaluations])),
        recall=float(np.mean([e.recall for e in evaluations])),
    )
