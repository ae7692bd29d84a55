#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Voice separation using McLeod and Steedman's HMM-based beam search [1]_.

Notes are processed in batches of simultaneous onsets. Every hypothesis
(:class:`~voicesplitting.state.SearchState`) held by the model is
expanded with all possible assignments of the batch, and the pooled
successors are pruned back to the beam size. After the last batch the
best hypothesis holds the voices.

References
----------
.. [1] McLeod, A. and Steedman, M. (2016) "HMM-Based Voice Separation
       of MIDI Performance". Journal of New Music Research 45(1).
"""
import logging

import numpy as np

from voicesplitting.note import Note
from voicesplitting.ordering import note_key, sort_states
from voicesplitting.parameters import DEFAULT_PARAMETERS
from voicesplitting.state import SearchState

__all__ = [
    "BeamSearchModel",
    "group_by_onset",
    "split_voices",
    "estimate_voices",
    "NoteOrderException",
    "EmptyHypothesesException",
]

LOGGER = logging.getLogger(__name__)


class NoteOrderException(ValueError):
    """A batch of notes violates the input contract of the model."""


class EmptyHypothesesException(Exception):
    """The model ran out of hypotheses (this is a bug)."""


def group_by_onset(notes):
    """Group notes into batches of simultaneous onsets.

    Parameters
    ----------
    notes : iterable of Note
        Notes in any order

    Returns
    -------
    list of list of Note
        Batches in ascending onset time. The notes in each batch are
        sorted by :func:`~voicesplitting.ordering.note_key`.
    """
    batches = []
    onset_time = None

    for note in sorted(notes, key=lambda n: (n.onset_time, note_key(n))):
        if onset_time is None or note.onset_time != onset_time:
            batches.append([])
            onset_time = note.onset_time
        batches[-1].append(note)

    return batches


class BeamSearchModel(object):
    """Beam search over voice assignments.

    Parameters
    ----------
    params : VoiceSplittingParameters, optional
        The model parameters. Defaults to
        :data:`~voicesplitting.parameters.DEFAULT_PARAMETERS`.

    Attributes
    ----------
    params : VoiceSplittingParameters
        The model parameters
    hypotheses : list of SearchState
        The current hypotheses, best first. Never longer than the beam
        size.
    """

    def __init__(self, params=None):
        self.params = params if params is not None else DEFAULT_PARAMETERS
        self.hypotheses = [SearchState(self.params)]
        self.last_onset_time = None
        self.num_batches = 0

    def _check_batch(self, notes):
        if len(notes) == 0:
            raise NoteOrderException("Empty batch of notes")

        onset_time = notes[0].onset_time

        if any(note.onset_time != onset_time for note in notes):
            raise NoteOrderException(
                "All notes in a batch must have the same onset time"
            )

        if any(note.is_active for note in notes):
            raise NoteOrderException("All notes in a batch must be closed")

        if self.last_onset_time is not None and onset_time < self.last_onset_time:
            raise NoteOrderException(
                "Batch at onset {0} precedes the previous batch at onset {1}".format(
                    onset_time, self.last_onset_time
                )
            )

        return onset_time

    def handle_batch(self, notes):
        """Assign the next batch of simultaneous notes.

        Parameters
        ----------
        notes : sequence of Note
            Closed notes sharing one onset time, not earlier than the
            onset time of the previous batch.

        Raises
        ------
        NoteOrderException
            If the batch is empty, has mixed onset times, contains open
            notes or starts before the previous batch.
        EmptyHypothesesException
            If no hypothesis survives.
        """
        notes = list(notes)
        onset_time = self._check_batch(notes)

        new_states = []
        for state in self.hypotheses:
            new_states.extend(state.successors(notes))

            if len(new_states) > self.params.beam_size:
                new_states = sort_states(new_states, self.params.beam_size)

        new_states = sort_states(new_states, self.params.beam_size)

        if len(new_states) == 0:
            raise EmptyHypothesesException(
                "No hypotheses left after the batch at onset {0}".format(onset_time)
            )

        self.hypotheses = new_states
        self.last_onset_time = onset_time
        self.num_batches += 1

        LOGGER.debug(
            "batch %d (onset %d, %d notes): %d hypotheses, best log prob %g",
            self.num_batches,
            onset_time,
            len(notes),
            len(new_states),
            new_states[0].log_prob,
        )

    def run(self, batches, should_stop=None):
        """Assign a sequence of batches.

        Parameters
        ----------
        batches : iterable of sequences of Note
            Batches in chronological order (see :func:`group_by_onset`)
        should_stop : callable, optional
            Called before each batch. If it returns True the search is
            abandoned. The hypotheses of the batches handled so far are
            kept.

        Returns
        -------
        bool
            True if all batches were handled, False if the search was
            cancelled.
        """
        for batch in batches:
            if should_stop is not None and should_stop():
                LOGGER.info(
                    "Voice separation cancelled after %d batches", self.num_batches
                )
                return False

            self.handle_batch(batch)

        return True

    @property
    def best(self):
        """The most probable hypothesis"""
        if len(self.hypotheses) == 0:
            raise EmptyHypothesesException("The model has no hypotheses")
        return self.hypotheses[0]

    @property
    def voices(self):
        """The voices of the most probable hypothesis"""
        return list(self.best.voices)

    def assign_voices(self):
        """Stamp every note with the index of its voice in the best
        hypothesis.

        Returns
        -------
        list of Voice
            The voices of the best hypothesis
        """
        voices = self.voices
        for i, voice in enumerate(voices):
            for note in voice.notes:
                note.voice = i
        return voices

    def f1(self, gold_standard):
        """F1 score of the voices of the best hypothesis (see
        :func:`~voicesplitting.evaluation.f1_score`)"""
        # evaluation imports this module
        from voicesplitting.evaluation import f1_score

        if len(self.hypotheses) == 0:
            return 0.0

        return f1_score(self.voices, gold_standard)


def split_voices(notes, params=None, should_stop=None):
    """Separate notes into monophonic voices.

    Parameters
    ----------
    notes : iterable of Note
        Closed notes, in any order.
    params : VoiceSplittingParameters, optional
        The model parameters
    should_stop : callable, optional
        Cancellation check, see :meth:`BeamSearchModel.run`

    Returns
    -------
    list of Voice or None
        The voices, where each note has been stamped with the index of
        its voice. None if the search was cancelled.
    """
    model = BeamSearchModel(params)

    if not model.run(group_by_onset(notes), should_stop=should_stop):
        return None

    return model.assign_voices()


def prepare_note_array(note_array, seconds_per_unit=1.0):
    # * check whether note_array is a structured array
    # * check for pitch and onset/duration fields (in seconds or in
    #   generic time units)
    # * return a list of Note objects with the row index as id
    if note_array.dtype.fields is None:
        raise ValueError("`note_array` must be a structured numpy array")

    names = note_array.dtype.names

    if "pitch" not in names:
        raise ValueError("Input array does not contain required field pitch")

    if "onset_sec" in names and "duration_sec" in names:
        onset_field, duration_field, factor = "onset_sec", "duration_sec", 1.0
    elif "onset" in names and "duration" in names:
        onset_field, duration_field, factor = "onset", "duration", seconds_per_unit
    else:
        raise ValueError(
            "Input array does not contain onset/duration fields "
            "(`onset_sec` and `duration_sec`, or `onset` and `duration`)"
        )

    if "channel" in names:
        labels = note_array["channel"]
    elif "track" in names:
        labels = note_array["track"]
    else:
        labels = np.zeros(len(note_array), dtype=int)

    if "velocity" in names:
        velocities = note_array["velocity"]
    else:
        velocities = np.full(len(note_array), 64, dtype=int)

    onsets = note_array[onset_field].astype(float) * factor
    durations = note_array[duration_field].astype(float) * factor

    if np.any(durations < 0):
        raise ValueError("Notes cannot have negative durations")

    return [
        Note.from_seconds(
            int(pitch),
            onset,
            duration,
            velocity=int(velocity),
            channel=int(label),
            note_id=i,
        )
        for i, (pitch, onset, duration, velocity, label) in enumerate(
            zip(note_array["pitch"], onsets, durations, velocities, labels)
        )
    ]


def estimate_voices(note_array, params=None, seconds_per_unit=1.0):
    """Voice estimation using the HMM-based voice separation in [2]_.

    Parameters
    ----------
    note_array : numpy structured array
        Structured array containing note information. Required fields
        are `pitch` (MIDI pitch) and either `onset_sec` and
        `duration_sec` (in seconds), or `onset` and `duration`
        (converted to seconds with `seconds_per_unit`). Optional fields
        are `velocity` and `channel` (or `track`).
    params : VoiceSplittingParameters, optional
        The model parameters
    seconds_per_unit : float, optional
        Length in seconds of a time unit of the `onset` and `duration`
        fields. Defaults to 1.0.

    Returns
    -------
    voice : numpy array
        Voice index (starting at 0) for each note in `note_array`. Voices
        are numbered in the order of the winning hypothesis.

    References
    ----------
    .. [2] McLeod, A. and Steedman, M. (2016) "HMM-Based Voice Separation
           of MIDI Performance". Journal of New Music Research 45(1).
    """
    notes = prepare_note_array(note_array, seconds_per_unit)

    voices = np.full(len(notes), -1, dtype=int)

    if len(notes) == 0:
        return voices

    split_voices(notes, params)

    for note in notes:
        voices[note.id] = note.voice

    return voices
