#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains the search state of the voice separation beam
search.

A :class:`SearchState` is one hypothesis: an assignment of all notes
seen so far to voices, together with its log probability. Given the
next batch of simultaneous notes, :meth:`SearchState.successors`
enumerates all states that can be reached by assigning each note of the
batch either to an open existing voice or to a new voice.
"""

from voicesplitting.ordering import sort_states
from voicesplitting.parameters import DEFAULT_PARAMETERS
from voicesplitting.scoring import clamp_log_prob, transition_log_probability
from voicesplitting.voice import Voice

__all__ = ["SearchState"]


class SearchState(object):
    """A hypothesis of the beam search.

    Search states are immutable. The voices are kept sorted so that, as
    far as the model is concerned, their pitches ascend with the index.

    Parameters
    ----------
    params : VoiceSplittingParameters, optional
        The model parameters. Defaults to
        :data:`~voicesplitting.parameters.DEFAULT_PARAMETERS`.
    log_prob : float, optional
        Cumulative log probability of the state. Defaults to 0 (i.e. a
        probability of 1).
    voices : iterable of Voice, optional
        The voices of the state. Defaults to no voices.

    Attributes
    ----------
    params : VoiceSplittingParameters
        The model parameters
    log_prob : float
        Cumulative log probability, finite.
    voices : tuple of Voice
        The voices of the state
    """

    __slots__ = ("params", "log_prob", "voices")

    def __init__(self, params=None, log_prob=0.0, voices=()):
        self.params = params if params is not None else DEFAULT_PARAMETERS
        self.log_prob = clamp_log_prob(float(log_prob))
        self.voices = tuple(voices)

    @property
    def num_notes(self):
        return sum(voice.num_notes for voice in self.voices)

    def open_voice_indices(self, note, onset_time=None):
        """Indices of the voices that admit `note`

        Parameters
        ----------
        note : Note
            The candidate note (must be closed)
        onset_time : int, optional
            Onset time to check. Defaults to the onset of `note`.

        Returns
        -------
        list
            Ascending voice indices.
        """
        return [
            i
            for i, is_open in enumerate(self._open_mask(note, onset_time))
            if is_open
        ]

    def _open_mask(self, note, onset_time=None):
        if onset_time is None:
            onset_time = note.onset_time
        duration = note.duration_time
        symmetric = self.params.symmetric_overlap
        return tuple(
            voice.can_extend(onset_time, duration, symmetric) for voice in self.voices
        )

    def successors(self, batch):
        """All states reachable by assigning the notes of `batch`.

        Each note of the batch is added either to one of the voices
        that admit it or to a new voice. A voice takes at most one note
        of the batch. A new voice is only created at the positions
        where it is most probable (the position only affects the pitch
        order penalty). The result is pruned to the beam size during
        enumeration.

        Parameters
        ----------
        batch : sequence of Note
            The notes starting at the next onset time. They must all be
            closed and share the same onset time.

        Returns
        -------
        list of SearchState
            The successors, best first, at most ``params.beam_size``.
        """
        notes = list(batch)

        if len(notes) == 0:
            raise ValueError("Cannot handle an empty batch of notes")

        # open voices are determined once, before any note of the
        # batch is assigned
        onset_time = notes[0].onset_time
        masks = tuple(self._open_mask(note, onset_time) for note in notes)

        return self._successors(notes, 0, self.voices, masks, self.log_prob)

    def _successors(self, notes, note_index, voices, masks, log_prob_sum):
        # `masks` holds, for each note from `note_index` on, which of
        # `voices` may still take that note
        if note_index == len(notes):
            return [SearchState(self.params, log_prob_sum, voices)]

        note = notes[note_index]
        params = self.params
        beam_size = params.beam_size
        remaining_masks = masks[1:]

        new_states = []

        # start a new voice at the best position(s)
        new_voice_log_probs = [
            transition_log_probability(note, i, voices, params, new_voice=True)
            for i in range(len(voices) + 1)
        ]
        best_log_prob = max(new_voice_log_probs)

        for i, log_prob in enumerate(new_voice_log_probs):
            if log_prob != best_log_prob:
                continue

            new_voices = voices[:i] + (Voice(note),) + voices[i:]
            new_masks = tuple(mask[:i] + (False,) + mask[i:] for mask in remaining_masks)

            new_states.extend(
                self._successors(
                    notes, note_index + 1, new_voices, new_masks, log_prob_sum + log_prob
                )
            )
            if len(new_states) > beam_size:
                new_states = sort_states(new_states, beam_size)

        # add to an open existing voice
        existing_log_probs = [
            (i, transition_log_probability(note, i, voices, params))
            for i, is_open in enumerate(masks[0])
            if is_open
        ]

        for i, log_prob in existing_log_probs:
            new_voice = voices[i].checked_extend(note, params.symmetric_overlap)
            new_voices = voices[:i] + (new_voice,) + voices[i + 1:]
            new_masks = tuple(
                mask[:i] + (False,) + mask[i + 1:] for mask in remaining_masks
            )

            new_states.extend(
                self._successors(
                    notes, note_index + 1, new_voices, new_masks, log_prob_sum + log_prob
                )
            )
            if len(new_states) > beam_size:
                new_states = sort_states(new_states, beam_size)

        return sort_states(new_states, beam_size)

    def __str__(self):
        return "{0} {1}".format([str(voice) for voice in self.voices], self.log_prob)

    def __repr__(self):
        return "<SearchState: {0} voices, log_prob={1}>".format(
            len(self.voices), self.log_prob
        )
