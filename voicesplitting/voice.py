#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains the representation of a monophonic voice.

A :class:`Voice` is a node of a backward linked list of notes: it
holds the most recent note of the voice and a reference to the voice
as it was before that note was added. Extending a voice creates a new
node and leaves the extended voice untouched, so that many hypotheses of the
beam search can share the common beginning of their voices.
"""
from collections import Counter

from voicesplitting.utils import iter_current_next

__all__ = ["Voice", "InvalidTransitionException"]


class InvalidTransitionException(Exception):
    """A note was added to a voice that cannot take it."""


class Voice(object):
    """A monophonic stream of notes, ending in :attr:`note`.

    Parameters
    ----------
    note : Note or None, optional
        The most recent note of the voice. If None (the default) the
        voice is empty.
    previous : Voice or None, optional
        The voice ending at the second to last note of this voice.

    Attributes
    ----------
    note : Note or None
        The most recent note of the voice
    previous : Voice or None
        The voice ending at the previous note, or None if `note` is the
        first note of the voice.
    """

    __slots__ = ("note", "previous", "_num_notes")

    def __init__(self, note=None, previous=None):
        if note is None and previous is not None:
            raise ValueError("An empty voice cannot have a previous voice")

        if previous is not None and previous.note is None:
            # do not keep empty voices in the chain
            previous = None

        self.note = note
        self.previous = previous

        if note is None:
            self._num_notes = 0
        elif previous is None:
            self._num_notes = 1
        else:
            self._num_notes = previous._num_notes + 1

    @property
    def is_empty(self):
        return self.note is None

    @property
    def last_note(self):
        return self.note

    @property
    def last_offset_time(self):
        """Offset time of the most recent note (0 for an empty voice)"""
        if self.note is None:
            return 0
        return self.note.offset_time

    @property
    def num_notes(self):
        return self._num_notes

    def __len__(self):
        return self._num_notes

    def can_extend(self, onset_time, duration, symmetric=True):
        """Decide whether a note can be added to this voice.

        The overlap between the last note of the voice and the new note
        is the time between the onset of the new note and the offset of
        the last note. It is tolerated when it is at most half of the
        duration of the last note and shorter than the new note. When
        `symmetric` is True, an overlap shorter than the last note and
        at most half of the new note is tolerated as well.

        Parameters
        ----------
        onset_time : int
            Onset time of the new note in microseconds
        duration : int
            Duration of the new note in microseconds
        symmetric : bool, optional
            Also allow the symmetric case. Defaults to True.

        Returns
        -------
        bool
            True if a note with the given onset and duration may be
            added to the voice.
        """
        if self.note is None:
            return True

        last_duration = self.note.duration_time
        overlap = self.note.offset_time - onset_time

        if overlap <= last_duration / 2 and overlap < duration:
            return True

        return symmetric and overlap < last_duration and overlap <= duration / 2

    def weighted_last_pitch(self, history_length):
        """Weighted average pitch of the most recent notes.

        The weight of a note halves with each step back in the voice.

        Parameters
        ----------
        history_length : int
            Number of notes (counting from the most recent one) to take
            into account.

        Returns
        -------
        float
            The weighted pitch, or 0.0 if the voice is empty.
        """
        weight = 1.0
        total_weight = 0.0
        pitch_sum = 0.0

        node = self
        for _ in range(history_length):
            if node is None or node.note is None:
                break
            pitch_sum += node.note.pitch * weight
            total_weight += weight
            weight *= 0.5
            node = node.previous

        if total_weight == 0:
            return 0.0

        return pitch_sum / total_weight

    def extend(self, note):
        """Return a new voice that ends with `note`.

        This voice is not modified.
        """
        if self.note is None:
            return Voice(note)
        return Voice(note, self)

    def checked_extend(self, note, symmetric=True):
        """Like :meth:`extend`, but enforce the admission check.

        Raises
        ------
        InvalidTransitionException
            If :meth:`can_extend` rejects the note.
        """
        if not self.can_extend(note.onset_time, note.duration_time, symmetric):
            raise InvalidTransitionException(
                "{0} cannot be added to voice ending with {1}".format(note, self.note)
            )
        return self.extend(note)

    def iter_nodes(self):
        """Iterate over the (non-empty) nodes of the chain, most recent first"""
        node = self
        while node is not None and node.note is not None:
            yield node
            node = node.previous

    @property
    def notes(self):
        """The notes of the voice in chronological order"""
        notes = [node.note for node in self.iter_nodes()]
        notes.reverse()
        return notes

    def iter_links(self):
        """Iterate over pairs of consecutive notes, in chronological order"""
        return iter_current_next(self.notes)

    def num_notes_correct(self, gold_label=None):
        """Number of notes that carry the most common gold label

        Parameters
        ----------
        gold_label : callable, optional
            Function returning the gold standard label of a note.
            Defaults to the channel of the note.

        Returns
        -------
        int
            The size of the largest group of notes in this voice that
            share a gold label (0 for an empty voice).
        """
        if gold_label is None:
            gold_label = _channel

        counts = Counter(gold_label(node.note) for node in self.iter_nodes())

        if not counts:
            return 0

        return max(counts.values())

    def num_links_correct(self, gold_standard):
        """Number of consecutive note pairs that are also consecutive
        in the gold standard.

        Parameters
        ----------
        gold_standard : dict or list
            Mapping of gold labels (channels) to the chronologically
            sorted list of notes with that label.

        Returns
        -------
        int
            Number of correct links in this voice.
        """
        count = 0
        # position of the current note in its gold standard voice, or
        # -1 if it has to be searched again
        index = -1

        node = self
        while node.previous is not None:
            note = node.note
            guessed_prev = node.previous.note

            if note.channel == guessed_prev.channel:
                gold_voice = gold_standard[note.channel]

                if index == -1:
                    index = _index_of(gold_voice, note)

                if index > 0 and gold_voice[index - 1] is guessed_prev:
                    count += 1
                    index -= 1
                else:
                    index = -1

            else:
                index = -1

            node = node.previous

        return count

    def __iter__(self):
        return iter(self.notes)

    def __str__(self):
        return str(self.notes)

    def __repr__(self):
        return "Voice({0})".format(self.notes)


def _channel(note):
    return note.channel


def _index_of(notes, note):
    # notes are looked up by identity
    for i, n in enumerate(notes):
        if n is note:
            return i
    return -1
