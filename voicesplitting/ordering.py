#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module gathers the orderings of notes, voices, parameters and
search states.

The beam search keeps its hypotheses sorted by :func:`compare_states`,
and both pruning and the choice of the final hypothesis depend on it.
All comparison functions follow the ``cmp`` convention (negative,
zero or positive) and are turned into sort keys with
:func:`functools.cmp_to_key`.

* Notes: onset tick, offset tick, onset time, offset time, pitch,
  velocity, channel. Missing ticks sort first.
* Voices: most recent note first, walking back through the chains.
  A voice whose chain runs out first sorts first.
* Parameters: beam size, min gap score, pitch std, gap std, new voice
  probability, pitch history length, symmetric overlap.
* Search states: log probability (descending), number of voices,
  voices one by one, parameters.
"""
from functools import cmp_to_key

__all__ = [
    "note_key",
    "compare_notes",
    "compare_voices",
    "compare_parameters",
    "compare_states",
    "sort_notes",
    "sort_states",
]


def _cmp(a, b):
    return (a > b) - (a < b)


def _none_first(value):
    return (0, 0) if value is None else (1, value)


def note_key(note):
    """Sort key of a note, see :func:`compare_notes`"""
    return (
        _none_first(note.onset_tick),
        _none_first(note.offset_tick),
        note.onset_time,
        _none_first(note.offset_time),
        note.pitch,
        note.velocity,
        note.channel,
    )


def compare_notes(a, b):
    return _cmp(note_key(a), note_key(b))


def compare_voices(a, b):
    """Compare two voices note by note, from their most recent notes

    Shared chain suffixes (identical nodes) compare equal without being
    walked.
    """
    while a is not b:
        a_note = None if a is None else a.note
        b_note = None if b is None else b.note

        if a_note is None or b_note is None:
            return _cmp(a_note is not None, b_note is not None)

        result = compare_notes(a_note, b_note)
        if result != 0:
            return result

        a = a.previous
        b = b.previous

    return 0


def _parameters_key(params):
    return (
        params.beam_size,
        params.min_gap_score,
        params.pitch_std,
        params.gap_std_micros,
        params.new_voice_probability,
        params.pitch_history_length,
        params.symmetric_overlap,
    )


def compare_parameters(a, b):
    return _cmp(_parameters_key(a), _parameters_key(b))


def compare_states(a, b):
    """Total order of search states, best state first"""
    # higher log probability first
    result = _cmp(b.log_prob, a.log_prob)
    if result != 0:
        return result

    result = _cmp(len(a.voices), len(b.voices))
    if result != 0:
        return result

    for a_voice, b_voice in zip(a.voices, b.voices):
        result = compare_voices(a_voice, b_voice)
        if result != 0:
            return result

    return compare_parameters(a.params, b.params)


def sort_notes(notes):
    """Return the notes as a new list sorted by :func:`note_key`"""
    return sorted(notes, key=note_key)


def sort_states(states, beam_size=None):
    """Sort states best first, dropping duplicates and the states
    beyond `beam_size`.

    Parameters
    ----------
    states : iterable of SearchState
        States to sort
    beam_size : int or None, optional
        Maximal number of states to keep. If None, keep all.

    Returns
    -------
    list
        Sorted list of unique states.
    """
    ordered = sorted(states, key=cmp_to_key(compare_states))

    unique = []
    for state in ordered:
        if unique and compare_states(unique[-1], state) == 0:
            continue
        unique.append(state)
        if beam_size is not None and len(unique) == beam_size:
            break

    return unique
