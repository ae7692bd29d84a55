#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains the transition model of the voice separation HMM.

Adding a note to an existing voice is scored by the closeness of the
note's pitch to the recent (weighted) pitch of the voice and by the
temporal gap between the end of the voice and the note. Starting a new
voice has a flat probability. In both cases placing the note out of
pitch order with respect to the neighbouring voices halves the
probability, once per side.
"""
import math
import sys

__all__ = [
    "MIN_LOG_PROB",
    "gaussian_window",
    "pitch_score",
    "gap_score",
    "voice_probability",
    "transition_log_probability",
]

# Finite stand-in for log(0), keeps comparisons of hypotheses well defined
MIN_LOG_PROB = -sys.float_info.max

LOG_2 = math.log(2)


def safe_log(x):
    """Natural logarithm clamped to :data:`MIN_LOG_PROB`"""
    if x <= 0:
        return MIN_LOG_PROB
    return max(math.log(x), MIN_LOG_PROB)


def clamp_log_prob(log_prob):
    """Replace negative infinity (and NaN) by :data:`MIN_LOG_PROB`"""
    if math.isnan(log_prob) or log_prob < MIN_LOG_PROB:
        return MIN_LOG_PROB
    return log_prob


def gaussian_window(mean1, mean2, std):
    """Gaussian window function

    .. math::

        G(m_1, m_2, s) = e^{-\\frac{1}{2}\\left(\\frac{m_2 - m_1}{s}\\right)^2}

    Parameters
    ----------
    mean1 : float
        The low end of the mean range
    mean2 : float
        The high end of the mean range
    std : float
        The standard deviation

    Returns
    -------
    float
        The value of the window function, in (0, 1].
    """
    fraction = (mean2 - mean1) / std
    return math.exp(-(fraction * fraction) / 2.0)


def pitch_score(weighted_pitch, pitch, pitch_std):
    """Pitch closeness of a note to the weighted pitch of a voice

    Parameters
    ----------
    weighted_pitch : float
        Weighted pitch of the voice (see
        :meth:`~voicesplitting.voice.Voice.weighted_last_pitch`)
    pitch : int or float
        Pitch of the candidate note
    pitch_std : float
        Standard deviation of the Gaussian, in semitones.

    Returns
    -------
    float
        Score between 0 and 1, symmetric in its first two arguments.
    """
    return gaussian_window(weighted_pitch, pitch, pitch_std)


def gap_score(time1, time2, gap_std_micros, min_gap_score):
    """Score of the temporal gap between two time points

    The score decays log-linearly with the gap and is 1 for a gap of
    length 0. It never drops below `min_gap_score`, also for gaps
    longer than `gap_std_micros`, for which the logarithm is undefined.

    Parameters
    ----------
    time1, time2 : int
        Time points in microseconds
    gap_std_micros : float
        Gap length at which the score reaches its minimum.
    min_gap_score : float
        Lower bound of the score

    Returns
    -------
    float
        The gap score, between `min_gap_score` and 1.
    """
    time_diff = abs(time2 - time1)
    inside = max(0.0, 1.0 - time_diff / gap_std_micros)

    if inside == 0:
        return min_gap_score

    return max(math.log(inside) + 1.0, min_gap_score)


def voice_probability(voice, note, params):
    """Probability of adding `note` to the (non-empty) `voice`"""
    pitch = pitch_score(
        voice.weighted_last_pitch(params.pitch_history_length),
        note.pitch,
        params.pitch_std,
    )
    gap = gap_score(
        note.onset_time,
        voice.last_offset_time,
        params.gap_std_micros,
        params.min_gap_score,
    )
    return pitch * gap


def transition_log_probability(note, index, voices, params, new_voice=False):
    """Log probability of a transition

    Parameters
    ----------
    note : Note
        The note to assign
    index : int
        If `new_voice` is True, the position (0 to ``len(voices)``) at
        which a new voice is inserted. Otherwise the index of the
        existing voice that takes the note.
    voices : sequence of Voice
        The current voices, sorted as in the search state
    params : VoiceSplittingParameters
        The model parameters
    new_voice : bool, optional
        Whether the note starts a new voice. Defaults to False.

    Returns
    -------
    float
        Log probability of the transition, never negative infinity.
    """
    prev_voice = voices[index - 1] if index > 0 else None

    if new_voice:
        log_prob = safe_log(params.new_voice_probability)
        next_voice = voices[index] if index < len(voices) else None
    else:
        log_prob = safe_log(voice_probability(voices[index], note, params))
        next_voice = voices[index + 1] if index < len(voices) - 1 else None

    # out of pitch order with respect to the neighbouring voices
    if prev_voice is not None and note.pitch < prev_voice.last_note.pitch:
        log_prob -= LOG_2

    if next_voice is not None and note.pitch > next_voice.last_note.pitch:
        log_prob -= LOG_2

    return clamp_log_prob(log_prob)
