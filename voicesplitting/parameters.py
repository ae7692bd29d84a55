#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains the parameters of the voice separation model.

The default values are those found to work best when tuning on the
computer-generated fugues of Bach's Well-Tempered Clavier [1]_.

References
----------
.. [1] McLeod, A. and Steedman, M. (2016) "HMM-Based Voice Separation
       of MIDI Performance". Journal of New Music Research 45(1).
"""
from collections import namedtuple

__all__ = ["VoiceSplittingParameters", "DEFAULT_PARAMETERS"]

BEAM_SIZE_DEFAULT = 25
NEW_VOICE_PROBABILITY_DEFAULT = 5e-10
PITCH_HISTORY_LENGTH_DEFAULT = 11
GAP_STD_MICROS_DEFAULT = 224000.0
PITCH_STD_DEFAULT = 4.0
MIN_GAP_SCORE_DEFAULT = 7e-5

_PARAMETER_FIELDS = (
    "beam_size",
    "new_voice_probability",
    "pitch_history_length",
    "gap_std_micros",
    "pitch_std",
    "min_gap_score",
    "symmetric_overlap",
)

_ParametersBase = namedtuple(
    "_ParametersBase",
    _PARAMETER_FIELDS,
    defaults=(
        BEAM_SIZE_DEFAULT,
        NEW_VOICE_PROBABILITY_DEFAULT,
        PITCH_HISTORY_LENGTH_DEFAULT,
        GAP_STD_MICROS_DEFAULT,
        PITCH_STD_DEFAULT,
        MIN_GAP_SCORE_DEFAULT,
        True,
    ),
)


class VoiceSplittingParameters(_ParametersBase):
    """Immutable set of parameters of the voice separation model.

    Parameters
    ----------
    beam_size : int
        Maximal number of hypotheses kept between note batches.
    new_voice_probability : float
        Probability of starting a new voice with a note.
    pitch_history_length : int
        Number of notes to look back in a voice when computing its
        weighted pitch.
    gap_std_micros : float
        Width (in microseconds) of the temporal gap score. A gap of this
        length or longer gets the minimum gap score.
    pitch_std : float
        Standard deviation (in semitones) of the Gaussian pitch score.
    min_gap_score : float
        Lower bound of the gap score.
    symmetric_overlap : bool
        If True (default) a note may also be added to a voice when it
        overlaps the last note of the voice by less than the last
        note's duration and by at most half of its own duration. If
        False, only the overlap with respect to half the duration of
        the last note is tolerated.
    """

    __slots__ = ()

    def __new__(cls, *args, **kwargs):
        self = super(VoiceSplittingParameters, cls).__new__(cls, *args, **kwargs)

        if self.beam_size < 1:
            raise ValueError("`beam_size` must be at least 1")
        if self.pitch_history_length < 1:
            raise ValueError("`pitch_history_length` must be at least 1")
        if not 0 < self.new_voice_probability <= 1:
            raise ValueError("`new_voice_probability` must be in (0, 1]")
        if self.gap_std_micros <= 0 or self.pitch_std <= 0:
            raise ValueError("`gap_std_micros` and `pitch_std` must be positive")

        return self

    def __str__(self):
        return "({0},{1},{2},{3},{4},{5})".format(*self[:6])


DEFAULT_PARAMETERS = VoiceSplittingParameters()
