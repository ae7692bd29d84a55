#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains a grid search over the parameters of the voice
separation model.

Each point of the grid is evaluated on a collection of songs with known
voices (see :func:`~voicesplitting.evaluation.evaluate`), and the
parameters with the highest F1 score win.
"""
import logging
from collections import OrderedDict
from functools import partial

from voicesplitting.evaluation import EvaluationResult, evaluate
from voicesplitting.parameters import VoiceSplittingParameters
from voicesplitting.utils import make_pool

__all__ = ["DEFAULT_RANGES", "parameter_grid", "tune"]

LOGGER = logging.getLogger(__name__)

EPSILON = 1e-9

# (min, max, min step) of each parameter, max is exclusive
DEFAULT_RANGES = OrderedDict(
    [
        ("beam_size", (10, 11, 1)),
        ("new_voice_probability", (1e-9, 1e-7, 0)),
        ("pitch_history_length", (5, 10, 1)),
        ("gap_std_micros", (30000.0, 1000000.0, 0)),
        ("pitch_std", (4.0, 9.0, 0.5)),
        ("min_gap_score", (1e-6, 1e-4, 0)),
    ]
)

# nesting order of the grid, from outermost to innermost
_GRID_ORDER = (
    "new_voice_probability",
    "pitch_history_length",
    "gap_std_micros",
    "pitch_std",
    "min_gap_score",
    "beam_size",
)

_INT_PARAMETERS = ("beam_size", "pitch_history_length")


def _axis(low, high, min_step, steps):
    step = max((high - low) / steps, min_step)
    values = []
    value = low
    while high - value > EPSILON:
        values.append(value)
        value += step
    return values


def parameter_grid(steps=5, ranges=None, symmetric_overlap=True):
    """Enumerate the parameters of the grid search.

    Each range is divided into `steps` steps (but not into steps smaller
    than its minimal step). The upper end of a range is excluded.

    Parameters
    ----------
    steps : int, optional
        Number of steps per parameter range. Defaults to 5.
    ranges : dict, optional
        Mapping of parameter names to (min, max, min step) triples.
        Parameters not given use :data:`DEFAULT_RANGES`.
    symmetric_overlap : bool, optional
        Overlap rule of all grid points (see
        :class:`~voicesplitting.parameters.VoiceSplittingParameters`).
        Defaults to True.

    Returns
    -------
    list of VoiceSplittingParameters
        The grid points
    """
    steps = max(1, steps)
    all_ranges = OrderedDict(DEFAULT_RANGES)
    if ranges is not None:
        all_ranges.update(ranges)

    axes = [_axis(*all_ranges[name], steps=steps) for name in _GRID_ORDER]

    grid = [{}]
    for name, axis in zip(_GRID_ORDER, axes):
        if name in _INT_PARAMETERS:
            axis = [int(round(value)) for value in axis]
        grid = [dict(point, **{name: value}) for point in grid for value in axis]

    return [
        VoiceSplittingParameters(symmetric_overlap=symmetric_overlap, **point)
        for point in grid
    ]


def tune(songs, steps=5, n_jobs=None, ranges=None, symmetric_overlap=True):
    """Find the parameters with the best F1 score on `songs`.

    Parameters
    ----------
    songs : list
        Songs with known voices (e.g.
        :class:`~voicesplitting.io.MidiSong` instances)
    steps : int, optional
        Number of steps per parameter range, see :func:`parameter_grid`
    n_jobs : int or None, optional
        Number of worker processes. If 1, the grid is evaluated in this
        process. If None, use all CPUs.
    ranges : dict, optional
        Parameter ranges, see :func:`parameter_grid`
    symmetric_overlap : bool, optional
        Overlap rule of all grid points, see :func:`parameter_grid`

    Returns
    -------
    EvaluationResult
        The best result. Among equal F1 scores the first grid point
        wins.
    """
    songs = list(songs)
    grid = parameter_grid(steps, ranges, symmetric_overlap)

    LOGGER.info("Evaluating %d parameter sets on %d songs", len(grid), len(songs))

    best = EvaluationResult()

    pool = make_pool(n_jobs)
    try:
        for result in pool.imap(partial(evaluate, songs), grid):
            LOGGER.info("%s", result)
            if result.f1 > best.f1:
                best = result
        pool.close()
    finally:
        pool.terminate()
        pool.join()

    LOGGER.info("BEST = %s", best)

    return best
