#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains generic iteration and grouping utilities
"""
from collections import defaultdict


__all__ = ["iter_current_next", "partition"]


def iter_current_next(iterable):
    """Iterate over pairs of consecutive values in an iterable.

    Examples
    --------

    >>> list(iter_current_next([0, 1, 2]))
    [(0, 1), (1, 2)]
    >>> list(iter_current_next([0]))
    []

    """
    iterable = iter(iterable)
    try:
        cur = next(iterable)
    except StopIteration:
        return

    for nxt in iterable:
        yield (cur, nxt)
        cur = nxt


def partition(func, iterable):
    """Group the elements of `iterable` by the value of `func`.

    Returns
    -------
    dict
        Lists of elements, keyed by `func(element)`, in the order of
        first occurrence. Each list keeps the order of `iterable`.

    Examples
    --------

    >>> partition(lambda x: x % 3, range(7))
    {0: [0, 3, 6], 1: [1, 4], 2: [2, 5]}

    """
    result = defaultdict(list)
    for v in iterable:
        result[func(v)].append(v)
    return dict(result)
