#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Helpers for running jobs in a process pool.
"""
from multiprocessing import Pool

__all__ = ["FakePool", "make_pool"]


class FakePool(object):

    """
    A drop-in replacement for multiprocessing.Pool that
    carries out jobs sequentially (useful for debugging).

    """

    def __init__(self, *args):
        pass

    def map(self, f, a):
        return list(map(f, a))

    def imap(self, f, a):
        for x in a:
            yield f(x)

    def close(self):
        pass

    def terminate(self):
        pass

    def join(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.terminate()


def make_pool(n_jobs=None):
    """A process pool with `n_jobs` workers, or a :class:`FakePool` if
    `n_jobs` is 1. If `n_jobs` is None, use all CPUs."""
    if n_jobs is not None and n_jobs < 1:
        raise ValueError("n_jobs must be at least 1")
    if n_jobs == 1:
        return FakePool()
    return Pool(n_jobs)
