#!/usr/bin/env python

from voicesplitting.utils.generic import (
    iter_current_next,
    partition,
)

from .misc import (
    PathLike,
    find_files,
)

from .os_utils import FakePool, make_pool


__all__ = [
    "iter_current_next",
    "partition",
    "PathLike",
    "find_files",
    "FakePool",
    "make_pool",
]
