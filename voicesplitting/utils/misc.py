#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
This module contains miscellaneous utilities for file handling.
"""
import os

from typing import Union, List

# Recommended by PEP 519
PathLike = Union[str, bytes, os.PathLike]


def find_files(path: PathLike) -> List[str]:
    """
    List a file, or all files below a directory (recursively).

    Parameters
    ----------
    path : PathLike
        A file or a directory.

    Returns
    -------
    files : list
        Sorted list of file paths. Empty if `path` is neither a file
        nor a directory.
    """
    if os.path.isfile(path):
        return [os.fspath(path)]

    files = []
    if os.path.isdir(path):
        for root, _, filenames in os.walk(path):
            files.extend(os.path.join(root, fn) for fn in filenames)

    return sorted(files)
