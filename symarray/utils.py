from __future__ import annotations


__copyright__ = "Copyright (C) 2026 symarray Contributors"

__license__ = """
Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN
THE SOFTWARE.
"""

from collections.abc import Sequence
from typing import Any, TypeAlias

import numpy as np

from pytools import product

from symarray.diagnostic import ShapeError


__doc__ = """
Helper routines
---------------

The front end of :mod:`symarray` enumerates elements in column-major order
(first axis fastest), which is what linear subscripts, flattening and
reshaping refer to. The execution backend addresses an array through its
row-major flattening. The routines here translate between the two.

.. autofunction:: normalize_shape
.. autofunction:: enumerate_indices
.. autofunction:: flatten_rowwise
.. autofunction:: unflatten_rowwise
.. autofunction:: flatten_colwise
.. autofunction:: match
.. autofunction:: rep_index
"""

INT_CLASSES = (int, np.integer)
ShapeType: TypeAlias = tuple[int, ...]


# {{{ shapes

def normalize_shape(shape: int | Sequence[int] | np.ndarray) -> ShapeType:
    """
    Returns *shape* as a tuple of :class:`int` with at least two entries.
    A scalar shape ``()`` becomes ``(1, 1)`` and ``(n,)`` becomes the column
    shape ``(n, 1)``.
    """
    if isinstance(shape, INT_CLASSES):
        shape = shape,

    result = []
    for s in shape:
        if isinstance(s, bool) or not isinstance(s, INT_CLASSES):
            raise ShapeError("array dimensions must be integers "
                             f"(got {type(s).__name__})")
        if s < 0:
            raise ShapeError(f"array dimensions must be non-negative (got {s})")
        result.append(int(s))

    if len(result) == 0:
        return (1, 1)
    if len(result) == 1:
        return (result[0], 1)

    return tuple(result)

# }}}


# {{{ index enumeration

def enumerate_indices(shape: ShapeType) -> np.ndarray:
    """
    Returns the dummy placeholder for an array of *shape*: an integer array
    of that shape holding, at every position, the position's rank in the
    row-major flattening of the array.

    Subscripting the placeholder exactly like the real array yields, for
    each selected element, where the backend finds it.
    """
    return np.arange(product(shape), dtype=np.intp).reshape(shape)


def flatten_rowwise(ary: Any) -> np.ndarray:
    """
    Returns the elements of *ary* in row-major order (last axis fastest).
    """
    return np.asarray(ary).ravel(order="C")


def unflatten_rowwise(flat: Any, shape: ShapeType) -> np.ndarray:
    """
    Inverse of :func:`flatten_rowwise`.
    """
    return np.asarray(flat).reshape(shape, order="C")


def flatten_colwise(ary: Any) -> np.ndarray:
    """
    Returns the elements of *ary* in column-major order (first axis fastest).
    """
    return np.asarray(ary).ravel(order="F")


def match(values: Any, table: Any) -> np.ndarray:
    """
    Returns, for each entry of *values*, the position of its first
    occurrence in the column-major flattening of *table*.
    """
    flat_table = flatten_colwise(table)
    values = np.asarray(values).ravel()

    # stable sort => among duplicates the first occurrence comes first
    order = np.argsort(flat_table, kind="stable")
    sorted_table = flat_table[order]
    pos = np.searchsorted(sorted_table, values, side="left")

    found = pos < len(sorted_table)
    found[found] = sorted_table[pos[found]] == values[found]
    if not found.all():
        raise ValueError(f"{values[~found][0]} does not occur in the table")

    return order[pos]

# }}}


# {{{ repetition

def rep_index(n: int,
              times: int | Sequence[int] = 1,
              each: int = 1,
              length_out: int | None = None) -> np.ndarray:
    """
    Returns the positions ``0, ..., n-1`` repeated in the manner of a
    conventional ``rep``.

    :param times: number of times to repeat the whole sequence, or a
        sequence of per-element repetition counts, as long as the sequence
        obtained after applying *each*.
    :param each: number of times each element is repeated before
        applying *times*.
    :param length_out: if given, the result is cycled or truncated to this
        length and *times* is ignored.
    """
    if each < 0:
        raise ValueError(f"invalid 'each' argument: {each}")

    idx = np.repeat(np.arange(n, dtype=np.intp), each)

    if length_out is not None:
        if length_out < 0:
            raise ValueError(f"invalid 'length_out' argument: {length_out}")
        if len(idx) == 0:
            if length_out > 0:
                raise ValueError("attempt to replicate an object of length 0")
            return idx
        return np.resize(idx, length_out)

    if isinstance(times, INT_CLASSES):
        if times < 0:
            raise ValueError(f"invalid 'times' argument: {times}")
        return np.tile(idx, times)

    times = np.asarray(times, dtype=np.intp)
    if len(times) == 1:
        return rep_index(n, int(times[0]), each)
    if len(times) != len(idx) or (times < 0).any():
        raise ValueError("invalid 'times' argument: expected a single count "
                         f"or {len(idx)} non-negative counts")

    return np.repeat(idx, times)

# }}}

# vim: foldmethod=marker
