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

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any, TypeAlias

import numpy as np
from typing_extensions import override

from symarray.utils import INT_CLASSES, flatten_colwise


__doc__ = """
Subscripts
----------

An index expression such as ``x[1:3, :]`` is turned into one
:class:`Subscript` per entry, each of which is resolved against the extent
of the axis (or, for a single linear subscript, the number of elements) it
applies to.

.. autoclass:: Subscript
.. autoclass:: AllIndices
.. autoclass:: SliceIndices
.. autoclass:: IntegerIndices
.. autoclass:: LogicalMask

.. autofunction:: to_subscript
.. autofunction:: normalize_subscripts
.. autofunction:: apply_subscript
"""

ConvertibleToSubscript: TypeAlias = (
    int | bool | slice | Sequence[int] | Sequence[bool] | np.ndarray)


# {{{ subscript types

class Subscript(ABC):
    """
    .. automethod:: resolve
    """

    @abstractmethod
    def resolve(self, extent: int) -> np.ndarray:
        """
        Returns the selected 0-based positions of an axis of length *extent*
        as an integer array.
        """


@dataclasses.dataclass(frozen=True)
class AllIndices(Subscript):
    """Selects an entire axis."""

    @override
    def resolve(self, extent: int) -> np.ndarray:
        return np.arange(extent, dtype=np.intp)


@dataclasses.dataclass(frozen=True)
class SliceIndices(Subscript):
    """
    A :class:`slice`, with the usual semantics of Python slices.

    .. attribute:: start
    .. attribute:: stop
    .. attribute:: step
    """
    start: int | None
    stop: int | None
    step: int | None

    @override
    def resolve(self, extent: int) -> np.ndarray:
        if self.step == 0:
            raise IndexError("slice step cannot be zero")
        return np.arange(*slice(self.start, self.stop, self.step).indices(extent),
                         dtype=np.intp)


@dataclasses.dataclass(frozen=True)
class IntegerIndices(Subscript):
    """
    Explicit 0-based positions. Negative positions count from the end of
    the axis. Positions may repeat and appear in any order.

    .. attribute:: indices
    """
    indices: tuple[int, ...]

    @override
    def resolve(self, extent: int) -> np.ndarray:
        result = np.array(self.indices, dtype=np.intp).reshape(-1)
        out_of_bounds = (result < -extent) | (result >= extent)
        if out_of_bounds.any():
            raise IndexError(f"index {result[out_of_bounds][0]} is out of bounds "
                             f"for axis with size {extent}")

        return np.where(result < 0, result + extent, result)


@dataclasses.dataclass(frozen=True)
class LogicalMask(Subscript):
    """
    Selects the positions at which :attr:`mask` is *True*. A mask shorter
    than the axis is recycled along it.

    .. attribute:: mask
    """
    mask: tuple[bool, ...]

    @override
    def resolve(self, extent: int) -> np.ndarray:
        mask = np.array(self.mask, dtype=bool).reshape(-1)
        if len(mask) > extent:
            raise IndexError(f"logical subscript of length {len(mask)} is too "
                             f"long for axis with size {extent}")
        if len(mask) == 0:
            return np.zeros(0, dtype=np.intp)

        return np.flatnonzero(np.resize(mask, extent)).astype(np.intp)

# }}}


# {{{ normalization

def to_subscript(obj: Any) -> Subscript:
    """
    Converts an entry of an index expression into a :class:`Subscript`.
    """
    if isinstance(obj, Subscript):
        return obj

    if isinstance(obj, slice):
        if obj == slice(None):
            return AllIndices()
        for attr in (obj.start, obj.stop, obj.step):
            if attr is not None and not isinstance(attr, INT_CLASSES):
                raise IndexError("slice indices must be integers or None")
        return SliceIndices(obj.start, obj.stop, obj.step)

    if isinstance(obj, (bool, np.bool_)):
        return LogicalMask((bool(obj),))

    if isinstance(obj, INT_CLASSES):
        return IntegerIndices((int(obj),))

    if isinstance(obj, (Sequence, np.ndarray)) and not isinstance(obj, str):
        ary = np.asarray(obj)
        if ary.ndim == 0:
            return to_subscript(ary.item())
        if ary.ndim > 1:
            raise IndexError("subscripts must be one-dimensional "
                             f"(got {ary.ndim} dimensions)")
        if ary.dtype.kind == "b":
            return LogicalMask(tuple(bool(v) for v in ary))
        if ary.dtype.kind in "iu" or ary.size == 0:
            return IntegerIndices(tuple(int(v) for v in ary))

    raise IndexError("only integers, slices, integer sequences and logical "
                     f"masks are valid subscripts (got {obj!r})")


def normalize_subscripts(key: Any, ndim: int) -> tuple[Subscript, ...]:
    """
    Returns *key* (the argument of ``__getitem__``) as a tuple of
    :class:`Subscript`. A single subscript addresses the array linearly in
    column-major order; otherwise there must be exactly one subscript per
    axis.
    """
    if not isinstance(key, tuple):
        key = key,

    if len(key) != 1 and len(key) != ndim:
        raise IndexError(f"incorrect number of subscripts: expected 1 or {ndim}"
                         f", got {len(key)}")

    return tuple(to_subscript(k) for k in key)


def apply_subscript(ary: Any, subscripts: tuple[Subscript, ...]) -> np.ndarray:
    """
    Returns the elements of *ary* selected by *subscripts* (see
    :func:`normalize_subscripts`), never dropping any axes. A linear
    subscript produces a column of shape ``(n, 1)``.

    This is used both on concrete data and on the dummy placeholder from
    :func:`~symarray.utils.enumerate_indices`.
    """
    ary = np.asarray(ary)

    if len(subscripts) == 1:
        sub, = subscripts
        flat = flatten_colwise(ary)
        return flat[sub.resolve(flat.size)].reshape(-1, 1)

    assert len(subscripts) == ary.ndim
    positions = [sub.resolve(axis_len)
                 for sub, axis_len in zip(subscripts, ary.shape, strict=True)]

    return ary[np.ix_(*positions)]

# }}}

# vim: foldmethod=marker
