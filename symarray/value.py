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
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, TypeAlias

import numpy as np
from typing_extensions import override

from symarray.utils import ShapeType, flatten_colwise


if TYPE_CHECKING:
    from symarray.subscript import Subscript


__doc__ = """
Node Values
-----------

Every node carries a value that is either fully known or a placeholder that
only records the shape.

.. autoclass:: ConcreteValue
.. autoclass:: UnknownValue
.. autofunction:: concatenate_values
"""


@dataclasses.dataclass(frozen=True, eq=False)
class ConcreteValue:
    """
    A fully known value.

    .. attribute:: data

        A read-only :class:`numpy.ndarray` of the owning node's shape.
    """
    data: np.ndarray

    def __post_init__(self) -> None:
        data = np.array(self.data)
        data.setflags(write=False)
        object.__setattr__(self, "data", data)

    @property
    def shape(self) -> ShapeType:
        return self.data.shape

    @property
    def is_known(self) -> bool:
        return True

    def subscript(self, subscripts: tuple[Subscript, ...],
                  dims_out: ShapeType) -> ConcreteValue:
        from symarray.subscript import apply_subscript
        return ConcreteValue(
            apply_subscript(self.data, subscripts).reshape(dims_out))

    def reshaped(self, dims: ShapeType) -> ConcreteValue:
        # column-major, so the linear order of the elements is unchanged
        return ConcreteValue(self.data.reshape(dims, order="F"))

    def replaced(self, positions: np.ndarray, replacement: Value) -> Value:
        """
        Returns a copy of *self* with the elements at the column-major
        *positions* overwritten by the column-major elements of
        *replacement*.
        """
        if not replacement.is_known:
            return UnknownValue(self.shape)

        assert isinstance(replacement, ConcreteValue)
        dtype = np.result_type(self.data, replacement.data)
        new_flat = flatten_colwise(self.data).astype(dtype)
        new_flat[positions] = flatten_colwise(replacement.data)

        return ConcreteValue(new_flat.reshape(self.shape, order="F"))

    @override
    def __repr__(self) -> str:
        return f"ConcreteValue({self.data!r})"


@dataclasses.dataclass(frozen=True)
class UnknownValue:
    """
    The value of a node that depends on something that is not known at
    construction time.

    .. attribute:: shape
    """
    shape: ShapeType

    @property
    def is_known(self) -> bool:
        return False

    def subscript(self, subscripts: tuple[Subscript, ...],
                  dims_out: ShapeType) -> UnknownValue:
        return UnknownValue(dims_out)

    def reshaped(self, dims: ShapeType) -> UnknownValue:
        return UnknownValue(dims)

    def replaced(self, positions: np.ndarray, replacement: Value) -> UnknownValue:
        return self


Value: TypeAlias = ConcreteValue | UnknownValue


def concatenate_values(values: Sequence[Value], axis: int,
                       shape: ShapeType) -> Value:
    """
    Joins *values* along *axis*. The result is unknown unless all of
    *values* are known.
    """
    if all(isinstance(val, ConcreteValue) for val in values):
        data: list[Any] = [val.data for val in values]  # type: ignore[union-attr]
        return ConcreteValue(np.concatenate(data, axis=axis))

    return UnknownValue(shape)
