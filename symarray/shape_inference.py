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

from collections.abc import Callable, Sequence
from typing import TypeAlias

from pytools import product

from symarray.diagnostic import ShapeError
from symarray.utils import ShapeType


__doc__ = """
Shape Inference
---------------

Each operation computes its shape from the shapes of its operands with one of
the functions below, at the time the operation's node is constructed.

.. autofunction:: make_constant_shape
.. autofunction:: replace_shape
.. autofunction:: cbind_shape
.. autofunction:: rbind_shape
.. autofunction:: concatenated_length_shape
"""

ShapeFunction: TypeAlias = Callable[[Sequence[ShapeType]], ShapeType]


def make_constant_shape(shape: ShapeType) -> ShapeFunction:
    """
    Returns a shape function that ignores its operands and returns *shape*.
    Used where the output shape was established before the node is built,
    as for extraction and reshaping.
    """
    def shape_fn(input_shapes: Sequence[ShapeType]) -> ShapeType:
        return shape

    return shape_fn


def replace_shape(input_shapes: Sequence[ShapeType]) -> ShapeType:
    return input_shapes[0]


def _get_matrix_shapes(input_shapes: Sequence[ShapeType],
                       ) -> tuple[list[int], list[int]]:
    if not input_shapes:
        raise ShapeError("need at least one array to bind")

    if not all(len(shape) == 2 for shape in input_shapes):
        raise ShapeError("all arrays must be two-dimensional")

    rows = [shape[0] for shape in input_shapes]
    cols = [shape[1] for shape in input_shapes]
    return rows, cols


def cbind_shape(input_shapes: Sequence[ShapeType]) -> ShapeType:
    rows, cols = _get_matrix_shapes(input_shapes)

    if any(nrow != rows[0] for nrow in rows):
        raise ShapeError("all arrays must have the same number of rows "
                         f"(got {', '.join(str(nrow) for nrow in rows)})")

    return (rows[0], sum(cols))


def rbind_shape(input_shapes: Sequence[ShapeType]) -> ShapeType:
    rows, cols = _get_matrix_shapes(input_shapes)

    if any(ncol != cols[0] for ncol in cols):
        raise ShapeError("all arrays must have the same number of columns "
                         f"(got {', '.join(str(ncol) for ncol in cols)})")

    return (sum(rows), cols[0])


def concatenated_length_shape(input_shapes: Sequence[ShapeType]) -> ShapeType:
    """
    Shape of the column holding the elements of all operands one after the
    other.
    """
    if not input_shapes:
        raise ShapeError("need at least one array to concatenate")

    return (sum(product(shape) for shape in input_shapes), 1)
