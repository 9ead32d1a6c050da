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

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

import numpy as np

from symarray.transform import CachedMapper, InputGatherer
from symarray.utils import ShapeType, normalize_shape


if TYPE_CHECKING:
    from symarray.array import Array, DataNode, Operation, VariableNode


logger = logging.getLogger(__name__)


__doc__ = """
Execution Backend
-----------------

The backend functions realize the value of one operation node from the
values of its parents. They are stored on the node as
:attr:`~symarray.array.Operation.backend` and called as
``backend(*parent_values, **operation_args)``. Positions in the operation
arguments refer to the row-major flattening of the arrays involved.

.. autofunction:: backend_extract
.. autofunction:: backend_replace
.. autofunction:: backend_cbind
.. autofunction:: backend_rbind
.. autofunction:: backend_reshape

Evaluation
----------

.. autoclass:: BackendEvaluator
.. autofunction:: evaluate
"""


# {{{ backend functions

def backend_extract(x: np.ndarray, *,
                    nelem: int,
                    index: Sequence[int],
                    dims_out: ShapeType) -> np.ndarray:
    flat = np.asarray(x).reshape(-1)
    assert flat.size == nelem

    return flat[np.asarray(index, dtype=np.intp)].reshape(dims_out)


def backend_replace(x: np.ndarray, value: np.ndarray, *,
                    index: Sequence[int],
                    dims: ShapeType) -> np.ndarray:
    x = np.asarray(x)
    value = np.asarray(value)

    new_flat = x.astype(np.result_type(x, value)).reshape(-1)
    # replacement values are consumed in column-major order
    new_flat[np.asarray(index, dtype=np.intp)] = value.ravel(order="F")

    return new_flat.reshape(dims)


def backend_cbind(*arrays: np.ndarray) -> np.ndarray:
    return np.concatenate(arrays, axis=1)


def backend_rbind(*arrays: np.ndarray) -> np.ndarray:
    return np.concatenate(arrays, axis=0)


def backend_reshape(x: np.ndarray, *, shape: ShapeType) -> np.ndarray:
    return np.reshape(x, shape, order="F")

# }}}


# {{{ evaluation

class BackendEvaluator(CachedMapper[np.ndarray]):
    """
    Realizes the value of a node by calling the
    :attr:`~symarray.array.Operation.backend` of every operation it depends
    on, each exactly once.

    .. attribute:: variable_values

        A mapping from :class:`~symarray.array.VariableNode` to the
        :class:`numpy.ndarray` to use as its value.
    """

    def __init__(self,
                 variable_values: Mapping[VariableNode, Any] | None = None,
                 ) -> None:
        super().__init__()
        self.variable_values = dict(variable_values or {})
        self.num_backend_calls = 0

    def map_data_node(self, expr: DataNode) -> np.ndarray:
        return expr.value.data

    def map_variable_node(self, expr: VariableNode) -> np.ndarray:
        try:
            value = np.asarray(self.variable_values[expr])
        except KeyError:
            raise ValueError(
                f"no value supplied for variable node {expr.node_id}"
                + (f" ('{expr.name}')" if expr.name else "")) from None

        if normalize_shape(value.shape) != expr.shape:
            raise ValueError(f"value of shape {value.shape} supplied for "
                             f"variable node {expr.node_id} of shape "
                             f"{expr.shape}")

        return value.reshape(expr.shape)

    def _map_operation(self, expr: Operation) -> np.ndarray:
        parent_values = [self.rec(parent) for parent in expr.parents]
        self.num_backend_calls += 1
        return expr.backend(*parent_values, **expr.operation_args)

    map_extract = _map_operation
    map_replace = _map_operation
    map_column_bind = _map_operation
    map_row_bind = _map_operation
    map_reshape = _map_operation


def evaluate(expr: Array,
             variable_values: Mapping[VariableNode, Any] | None = None,
             ) -> np.ndarray:
    r"""
    Returns the value of *expr* as a :class:`numpy.ndarray`.

    :param variable_values: values for the
        :class:`~symarray.array.VariableNode`\ s *expr* depends on.
    """
    from symarray.array import VariableNode

    variable_values = dict(variable_values or {})
    missing = sorted(
        (inp for inp in InputGatherer()(expr)
         if isinstance(inp, VariableNode) and inp not in variable_values),
        key=lambda inp: inp.node_id)
    if missing:
        raise ValueError("no value supplied for variable nodes "
                         + ", ".join(str(var.node_id) for var in missing))

    evaluator = BackendEvaluator(variable_values)
    result = evaluator(expr)

    logger.info("evaluate: realized node %d with %d backend calls",
                expr.node_id, evaluator.num_backend_calls)

    return result

# }}}

# vim: foldmethod=marker
