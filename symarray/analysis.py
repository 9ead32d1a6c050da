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

from collections import defaultdict
from typing import TYPE_CHECKING, Any

from symarray.transform import CachedWalkMapper, TopoSortMapper


if TYPE_CHECKING:
    from symarray.array import Array


__doc__ = """
.. currentmodule:: symarray.analysis

.. autofunction:: get_num_nodes
.. autofunction:: get_node_type_counts
.. autofunction:: get_topologically_sorted_nodes
"""


# {{{ NodeCountMapper

class NodeCountMapper(CachedWalkMapper):
    """
    Counts the number of nodes of a given type in a DAG.

    .. attribute:: expr_type_counts

       Dictionary mapping node types to number of nodes of that type.
    """

    def __init__(self) -> None:
        super().__init__()
        self.expr_type_counts: dict[type[Any], int] = defaultdict(int)

    def post_visit(self, expr: Any) -> None:
        self.expr_type_counts[type(expr)] += 1


def get_node_type_counts(expr: Array) -> dict[type[Any], int]:
    """
    Returns a dictionary mapping node types to node count for that type
    in the DAG of *expr*.
    """
    ncm = NodeCountMapper()
    ncm(expr)

    return ncm.expr_type_counts


def get_num_nodes(expr: Array) -> int:
    """
    Returns the number of distinct nodes in the DAG of *expr*, *expr*
    included.
    """
    return sum(get_node_type_counts(expr).values())

# }}}


def get_topologically_sorted_nodes(expr: Array) -> list[Array]:
    """
    Returns the nodes in the DAG of *expr*, each after all of its parents.
    """
    mapper = TopoSortMapper()
    mapper(expr)

    return mapper.topological_order

# vim: foldmethod=marker
