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

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from symarray.transform import Mapper


if TYPE_CHECKING:
    from symarray.array import Array, Operation


__doc__ = """
.. currentmodule:: symarray.stringifier

.. autoclass:: Reprifier
"""


# {{{ Reprifier

class Reprifier(Mapper):
    """
    Stringifies :mod:`symarray` nodes to closely resemble CPython's
    implementation of :func:`repr` for its builtin datatypes.

    Sequences longer than *max_sequence_length* are abbreviated.
    """

    def __init__(self,
                 truncation_depth: int = 3,
                 truncation_string: str = "(...)",
                 max_sequence_length: int = 8) -> None:
        super().__init__()
        self.truncation_depth = truncation_depth
        self.truncation_string = truncation_string
        self.max_sequence_length = max_sequence_length

    def __call__(self, expr: Any, depth: int = 0) -> str:  # type: ignore[override]
        return self.rec(expr, depth)

    def map_foreign(self, expr: Any, depth: int) -> str:
        if isinstance(expr, tuple):
            if len(expr) > self.max_sequence_length:
                head = ", ".join(self.rec(el, depth)
                                 for el in expr[:self.max_sequence_length - 1])
                return f"({head}, ..., {self.rec(expr[-1], depth)})"
            if len(expr) == 1:
                return f"({self.rec(expr[0], depth)},)"
            return "(" + ", ".join(self.rec(el, depth) for el in expr) + ")"
        elif isinstance(expr, Mapping):
            return ("{"
                    + ", ".join(f"{key!r}: {self.rec(val, depth)}"
                                for key, val in sorted(expr.items()))
                    + "}")
        elif isinstance(expr, frozenset):
            return "{" + ", ".join(sorted(self.rec(el, depth) for el in expr)) + "}"
        else:
            return repr(expr)

    def _get_common_fields(self, expr: Array) -> list[str]:
        fields = ["node_id", "shape"]
        if expr.tags:
            # prettify: if empty 'expr.tags' => don't print.
            fields.append("tags")
        return fields

    def _map_input(self, expr: Array, depth: int) -> str:
        if depth > self.truncation_depth:
            return self.truncation_string

        return (f"{type(expr).__name__}("
                + ", ".join(f"{field}={self.rec(getattr(expr, field), depth+1)}"
                            for field in self._get_common_fields(expr))
                + ")")

    map_data_node = _map_input
    map_variable_node = _map_input

    def _map_operation(self, expr: Operation, depth: int) -> str:
        if depth > self.truncation_depth:
            return self.truncation_string

        fields = [*self._get_common_fields(expr), "operation_args", "parents"]

        return (f"{type(expr).__name__}("
                + ", ".join(f"{field}={self.rec(getattr(expr, field), depth+1)}"
                            for field in fields)
                + ")")

    map_extract = _map_operation
    map_replace = _map_operation
    map_column_bind = _map_operation
    map_row_bind = _map_operation
    map_reshape = _map_operation

# }}}

# vim: foldmethod=marker
