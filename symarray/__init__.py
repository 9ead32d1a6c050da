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


# {{{ debug control

import os
try:
    v = os.environ.get("SYMARRAY_DEBUG")
    if v is None:
        v = ""

    DEBUG_ENABLED = bool(eval(v))
except Exception:
    DEBUG_ENABLED = False


def set_debug_enabled(flag: bool) -> None:
    """Set whether :mod:`symarray` should check every operation's value
    against its backend as the operation is created."""
    global DEBUG_ENABLED
    DEBUG_ENABLED = flag

# }}}


from symarray.array import (
        Array, GraphBuilder,
        DataNode, VariableNode,
        Operation, Extract, Replace, ColumnBind, RowBind, Reshape,

        extract, replace,
        cbind, rbind, c, rep, flatten,
        dim, length, reshape,
        head, tail,
        )
from symarray.backend import evaluate
from symarray.diagnostic import ShapeError, ImmutabilityError, LengthError
import symarray.analysis as analysis
import symarray.tags as tags
import symarray.transform as transform

__all__ = (
        "Array", "GraphBuilder",
        "DataNode", "VariableNode",
        "Operation", "Extract", "Replace", "ColumnBind", "RowBind", "Reshape",

        "extract", "replace",
        "cbind", "rbind", "c", "rep", "flatten",
        "dim", "length", "reshape",
        "head", "tail",

        "evaluate",

        "ShapeError", "ImmutabilityError", "LengthError",

        "set_debug_enabled",

        # sub-modules
        "analysis", "tags", "transform",
)
