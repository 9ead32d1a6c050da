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

__doc__ = """
.. currentmodule:: symarray.diagnostic

All of these are raised while a node is being constructed, never when it is
evaluated. Subscripting errors are reported as plain :class:`IndexError`.

.. autoclass:: ShapeError
.. autoclass:: ImmutabilityError
.. autoclass:: LengthError
"""


class ShapeError(ValueError):
    """
    Raised when the shapes of the operands of an operation are incompatible,
    or when a requested shape is invalid.
    """


class ImmutabilityError(TypeError):
    """
    Raised when attempting to replace elements of a
    :class:`~symarray.array.VariableNode`.
    """


class LengthError(ValueError):
    """
    Raised when the number of replacement values does not evenly divide the
    number of elements to be replaced.
    """
