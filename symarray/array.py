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

# {{{ docs

__doc__ = """
.. currentmodule:: symarray

Array Interface
---------------

.. autoclass:: Array
.. autoclass:: GraphBuilder

Extract, Replace and Combine
----------------------------

These functions follow the conventions of column-major array languages:
a single subscript addresses the elements of an array linearly, first axis
fastest, and no operation ever drops an axis. All subscripts are 0-based.

.. autofunction:: extract
.. autofunction:: replace
.. autofunction:: cbind
.. autofunction:: rbind
.. autofunction:: c
.. autofunction:: rep
.. autofunction:: flatten
.. autofunction:: dim
.. autofunction:: length
.. autofunction:: reshape
.. autofunction:: head
.. autofunction:: tail

.. currentmodule:: symarray.array

Graph Nodes
-----------

.. autoclass:: DataNode
.. autoclass:: VariableNode
.. autoclass:: Operation
.. autoclass:: Extract
.. autoclass:: Replace
.. autoclass:: ColumnBind
.. autoclass:: RowBind
.. autoclass:: Reshape
"""

# }}}

import dataclasses
import logging
import math
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from sys import intern
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

import numpy as np
from immutabledict import immutabledict
from typing_extensions import override

from pytools import memoize_method, product
from pytools.tag import Tag

from symarray.backend import (
    backend_cbind,
    backend_extract,
    backend_rbind,
    backend_replace,
    backend_reshape,
)
from symarray.diagnostic import ImmutabilityError, LengthError, ShapeError
from symarray.shape_inference import (
    ShapeFunction,
    cbind_shape,
    concatenated_length_shape,
    make_constant_shape,
    rbind_shape,
    replace_shape,
)
from symarray.subscript import apply_subscript, normalize_subscripts
from symarray.tags import Named
from symarray.utils import (
    INT_CLASSES,
    ShapeType,
    enumerate_indices,
    flatten_colwise,
    flatten_rowwise,
    match,
    normalize_shape,
    rep_index,
)
from symarray.value import ConcreteValue, UnknownValue, Value, concatenate_values


logger = logging.getLogger(__name__)

T = TypeVar("T")


# {{{ array dataclass helpers

# https://stackoverflow.com/a/1176023
_CAMEL_TO_SNAKE_RE = re.compile(
    r"""
        (?<=[a-z])      # preceded by lowercase
        (?=[A-Z])       # followed by uppercase
        |               #   OR
        (?<=[A-Z])      # preceded by lowercase
        (?=[A-Z][a-z])  # followed by uppercase, then lowercase
    """,
    re.X,
)


def array_dataclass() -> Callable[[type[T]], type[T]]:
    """
    Turns a node class into a frozen dataclass compared by identity, and
    assigns its ``_mapper_method`` (``map_<snake_case_class_name>``), which
    :class:`symarray.transform.Mapper` dispatches on.
    """
    def map_cls(cls: type[T]) -> type[T]:
        dc_cls = dataclasses.dataclass(init=True, frozen=True,
                                       eq=False, repr=False)(cls)

        snake_clsname = _CAMEL_TO_SNAKE_RE.sub("_", dc_cls.__name__).lower()
        dc_cls._mapper_method = intern(f"map_{snake_clsname}")  # type: ignore[attr-defined]

        return dc_cls

    return map_cls

# }}}


# {{{ array interface

@array_dataclass()
class Array:
    r"""
    A node in a graph of lazily evaluated array operations. Nodes are
    immutable; every operation returns a new node.

    .. attribute:: node_id

        Identifier of the node, unique within :attr:`builder` and increasing
        in order of construction.

    .. attribute:: builder

        The :class:`GraphBuilder` that registered this node.

    .. attribute:: shape

        A tuple of at least two :class:`int`\ s. Column vectors have shape
        ``(n, 1)``.

    .. attribute:: value

        A :class:`~symarray.value.ConcreteValue` if all the data this node
        depends on is known, an :class:`~symarray.value.UnknownValue`
        otherwise.

    .. attribute:: tags

    .. automethod:: __getitem__
    .. attribute:: at

        ``x.at[key].set(value)`` is the same as ``replace(x, key, value)``.

    .. automethod:: reshape
    """
    node_id: int
    builder: GraphBuilder
    tags: frozenset[Tag] = dataclasses.field(kw_only=True, default=frozenset())

    # otherwise subclasses cannot set these
    if TYPE_CHECKING:
        @property
        def shape(self) -> ShapeType:
            raise NotImplementedError

        @property
        def value(self) -> Value:
            raise NotImplementedError

    _mapper_method: ClassVar[str]

    # disallow numpy arithmetic from taking precedence
    __array_priority__: ClassVar[int] = 1

    @property
    def ndim(self) -> int:
        return len(self.shape)

    @property
    def size(self) -> int:
        return product(self.shape)  # type: ignore[no-any-return]

    @property
    def name(self) -> str | None:
        named_tags = [tag for tag in self.tags if isinstance(tag, Named)]
        return named_tags[0].name if named_tags else None

    def __getitem__(self, key: Any) -> Array:
        """
        Equivalent to :func:`extract`.
        """
        return extract(self, key)

    @property
    def at(self) -> _IndexUpdateHelper:
        return _IndexUpdateHelper(self)

    def reshape(self, *shape: int | Sequence[int] | None) -> Array:
        """
        Equivalent to :func:`symarray.reshape`.
        """
        if len(shape) == 0:
            raise TypeError("reshape takes at least one argument (0 given)")
        if len(shape) == 1:
            # handle shape as single argument tuple
            return reshape(self, shape[0])

        return reshape(self, shape)  # type: ignore[arg-type]

    def __bool__(self) -> None:
        raise ValueError("The truth value of an array expression is undefined.")

    @memoize_method
    def __repr__(self) -> str:
        from symarray.stringifier import Reprifier
        return Reprifier()(self)


class _IndexUpdateRef:
    def __init__(self, array: Array, key: Any) -> None:
        self.array = array
        self.key = key

    def set(self, value: Any) -> Array:
        return replace(self.array, self.key, value)


class _IndexUpdateHelper:
    def __init__(self, array: Array) -> None:
        self.array = array

    def __getitem__(self, key: Any) -> _IndexUpdateRef:
        return _IndexUpdateRef(self.array, key)

# }}}


# {{{ input nodes

@array_dataclass()
class DataNode(Array):
    """
    An array with known contents, e.g. created from literal data via
    :meth:`GraphBuilder.as_data`.
    """
    value: ConcreteValue

    @property
    def shape(self) -> ShapeType:
        return self.value.shape


@array_dataclass()
class VariableNode(Array):
    """
    A free array whose contents are only supplied at evaluation time.
    Elements of a variable cannot be replaced.
    """
    shape: ShapeType

    @property
    def value(self) -> UnknownValue:
        return UnknownValue(self.shape)

# }}}


# {{{ operations

@array_dataclass()
class Operation(Array):
    """
    Base class for nodes computed from other nodes.

    .. attribute:: parents

        The operands, in order.

    .. attribute:: operation_args

        A mapping of the parameters the :attr:`backend` needs in addition to
        the operands' values.

    .. attribute:: backend

        A callable that is invoked as
        ``backend(*parent_values, **operation_args)`` to obtain the value of
        the node from the (row-major) values of :attr:`parents`. See
        :mod:`symarray.backend`.
    """
    parents: tuple[Array, ...]
    shape: ShapeType
    operation_args: Mapping[str, Any]
    value: Value
    backend: Callable[..., np.ndarray]

    kind: ClassVar[str]


@array_dataclass()
class Extract(Operation):
    """
    Selects elements of its single parent.

    Operation arguments: ``nelem``, the number of elements of the parent;
    ``index``, for each element of the result in row-major order, its
    position in the row-major flattening of the parent; ``dims_out``, the
    shape of the result.
    """
    kind: ClassVar[str] = "extract"


@array_dataclass()
class Replace(Operation):
    """
    Copies its first parent and overwrites some of its elements with those
    of its second parent.

    Operation arguments: ``index``, the row-major positions of the
    overwritten elements, in the column-major order of the replacement
    values; ``dims``, the shape of the result.
    """
    kind: ClassVar[str] = "replace"


@array_dataclass()
class ColumnBind(Operation):
    """Joins two-dimensional parents side by side."""
    kind: ClassVar[str] = "cbind"


@array_dataclass()
class RowBind(Operation):
    """Stacks two-dimensional parents on top of each other."""
    kind: ClassVar[str] = "rbind"


@array_dataclass()
class Reshape(Operation):
    """
    Changes the shape of its parent, preserving the column-major order of
    the elements.

    Operation arguments: ``shape``.
    """
    kind: ClassVar[str] = "reshape"


OPERATION_CLASSES: Mapping[str, type[Operation]] = immutabledict({
    cls.kind: cls
    for cls in [Extract, Replace, ColumnBind, RowBind, Reshape]})

# }}}


# {{{ graph builder

class GraphBuilder:
    """
    Registers the nodes of one graph and assigns their identifiers.
    Operations on nodes register their results with the builder of their
    operands; nodes from different builders cannot be combined.

    .. attribute:: num_nodes

    .. automethod:: as_data
    .. automethod:: variable
    .. automethod:: as_symbolic_array
    .. automethod:: register_operation
    """

    def __init__(self) -> None:
        self._next_id = 0

    @property
    def num_nodes(self) -> int:
        return self._next_id

    def _get_new_id(self) -> int:
        node_id = self._next_id
        self._next_id += 1
        return node_id

    def as_data(self, value: Any, name: str | None = None) -> DataNode:
        """
        Returns a :class:`DataNode` holding a copy of *value*, a scalar or
        (nested) sequence of numbers or a :class:`numpy.ndarray`.
        One-dimensional data becomes a column.
        """
        if isinstance(value, Array):
            raise TypeError("value is already an array node")

        data = np.asarray(value)
        if data.dtype.kind not in "biufc":
            raise TypeError(f"cannot create an array from data of type "
                            f"'{data.dtype}'")

        data = data.reshape(normalize_shape(data.shape))
        tags = frozenset({Named(name)}) if name is not None else frozenset()

        node = DataNode(self._get_new_id(), self, ConcreteValue(data), tags=tags)
        logger.debug("registered data node %d with shape %s",
                     node.node_id, node.shape)
        return node

    def variable(self, shape: int | Sequence[int],
                 name: str | None = None) -> VariableNode:
        """
        Returns a :class:`VariableNode` of *shape*.
        """
        shape = normalize_shape(shape)
        tags = frozenset({Named(name)}) if name is not None else frozenset()

        node = VariableNode(self._get_new_id(), self, shape, tags=tags)
        logger.debug("registered variable node %d with shape %s",
                     node.node_id, node.shape)
        return node

    def as_symbolic_array(self, value: Any) -> Array:
        """
        Returns *value* if it is a node of this builder, or lifts it into a
        :class:`DataNode` otherwise.
        """
        if isinstance(value, Array):
            if value.builder is not self:
                raise ValueError("cannot combine arrays from different graphs")
            return value

        return self.as_data(value)

    def register_operation(self,
                           kind: str,
                           parents: Iterable[Array],
                           shape_fn: ShapeFunction,
                           operation_args: Mapping[str, Any] | None = None,
                           value: Value | None = None,
                           backend: Callable[..., np.ndarray] | None = None,
                           ) -> Operation:
        """
        Creates the node of an operation.

        :param kind: one of ``"extract"``, ``"replace"``, ``"cbind"``,
            ``"rbind"``, ``"reshape"``.
        :param shape_fn: maps the shapes of *parents* to the shape of the
            result; see :mod:`symarray.shape_inference`.
        :param value: the value of the result if it could be derived, *None*
            otherwise.
        :param backend: see :attr:`Operation.backend`.
        """
        try:
            cls = OPERATION_CLASSES[kind]
        except KeyError:
            raise ValueError(f"unknown operation kind '{kind}'") from None

        if backend is None:
            raise ValueError(f"no backend given for operation '{kind}'")

        parents = tuple(parents)
        for parent in parents:
            if not isinstance(parent, Array):
                raise TypeError(f"operand of '{kind}' is not an array: "
                                f"{type(parent).__name__}")
            if parent.builder is not self:
                raise ValueError("cannot combine arrays from different graphs")

        shape = normalize_shape(shape_fn([parent.shape for parent in parents]))

        if value is None:
            value = UnknownValue(shape)
        if value.shape != shape:
            raise ValueError(f"value of shape {value.shape} does not match "
                             f"the shape {shape} of '{kind}'")

        node = cls(self._get_new_id(), self,
                   parents=parents,
                   shape=shape,
                   operation_args=immutabledict(operation_args or {}),
                   value=value,
                   backend=backend)

        logger.debug("registered %s node %d with shape %s (parents: %s)",
                     kind, node.node_id, shape,
                     ", ".join(str(parent.node_id) for parent in parents))

        from symarray import DEBUG_ENABLED
        if DEBUG_ENABLED:
            _check_value_against_backend(node)

        return node


def _check_value_against_backend(node: Operation) -> None:
    if not (node.value.is_known
            and all(parent.value.is_known for parent in node.parents)):
        return

    parent_values = [parent.value.data  # type: ignore[union-attr]
                     for parent in node.parents]
    result = node.backend(*parent_values, **node.operation_args)

    expected = node.value.data  # type: ignore[union-attr]
    if not np.array_equal(result, expected, equal_nan=True):
        raise AssertionError(f"backend result of '{node.kind}' node "
                             f"{node.node_id} does not match its value")

    logger.debug("checked %s node %d against backend", node.kind, node.node_id)

# }}}


# {{{ extract and replace

def extract(x: Array, key: Any, drop: bool = False) -> Array:
    """
    Returns the elements of *x* selected by *key*, as in ``x[key]``.

    *key* is either a single subscript, addressing the elements of *x* in
    column-major order and producing a column, or a tuple with one subscript
    per axis of *x*. Each subscript may be an integer, a slice, a sequence
    of integers or a logical mask; see :mod:`symarray.subscript`.

    :param drop: accepted for compatibility and ignored; axes are never
        dropped.
    """
    dims_in = x.shape
    subscripts = normalize_subscripts(key, len(dims_in))

    # subscripting the placeholder like the real array produces the shape of
    # the result, and each selected element's row-major position in x
    dummy_out = apply_subscript(enumerate_indices(dims_in), subscripts)
    dims_out = normalize_shape(dummy_out.shape)

    value = None
    if x.value.is_known:
        value = x.value.subscript(subscripts, dims_out)

    index = flatten_rowwise(dummy_out)

    return x.builder.register_operation(
        "extract", (x,), make_constant_shape(dims_out),
        operation_args={"nelem": x.size,
                        "index": tuple(index.tolist()),
                        "dims_out": dims_out},
        value=value,
        backend=backend_extract)


def replace(x: Array, key: Any, value: Any) -> Array:
    """
    Returns a copy of *x* with the elements selected by *key* (see
    :func:`extract`) replaced by *value*, which is taken in column-major
    order and recycled if it is shorter than the selection.

    :raises ImmutabilityError: if *x* is a :class:`VariableNode`.
    :raises LengthError: if the length of *value* does not divide the number
        of selected elements.
    """
    if isinstance(x, VariableNode):
        raise ImmutabilityError("cannot replace values in a variable array")

    dims = x.shape
    subscripts = normalize_subscripts(key, len(dims))

    dummy = enumerate_indices(dims)
    index = flatten_colwise(apply_subscript(dummy, subscripts))

    n_replacement = value.size if isinstance(value, Array) else np.size(value)
    if n_replacement != len(index):
        if n_replacement == 0 or len(index) % n_replacement != 0:
            raise LengthError("number of items to replace is not a multiple "
                              "of replacement length")

    replacement = x.builder.as_symbolic_array(value)
    if replacement.size != len(index):
        replacement = rep(replacement, length_out=len(index))

    new_value: Value = x.value
    if x.value.is_known:
        new_value = x.value.replaced(match(index, dummy), replacement.value)

    return x.builder.register_operation(
        "replace", (x, replacement), replace_shape,
        operation_args={"index": tuple(index.tolist()),
                        "dims": dims},
        value=new_value,
        backend=backend_replace)

# }}}


# {{{ combine

def _get_builder(arrays: Sequence[Any]) -> GraphBuilder:
    if not arrays:
        raise ShapeError("need at least one array to bind")

    for ary in arrays:
        if isinstance(ary, Array):
            return ary.builder

    raise TypeError("at least one argument must be an array node")


def _get_operand_shape(ary: Any) -> ShapeType:
    if isinstance(ary, Array):
        return ary.shape
    return normalize_shape(np.shape(ary))


def cbind(*arrays: Any) -> Array:
    """
    Joins two-dimensional arrays with the same number of rows side by side.
    Operands that are not array nodes are converted with
    :meth:`GraphBuilder.as_symbolic_array`.
    """
    builder = _get_builder(arrays)
    shape = cbind_shape([_get_operand_shape(ary) for ary in arrays])

    operands = tuple(builder.as_symbolic_array(ary) for ary in arrays)

    return builder.register_operation(
        "cbind", operands, cbind_shape,
        value=concatenate_values([ary.value for ary in operands], 1, shape),
        backend=backend_cbind)


def rbind(*arrays: Any) -> Array:
    """
    Stacks two-dimensional arrays with the same number of columns.
    Operands that are not array nodes are converted with
    :meth:`GraphBuilder.as_symbolic_array`.
    """
    builder = _get_builder(arrays)
    shape = rbind_shape([_get_operand_shape(ary) for ary in arrays])

    operands = tuple(builder.as_symbolic_array(ary) for ary in arrays)

    return builder.register_operation(
        "rbind", operands, rbind_shape,
        value=concatenate_values([ary.value for ary in operands], 0, shape),
        backend=backend_rbind)


def flatten(x: Array) -> Array:
    """
    Returns the elements of *x* as a column, in column-major order.
    """
    if x.ndim == 2 and x.shape[1] == 1:
        return x

    return reshape(x, None)


def c(*arrays: Any, recursive: bool = False) -> Array:
    """
    Returns a column holding the elements of all *arrays*, each flattened
    in column-major order.

    :param recursive: accepted for compatibility and ignored.
    """
    builder = _get_builder(arrays)
    operands = tuple(flatten(builder.as_symbolic_array(ary)) for ary in arrays)
    shape = concatenated_length_shape([ary.shape for ary in operands])

    return builder.register_operation(
        "rbind", operands, concatenated_length_shape,
        value=concatenate_values([ary.value for ary in operands], 0, shape),
        backend=backend_rbind)


def rep(x: Array,
        times: int | Sequence[int] = 1,
        *,
        each: int = 1,
        length_out: int | None = None,
        recursive: bool = False) -> Array:
    """
    Returns a column of the elements of *x* (in column-major order),
    repeated. See :func:`symarray.utils.rep_index` for the meaning of
    *times*, *each* and *length_out*.

    :param recursive: accepted for compatibility and ignored.
    """
    idx = rep_index(x.size, times, each=each, length_out=length_out)

    # a single subscript, so the result is a column
    return extract(x, (idx,))

# }}}


# {{{ dimensions

def dim(x: Array) -> ShapeType:
    return x.shape


def length(x: Array) -> int:
    return x.size


def _normalize_dim(d: Any) -> int:
    if isinstance(d, INT_CLASSES) and not isinstance(d, bool):
        return int(d)
    if isinstance(d, (float, np.floating)) and float(d).is_integer():
        return int(d)

    raise ShapeError(f"the dims must be integers (got {d!r})")


def reshape(x: Array, dims: int | Sequence[int] | None) -> Array:
    """
    Returns an array with the elements of *x* in the same column-major order
    and the shape *dims*. *None* gives a single column.

    :raises ShapeError: if *dims* is empty, contains missing or negative
        entries, or does not have as many elements as *x*.
    """
    if dims is None:
        dims = x.size,
    elif isinstance(dims, (*INT_CLASSES, float)):
        dims = dims,

    new_dims = list(dims)

    if len(new_dims) == 0:
        raise ShapeError("length-0 dimension vector is invalid")

    if len(new_dims) == 1:
        new_dims.append(1)

    if any(d is None
           or (isinstance(d, (float, np.floating)) and math.isnan(d))
           for d in new_dims):
        raise ShapeError("the dims contain missing values")

    new_dims = [_normalize_dim(d) for d in new_dims]

    if any(d < 0 for d in new_dims):
        raise ShapeError("the dims contain negative values")

    prod_dims = product(new_dims)
    if prod_dims != x.size:
        raise ShapeError(f"dims [product {prod_dims}] do not match the length "
                         f"of object [{x.size}]")

    shape = tuple(new_dims)

    return x.builder.register_operation(
        "reshape", (x,), make_constant_shape(shape),
        operation_args={"shape": shape},
        value=x.value.reshaped(shape),
        backend=backend_reshape)

# }}}


# {{{ head and tail

def _clamp_count(n: int, total: int) -> int:
    if isinstance(n, bool) or not isinstance(n, INT_CLASSES):
        raise TypeError(f"'n' must be a single integer (got {n!r})")

    if n < 0:
        return max(total + n, 0)
    else:
        return min(n, total)


def head(x: Array, n: int = 6) -> Array:
    """
    Returns the first *n* rows of a two-dimensional *x*, or the first *n*
    elements (in column-major order) of *x* otherwise. A negative *n*
    selects all but the last ``-n``.
    """
    if x.ndim == 2:
        n = _clamp_count(n, x.shape[0])
        return extract(x, (slice(0, n), slice(None)))

    n = _clamp_count(n, x.size)
    return extract(x, slice(0, n))


def tail(x: Array, n: int = 6) -> Array:
    """
    Returns the last *n* rows of a two-dimensional *x*, or the last *n*
    elements (in column-major order) of *x* otherwise. A negative *n*
    selects all but the first ``-n``.
    """
    if x.ndim == 2:
        nrow = x.shape[0]
        n = _clamp_count(n, nrow)
        return extract(x, (slice(nrow - n, nrow), slice(None)))

    total = x.size
    n = _clamp_count(n, total)
    return extract(x, slice(total - n, total))

# }}}

# vim: foldmethod=marker
