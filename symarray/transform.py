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

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar


if TYPE_CHECKING:
    from symarray.array import Array, DataNode, Operation, VariableNode


CombineT = TypeVar("CombineT")  # used in CombineMapper
CachedMapperT = TypeVar("CachedMapperT")  # used in CachedMapper

__doc__ = """
.. currentmodule:: symarray.transform

.. autoclass:: Mapper
.. autoclass:: CachedMapper
.. autoclass:: CombineMapper
.. autoclass:: InputGatherer
.. autoclass:: WalkMapper
.. autoclass:: CachedWalkMapper
.. autoclass:: TopoSortMapper
"""


class UnsupportedArrayError(ValueError):
    pass


# {{{ mapper base class

class Mapper:
    """A class that when called with a :class:`symarray.Array` recursively
    iterates over the DAG, calling the *_mapper_method* of each node. Users of
    this class are expected to override the methods of this class or create a
    subclass.

    .. note::

       This class might visit a node multiple times. Use a :class:`CachedMapper`
       if this is not desired.

    .. automethod:: handle_unsupported_array
    .. automethod:: map_foreign
    .. automethod:: rec
    .. automethod:: __call__
    """

    def handle_unsupported_array(self, expr: Array, *args: Any, **kwargs: Any) -> Any:
        """Mapper method that is invoked for :class:`symarray.Array`
        subclasses for which a mapper method does not exist in this mapper.
        """
        raise UnsupportedArrayError("%s cannot handle expressions of type %s"
                % (type(self).__name__, type(expr)))

    def map_foreign(self, expr: Any, *args: Any, **kwargs: Any) -> Any:
        """Mapper method that is invoked for an object of class for which a
        mapper method does not exist in this mapper.
        """
        raise ValueError("%s encountered invalid foreign object: %s"
                % (type(self).__name__, repr(expr)))

    def rec(self, expr: Any, *args: Any, **kwargs: Any) -> Any:
        """Call the mapper method of *expr* and return the result."""
        from symarray.array import Array

        method: Callable[..., Any]

        try:
            method = getattr(self, expr._mapper_method)
        except AttributeError:
            if isinstance(expr, Array):
                return self.handle_unsupported_array(expr, *args, **kwargs)
            else:
                return self.map_foreign(expr, *args, **kwargs)

        return method(expr, *args, **kwargs)

    def __call__(self, expr: Any, *args: Any, **kwargs: Any) -> Any:
        """Handle the mapping of *expr*."""
        return self.rec(expr, *args, **kwargs)

# }}}


# {{{ CachedMapper

class CachedMapper(Mapper, Generic[CachedMapperT]):
    """Mapper class that maps each node in the DAG exactly once. This loses some
    information compared to :class:`Mapper` as a node is visited only from
    one of its predecessors.
    """

    def __init__(self) -> None:
        self._cache: dict[Any, CachedMapperT] = {}

    def cache_key(self, expr: Any) -> Any:
        return expr

    # type-ignore-reason: incompatible with super class
    def rec(self, expr: Any) -> CachedMapperT:  # type: ignore[override]
        key = self.cache_key(expr)
        try:
            return self._cache[key]
        except KeyError:
            result: CachedMapperT = super().rec(expr)
            self._cache[key] = result
            return result

# }}}


# {{{ CombineMapper

class CombineMapper(CachedMapper[CombineT]):
    """
    Abstract mapper that recursively combines the results of the parents of
    a given operation.

    .. automethod:: combine
    """

    def combine(self, *args: CombineT) -> CombineT:
        """Combine the arguments."""
        raise NotImplementedError

    def _map_operation(self, expr: Operation) -> CombineT:
        return self.combine(*(self.rec(parent) for parent in expr.parents))

    map_extract = _map_operation
    map_replace = _map_operation
    map_column_bind = _map_operation
    map_row_bind = _map_operation
    map_reshape = _map_operation

# }}}


# {{{ InputGatherer

class InputGatherer(CombineMapper[frozenset["Array"]]):
    """
    Mapper to combine all instances of :class:`~symarray.array.DataNode`
    and :class:`~symarray.array.VariableNode` that an array expression
    depends on.
    """

    def combine(self, *args: frozenset[Array]) -> frozenset[Array]:
        from functools import reduce
        return reduce(lambda a, b: a | b, args, frozenset())

    def map_data_node(self, expr: DataNode) -> frozenset[Array]:
        return frozenset({expr})

    map_variable_node = map_data_node

# }}}


# {{{ WalkMapper

class WalkMapper(Mapper):
    """
    A mapper that walks over all the arrays in a :class:`symarray.Array`.

    Users may override the specific mapper methods in a derived class or
    override :meth:`WalkMapper.visit` and :meth:`WalkMapper.post_visit`.

    .. automethod:: visit
    .. automethod:: post_visit
    """

    def visit(self, expr: Any) -> bool:
        """
        If this method returns *True*, *expr* is traversed during the walk.
        If this method returns *False*, *expr* is not traversed as a part of
        the walk.
        """
        return True

    def post_visit(self, expr: Any) -> None:
        """
        Callback after *expr* has been traversed.
        """
        pass

    def map_data_node(self, expr: DataNode) -> None:
        if not self.visit(expr):
            return

        self.post_visit(expr)

    def map_variable_node(self, expr: VariableNode) -> None:
        if not self.visit(expr):
            return

        self.post_visit(expr)

    def _map_operation(self, expr: Operation) -> None:
        if not self.visit(expr):
            return

        for parent in expr.parents:
            self.rec(parent)

        self.post_visit(expr)

    map_extract = _map_operation
    map_replace = _map_operation
    map_column_bind = _map_operation
    map_row_bind = _map_operation
    map_reshape = _map_operation

# }}}


# {{{ CachedWalkMapper

class CachedWalkMapper(WalkMapper):
    """
    WalkMapper that visits each node in the DAG exactly once. This loses some
    information compared to :class:`WalkMapper` as a node is visited only from
    one of its predecessors.
    """

    def __init__(self) -> None:
        self._visited_ids: set[int] = set()

    def rec(self, expr: Any) -> None:  # type: ignore[override]
        if id(expr) in self._visited_ids:
            return

        super().rec(expr)
        self._visited_ids.add(id(expr))

# }}}


# {{{ TopoSortMapper

class TopoSortMapper(CachedWalkMapper):
    """A mapper that creates a list of nodes in topological order.

    :members: topological_order
    """

    def __init__(self) -> None:
        super().__init__()
        self.topological_order: list[Array] = []

    def post_visit(self, expr: Any) -> None:
        self.topological_order.append(expr)

# }}}

# vim: foldmethod=marker
