#!/usr/bin/env python
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

import sys

import numpy as np
import pytest
from testlib import column_major_matrix

import symarray as sa
from symarray.diagnostic import ImmutabilityError, LengthError, ShapeError
from symarray.subscript import (
    AllIndices,
    IntegerIndices,
    LogicalMask,
    SliceIndices,
    normalize_subscripts,
    to_subscript,
)
from symarray.utils import (
    enumerate_indices,
    flatten_colwise,
    flatten_rowwise,
    match,
    normalize_shape,
    rep_index,
    unflatten_rowwise,
)


def _make_matrix():
    g = sa.GraphBuilder()
    x = g.as_data(column_major_matrix(3, 4), name="x")
    return g, x


# {{{ utilities

def test_normalize_shape():
    assert normalize_shape(()) == (1, 1)
    assert normalize_shape((5,)) == (5, 1)
    assert normalize_shape(5) == (5, 1)
    assert normalize_shape((2, 3, 4)) == (2, 3, 4)
    assert normalize_shape((np.int64(2), 3)) == (2, 3)

    with pytest.raises(ShapeError):
        normalize_shape((-1, 2))

    with pytest.raises(ShapeError):
        normalize_shape((2.0, 2))

    with pytest.raises(ShapeError):
        normalize_shape((True, 2))


def test_index_enumeration():
    dummy = enumerate_indices((2, 3))
    np.testing.assert_array_equal(dummy, [[0, 1, 2], [3, 4, 5]])

    np.testing.assert_array_equal(flatten_rowwise(dummy), np.arange(6))
    np.testing.assert_array_equal(flatten_colwise(dummy), [0, 3, 1, 4, 2, 5])
    np.testing.assert_array_equal(
        unflatten_rowwise(flatten_rowwise(dummy), (2, 3)), dummy)


def test_match():
    table = enumerate_indices((2, 3))

    np.testing.assert_array_equal(match([4, 1], table), [3, 2])
    np.testing.assert_array_equal(match([0, 0], table), [0, 0])
    np.testing.assert_array_equal(match([], table), [])

    # first occurrence in column-major order
    np.testing.assert_array_equal(match([7], [[7, 1], [7, 2]]), [0])

    with pytest.raises(ValueError):
        match([6], table)


def test_rep_index():
    np.testing.assert_array_equal(rep_index(3, 2), [0, 1, 2, 0, 1, 2])
    np.testing.assert_array_equal(rep_index(3, each=2), [0, 0, 1, 1, 2, 2])
    np.testing.assert_array_equal(rep_index(3, [1, 0, 2]), [0, 2, 2])
    np.testing.assert_array_equal(rep_index(3, [2]), [0, 1, 2, 0, 1, 2])
    np.testing.assert_array_equal(rep_index(3, length_out=5), [0, 1, 2, 0, 1])
    np.testing.assert_array_equal(rep_index(3, each=2, length_out=3), [0, 0, 1])
    np.testing.assert_array_equal(rep_index(3, 5, length_out=2), [0, 1])
    np.testing.assert_array_equal(rep_index(0, 3), [])
    np.testing.assert_array_equal(rep_index(0, length_out=0), [])

    with pytest.raises(ValueError):
        rep_index(0, length_out=2)

    with pytest.raises(ValueError):
        rep_index(3, -1)

    with pytest.raises(ValueError):
        rep_index(3, [1, 2])

    with pytest.raises(ValueError):
        rep_index(3, each=-1)

# }}}


# {{{ subscripts

def test_subscript_resolution():
    np.testing.assert_array_equal(AllIndices().resolve(3), [0, 1, 2])
    np.testing.assert_array_equal(SliceIndices(None, None, 2).resolve(5),
                                  [0, 2, 4])
    np.testing.assert_array_equal(SliceIndices(None, None, -1).resolve(3),
                                  [2, 1, 0])
    np.testing.assert_array_equal(IntegerIndices((-1, 0, 0)).resolve(3),
                                  [2, 0, 0])
    np.testing.assert_array_equal(LogicalMask((True, False)).resolve(5),
                                  [0, 2, 4])
    np.testing.assert_array_equal(LogicalMask(()).resolve(5), [])

    with pytest.raises(IndexError):
        SliceIndices(None, None, 0).resolve(3)

    with pytest.raises(IndexError):
        IntegerIndices((3,)).resolve(3)

    with pytest.raises(IndexError):
        IntegerIndices((-4,)).resolve(3)

    with pytest.raises(IndexError):
        LogicalMask((True,)*6).resolve(5)


def test_subscript_conversion():
    assert isinstance(to_subscript(slice(None)), AllIndices)
    assert to_subscript(slice(1, 3)) == SliceIndices(1, 3, None)
    assert to_subscript(2) == IntegerIndices((2,))
    assert to_subscript(np.int32(2)) == IntegerIndices((2,))
    assert to_subscript([0, 2]) == IntegerIndices((0, 2))
    assert to_subscript(np.array([0, 2])) == IntegerIndices((0, 2))
    assert to_subscript([True, False]) == LogicalMask((True, False))
    assert to_subscript(True) == LogicalMask((True,))
    assert to_subscript([]) == IntegerIndices(())
    assert to_subscript(np.array(2)) == IntegerIndices((2,))
    assert to_subscript(np.array(True)) == LogicalMask((True,))

    for bad_subscript in ["a", 1.5, [0.5], [[0, 1]], slice(0.5, 2), None,
                          np.array(1.5)]:
        with pytest.raises(IndexError):
            to_subscript(bad_subscript)

    with pytest.raises(IndexError):
        normalize_subscripts((0, 1, 2), 2)

    assert len(normalize_subscripts(3, 2)) == 1
    assert len(normalize_subscripts((3, 2), 2)) == 2

    _, x = _make_matrix()
    np.testing.assert_array_equal(x[np.array(2)].value.data, [[3]])
    np.testing.assert_array_equal(x[np.array(True), :].value.data,
                                  column_major_matrix(3, 4))

# }}}


# {{{ extract

def test_extract_values():
    _, x = _make_matrix()

    np.testing.assert_array_equal(x[1, 2].value.data, [[8]])
    np.testing.assert_array_equal(x[[0, 2], :].value.data,
                                  [[1, 4, 7, 10], [3, 6, 9, 12]])
    np.testing.assert_array_equal(x[1:3, [0, 3]].value.data, [[2, 11], [3, 12]])
    np.testing.assert_array_equal(x[:, [True, False]].value.data,
                                  [[1, 7], [2, 8], [3, 9]])
    np.testing.assert_array_equal(x[[2, 0], [3, 3]].value.data,
                                  [[12, 12], [10, 10]])


def test_extract_never_drops_axes():
    _, x = _make_matrix()

    assert x[1, 2].shape == (1, 1)
    assert x[-1, :].shape == (1, 4)
    np.testing.assert_array_equal(x[-1, :].value.data, [[3, 6, 9, 12]])
    assert x[:, 0].shape == (3, 1)
    assert sa.extract(x, (0, slice(None)), drop=True).shape == (1, 4)


def test_linear_extract():
    _, x = _make_matrix()

    np.testing.assert_array_equal(x[4].value.data, [[5]])
    np.testing.assert_array_equal(x[[0, 5, 11]].value.data, [[1], [6], [12]])
    np.testing.assert_array_equal(x[-1].value.data, [[12]])
    np.testing.assert_array_equal(x[::5].value.data, [[1], [6], [11]])
    np.testing.assert_array_equal(
        x[[True, False, False]].value.data, [[1], [4], [7], [10]])

    assert x[[]].shape == (0, 1)
    assert x[:].shape == (12, 1)


def test_extract_operation_args():
    _, x = _make_matrix()

    y = x[1:3, [0, 3]]
    assert isinstance(y, sa.Extract)
    assert y.parents == (x,)
    assert y.operation_args["nelem"] == 12
    assert y.operation_args["dims_out"] == (2, 2)
    # row-major positions in x, in row-major order of y
    assert y.operation_args["index"] == (4, 7, 8, 11)

    z = x[[0, 5]]
    assert z.operation_args["index"] == (0, 9)
    assert z.operation_args["dims_out"] == (2, 1)


def test_extract_higher_dimensional():
    g = sa.GraphBuilder()
    data = np.arange(24).reshape(2, 3, 4)
    a = g.as_data(data)

    y = a[:, 1, [0, 3]]
    assert y.shape == (2, 1, 2)
    np.testing.assert_array_equal(y.value.data, data[:, [1]][:, :, [0, 3]])

    np.testing.assert_array_equal(a[[0, 1, 2]].value.data,
                                  data.ravel(order="F")[:3].reshape(-1, 1))


def test_extract_errors():
    g, x = _make_matrix()
    num_nodes = g.num_nodes

    for key in [(1, 2, 3), (3, 0), (0, -5), 12, -13, [True]*13, 0.5,
                (slice(None, None, 0), 0)]:
        with pytest.raises(IndexError):
            x[key]

    assert g.num_nodes == num_nodes


def test_extract_from_variable():
    g = sa.GraphBuilder()
    v = g.variable((3, 4), name="v")

    y = v[0, :]
    assert y.shape == (1, 4)
    assert not y.value.is_known
    assert y.value.shape == (1, 4)

# }}}


# {{{ replace

def test_replace_single_element():
    _, x = _make_matrix()

    y = x.at[1, 2].set(0)
    assert isinstance(y, sa.Replace)
    assert y.parents[0] is x

    expected = column_major_matrix(3, 4)
    expected[1, 2] = 0
    np.testing.assert_array_equal(y.value.data, expected)

    # x is unchanged
    np.testing.assert_array_equal(x.value.data, column_major_matrix(3, 4))


def test_replace_linear():
    _, x = _make_matrix()

    y = x.at[[0, 5]].set([100, 200])
    np.testing.assert_array_equal(y.value.data,
                                  [[100, 4, 7, 10],
                                   [2, 5, 8, 11],
                                   [3, 200, 9, 12]])
    assert y.operation_args["index"] == (0, 9)
    assert y.operation_args["dims"] == (3, 4)


def test_replace_column_major_order():
    g, x = _make_matrix()

    expected = column_major_matrix(3, 4)
    expected[0:2, 0:2] = [[1, 3], [2, 4]]

    y = x.at[0:2, 0:2].set([1, 2, 3, 4])
    np.testing.assert_array_equal(y.value.data, expected)

    z = sa.replace(x, (slice(0, 2), slice(0, 2)),
                   g.as_data([[1, 3], [2, 4]]))
    np.testing.assert_array_equal(z.value.data, expected)


def test_replace_recycles_values():
    _, x = _make_matrix()

    y = x.at[:, 0].set(0)
    expected = column_major_matrix(3, 4)
    expected[:, 0] = 0
    np.testing.assert_array_equal(y.value.data, expected)

    z = x.at[0, :].set([-1, -2])
    expected = column_major_matrix(3, 4)
    expected[0, :] = [-1, -2, -1, -2]
    np.testing.assert_array_equal(z.value.data, expected)


def test_replace_upcasts():
    _, x = _make_matrix()

    y = x.at[0].set(0.5)
    assert y.value.data.dtype.kind == "f"
    assert y.value.data[0, 0] == 0.5
    assert y.value.data[2, 3] == 12


def test_replace_errors():
    g, x = _make_matrix()
    num_nodes = g.num_nodes

    with pytest.raises(LengthError):
        x.at[[0, 1, 2]].set([1, 2])

    with pytest.raises(LengthError):
        x.at[0].set([])

    with pytest.raises(IndexError):
        x.at[3, 0].set(1)

    assert g.num_nodes == num_nodes

    v = g.variable((3, 4))
    with pytest.raises(ImmutabilityError):
        v.at[0].set(1)


def test_replace_with_unknown_value():
    g, x = _make_matrix()
    w = g.variable(1)

    y = x.at[0].set(w)
    assert y.shape == (3, 4)
    assert not y.value.is_known

    # elements of operations on variables may be replaced
    v = g.variable((3, 4))
    z = v[:, :].at[0].set(1)
    assert not z.value.is_known

# }}}


# {{{ combination

def test_cbind_rbind():
    g, x = _make_matrix()
    data = column_major_matrix(3, 4)

    y = sa.cbind(x, x[:, 0])
    assert isinstance(y, sa.ColumnBind)
    assert y.shape == (3, 5)
    np.testing.assert_array_equal(y.value.data, np.hstack([data, data[:, :1]]))

    z = sa.rbind(x, x[0, :])
    assert isinstance(z, sa.RowBind)
    assert z.shape == (4, 4)
    np.testing.assert_array_equal(z.value.data, np.vstack([data, data[:1]]))

    w = sa.cbind(x, [0, 0, 0])
    assert w.shape == (3, 5)
    assert isinstance(w.parents[1], sa.DataNode)


def test_bind_errors():
    g, x = _make_matrix()
    y = x[0:2, :]
    num_nodes = g.num_nodes

    with pytest.raises(ShapeError):
        sa.cbind(x, y)

    with pytest.raises(ShapeError):
        sa.rbind(x, [1, 2, 3])

    with pytest.raises(ShapeError):
        sa.cbind(x, g.as_data(np.zeros((3, 1, 2))))

    num_nodes = g.num_nodes

    with pytest.raises(ShapeError):
        sa.rbind(x, np.zeros((2, 3)))

    with pytest.raises(TypeError):
        sa.cbind(1, 2)

    for bind in [sa.cbind, sa.rbind]:
        with pytest.raises(ShapeError):
            bind()

    assert g.num_nodes == num_nodes

    other = sa.GraphBuilder().as_data([1, 2, 3])
    with pytest.raises(ValueError):
        sa.cbind(x, other)


def test_c():
    _, x = _make_matrix()

    y = sa.c(x[0:2, 0:2], [9, 10])
    assert isinstance(y, sa.RowBind)
    assert y.shape == (6, 1)
    np.testing.assert_array_equal(y.value.data.ravel(), [1, 2, 4, 5, 9, 10])

    z = sa.c(x)
    np.testing.assert_array_equal(z.value.data.ravel(), np.arange(1, 13))

    col = x[:, 0]
    assert sa.flatten(col) is col
    assert sa.c(col).parents == (col,)

    with pytest.raises(ShapeError):
        sa.c()


def test_rep():
    _, x = _make_matrix()

    y = sa.rep(x[0, :], times=2)
    assert y.shape == (8, 1)
    np.testing.assert_array_equal(y.value.data.ravel(),
                                  [1, 4, 7, 10, 1, 4, 7, 10])

    np.testing.assert_array_equal(
        sa.rep(x[0:2, 0], each=2).value.data.ravel(), [1, 1, 2, 2])
    np.testing.assert_array_equal(
        sa.rep(x[0:2, 0], length_out=3).value.data.ravel(), [1, 2, 1])
    np.testing.assert_array_equal(
        sa.rep(x[0:2, 0], times=[2, 0]).value.data.ravel(), [1, 1])

    assert isinstance(y, sa.Extract)

# }}}


# {{{ dimensions

def test_dim_length():
    g, x = _make_matrix()

    assert sa.dim(x) == (3, 4)
    assert sa.length(x) == 12
    assert x.ndim == 2
    assert x.size == 12

    assert sa.dim(g.as_data(5)) == (1, 1)
    assert sa.dim(g.as_data([1, 2, 3])) == (3, 1)
    assert sa.dim(g.variable((2, 3, 4))) == (2, 3, 4)


def test_reshape():
    _, x = _make_matrix()

    y = sa.reshape(x, (4, 3))
    assert isinstance(y, sa.Reshape)
    assert y.operation_args["shape"] == (4, 3)
    np.testing.assert_array_equal(y.value.data,
                                  np.arange(1, 13).reshape(4, 3, order="F"))

    np.testing.assert_array_equal(sa.reshape(x, None).value.data.ravel(),
                                  np.arange(1, 13))
    assert sa.reshape(x, 12).shape == (12, 1)
    assert sa.reshape(x, [2.0, 6]).shape == (2, 6)
    assert x.reshape(2, 6).shape == (2, 6)
    assert x.reshape((6, 2)).shape == (6, 2)

    z = sa.reshape(x, (2, 3, 2))
    np.testing.assert_array_equal(z.value.data,
                                  np.arange(1, 13).reshape(2, 3, 2, order="F"))


def test_reshape_errors():
    g, x = _make_matrix()
    num_nodes = g.num_nodes

    with pytest.raises(ShapeError, match="length-0"):
        sa.reshape(x, ())

    with pytest.raises(ShapeError, match="product 15"):
        sa.reshape(x, (5, 3))

    with pytest.raises(ShapeError, match="negative"):
        sa.reshape(x, (-3, -4))

    with pytest.raises(ShapeError, match="missing"):
        sa.reshape(x, (None, 3))

    with pytest.raises(ShapeError, match="missing"):
        sa.reshape(x, (float("nan"), 3))

    with pytest.raises(ShapeError):
        sa.reshape(x, (2.5, 4))

    with pytest.raises(TypeError):
        x.reshape()

    assert g.num_nodes == num_nodes

# }}}


# {{{ head and tail

def test_head_tail_rows():
    g = sa.GraphBuilder()
    data = column_major_matrix(10, 2)
    tall = g.as_data(data)

    np.testing.assert_array_equal(sa.head(tall).value.data, data[:6])
    np.testing.assert_array_equal(sa.head(tall, 3).value.data, data[:3])
    np.testing.assert_array_equal(sa.head(tall, -7).value.data, data[:3])
    np.testing.assert_array_equal(sa.head(tall, 20).value.data, data)
    assert sa.head(tall, -20).shape == (0, 2)

    np.testing.assert_array_equal(sa.tail(tall).value.data, data[4:])
    np.testing.assert_array_equal(sa.tail(tall, 3).value.data, data[7:])
    np.testing.assert_array_equal(sa.tail(tall, -8).value.data, data[8:])
    assert sa.tail(tall, 0).shape == (0, 2)


def test_head_tail_higher_dimensional():
    g = sa.GraphBuilder()
    data = np.arange(24).reshape(2, 3, 4)
    a = g.as_data(data)

    np.testing.assert_array_equal(sa.head(a, 5).value.data.ravel(),
                                  data.ravel(order="F")[:5])
    np.testing.assert_array_equal(sa.tail(a, 2).value.data.ravel(),
                                  data.ravel(order="F")[-2:])
    assert sa.head(a, -20).shape == (4, 1)


def test_head_tail_errors():
    _, x = _make_matrix()

    with pytest.raises(TypeError):
        sa.head(x, 2.5)

    with pytest.raises(TypeError):
        sa.tail(x, [1, 2])

# }}}


# {{{ graph builder and nodes

def test_node_ids():
    g, x = _make_matrix()
    assert x.node_id == 0

    y = x[0, :]
    z = sa.cbind(x, x)
    assert y.node_id == 1
    assert z.node_id == 2
    assert g.num_nodes == 3


def test_as_data():
    g = sa.GraphBuilder()

    x = g.as_data([1.5, 2.5])
    assert x.shape == (2, 1)
    with pytest.raises(ValueError):
        x.value.data[0, 0] = 0

    data = np.ones((2, 2))
    y = g.as_data(data)
    data[0, 0] = 5
    assert y.value.data[0, 0] == 1

    with pytest.raises(TypeError):
        g.as_data(["a", "b"])

    with pytest.raises(TypeError):
        g.as_data(x)

    assert g.as_symbolic_array(x) is x
    assert isinstance(g.as_symbolic_array(3), sa.DataNode)


def test_array_truth_value():
    _, x = _make_matrix()

    with pytest.raises(ValueError):
        bool(x)


def test_name():
    g, x = _make_matrix()

    assert x.name == "x"
    assert g.variable(3, name="v").name == "v"
    assert x[0].name is None

# }}}


# {{{ repr

def test_repr():
    g = sa.GraphBuilder()
    x = g.as_data(column_major_matrix(3, 4))

    assert repr(x) == "DataNode(node_id=0, shape=(3, 4))"
    assert repr(x[0, :]) == (
        "Extract(node_id=1, shape=(1, 4), "
        "operation_args={'dims_out': (1, 4), 'index': (0, 1, 2, 3), "
        "'nelem': 12}, "
        "parents=(DataNode(node_id=0, shape=(3, 4)),))")

    assert "tags=" in repr(g.variable(2, name="v"))


def test_repr_truncation():
    _, x = _make_matrix()

    assert "..." in repr(sa.rep(x, times=3))

    y = x
    for _ in range(6):
        y = y[:, :]

    assert "(...)" in repr(y)

# }}}


# {{{ analysis

def test_node_counts():
    _, x = _make_matrix()

    assert sa.analysis.get_num_nodes(sa.cbind(x, x)) == 2

    counts = sa.analysis.get_node_type_counts(sa.c(x[0, :], x[1, :]))
    assert dict(counts) == {sa.DataNode: 1, sa.Extract: 2,
                            sa.Reshape: 2, sa.RowBind: 1}


def test_topological_order():
    _, x = _make_matrix()
    y = x[0:2, :]
    z = sa.rbind(y, sa.reshape(x, (4, 3))[0:2, 0:2].reshape(1, 4))
    expr = sa.cbind(z, z)

    order = sa.analysis.get_topologically_sorted_nodes(expr)
    assert len(order) == len(set(map(id, order)))
    assert order[-1] is expr

    position = {id(node): i for i, node in enumerate(order)}
    for node in order:
        for parent in getattr(node, "parents", ()):
            assert position[id(parent)] < position[id(node)]

# }}}


def test_matrix_properties():
    g, x = _make_matrix()
    data = column_major_matrix(3, 4)

    full = x[0:3, :]
    assert full.shape == (3, 4)
    np.testing.assert_array_equal(full.value.data, data)

    np.testing.assert_array_equal(x[:, 1:4].value.data, data[:, 1:])

    y = x.at[:, 1:4].set(np.arange(1, 10))
    np.testing.assert_array_equal(y.value.data[:, 1:],
                                  np.arange(1, 10).reshape(3, 3, order="F"))
    np.testing.assert_array_equal(y.value.data[:, 0], data[:, 0])

    with pytest.raises(LengthError):
        x.at[:, 1:4].set([1, 2])

    z = x.at[:, 1:4].set([1, 2, 3])
    np.testing.assert_array_equal(z.value.data[:, 1:], [[1]*3, [2]*3, [3]*3])

    assert sa.cbind(x[:, 1], x[:, 0]).shape == (3, 2)
    assert sa.c(x[:, 0], x).shape == (15, 1)

    r = sa.rep(x[:, 1], times=3)
    assert r.shape == (9, 1)
    np.testing.assert_array_equal(r.value.data.ravel(), [4, 5, 6]*3)

    np.testing.assert_array_equal(sa.head(x, 2).value.data, data[:2])
    np.testing.assert_array_equal(sa.head(x, -1).value.data, data[:2])
    np.testing.assert_array_equal(sa.tail(x, -1).value.data, data[1:])


if __name__ == "__main__":
    if len(sys.argv) > 1:
        exec(sys.argv[1])
    else:
        from pytest import main
        main([__file__])

# vim: fdm=marker
