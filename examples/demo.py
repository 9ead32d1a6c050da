#!/usr/bin/env python

import logging

import numpy as np

import symarray as sa


logging.basicConfig(level=logging.DEBUG)

g = sa.GraphBuilder()
x = g.as_data(np.arange(1, 13).reshape(3, 4, order="F"), name="x")
v = g.variable((3, 1), name="v")

# {{{ known data: values are computed as the graph is built

block = x[1:3, [0, 3]]
zeroed = x.at[[0, 5]].set(0)
joined = sa.c(block, sa.rep(x[0, :], times=2))

print(block.value)
print(zeroed.value)
print(sa.dim(joined), sa.reshape(joined, (3, 4)).value)
print(sa.head(x, 2).value, sa.tail(x, -2).value)

# }}}

# {{{ variables: values are only available through the backend

result = sa.cbind(v, x).at[0, :].set(-1)
print(result)
print(sa.analysis.get_node_type_counts(result))

out = sa.evaluate(result, {v: np.array([10, 20, 30])})
print(out)
assert np.array_equal(out[1:, 0], [20, 30])

# }}}
