import numpy as np

from ..helpers.errors import DimensionMismatch


class WeightGrid:
    """
    Row/column view onto a flat weight buffer.

    Cell (row, col) lives at buffer[row * stride + col]. The stride is
    explicit so the addressing can be checked independently of the
    arithmetic that uses it. For a layer, rows are output units and
    columns are inputs, so the natural stride is the input width.
    """
    def __init__(self, buffer, n_rows, n_cols, stride=None):
        if buffer.ndim != 1 or not buffer.flags.c_contiguous:
            raise ValueError("WeightGrid needs a flat contiguous buffer")
        stride = n_cols if stride is None else int(stride)
        if stride < n_cols:
            raise DimensionMismatch(n_cols, stride, where="grid stride")
        needed = (n_rows - 1) * stride + n_cols if n_rows > 0 else 0
        if needed > buffer.size:
            raise DimensionMismatch(needed, buffer.size, where="grid buffer")

        self.buffer = buffer
        self.n_rows = n_rows
        self.n_cols = n_cols
        self.stride = stride

    def index(self, row, col):
        return row * self.stride + col

    def __getitem__(self, rc):
        row, col = rc
        return self.buffer[self.index(row, col)]

    def __setitem__(self, rc, value):
        row, col = rc
        self.buffer[self.index(row, col)] = value

    def matrix(self):
        # writes through the returned view land in the flat buffer
        itemsize = self.buffer.itemsize
        return np.lib.stride_tricks.as_strided(
            self.buffer,
            shape=(self.n_rows, self.n_cols),
            strides=(self.stride * itemsize, itemsize),
        )

    def row(self, i):
        start = self.index(i, 0)
        return self.buffer[start:start + self.n_cols]
