"""Semi-sparse tensors: sparse modes indexed per chunk, dense modes stored in chunks."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import ErrCode, TensorError
from .utils import Scalar, ceil_div

Index = np.int64
"""Element type of coordinate arrays."""


def _resized(array: np.ndarray, size: int) -> np.ndarray:
    """Return a zero-padded copy of ``array`` with ``size`` elements."""
    result = np.zeros(size, dtype=array.dtype)
    keep = min(size, len(array))
    result[:keep] = array[:keep]
    return result


def _grown_capacity(current: int, needed: int) -> int:
    new_size = current + current // 2 if current >= 8 else 8
    return max(new_size, needed)


class SparseTensor:
    """A tensor whose sparse modes hold coordinates and whose dense modes form chunks.

    Each stored chunk covers every dense mode, padded to a multiple of eight,
    and is located by one coordinate per sparse mode.  ``indices`` and
    ``values`` may hold spare capacity beyond ``num_chunks``.
    """

    def __init__(
        self,
        shape: Sequence[int] | None = None,
        is_dense: Sequence[bool] | None = None,
    ):
        if shape is None:
            self.shape: tuple[int, ...] = ()
            self.is_dense: tuple[bool, ...] = ()
            self.dense_order: tuple[int, ...] = ()
            self.sparse_order: tuple[int, ...] = ()
            self.strides: tuple[int, ...] = ()
            self.chunk_size = 0
            self.num_chunks = 0
            self.indices: list[np.ndarray] = []
            self.values = np.zeros(0, dtype=Scalar)
        else:
            self.reset(shape, is_dense)

    @property
    def nmodes(self) -> int:
        return len(self.shape)

    def reset(
        self, shape: Sequence[int], is_dense: Sequence[bool] | None = None
    ) -> SparseTensor:
        """Reinitialise as an empty tensor of the given shape and mode kinds."""
        self.shape = tuple(int(s) for s in shape)
        if is_dense is None:
            is_dense = [False] * len(self.shape)
        if len(is_dense) != len(self.shape):
            raise TensorError(
                ErrCode.SHAPE_MISMATCH, "is_dense must have one entry per mode"
            )
        self.is_dense = tuple(bool(d) for d in is_dense)
        self.dense_order = tuple(m for m, dense in enumerate(self.is_dense) if dense)
        self.sparse_order = tuple(
            m for m, dense in enumerate(self.is_dense) if not dense
        )
        self.strides = tuple(
            ceil_div(size, 8) * 8 if dense else 1
            for size, dense in zip(self.shape, self.is_dense)
        )
        self.chunk_size = 1
        for stride in self.strides:
            self.chunk_size *= stride
        self.num_chunks = 0
        self.indices = [np.zeros(0, dtype=Index) for _ in self.shape]
        self.values = np.zeros(0, dtype=Scalar)
        return self

    def clone(self) -> SparseTensor:
        """Return an independent deep copy."""
        result = SparseTensor()
        result.shape = self.shape
        result.is_dense = self.is_dense
        result.dense_order = self.dense_order
        result.sparse_order = self.sparse_order
        result.strides = self.strides
        result.chunk_size = self.chunk_size
        result.num_chunks = self.num_chunks
        result.indices = [array.copy() for array in self.indices]
        result.values = self.values.copy()
        return result

    def offset_to_indices(self, offset: int) -> tuple[list[int], bool]:
        """Return the coordinate at a value offset and whether it is in bounds."""
        if offset >= self.num_chunks * self.chunk_size:
            return list(self.shape), False
        indices = [0] * self.nmodes
        chunk = offset // self.chunk_size
        for mode in self.sparse_order:
            indices[mode] = int(self.indices[mode][chunk])
        if self.chunk_size != 1 and self.dense_order:
            intra_chunk = offset % self.chunk_size
            for mode in reversed(self.dense_order[1:]):
                indices[mode] = intra_chunk % self.strides[mode]
                intra_chunk //= self.strides[mode]
            indices[self.dense_order[0]] = intra_chunk
        inbound = all(index < size for index, size in zip(indices, self.shape))
        return indices, inbound

    def indices_to_intra_offset(self, indices: Sequence[int]) -> int:
        """Return the offset of a coordinate's dense part within its chunk."""
        if not self.dense_order:
            return 0
        offset = int(indices[self.dense_order[0]])
        for mode in self.dense_order[1:]:
            offset = offset * self.strides[mode] + int(indices[mode])
        return offset

    def _ensure_index_capacity(self, modes: Sequence[int], needed: int) -> None:
        for mode in modes:
            current = len(self.indices[mode])
            if current < needed:
                self.indices[mode] = _resized(
                    self.indices[mode], _grown_capacity(current, needed)
                )

    def _ensure_value_capacity(self, needed: int) -> None:
        current = len(self.values)
        if current < needed:
            self.values = _resized(self.values, _grown_capacity(current, needed))

    def _chunk_values(self, value: Sequence[float]) -> np.ndarray:
        chunk = np.asarray(value, dtype=Scalar).ravel()
        if len(chunk) < self.chunk_size:
            raise TensorError(
                ErrCode.VALUE_ERROR,
                f"expected {self.chunk_size} values, got {len(chunk)}",
            )
        return chunk[: self.chunk_size]

    def append(self, coord: Sequence[int], value) -> None:
        """Append one chunk at ``coord``.

        ``value`` is either a sequence holding a whole chunk, or a single
        number, which is only allowed on a fully sparse tensor.
        """
        needed = self.num_chunks + 1
        if np.ndim(value) == 0:
            if self.chunk_size != 1:
                raise TensorError(ErrCode.SHAPE_MISMATCH, "tensor is not fully sparse")
            self._ensure_index_capacity(range(self.nmodes), needed)
            self._ensure_value_capacity(needed * self.chunk_size)
            chunk = np.asarray([value], dtype=Scalar)
        else:
            chunk = self._chunk_values(value)
            self._ensure_index_capacity(self.sparse_order, needed)
            self._ensure_value_capacity(needed * self.chunk_size)
        location = self.num_chunks
        for mode in self.sparse_order:
            self.indices[mode][location] = coord[mode]
        start = location * self.chunk_size
        self.values[start : start + self.chunk_size] = chunk
        self.num_chunks += 1

    def put(self, location: int, coord: Sequence[int], value) -> None:
        """Overwrite the chunk at ``location`` within the reserved capacity.

        A single-number ``value`` requires a fully sparse tensor and also
        counts one more stored chunk.
        """
        if np.ndim(value) == 0:
            if self.chunk_size != 1:
                raise TensorError(ErrCode.SHAPE_MISMATCH, "tensor is not fully sparse")
            chunk = np.asarray([value], dtype=Scalar)
            counts = True
        else:
            chunk = self._chunk_values(value)
            counts = False
        for mode in self.sparse_order:
            self.indices[mode][location] = coord[mode]
        start = location * self.chunk_size
        if start + self.chunk_size > len(self.values):
            raise IndexError(f"location {location} is beyond the reserved capacity")
        self.values[start : start + self.chunk_size] = chunk
        if counts:
            self.num_chunks += 1

    def reserve(self, size: int, initialize: bool = True) -> int:
        """Make room for at least ``size`` chunks and return the resulting capacity.

        Newly reserved values are always zero, so ``initialize`` is satisfied
        either way.
        """
        result = size
        for mode in range(self.nmodes):
            if len(self.indices[mode]) < size:
                self.indices[mode] = _resized(self.indices[mode], size)
            else:
                result = len(self.indices[mode])
        if len(self.values) < size * self.chunk_size:
            self.values = _resized(self.values, size * self.chunk_size)
        elif self.chunk_size != 0:
            result = len(self.values) // self.chunk_size
        return result

    def init_single_chunk(self, initialize: bool = True) -> None:
        """Hold exactly one chunk at coordinate zero.

        When the value storage has to be reallocated it is zero-filled.
        """
        for mode in range(self.nmodes):
            if len(self.indices[mode]) != 1:
                self.indices[mode] = np.zeros(1, dtype=Index)
            self.indices[mode][0] = 0
        if len(self.values) != self.chunk_size:
            self.values = np.zeros(self.chunk_size, dtype=Scalar)
        self.num_chunks = 1

    def sort_index(self, sparse_order: Sequence[int] | None = None) -> None:
        """Sort chunks by their sparse coordinates, optionally in a new mode order."""
        if sparse_order is not None:
            order = tuple(int(m) for m in sparse_order)
            if len(order) != len(self.sparse_order):
                raise TensorError(
                    ErrCode.SHAPE_MISMATCH,
                    "sparse_order must name every sparse mode",
                )
            self.sparse_order = order
        count = self.num_chunks
        if count < 2 or not self.sparse_order:
            return
        keys = [self.indices[mode][:count] for mode in reversed(self.sparse_order)]
        perm = np.lexsort(keys)
        for mode in range(self.nmodes):
            if not self.is_dense[mode]:
                self.indices[mode][:count] = self.indices[mode][:count][perm]
        span = count * self.chunk_size
        chunks = self.values[:span].reshape(count, self.chunk_size)
        self.values[:span] = chunks[perm].ravel()