"""Norms and layout conversions between dense, semi-sparse and fully sparse tensors."""

from __future__ import annotations

import math

import numpy as np

from .errors import ErrCode, TensorError
from .sptensor import Index, SparseTensor
from .tensor import Tensor
from .utils import Scalar


def _dense_cell_offsets(tensor: SparseTensor) -> np.ndarray:
    """Intra-chunk offsets of every in-bound cell of the dense modes."""
    offsets = np.zeros(1, dtype=np.int64)
    for mode in tensor.dense_order:
        size = tensor.shape[mode]
        stride = tensor.strides[mode]
        offsets = (offsets[:, None] * stride + np.arange(size)[None, :]).ravel()
    return offsets


def norm(tensor: SparseTensor) -> float:
    """Frobenius norm over the in-bound cells of every stored chunk."""
    offsets = _dense_cell_offsets(tensor)
    count = tensor.num_chunks
    if count == 0 or offsets.size == 0:
        return 0.0
    span = count * tensor.chunk_size
    chunks = tensor.values[:span].astype(np.float64).reshape(count, tensor.chunk_size)
    cells = chunks[:, offsets]
    return math.sqrt(float(np.sum(cells * cells)))


def _in_bound_elements(tensor: SparseTensor):
    """Yield (offset, coordinate) for every in-bound stored element."""
    for offset in range(tensor.num_chunks * tensor.chunk_size):
        coord, inbound = tensor.offset_to_indices(offset)
        if inbound:
            yield offset, coord


def to_fully_dense(tensor: SparseTensor) -> SparseTensor:
    """Return a single-chunk copy with every mode dense.

    The dense mode order of the result is the sparse order followed by the
    dense order of ``tensor``.
    """
    result = SparseTensor(tensor.shape, [True] * tensor.nmodes)
    result.dense_order = tuple(tensor.sparse_order) + tuple(tensor.dense_order)
    result.init_single_chunk()
    for offset, coord in _in_bound_elements(tensor):
        target = result.indices_to_intra_offset(coord)
        result.values[target] = tensor.values[offset]
    result.num_chunks = 1
    return result


def to_fully_sparse(tensor: SparseTensor) -> SparseTensor:
    """Return a copy with every mode sparse, one entry per in-bound cell.

    The sparse mode order of the result is the sparse order followed by the
    dense order of ``tensor``.
    """
    result = SparseTensor(tensor.shape, [False] * tensor.nmodes)
    result.sparse_order = tuple(tensor.sparse_order) + tuple(tensor.dense_order)
    result.reserve(tensor.num_chunks * tensor.chunk_size, False)
    for offset, coord in _in_bound_elements(tensor):
        result.append(coord, float(tensor.values[offset]))
    return result


def dense_to_sparse(tensor: Tensor) -> SparseTensor:
    """Wrap a dense tensor as a fully dense, single-chunk sparse tensor."""
    result = SparseTensor()
    result.shape = tuple(tensor.shape)
    result.is_dense = tuple(True for _ in tensor.shape)
    result.dense_order = tuple(tensor.storage_order)
    result.sparse_order = ()
    result.strides = tuple(tensor.strides)
    result.chunk_size = tensor.chunk_size
    result.num_chunks = 1
    result.indices = [np.zeros(1, dtype=Index) for _ in tensor.shape]
    result.values = np.asarray(tensor.values, dtype=Scalar).copy()
    return result


def sparse_to_dense(tensor: SparseTensor) -> Tensor:
    """Return the dense tensor held by a fully dense sparse tensor."""
    if not all(tensor.is_dense):
        raise TensorError(ErrCode.SHAPE_MISMATCH, "tensor is not fully dense")
    result = Tensor()
    result.shape = tuple(tensor.shape)
    result.storage_order = tuple(tensor.dense_order)
    result.strides = tuple(tensor.strides)
    result.chunk_size = tensor.chunk_size
    values = np.zeros(tensor.chunk_size, dtype=Scalar)
    keep = min(tensor.chunk_size, len(tensor.values))
    values[:keep] = tensor.values[:keep]
    result.values = values
    return result