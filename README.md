# semisparse

`semisparse` holds multi-dimensional tensors in two storage layouts:

- `Tensor` (in `semisparse.tensor`) is a dense tensor. Each mode is padded to a
  multiple of 8, and `strides` and `chunk_size` describe that padded storage.
  `values` is a flat `numpy.float32` array.
- `SparseTensor` (in `semisparse.sptensor`) is a *semi-sparse* tensor. Each
  mode is either sparse, with one coordinate per stored chunk, or dense, laid
  out inside every chunk. If all modes are sparse the tensor is plain COO. If
  all modes are dense it has a single chunk.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Building tensors

```python
from semisparse.sptensor import SparseTensor

# A 3x4 tensor with both modes sparse (COO)
x = SparseTensor([3, 4], [False, False])
x.append([2, 1], 5.0)
x.append([0, 3], -1.5)
x.sort_index()            # order chunks by their sparse coordinates
```

On a tensor with dense modes, `append` and `put` take a whole chunk of
`chunk_size` values. A single number is only accepted when the tensor is fully
sparse. `reserve(size)` makes room for at least `size` chunks and returns the
capacity it ended up with. `init_single_chunk()` turns the storage into one
chunk at coordinate zero. `clone()` returns a deep copy.

`offset_to_indices(offset)` returns `(coordinate, in_bounds)` for a position in
`values`. `SparseTensor.indices_to_intra_offset` and
`Tensor.indices_to_offset` go the other way.

## Norms and conversions

```python
from semisparse.sptensor_ops import (
    norm, to_fully_dense, to_fully_sparse, sparse_to_dense, dense_to_sparse,
)

print(norm(x))                      # Frobenius norm of the in-bound cells

d = to_fully_dense(x)               # SparseTensor, every mode dense, one chunk
dense = sparse_to_dense(d)          # Tensor
back = dense_to_sparse(dense)       # fully dense SparseTensor again
coo = to_fully_sparse(d)            # one entry per in-bound cell
print(dense.to_string())
```

`sparse_to_dense` raises `TensorError` with `ErrCode.SHAPE_MISMATCH` if any
mode of its argument is sparse.

## Text files

A sparse tensor file holds the number of modes, then the shape, then one line
per element with its coordinates and value. `start_index` sets the base of the
coordinates, for example 1 for one-based files. `load_sparse` always returns a
fully sparse tensor, sorted by coordinate.

```python
from semisparse.sptensor_format import load_sparse, dump_sparse, format_sparse

with open("tensor.tns") as fp:
    x = load_sparse(fp, 1)

with open("copy.tns", "w") as fp:
    dump_sparse(x, fp, 1)

print(format_sparse(x, True, 10))   # list chunks, at most 10 per listing
print(format_sparse(x, False))      # nested brackets, missing cells as zeros
```

Dense tensors have `Tensor.dump(fp)` and `Tensor.load(fp)`. After the mode
count and the shape, these write and read the values in row order.
`Tensor.to_string(limit)` prints the tensor as nested brackets.

## Timing

```python
from semisparse.timer import Timer, tick, tock

tick()
# ... work ...
tock("work")      # prints the elapsed time to stderr and returns it

with Timer() as t:
    ...           # timed block
print(t.elapsed_time())
```

## Errors

Failures raise `semisparse.errors.TensorError`, which carries an `ErrCode` in
its `code` attribute. Failed or malformed reads and writes raise
`TensorOSError`. A `Timer` created for a CUDA device raises `CUDAError`.

## What the package does not do

All computation runs on the CPU with numpy. `semisparse.device` lists the host
processor only, and nothing runs on a GPU. The package stores, converts, prints
and reads and writes tensors, and computes their norm. It has no tensor
algorithms beyond that, such as tensor-times-matrix products, unfolding, SVD or
Tucker decomposition. It has no command-line program.