"""Text serialisation and printing of semi-sparse tensors."""

from __future__ import annotations

import re
from typing import IO, Sequence

from .errors import ErrCode, TensorError, TensorOSError
from .sptensor import SparseTensor
from .utils import array_to_string

_UINT = re.compile(r"\s*\+?(\d+)")
_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)
_BLANK = re.compile(r"\s*\Z")


class _Scanner:
    """Reads whitespace-separated numbers from text, scanf style."""

    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    def _scan(self, pattern: re.Pattern[str]) -> str | None:
        match = pattern.match(self._text, self._pos)
        if match is None:
            return None
        self._pos = match.end()
        return match.group(1)

    def read_uint(self) -> int | None:
        token = self._scan(_UINT)
        return None if token is None else int(token)

    def read_float(self) -> float | None:
        token = self._scan(_FLOAT)
        return None if token is None else float(token)

    def at_end(self) -> bool:
        return _BLANK.match(self._text, self._pos) is not None


def _format_value(value: float) -> str:
    text = f"{float(value):f}"
    return " " + text if value >= 0 else text


def _compare_indices(
    i: Sequence[int], j: Sequence[int], mode_order: Sequence[int]
) -> int:
    for mode in mode_order:
        if i[mode] < j[mode]:
            return -1
        if i[mode] > j[mode]:
            return 1
    return 0


def dump_sparse(tensor: SparseTensor, fp: IO[str], start_index: int = 0) -> None:
    """Write the tensor as text: mode count, shape, then one line per element."""
    try:
        fp.write(f"{tensor.nmodes}\n")
        fp.write(f"{array_to_string(tensor.shape, chr(9))}\n")
        for offset in range(tensor.num_chunks * tensor.chunk_size):
            coord, inbound = tensor.offset_to_indices(offset)
            if not inbound:
                continue
            shifted = [index + start_index for index in coord]
            value = float(tensor.values[offset])
            fp.write(f"{array_to_string(shifted, chr(9))}\t{value: .16g}\n")
    except OSError as exc:
        raise TensorOSError(ErrCode.UNKNOWN, str(exc)) from exc


def _read_record(
    scanner: _Scanner, nmodes: int
) -> tuple[list[int], float] | None:
    coord = []
    for _ in range(nmodes):
        index = scanner.read_uint()
        if index is None:
            return None
        coord.append(index)
    value = scanner.read_float()
    if value is None:
        return None
    return coord, value


def load_sparse(fp: IO[str], start_index: int = 0) -> SparseTensor:
    """Read a fully sparse tensor in the format written by :func:`dump_sparse`.

    The elements are sorted by coordinate after loading.
    """
    try:
        text = fp.read()
    except OSError as exc:
        raise TensorOSError(ErrCode.UNKNOWN, str(exc)) from exc
    scanner = _Scanner(text)
    nmodes = scanner.read_uint()
    if nmodes is None:
        raise TensorOSError(ErrCode.UNKNOWN, "expected the number of modes")
    shape = []
    for _ in range(nmodes):
        size = scanner.read_uint()
        if size is None:
            raise TensorOSError(ErrCode.UNKNOWN, "expected the size of a mode")
        shape.append(size)

    tensor = SparseTensor(shape, [False] * nmodes)
    while (record := _read_record(scanner, nmodes)) is not None:
        coord, value = record
        if any(index < start_index for index in coord):
            raise TensorError(
                ErrCode.VALUE_ERROR,
                f"coordinate {coord} is below the start index {start_index}",
            )
        tensor.append([index - start_index for index in coord], value)
    if not scanner.at_end():
        raise TensorOSError(ErrCode.UNKNOWN, "malformed tensor element")

    tensor.sort_index()
    return tensor


def _format_chunks(tensor: SparseTensor, limit: int) -> str:
    out: list[str] = []
    for i in range(tensor.num_chunks):
        if limit != 0 and i >= limit:
            out.append(",\n    ...")
            break
        if i != 0:
            out.append(",\n")
        coord = (
            ":" if tensor.is_dense[m] else str(int(tensor.indices[m][i]))
            for m in range(tensor.nmodes)
        )
        out.append(f"    ({', '.join(coord)}): [")
        for j in range(tensor.chunk_size):
            if limit != 0 and j >= limit:
                out.append(", ...")
                break
            if j != 0:
                out.append(", ")
            out.append(_format_value(tensor.values[i * tensor.chunk_size + j]))
        out.append("]")
    if tensor.num_chunks != 0:
        out.append("\n")
    return "".join(out)


def _format_nested(tensor: SparseTensor, limit: int) -> str:
    mode_order = tensor.sparse_order + tensor.dense_order
    shape = tensor.shape
    nonzero_modes = 0
    for mode in mode_order:
        if shape[mode] == 0:
            break
        nonzero_modes += 1
    has_empty_mode = nonzero_modes != tensor.nmodes
    if has_empty_mode:
        nonzero_modes += 1

    out: list[str] = []
    i = 0
    level = 0
    first_in_level = False
    coord = [0] * tensor.nmodes
    next_coord, inbound = tensor.offset_to_indices(i)
    # Without an empty mode every cell is printed, as a placeholder if missing.
    active = inbound or not has_empty_mode

    while True:
        if level != nonzero_modes:
            if level != 0:
                out.append(",\n")
            out.append(" " * (level + 4))
            out.append("[" * (nonzero_modes - level))
            level = nonzero_modes
            first_in_level = True
        mode = mode_order[level - 1]

        coord_compare = _compare_indices(next_coord, coord, mode_order)

        if active:
            if coord_compare >= 0:
                if first_in_level:
                    first_in_level = False
                else:
                    out.append(", ")
                if coord_compare == 0:
                    out.append(_format_value(tensor.values[i]))
                    i += 1
                    next_coord, _ = tensor.offset_to_indices(i)
                else:
                    out.append(" 0.000000")
                coord[mode] += 1
            else:
                i += 1
                next_coord, _ = tensor.offset_to_indices(i)
                continue

        while level != 0:
            if limit != 0 and coord[mode] >= limit:
                out.append(", ...")
            elif coord[mode] < shape[mode]:
                break
            coord[mode] = 0
            level -= 1
            out.append("]")
            if level == 0:
                break
            mode = mode_order[level - 1]
            coord[mode] += 1

        if level == 0:
            break
    out.append("\n")
    return "".join(out)


def format_sparse(
    tensor: SparseTensor, sparse_format: bool = True, limit: int = 0
) -> str:
    """Render the tensor's layout and values.

    With ``sparse_format`` each stored chunk is listed with its coordinate;
    otherwise the tensor is printed as nested brackets with missing cells as
    zeros.  A non-zero ``limit`` truncates each listing.
    """
    parts = [
        "SparseTensor(\n  shape = [",
        array_to_string(tensor.shape),
        "], strides = [",
        array_to_string(tensor.strides),
        "],\n  is_dense = [",
        array_to_string(tensor.is_dense),
        "],\n  dense_order = [",
        array_to_string(tensor.dense_order),
        "], sparse_order = [",
        array_to_string(tensor.sparse_order),
        f"],\n  values[{tensor.num_chunks}x{tensor.chunk_size}] = {{\n",
    ]
    if sparse_format:
        parts.append(_format_chunks(tensor, limit))
    elif tensor.nmodes != 0:
        parts.append(_format_nested(tensor, limit))
    parts.append("  }\n)")
    return "".join(parts)