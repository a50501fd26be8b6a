"""Dense tensors stored with padded strides."""

from __future__ import annotations

import re
from typing import IO, Sequence

import numpy as np

from .errors import ErrCode, TensorOSError
from .utils import Scalar, array_to_string, ceil_div

_UINT = re.compile(r"\s*\+?(\d+)")
_FLOAT = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)


class _Scanner:
    """Reads whitespace-separated numbers from text, scanf style."""

    def __init__(self, text: str):
        self._text = text
        self._pos = 0

    def _scan(self, pattern: re.Pattern[str], what: str) -> str:
        match = pattern.match(self._text, self._pos)
        if match is None:
            raise TensorOSError(
                ErrCode.UNKNOWN, f"expected {what} at character {self._pos}"
            )
        self._pos = match.end()
        return match.group(1)

    def read_uint(self) -> int:
        return int(self._scan(_UINT, "an unsigned integer"))

    def read_float(self) -> float:
        return float(self._scan(_FLOAT, "a number"))


def _compare_indices(
    i: Sequence[int], j: Sequence[int], mode_order: Sequence[int]
) -> int:
    for mode in mode_order:
        if i[mode] < j[mode]:
            return -1
        if i[mode] > j[mode]:
            return 1
    return 0


def _format_value(value: float) -> str:
    text = f"{float(value):f}"
    return " " + text if value >= 0 else text


class Tensor:
    """A dense tensor whose modes are padded to multiples of eight."""

    def __init__(self, shape: Sequence[int] | None = None, initialize: bool = True):
        if shape is None:
            self.shape: tuple[int, ...] = ()
            self.storage_order: tuple[int, ...] = ()
            self.strides: tuple[int, ...] = ()
            self.chunk_size = 0
            self.values = np.zeros(0, dtype=Scalar)
        else:
            self.reset(shape, initialize)

    @property
    def nmodes(self) -> int:
        return len(self.shape)

    def reset(self, shape: Sequence[int], initialize: bool = True) -> Tensor:
        """Reshape the tensor, reallocating its values."""
        self.shape = tuple(int(s) for s in shape)
        self.storage_order = tuple(range(len(self.shape)))
        self.strides = tuple(ceil_div(s, 8) * 8 for s in self.shape)
        self.chunk_size = 1
        for stride in self.strides:
            self.chunk_size *= stride
        if initialize:
            self.values = np.zeros(self.chunk_size, dtype=Scalar)
        else:
            self.values = np.empty(self.chunk_size, dtype=Scalar)
        return self

    def offset_to_indices(self, offset: int) -> tuple[list[int], bool]:
        """Return the coordinate at a storage offset and whether it is in bounds."""
        if offset >= self.chunk_size:
            return list(self.shape), False
        if self.nmodes == 0:
            return [], True
        indices = [0] * self.nmodes
        intra_chunk = offset % self.chunk_size
        for mode in reversed(self.storage_order[1:]):
            indices[mode] = intra_chunk % self.strides[mode]
            intra_chunk //= self.strides[mode]
        indices[self.storage_order[0]] = intra_chunk
        inbound = all(index < size for index, size in zip(indices, self.shape))
        return indices, inbound

    def indices_to_offset(self, indices: Sequence[int]) -> int:
        """Return the storage offset of a coordinate."""
        if self.nmodes == 0:
            return 0
        offset = indices[self.storage_order[0]]
        for mode in self.storage_order[1:]:
            offset = offset * self.strides[mode] + indices[mode]
        return offset

    def _coordinates(self):
        """Yield (coordinate, row_break_count) in row-major order."""
        coord = [0] * self.nmodes
        last = self.nmodes - 1
        while coord[0] < self.shape[0]:
            current = list(coord)
            coord[last] += 1
            breaks = 0
            tab = False
            for m in range(last, 0, -1):
                if coord[m] >= self.shape[m]:
                    breaks += 1
                    coord[m] = 0
                    coord[m - 1] += 1
                else:
                    tab = m == last
                    break
            yield current, breaks, tab

    def dump(self, fp: IO[str]) -> None:
        """Write the tensor as text: mode count, shape, then the values."""
        try:
            fp.write(f"{self.nmodes}\n")
            fp.write(f"{array_to_string(self.shape, chr(9))}\n\n")
            if self.chunk_size == 0 or self.nmodes == 0:
                return
            for coord, breaks, tab in self._coordinates():
                value = float(self.values[self.indices_to_offset(coord)])
                fp.write(f"{value: .16g}")
                fp.write("\n" * breaks)
                if tab:
                    fp.write("\t")
        except OSError as exc:
            raise TensorOSError(ErrCode.UNKNOWN, str(exc)) from exc

    @classmethod
    def load(cls, fp: IO[str]) -> Tensor:
        """Read a tensor in the format written by :meth:`dump`."""
        try:
            text = fp.read()
        except OSError as exc:
            raise TensorOSError(ErrCode.UNKNOWN, str(exc)) from exc
        scanner = _Scanner(text)
        nmodes = scanner.read_uint()
        shape = [scanner.read_uint() for _ in range(nmodes)]
        tensor = cls(shape)
        if tensor.chunk_size == 0 or nmodes == 0:
            return tensor
        for coord, _, _ in tensor._coordinates():
            tensor.values[tensor.indices_to_offset(coord)] = scanner.read_float()
        return tensor

    def to_string(self, limit: int = 0) -> str:
        """Render the tensor as nested brackets; ``limit`` truncates each mode."""
        parts = [
            "Tensor(\n  shape = [",
            array_to_string(self.shape),
            "], strides = [",
            array_to_string(self.strides),
            "],\n  storage_order = [",
            array_to_string(self.storage_order),
            f"],\n  values[{self.chunk_size}] = {{\n",
        ]
        if self.nmodes != 0:
            parts.append(self._format_body(limit))
            parts.append("\n")
        parts.append("  }\n)")
        return "".join(parts)

    def _format_body(self, limit: int) -> str:
        mode_order = self.storage_order
        shape = self.shape
        nonzero_modes = 0
        for mode in mode_order:
            if shape[mode] == 0:
                break
            nonzero_modes += 1
        if nonzero_modes != self.nmodes:
            nonzero_modes += 1

        out: list[str] = []
        i = 0
        level = 0
        first_in_level = False
        coord = [0] * self.nmodes
        next_coord, inbound = self.offset_to_indices(i)

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

            if inbound:
                if coord_compare >= 0:
                    if first_in_level:
                        first_in_level = False
                    else:
                        out.append(", ")
                    if coord_compare == 0:
                        out.append(_format_value(self.values[i]))
                        i += 1
                        next_coord, _ = self.offset_to_indices(i)
                    else:
                        out.append(" 0.000000")
                    coord[mode] += 1
                else:
                    i += 1
                    next_coord, _ = self.offset_to_indices(i)
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
        return "".join(out)

    def __str__(self) -> str:
        return self.to_string()