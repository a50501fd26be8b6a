"""Error codes and exception types raised by the tensor library."""

from __future__ import annotations

from enum import IntEnum


class ErrCode(IntEnum):
    """Numeric error categories carried by :class:`TensorError`."""

    NO_ERROR = 0
    UNKNOWN = 1
    BUILD_CONFIG = 2
    SHAPE_MISMATCH = 3
    VALUE_ERROR = 4
    ZERO_DIVISION = 5
    BLAS_LIBRARY = 6
    LAPACK_LIBRARY = 7
    CUDA_LIBRARY = 8


class TensorError(RuntimeError):
    """Base error of the library, tagged with an :class:`ErrCode`."""

    def __init__(self, code: int = ErrCode.UNKNOWN, message: str = "Unknown error"):
        super().__init__(message)
        try:
            self.code: int = ErrCode(code)
        except ValueError:
            self.code = int(code)
        self.message = message

    def __str__(self) -> str:
        return self.message


class TensorOSError(TensorError):
    """An I/O or operating-system level failure."""

    def __init__(self, code: int = ErrCode.UNKNOWN, message: str = "Operating system error"):
        super().__init__(code, message)


class CUDAError(TensorError):
    """A failure related to CUDA support or the CUDA runtime."""

    def __init__(
        self,
        code: int = ErrCode.CUDA_LIBRARY,
        message: str = "CUDA support is not available in this build",
    ):
        super().__init__(code, message)