"""Dense and semi-sparse tensors with chunked storage, text I/O, norms and layout conversions."""

__version__ = "0.1.0"

__all__ = [
    "errors",
    "utils",
    "device",
    "timer",
    "tensor",
    "sptensor",
    "sptensor_format",
    "sptensor_ops",
]