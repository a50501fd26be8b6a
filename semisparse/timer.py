"""Wall-clock timers for measuring computation on a device."""

from __future__ import annotations

import sys
import time

from . import device as _device
from .errors import CUDAError


class Timer:
    """Measures elapsed time between :meth:`start` and :meth:`stop`."""

    def __init__(self, device: int | None = None):
        self.device = _device.CPU if device is None else device
        if isinstance(_device.DEVICES[self.device], _device.CudaDevice):
            raise CUDAError()
        self._start_ns = 0
        self._stop_ns = 0

    def start(self) -> None:
        self._start_ns = time.perf_counter_ns()

    def stop(self) -> None:
        self._stop_ns = time.perf_counter_ns()

    def elapsed_time(self) -> float:
        """Seconds between the last start and stop."""
        return (self._stop_ns - self._start_ns) * 1e-9

    def print_elapsed_time(self, name: str) -> float:
        """Report the elapsed time on stderr and return it."""
        elapsed = self.elapsed_time()
        device_name = _device.DEVICES[self.device].name
        sys.stderr.write(f'[{name}]: {elapsed:.9f} s spent on device "{device_name}"\n')
        sys.stderr.flush()
        return elapsed

    def __enter__(self) -> Timer:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()


_default_timer = Timer()


def tick() -> None:
    """Start the shared default timer."""
    _default_timer.start()


def tock(name: str | None = None) -> float:
    """Stop the shared default timer, optionally report it, and return seconds."""
    _default_timer.stop()
    if name is None:
        return _default_timer.elapsed_time()
    return _default_timer.print_elapsed_time(name)