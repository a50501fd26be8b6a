"""Computing devices known to the library."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(kw_only=True)
class Device:
    """A computing device attached to a memory node."""

    name: str = ""
    device_id: int = -1
    mem_node: int = 0


@dataclass(kw_only=True)
class CpuDevice(Device):
    """The host processor."""

    cpu_core: int = -1


@dataclass(kw_only=True)
class CudaDevice(Device):
    """A CUDA accelerator."""

    cuda_device: int = 0


CPU = 0
"""Index of the host device in :data:`DEVICES`."""

DEVICES: list[Device] = [CpuDevice(name="CPU", device_id=CPU, mem_node=0)]
"""Devices available to the process, indexed by device number."""