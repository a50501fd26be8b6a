import re
import time

import pytest

from semisparse import device as device_module
from semisparse.device import CPU, DEVICES, CpuDevice, CudaDevice
from semisparse.errors import CUDAError, ErrCode
from semisparse.timer import Timer, tick, tock


def test_elapsed_time_covers_sleep():
    timer = Timer()
    timer.start()
    time.sleep(0.01)
    timer.stop()
    assert timer.elapsed_time() >= 0.009


def test_context_manager_measures_block():
    with Timer(CPU) as timer:
        time.sleep(0.005)
    assert timer.elapsed_time() >= 0.004


def test_elapsed_time_is_monotonic_nonnegative():
    timer = Timer()
    timer.start()
    timer.stop()
    first = timer.elapsed_time()
    assert first >= 0.0
    time.sleep(0.002)
    timer.stop()
    assert timer.elapsed_time() >= first


def test_print_elapsed_time_format(capsys):
    timer = Timer()
    timer.start()
    timer.stop()
    returned = timer.print_elapsed_time("stage")
    err = capsys.readouterr().err
    name = re.escape(DEVICES[CPU].name)
    match = re.fullmatch(r'\[stage\]: (\d+\.\d{9}) s spent on device "' + name + r'"\n', err)
    assert match is not None
    assert float(match.group(1)) == pytest.approx(returned, abs=1e-9)


def test_cuda_device_is_rejected(monkeypatch):
    monkeypatch.setattr(
        device_module,
        "DEVICES",
        [
            CpuDevice(name="CPU", device_id=0, mem_node=0),
            CudaDevice(name="gpu", device_id=1, mem_node=1, cuda_device=0),
        ],
    )
    with pytest.raises(CUDAError) as info:
        Timer(1)
    assert info.value.code == ErrCode.CUDA_LIBRARY


def test_tick_tock_returns_elapsed():
    tick()
    time.sleep(0.003)
    assert tock() >= 0.002


def test_tock_with_name_reports(capsys):
    tick()
    elapsed = tock("phase")
    err = capsys.readouterr().err
    assert err.startswith("[phase]: ")
    assert elapsed >= 0.0