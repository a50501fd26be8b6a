from semisparse.errors import CUDAError, ErrCode, TensorError, TensorOSError


def test_errcode_values_match_documented_constants():
    assert ErrCode(0) is ErrCode.NO_ERROR
    assert ErrCode(3) is ErrCode.SHAPE_MISMATCH
    assert ErrCode(8) is ErrCode.CUDA_LIBRARY
    err = TensorError(3, "shape")
    assert err.code == ErrCode.SHAPE_MISMATCH


def test_tensor_error_carries_code_and_message():
    err = TensorError(ErrCode.SHAPE_MISMATCH, "tensor is not fully dense")
    assert err.code is ErrCode.SHAPE_MISMATCH
    assert str(err) == "tensor is not fully dense"


def test_tensor_error_is_runtime_error():
    err = TensorError(ErrCode.VALUE_ERROR, "bad value")
    assert isinstance(err, RuntimeError)
    assert err.code == ErrCode.VALUE_ERROR
    assert str(err) == "bad value"


def test_unknown_numeric_code_is_kept():
    err = TensorError(99, "odd")
    assert err.code == 99


def test_os_error_is_tensor_error():
    err = TensorOSError()
    assert isinstance(err, TensorError)
    assert err.code == ErrCode.UNKNOWN


def test_cuda_error_defaults_to_cuda_code():
    err = CUDAError()
    assert isinstance(err, TensorError)
    assert err.code is ErrCode.CUDA_LIBRARY