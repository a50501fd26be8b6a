import io

import pytest

from semisparse.errors import TensorError, TensorOSError
from semisparse.sptensor import SparseTensor
from semisparse.sptensor_format import dump_sparse, format_sparse, load_sparse


def _sparse_3x4():
    tensor = SparseTensor([3, 4], [False, False])
    tensor.append([0, 1], 1.5)
    tensor.append([2, 3], -2.0)
    return tensor


def _semi_sparse():
    tensor = SparseTensor([2, 3], [False, True])
    tensor.append([1, 0], [1.0, 2.0, 3.0, 0, 0, 0, 0, 0])
    return tensor


def _entries(tensor):
    result = {}
    for offset in range(tensor.num_chunks * tensor.chunk_size):
        coord, inbound = tensor.offset_to_indices(offset)
        if inbound:
            result[tuple(coord)] = float(tensor.values[offset])
    return result


def test_dump_fully_sparse_text():
    buf = io.StringIO()
    dump_sparse(_sparse_3x4(), buf)
    assert buf.getvalue() == "2\n3\t4\n0\t1\t 1.5\n2\t3\t-2\n"


def test_dump_load_round_trip():
    original = _sparse_3x4()
    buf = io.StringIO()
    dump_sparse(original, buf)
    buf.seek(0)
    loaded = load_sparse(buf)
    assert loaded.shape == original.shape
    assert loaded.num_chunks == 2
    assert _entries(loaded) == _entries(original)


def test_round_trip_with_start_index():
    original = _sparse_3x4()
    buf = io.StringIO()
    dump_sparse(original, buf, start_index=1)
    lines = buf.getvalue().splitlines()
    assert lines[2].split("\t")[:2] == ["1", "2"]
    buf.seek(0)
    loaded = load_sparse(buf, start_index=1)
    assert _entries(loaded) == _entries(original)


def test_load_sorts_elements():
    text = "2\n3 3\n2 0 5\n0 2 1\n1 1 3\n"
    tensor = load_sparse(io.StringIO(text))
    rows = [int(tensor.indices[0][i]) for i in range(tensor.num_chunks)]
    cols = [int(tensor.indices[1][i]) for i in range(tensor.num_chunks)]
    assert list(zip(rows, cols)) == sorted(zip(rows, cols))
    assert _entries(tensor) == {(0, 2): 1.0, (1, 1): 3.0, (2, 0): 5.0}


def test_load_ignores_truncated_last_record():
    tensor = load_sparse(io.StringIO("2\n3 4\n0 1 1.0\n2"))
    assert tensor.num_chunks == 1
    assert _entries(tensor) == {(0, 1): 1.0}


def test_load_rejects_garbage():
    with pytest.raises(TensorOSError):
        load_sparse(io.StringIO("2\n3 4\n0 1 x\n"))


def test_load_rejects_missing_header():
    with pytest.raises(TensorOSError):
        load_sparse(io.StringIO(""))
    with pytest.raises(TensorOSError):
        load_sparse(io.StringIO("2\n3\n"))


def test_load_rejects_coordinate_below_start_index():
    with pytest.raises(TensorError):
        load_sparse(io.StringIO("1\n3\n0 1.0\n"), start_index=1)


def test_dump_semi_sparse_only_inbound_cells():
    buf = io.StringIO()
    dump_sparse(_semi_sparse(), buf)
    lines = buf.getvalue().splitlines()
    assert len(lines) == 2 + 3
    buf.seek(0)
    loaded = load_sparse(buf)
    assert _entries(loaded) == {(1, 0): 1.0, (1, 1): 2.0, (1, 2): 3.0}


def test_format_sparse_listing():
    tensor = SparseTensor([2], [False])
    tensor.append([1], 3.0)
    assert format_sparse(tensor, True) == (
        "SparseTensor(\n  shape = [2], strides = [1],\n  is_dense = [0],\n"
        "  dense_order = [], sparse_order = [0],\n  values[1x1] = {\n"
        "    (1): [ 3.000000]\n  }\n)"
    )


def test_format_nested_fills_placeholders():
    tensor = SparseTensor([2], [False])
    tensor.append([1], 3.0)
    assert "    [ 0.000000,  3.000000]\n" in format_sparse(tensor, False)


def test_format_sparse_limit_truncates():
    text = format_sparse(_sparse_3x4(), True, limit=1)
    assert ",\n    ..." in text
    assert "-2.000000" not in text


def test_format_semi_sparse_chunks_show_dense_modes():
    text = format_sparse(_semi_sparse(), True)
    assert "(1, :)" in text
    assert "values[1x8]" in text


def test_format_semi_sparse_nested():
    text = format_sparse(_semi_sparse(), False)
    assert text.count(" 0.000000") == 3
    for value in ("1.000000", "2.000000", "3.000000"):
        assert value in text
    assert text.index("1.000000") < text.index("2.000000") < text.index("3.000000")


def test_format_empty_tensor_prints_zeros():
    tensor = SparseTensor([2, 2], [False, False])
    text = format_sparse(tensor, False)
    assert text.count("0.000000") == 4


def test_format_zero_sized_mode_terminates():
    tensor = SparseTensor([2, 0], [False, False])
    text = format_sparse(tensor, False)
    assert text.count("[]") == 2
    assert text.endswith("  }\n)")


def test_format_without_modes_has_empty_body():
    tensor = SparseTensor()
    text = format_sparse(tensor, False)
    assert text.endswith("values[0x0] = {\n  }\n)")