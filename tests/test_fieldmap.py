import pytest

from minihttpd.fieldmap import INITIAL_CAPACITY, FieldMap, djb2


def test_djb2_of_empty_is_seed():
    assert djb2(b"") == 5381


def test_djb2_accepts_str_and_bytes_alike():
    assert djb2("Host") == djb2(b"Host")


def test_djb2_fits_in_64_bits():
    assert 0 <= djb2(b"x" * 1000) < 2**64


def test_empty_map_has_no_capacity():
    fm = FieldMap()
    assert fm.capacity() == 0
    assert len(fm) == 0
    assert list(fm) == []


def test_first_insert_allocates_initial_capacity():
    fm = FieldMap()
    fm[b"Host"] = b"example.com"
    assert fm.capacity() == INITIAL_CAPACITY == 256


def test_set_and_get():
    fm = FieldMap()
    fm[b"Host"] = b"example.com"
    fm[b"Accept"] = b"*/*"
    assert fm[b"Host"] == b"example.com"
    assert fm[b"Accept"] == b"*/*"
    assert len(fm) == 2


def test_overwrite_keeps_single_entry():
    fm = FieldMap()
    fm[b"Host"] = b"a"
    fm[b"Host"] = b"b"
    assert fm[b"Host"] == b"b"
    assert len(fm) == 1


def test_missing_key_raises():
    fm = FieldMap()
    fm[b"Host"] = b"a"
    with pytest.raises(KeyError):
        fm[b"Other"]
    assert b"Other" not in fm
    assert fm[b"Host"] == b"a"
    assert len(fm) == 1


def test_missing_key_on_empty_map_raises():
    fm = FieldMap()
    with pytest.raises(KeyError):
        fm[b"Host"]
    assert len(fm) == 0


def test_contains():
    fm = FieldMap()
    fm[b"Host"] = b"a"
    assert b"Host" in fm
    assert "Host" in fm
    assert b"host" not in fm
    assert 42 not in fm


def test_iteration_matches_items():
    fm = FieldMap()
    for i in range(20):
        fm[f"k{i}".encode()] = str(i).encode()
    assert list(fm) == [k for k, _ in fm.items()]
    assert dict(fm.items()) == {f"k{i}".encode(): str(i).encode() for i in range(20)}


def test_growth_at_load_factor():
    fm = FieldMap()
    threshold = INITIAL_CAPACITY * 3 // 4
    for i in range(threshold):
        fm[f"key-{i}".encode()] = b"v"
    assert fm.capacity() == INITIAL_CAPACITY
    fm[b"one-more"] = b"v"
    assert fm.capacity() == INITIAL_CAPACITY * 2
    assert len(fm) == threshold + 1
    assert all(fm[f"key-{i}".encode()] == b"v" for i in range(threshold))


def test_reserve_preserves_entries():
    fm = FieldMap()
    fm[b"a"] = b"1"
    fm[b"b"] = b"2"
    fm.reserve(1000)
    assert fm.capacity() >= 1000
    assert fm.capacity() & (fm.capacity() - 1) == 0
    assert fm[b"a"] == b"1"
    assert fm[b"b"] == b"2"
    assert len(fm) == 2


def test_reserve_smaller_does_nothing():
    fm = FieldMap()
    fm[b"a"] = b"1"
    fm.reserve(10)
    assert fm.capacity() == INITIAL_CAPACITY


def test_mapping_get_default():
    fm = FieldMap()
    fm[b"a"] = b"1"
    assert fm.get(b"a") == b"1"
    assert fm.get(b"zz", b"none") == b"none"