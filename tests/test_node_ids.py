import pytest

from node_ids import dash_key, pack_cell, parse_dash_key, unpack_cell


def test_dash_key():
    assert dash_key(3, 14) == "3-14"
    assert parse_dash_key("3-14") == (3, 14)


@pytest.mark.parametrize("key", ["3", "3-4-5", "a-b", ""])
def test_parse_dash_key_rejects_malformed(key):
    with pytest.raises(ValueError):
        parse_dash_key(key)


def test_pack_cell_layout():
    assert pack_cell(1, 2) == (1 << 16) | 2
    assert pack_cell(0xFFFF, 0xFFFF) == 0xFFFFFFFF
    assert unpack_cell(pack_cell(640, 12)) == (640, 12)


@pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (0x10000, 0), (0, 0x10000)])
def test_pack_cell_rejects_out_of_range(x, y):
    with pytest.raises(ValueError):
        pack_cell(x, y)


def test_unpack_cell_rejects_out_of_range():
    with pytest.raises(ValueError):
        unpack_cell(-1)
    with pytest.raises(ValueError):
        unpack_cell(1 << 32)
