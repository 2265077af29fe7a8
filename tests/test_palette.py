import pytest

from png2gba.errors import CapacityExceeded
from png2gba.palette import PALETTE_SIZE, PaletteTable

KEY = 0x7C1F


def test_key_color_is_slot_zero():
    palette = PaletteTable(KEY)
    assert len(palette) == 1
    assert palette.colors == [KEY]
    assert palette.insert_or_lookup(KEY) == 0


def test_indices_follow_first_seen_order():
    palette = PaletteTable(KEY)
    assert palette.insert_or_lookup(0x0000) == 1
    assert palette.insert_or_lookup(0x001F) == 2
    assert palette.insert_or_lookup(0x0000) == 1
    assert palette.insert_or_lookup(0x03E0) == 3
    assert palette.colors == [KEY, 0x0000, 0x001F, 0x03E0]


def test_existing_color_keeps_its_index():
    palette = PaletteTable(KEY)
    first = {color: palette.insert_or_lookup(color) for color in range(100)}
    for color in reversed(range(100)):
        assert palette.insert_or_lookup(color) == first[color]


def test_insertion_is_deterministic():
    colors = [5, 9, 5, 3, 9, 12, 3]
    first, second = PaletteTable(KEY), PaletteTable(KEY)
    assert [first.insert_or_lookup(c) for c in colors] == [
        second.insert_or_lookup(c) for c in colors
    ]


def test_capacity_boundary_at_255_entries():
    palette = PaletteTable(KEY)
    for color in range(254):
        palette.insert_or_lookup(color)
    assert len(palette) == 255

    with pytest.raises(CapacityExceeded):
        palette.insert_or_lookup(1000)
    assert len(palette) == 255
    # Colors already present still resolve.
    assert palette.insert_or_lookup(0) == 1


def test_table_pads_to_all_slots():
    palette = PaletteTable(KEY)
    palette.insert_or_lookup(0x1234)
    table = palette.table()
    assert len(table) == PALETTE_SIZE
    assert table[:3] == [KEY, 0x1234, 0]
    assert set(table[2:]) == {0}


def test_copy_is_independent():
    palette = PaletteTable(KEY)
    palette.insert_or_lookup(1)
    clone = palette.copy()
    clone.insert_or_lookup(2)
    assert 2 in clone
    assert 2 not in palette
    assert len(palette) == 2
