import pytest

from roguely.core.grid import Grid
from roguely.core.random import RandomSource
from roguely.dungeon.cells import Cell
from roguely.dungeon.generator import CellularGenerator, neighbor_wall_count
from roguely.exceptions import EmptyGridError


def _gen(seed=123, **kwargs):
    return CellularGenerator(random_source=RandomSource(seed), **kwargs)


def test_same_seed_same_map():
    a = _gen(2024).generate(40, 30)
    b = _gen(2024).generate(40, 30)
    assert a == b
    assert _gen(2025).generate(40, 30) != a


def test_dimensions_rows_are_height():
    g = _gen().generate(width=20, height=10)
    assert g.rows == 10
    assert g.cols == 20


def test_cells_are_only_wall_or_floor():
    g = _gen().generate(25, 25)
    assert {v for _, _, v in g.iter_cells()} <= {Cell.WALL, Cell.FLOOR}


def test_zero_passes_is_raw_fill():
    src_a, src_b = RandomSource(9), RandomSource(9)
    raw = CellularGenerator(passes=0, random_source=src_a).generate(15, 12)
    expected = CellularGenerator(random_source=src_b).random_fill(15, 12)
    assert raw == expected


def test_fill_threshold_extremes():
    all_walls = _gen(floor_threshold=100).random_fill(8, 8)
    all_floor = _gen(floor_threshold=0).random_fill(8, 8)
    assert all_walls.count(Cell.WALL) == 64
    assert all_floor.count(Cell.FLOOR) == 64


def test_borders_are_walls_after_smoothing():
    g = _gen(77).generate(30, 20)
    for c in range(g.cols):
        assert g.get(0, c) == Cell.WALL
        assert g.get(g.rows - 1, c) == Cell.WALL
    for r in range(g.rows):
        assert g.get(r, 0) == Cell.WALL
        assert g.get(r, g.cols - 1) == Cell.WALL


def test_neighbor_count_includes_self_and_treats_border_as_wall():
    floor = Grid(3, 3, Cell.FLOOR)
    assert neighbor_wall_count(floor, 1, 1) == 8
    assert neighbor_wall_count(floor, 0, 0) == 8

    g = Grid(5, 5, Cell.FLOOR)
    assert neighbor_wall_count(g, 2, 2) == 0
    g.set(2, 2, Cell.WALL)
    assert neighbor_wall_count(g, 2, 2) == 1
    assert neighbor_wall_count(g, 1, 1) == 6


def test_single_pass_applies_more_than_four_rule():
    g = Grid(5, 5, Cell.FLOOR)
    smoothed = _gen().smooth(g, 1)
    assert smoothed.to_lines() == [
        "#####",
        "##.##",
        "#...#",
        "##.##",
        "#####",
    ]
    # input untouched
    assert g.count(Cell.FLOOR) == 25


def test_smoothing_is_stable_on_a_solid_block():
    g = Grid(6, 6, Cell.WALL)
    assert _gen().smooth(g, 3) == g


def test_invalid_dimensions():
    gen = _gen()
    with pytest.raises(EmptyGridError):
        gen.generate(0, 10)
    with pytest.raises(ValueError):
        gen.generate(-1, 10)


def test_invalid_parameters():
    with pytest.raises(ValueError):
        CellularGenerator(passes=-1)
    with pytest.raises(ValueError):
        CellularGenerator(floor_threshold=101)


def test_one_pass_follows_neighbour_count_everywhere():
    gen = _gen(404)
    raw = gen.random_fill(23, 17)
    smoothed = gen.smooth(raw, 1)
    for r, c, value in smoothed.iter_cells():
        expected = Cell.WALL if neighbor_wall_count(raw, r, c) > 4 else Cell.FLOOR
        assert value == expected, (r, c)
