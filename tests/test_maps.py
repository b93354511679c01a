import pytest

from roguely.core.geometry import Point, Size
from roguely.core.grid import Grid
from roguely.core.random import RandomSource
from roguely.dungeon.cells import Cell
from roguely.dungeon.generator import CellularGenerator
from roguely.dungeon.maps import MapCatalog, MapInfo, generate_map


def _info(name="m"):
    cells = Grid.from_lines([
        "#....",
        "..#..",
        "....#",
    ])
    return MapInfo(name, width=5, height=3, cells=cells)


def test_cell_at_uses_x_as_column():
    info = _info()
    for r, c, v in info.cells.iter_cells():
        assert info.cell_at(Point(x=c, y=r)) == v
    assert info.cell_at(Point(4, 2)) == Cell.WALL
    assert info.cell_at(Point(2, 1)) == Cell.WALL


def test_shape_mismatch_rejected():
    with pytest.raises(ValueError):
        MapInfo("bad", width=3, height=5, cells=Grid(3, 5))


def test_visibility_layer_defaults_to_unseen():
    info = _info()
    assert info.visibility.count(0) == 15
    assert info.size == Size(5, 3)


def test_is_point_blocked():
    info = _info()
    assert info.is_point_blocked(0, 0)
    assert not info.is_point_blocked(1, 0)
    assert info.is_point_blocked(-1, 0)
    assert info.is_point_blocked(5, 0)


def test_random_point_avoids_walls(seeded):
    info = _info()
    for _ in range(30):
        assert info.cell_at(info.random_point(random_source=seeded)) == Cell.FLOOR


def test_find_path_walks_floor():
    info = _info()
    path = info.find_path(Point(1, 0), Point(3, 2))
    assert path[0] == Point(1, 0) and path[-1] == Point(3, 2)
    assert len(path) == 5
    assert all(info.cell_at(p) == Cell.FLOOR for p in path)


def test_generate_map_is_deterministic_with_seeded_generator():
    a = generate_map("a", 30, 20, CellularGenerator(random_source=RandomSource(11)))
    b = generate_map("b", 30, 20, CellularGenerator(random_source=RandomSource(11)))
    assert a.cells == b.cells
    assert (a.width, a.height) == (30, 20)


def test_catalog_switch_and_remove():
    catalog = MapCatalog()
    assert catalog.current is None
    first = catalog.add(_info("first"))
    second = catalog.add(_info("second"), make_current=False)
    assert catalog.current is first
    assert catalog.names() == ["first", "second"]
    assert "second" in catalog and len(catalog) == 2

    assert catalog.switch("second") is True
    assert catalog.current is second
    assert catalog.switch("missing") is False
    assert catalog.current is second
    assert catalog.get("first") is first

    assert catalog.remove("second") is second
    assert catalog.current is None
    assert catalog.remove("second") is None


def test_supplied_visibility_layer_must_match_cells():
    with pytest.raises(ValueError):
        MapInfo("bad", width=5, height=3, cells=Grid(3, 5), visibility=Grid(5, 3))
    layer = Grid(3, 5, 0)
    assert MapInfo("ok", width=5, height=3, cells=Grid(3, 5), visibility=layer).visibility is layer
