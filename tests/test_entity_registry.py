import logging

import pytest

from roguely.core.geometry import Direction, Point
from roguely.ecs import POSITION, Component, Entity, EntityGroupName, EntityRegistry, PropertyBag


def _props(x, y, **extra):
    props = {POSITION: {"x": x, "y": y}}
    props.update(extra)
    return props


@pytest.fixture()
def registry():
    reg = EntityRegistry()
    reg.create_group(EntityGroupName.PLAYER)
    reg.create_group(EntityGroupName.MOBS)
    reg.create_entity_in_group("player", "player", _props(5, 5, health_component={"health": 100}))
    reg.create_entity_in_group("mobs", "rat", _props(6, 5))
    reg.create_entity_in_group("mobs", "bat", _props(1, 1))
    return reg


# ---- Entities and components ------------------------------------------------

def test_entity_ids_are_unique_and_increasing():
    a, b, c = Entity("a"), Entity("a"), Entity()
    assert a.id < b.id < c.id
    assert c.name == "unnamed entity"
    assert a.full_name == f"a-{a.id}"


def test_property_bag_deep_copies_input():
    source = {"stats": {"hp": 3}}
    bag = PropertyBag("props", source)
    source["stats"]["hp"] = 0
    assert bag["stats"]["hp"] == 3
    assert bag.to_dict() == {"stats": {"hp": 3}}


def test_property_bag_missing_property_message():
    bag = PropertyBag("props")
    with pytest.raises(KeyError, match="Property does not exist: speed"):
        bag.get_property("speed")
    bag.set_property("speed", 2)
    assert bag.get_property("speed") == 2


def test_component_lookup_by_kind_and_name():
    class Tag(Component):
        pass

    e = Entity("hero")
    first, second = Tag("flag"), Tag("mark")
    bag = PropertyBag("props", _props(0, 0))
    e.add_components([first, bag, second])

    assert e.component_count == 3
    assert e.find_first_component_by_type(Tag) is first
    assert e.find_first_component_by_name(Tag, "mark") is second
    assert e.find_components_by_type(Tag) == [first, second]
    assert e.find_components_by_type(Tag, lambda t: t.name == "flag") == [first]
    assert e.find_components_by_name(Tag, "nope") == []
    assert e.properties is bag
    assert e.position == Point(0, 0)


def test_component_removal_is_by_identity():
    e = Entity("x")
    a, b = PropertyBag("p"), PropertyBag("p")
    e.add_components([a, b])
    assert e.remove_component(b) is True
    assert e.components == [a]
    assert e.remove_component(b) is False
    assert e.remove_components([a, b]) == 1
    assert e.component_count == 0


def test_for_each_and_clear_components():
    e = Entity("x", [PropertyBag("a"), PropertyBag("b")])
    names = []
    e.for_each_component(lambda c: names.append(c.name))
    assert names == ["a", "b"]
    e.clear_components()
    assert e.components == []
    assert e.position is None


# ---- Groups ---------------------------------------------------------------------

def test_duplicate_groups_allowed_lookup_hits_first():
    reg = EntityRegistry()
    first = reg.create_group("loot")
    reg.create_group("loot")
    assert reg.group_names() == ["loot", "loot"]
    assert reg.get_group("loot") is first


def test_add_entity_creates_missing_group():
    reg = EntityRegistry()
    e = reg.add_entity("items", Entity.with_properties("potion", _props(2, 2)))
    assert reg.get_entities_in_group("items") == [e]
    assert len(reg) == 1


def test_create_entity_in_unknown_group_returns_none():
    reg = EntityRegistry()
    assert reg.create_entity_in_group("nope", "ghost") is None
    assert len(reg) == 0


def test_remove_entity(registry):
    rat_id = registry.get_entity_id_by_name("mobs", "rat")
    removed = registry.remove_entity("mobs", rat_id)
    assert removed.name == "rat"
    assert registry.get_entity_by_id("mobs", rat_id) is None
    assert registry.remove_entity("mobs", rat_id) is None
    assert registry.remove_entity("nope", rat_id) is None


def test_lookups_never_raise(registry):
    assert registry.find_entity("nope", lambda e: True) is None
    assert registry.find_entities("nope", lambda e: True) == []
    assert registry.get_entity_by_name("mobs", "dragon") is None
    assert registry.get_entity_id_by_name("mobs", "dragon") is None
    assert [e.name for e in registry.find_entities("mobs", lambda e: True)] == ["rat", "bat"]


def test_for_each_entity_visits_all(registry):
    seen = []
    registry.for_each_entity(lambda e: seen.append(e.name))
    assert seen == ["player", "rat", "bat"]


# ---- Component values ------------------------------------------------------------

def test_component_values(registry):
    assert registry.get_component_value("player", "player", "health_component", "health") == 100
    assert registry.set_component_value("player", "player", "health_component", "health", 80) is True
    assert registry.get_component_value("player", "player", "health_component", "health") == 80
    assert registry.get_component_value("player", "player", "mana_component", "mana", default=-1) == -1
    assert registry.set_component_value("player", "player", "mana_component", "mana", 5) is False
    assert registry.set_component_value("player", "ghost", "health_component", "health", 5) is False


def test_remove_component_section(registry):
    assert registry.remove_component("player", "player", "health_component") is True
    assert registry.remove_component("player", "player", "health_component") is False
    assert registry.get_component_value("player", "player", "health_component", "health") is None


# ---- Spatial queries -------------------------------------------------------------

def test_is_point_unique(registry):
    assert not registry.is_point_unique(Point(5, 5))
    assert not registry.is_point_unique(Point(1, 1))
    assert registry.is_point_unique(Point(0, 0))
    assert [e.name for e in registry.entities_at(6, 5)] == ["rat"]


def test_entities_without_position_are_ignored():
    reg = EntityRegistry()
    reg.add_entity("other", Entity("ghost"))
    assert reg.is_point_unique(Point(0, 0))
    assert reg.entities_in_viewport(lambda x, y: True) == {}


def test_overlapping_point_callback(registry):
    calls = []
    count = registry.for_each_overlapping_point("player", 6, 5, lambda full, name, bag: calls.append((full, name)))
    rat = registry.get_entity_by_name("mobs", "rat")
    assert count == 1
    assert calls == [(rat.full_name, "rat")]
    assert registry.for_each_overlapping_point("player", 5, 5, lambda *a: calls.append(a)) == 0


def test_overlapping_point_callback_errors_are_logged(registry, caplog):
    registry.create_entity_in_group("mobs", "rat", _props(6, 5))
    seen = []

    def callback(full_name, name, bag):
        seen.append(full_name)
        raise RuntimeError("boom")

    with caplog.at_level(logging.ERROR, logger="roguely.ecs.registry"):
        count = registry.for_each_overlapping_point("player", 6, 5, callback)
    assert count == 2
    assert len(seen) == 2
    assert "Overlap callback failed" in caplog.text


def test_blocked_points(registry):
    hit = registry.blocked_points("mobs", 5, 5, "right")
    assert hit is not None
    assert hit.entity_name == "rat"
    assert hit.entity_position == Point(6, 5)
    assert hit.direction is Direction.RIGHT
    assert registry.blocked_points("mobs", 5, 5, Direction.LEFT) is None
    assert registry.blocked_points("nope", 5, 5, "right") is None
    with pytest.raises(ValueError):
        registry.blocked_points("mobs", 5, 5, "diagonal")


def test_entities_in_viewport(registry):
    inside = registry.entities_in_viewport(lambda x, y: x >= 5)
    player = registry.get_entity_by_name("player", "player")
    rat = registry.get_entity_by_name("mobs", "rat")
    assert set(inside) == {player.full_name, rat.full_name}
    entry = inside[rat.full_name]
    assert (entry.group_name, entry.name, entry.entity) == ("mobs", "rat", rat)
