import pytest

from worldsave.domain import WorldMap, WorldState
from worldsave.domain.entities import City, Player, Unit


def test_map_coordinates() -> None:
    world_map = WorldMap(xsize=4, ysize=3)

    assert len(world_map.tiles) == 12
    assert world_map.index_of(3, 1) == 7
    assert world_map.position_of(7) == (3, 1)
    assert world_map.contains(3, 2)
    assert not world_map.contains(4, 0)
    with pytest.raises(IndexError):
        world_map.tile_at(-1, 0)
    assert [(x, y) for x, y, _tile in world_map.iterate()][:5] == [(0, 0), (1, 0), (2, 0), (3, 0), (0, 1)]


def test_map_rejects_bad_dimensions() -> None:
    with pytest.raises(ValueError):
        WorldMap(xsize=0, ysize=3)


def test_add_player_links_relationships() -> None:
    world = WorldState()
    first = world.add_player(Player(number=0, name="A"))
    second = world.add_player(Player(number=3, name="B"))

    assert set(first.diplstates) == {0, 3}
    assert set(second.ai_love) == {0, 3}
    assert world.shuffled_players == [0, 3]
    with pytest.raises(ValueError):
        world.add_player(Player(number=3, name="C"))


def test_add_unit_attaches_to_tile_and_home_city() -> None:
    world = WorldState(map=WorldMap(xsize=2, ysize=2))
    world.add_player(Player(number=0, name="A"))
    world.add_city(0, City(id=5, x=0, y=0, name="Home"))

    world.add_unit(0, Unit(id=9, x=1, y=1, type_name="Warriors", homecity=5))

    assert world.map.tile_at(1, 1).units == [9]
    assert world.city_by_id(5).supported_units == [9]
    assert world.unit_owner(9).number == 0
    with pytest.raises(ValueError):
        world.add_unit(0, Unit(id=9, x=0, y=0, type_name="Warriors"))
    with pytest.raises(KeyError):
        world.add_city(7, City(id=6, x=0, y=0, name="Nowhere"))


def test_lookup_finds_entities_added_directly() -> None:
    world = WorldState()
    player = world.add_player(Player(number=0, name="A"))
    player.cities.append(City(id=11, x=0, y=0, name="Direct"))

    assert world.city_by_id(11).name == "Direct"
    assert world.city_owner(11) is player
    assert world.unit_by_id(99) is None
