# tests/test_fleet.py
"""Ship registry and movement legality."""

import pytest

from crusade.events import build_event, create_warp_storm, create_wormhole


@pytest.fixture
def fleet(line_galaxy):
    return line_galaxy.fleet


class TestRegistry:
    def test_add_and_query(self, fleet, clock):
        ship = fleet.add_ship("red", "A")
        other = fleet.add_ship("blue", "B", name="Hammer")
        assert ship.name == "Fleet"
        assert ship.created_at == clock.now
        assert fleet.get(ship.id) is ship
        assert fleet.by_faction("blue") == [other]
        assert fleet.at_planet("A") == [ship]
        assert len(fleet.all()) == 2

    def test_rename_and_remove(self, fleet):
        ship = fleet.add_ship("red", "A")
        assert fleet.rename_ship(ship.id, "Spear") is True
        assert ship.name == "Spear"
        assert fleet.rename_ship("ghost", "x") is False
        assert fleet.remove_ship(ship.id) is True
        assert fleet.remove_ship(ship.id) is False
        assert fleet.get(ship.id) is None

    def test_clear(self, fleet):
        fleet.add_ship("red", "A")
        fleet.clear()
        assert fleet.all() == []


class TestMoveShip:
    def test_unknown_ship(self, fleet):
        result = fleet.move_ship("ghost", "B")
        assert not result.ok
        assert result.message == "Ship not found."

    def test_current_planet_missing(self, fleet):
        ship = fleet.add_ship("red", "lost")
        result = fleet.move_ship(ship.id, "B")
        assert result.message == "Current planet not found."

    def test_target_missing(self, fleet):
        ship = fleet.add_ship("red", "A")
        result = fleet.move_ship(ship.id, "nowhere")
        assert result.message == "Target planet not found."
        assert ship.planet_id == "A"

    def test_not_connected(self, fleet):
        ship = fleet.add_ship("red", "A")
        result = fleet.move_ship(ship.id, "C")
        assert not result.ok
        assert result.message == "Planets are not connected."
        assert ship.planet_id == "A"

    def test_move_along_lane(self, fleet):
        ship = fleet.add_ship("red", "A")
        result = fleet.move_ship(ship.id, "B")
        assert result.ok
        assert result.message == "Fleet moved to Planet B"
        assert ship.planet_id == "B"

    def test_blocked_by_storm_at_destination(self, line_galaxy, fleet):
        line_galaxy.events.add(create_warp_storm(line_galaxy.rng, "B"))
        ship = fleet.add_ship("red", "A")
        result = fleet.move_ship(ship.id, "B")
        assert not result.ok
        assert result.message == "Route blocked by warp storm!"
        assert ship.planet_id == "A"

    def test_wormhole_route(self, line_galaxy, fleet):
        line_galaxy.events.add(create_wormhole(line_galaxy.rng, "D", "A"))
        ship = fleet.add_ship("red", "A")
        result = fleet.move_ship(ship.id, "D")
        assert result.ok
        assert ship.planet_id == "D"

    def test_wormhole_not_open_yet(self, line_galaxy, fleet):
        line_galaxy.events.add(
            build_event(line_galaxy.rng, "WORMHOLE", "A", target_planet_id="D", start_turn=2)
        )
        ship = fleet.add_ship("red", "A")
        assert fleet.move_ship(ship.id, "D").message == "Planets are not connected."


class TestValidTargets:
    def test_direct_connections(self, fleet):
        ship = fleet.add_ship("red", "B")
        assert fleet.get_valid_move_targets(ship.id) == ["A", "C"]

    def test_storm_removes_target(self, line_galaxy, fleet):
        line_galaxy.events.add(create_warp_storm(line_galaxy.rng, "C"))
        ship = fleet.add_ship("red", "B")
        assert fleet.get_valid_move_targets(ship.id) == ["A"]

    def test_storm_at_origin_blocks_everything(self, line_galaxy, fleet):
        line_galaxy.events.add(create_warp_storm(line_galaxy.rng, "B"))
        ship = fleet.add_ship("red", "B")
        assert fleet.get_valid_move_targets(ship.id) == []

    def test_wormholes_both_directions_deduplicated(self, line_galaxy, fleet):
        rng = line_galaxy.rng
        line_galaxy.events.add(create_wormhole(rng, "B", "D"))
        line_galaxy.events.add(create_wormhole(rng, "D", "B"))
        line_galaxy.events.add(create_wormhole(rng, "A", "B"))
        ship = fleet.add_ship("red", "B")
        assert fleet.get_valid_move_targets(ship.id) == ["A", "C", "D"]

    def test_unknown_ship(self, fleet):
        assert fleet.get_valid_move_targets("ghost") == []
