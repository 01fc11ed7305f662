#!/usr/bin/env python3
"""
Ship registry and movement legality.

A ship may move along a lane of the connectivity graph or through an
active wormhole, unless a warp storm sits on either end of the route.
"""
from __future__ import annotations

import random
import time
from typing import Callable, Dict, List, Optional

from crusade.events import EventManager
from crusade.helper.galaxy_helpers import generate_id
from crusade.models import ActionResult, Planet, Ship


class FleetNavigator:
    def __init__(
        self,
        planets: Dict[str, Planet],
        events: EventManager,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        ships: Optional[List[Ship]] = None,
    ) -> None:
        self.planets = planets
        self.events = events
        self.rng = rng or random.Random()
        self.clock = clock
        self._ships: List[Ship] = list(ships or [])

    # ---------- registry ----------

    def all(self) -> List[Ship]:
        return list(self._ships)

    def get(self, ship_id: str) -> Optional[Ship]:
        return next((s for s in self._ships if s.id == ship_id), None)

    def by_faction(self, faction_id: str) -> List[Ship]:
        return [s for s in self._ships if s.faction_id == faction_id]

    def at_planet(self, planet_id: str) -> List[Ship]:
        return [s for s in self._ships if s.planet_id == planet_id]

    def add_ship(self, faction_id: str, planet_id: str, name: str = "Fleet") -> Ship:
        ship = Ship(
            id=generate_id(self.rng),
            faction_id=faction_id,
            planet_id=planet_id,
            name=name,
            created_at=self.clock(),
        )
        self._ships.append(ship)
        return ship

    def remove_ship(self, ship_id: str) -> bool:
        ship = self.get(ship_id)
        if ship is None:
            return False
        self._ships.remove(ship)
        return True

    def rename_ship(self, ship_id: str, new_name: str) -> bool:
        ship = self.get(ship_id)
        if ship is None:
            return False
        ship.name = new_name
        return True

    def clear(self) -> None:
        self._ships = []

    def restore(self, ships: List[Ship]) -> None:
        self._ships = list(ships)

    # ---------- movement ----------

    def move_ship(self, ship_id: str, target_planet_id: str) -> ActionResult:
        ship = self.get(ship_id)
        if ship is None:
            return ActionResult(False, "Ship not found.")

        current = self.planets.get(ship.planet_id)
        if current is None:
            return ActionResult(False, "Current planet not found.")

        target = self.planets.get(target_planet_id)
        if target is None:
            return ActionResult(False, "Target planet not found.")

        directly_connected = current.has_connection(target_planet_id)
        wormhole_connected = self.events.has_wormhole(ship.planet_id, target_planet_id)
        if not directly_connected and not wormhole_connected:
            return ActionResult(False, "Planets are not connected.")

        if self.events.is_route_blocked(ship.planet_id, target_planet_id):
            return ActionResult(False, "Route blocked by warp storm!")

        ship.planet_id = target_planet_id
        return ActionResult(True, f"Fleet moved to {target.name}", payload=ship)

    def get_valid_move_targets(self, ship_id: str) -> List[str]:
        ship = self.get(ship_id)
        if ship is None:
            return []
        current = self.planets.get(ship.planet_id)
        if current is None:
            return []

        origin = ship.planet_id
        targets: Dict[str, None] = {}  # insertion-ordered set

        for conn_id in current.connections:
            if not self.events.is_route_blocked(origin, conn_id):
                targets[conn_id] = None

        for wormhole in self.events.active_wormholes():
            if wormhole.planet_id == origin and wormhole.target_planet_id:
                other = wormhole.target_planet_id
            elif wormhole.target_planet_id == origin and wormhole.planet_id:
                other = wormhole.planet_id
            else:
                continue
            if not self.events.is_route_blocked(origin, other):
                targets[other] = None

        return list(targets)
