#!/usr/bin/env python3
"""
Campaign state and the turn pipeline.

Galaxy owns the planets, faction pools and turn counter, and wires the
subsystems (graph, events, fleets, stratagems, orders, economy) to the
same shared containers. Planets and pools are mutated in place so every
subsystem always sees the current state.
"""
from __future__ import annotations

import random
import time
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import ValidationError

from crusade import state_utils
from crusade.connectivity import ConnectivityGraph
from crusade.economy import ResourceDistributionEngine
from crusade.events import EventManager, build_event
from crusade.fleet import FleetNavigator
from crusade.helper.galaxy_helpers import (
    distance,
    generate_id,
    generate_random_planet,
    make_rng,
)
from crusade.helper.resource_helpers import PlayerResources, add_resources
from crusade.models import (
    CAMPAIGN_CONFIG,
    ActionResult,
    AutoDistributionConfig,
    CampaignEvent,
    CustomDistributionMode,
    GalacticOrder,
    GalaxyCenter,
    OrderCompletion,
    Planet,
    Sector,
    Ship,
    TurnSummary,
)
from crusade.orders import GalacticOrderStateMachine
from crusade.sectors import partition, sector_for_planet
from crusade.stratagems import StratagemResolver

GALAXY_CFG = CAMPAIGN_CONFIG.galaxy_modifiers
DEFAULT_GALAXY_SIZE: int = GALAXY_CFG.default_galaxy_size
PLANET_MIN_DISTANCE: float = GALAXY_CFG.planet_minimum_distance
PLACEMENT_NUDGE_SPAN: float = GALAXY_CFG.placement_nudge_span
INITIAL_PLANETS_PER_FACTION: int = GALAXY_CFG.initial_planets_per_faction
GALAXY_CENTER_TYPES = CAMPAIGN_CONFIG.galaxy_center_types


class Galaxy:
    def __init__(
        self,
        seed: Optional[object] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        resource_ids: Optional[List[str]] = None,
        name: str = "Crusade Campaign",
    ) -> None:
        if rng is None:
            rng, effective_seed = make_rng(seed)
            self.seed: Optional[int] = effective_seed
        else:
            self.seed = None
        self.rng = rng
        self.clock = clock
        self.resource_ids = resource_ids

        self.id = generate_id(rng)
        self.name = name
        self.turn = 1
        self.planets: Dict[str, Planet] = {}
        self.sectors: List[Sector] = []
        self.player_resources: PlayerResources = {}
        self.planet_modifiers: Dict[str, Dict[str, Any]] = {}
        self.galaxy_center = GalaxyCenter()
        self.custom_text: Dict[str, Any] = {}
        self.created_at = clock()
        self.last_modified = self.created_at

        self.graph = ConnectivityGraph(self.planets)
        self.events = EventManager()
        self.fleet = FleetNavigator(self.planets, self.events, rng=rng, clock=clock)
        self.stratagems = StratagemResolver(
            self.planets, self.player_resources, resource_ids=resource_ids
        )
        self.orders = GalacticOrderStateMachine(
            rng=rng, clock=clock, resource_ids=resource_ids
        )
        self.economy = ResourceDistributionEngine(
            self.planets, self.player_resources, self.planet_modifiers, rng=rng
        )

    def touch(self) -> None:
        self.last_modified = self.clock()

    @property
    def auto_distribution(self) -> AutoDistributionConfig:
        return self.economy.config

    @property
    def custom_distribution_modes(self) -> Dict[str, CustomDistributionMode]:
        return self.economy.custom_modes

    @property
    def current_order(self) -> Optional[GalacticOrder]:
        return self.orders.current_order

    # ---------- generation ----------

    def generate_galaxy(self, size: int = DEFAULT_GALAXY_SIZE) -> None:
        self.planets.clear()
        for _ in range(size):
            self.add_planet(generate_random_planet(self.rng))
        self.generate_connections()
        self.generate_sector_layout()
        print(
            f"[crusade] galaxy generated: planets={len(self.planets)} "
            f"sectors={len(self.sectors)} seed={self.seed}"
        )
        self.touch()

    def generate_connections(self) -> None:
        self.graph.generate()
        self.touch()

    def generate_sector_layout(self) -> None:
        self.sectors = partition(self.planets.values(), self.rng)
        self.touch()

    def get_sector_for_planet(self, planet_id: str) -> Optional[Sector]:
        return sector_for_planet(self.sectors, planet_id)

    # ---------- planets ----------

    def add_planet(self, planet: Planet) -> Planet:
        too_close = any(
            distance(planet.position, other.position) < PLANET_MIN_DISTANCE
            for other in self.planets.values()
        )
        if too_close:
            planet.position.x += (self.rng.random() - 0.5) * PLACEMENT_NUDGE_SPAN
            planet.position.z += (self.rng.random() - 0.5) * PLACEMENT_NUDGE_SPAN
        self.planets[planet.id] = planet
        self.touch()
        return planet

    def remove_planet(self, planet_id: str) -> bool:
        if planet_id not in self.planets:
            return False

        for planet in self.planets.values():
            planet.remove_connection(planet_id)
        for event in self.events.by_planet(planet_id):
            self.events.remove(event.id)
        for ship in self.fleet.at_planet(planet_id):
            self.fleet.remove_ship(ship.id)
        for sector in self.sectors:
            if planet_id in sector.planet_ids:
                sector.planet_ids.remove(planet_id)
        self.planet_modifiers.pop(planet_id, None)

        del self.planets[planet_id]
        self.touch()
        return True

    def get_planet(self, planet_id: str) -> Optional[Planet]:
        return self.planets.get(planet_id)

    def set_planet_modifier(self, planet_id: str, key: str, value: Any) -> None:
        self.planet_modifiers.setdefault(planet_id, {})[key] = value
        self.touch()

    def get_planet_modifier(self, planet_id: str, key: str) -> Any:
        return self.economy.get_planet_modifier(planet_id, key)

    def distribute_initial_planets(
        self,
        faction_ids: Sequence[str],
        planets_per_faction: int = INITIAL_PLANETS_PER_FACTION,
    ) -> Dict[str, List[str]]:
        """Hand each faction up to N distinct random planets; returns faction -> planet ids."""
        available = list(self.planets.values())
        assigned: Dict[str, List[str]] = {}
        for faction_id in faction_ids:
            picks = assigned.setdefault(faction_id, [])
            for _ in range(planets_per_faction):
                if not available:
                    break
                planet = available.pop(int(self.rng.random() * len(available)))
                planet.set_owner(faction_id, self.turn, record_history=False)
                picks.append(planet.id)
        self.touch()
        return assigned

    # ---------- connections ----------

    def add_connection(self, id1: str, id2: str) -> bool:
        added = self.graph.add_connection(id1, id2)
        if added:
            self.touch()
        return added

    def remove_connection(self, id1: str, id2: str) -> bool:
        removed = self.graph.remove_connection(id1, id2)
        if removed:
            self.touch()
        return removed

    def toggle_connection(self, id1: str, id2: str) -> Optional[str]:
        result = self.graph.toggle_connection(id1, id2)
        if result is not None:
            self.touch()
        return result

    # ---------- turn ----------

    def advance_turn(self) -> TurnSummary:
        """
        One campaign turn. The order of steps matters: distribution sees
        this turn's harvest, and an order completed by progress is never
        also force-expired.
        """
        self.turn += 1
        expired_events = self.events.advance_turn()
        harvested = self.economy.harvest()
        self.economy.distribute()
        completed_order = self.orders.update_progress()
        expired_order = self.orders.advance_expiration()
        self.stratagems.advance_turn()
        self.touch()

        print(
            f"[crusade] turn={self.turn} expired_events={len(expired_events)} "
            f"order_completed={completed_order is not None} "
            f"order_expired={expired_order is not None}"
        )
        return TurnSummary(
            turn=self.turn,
            expired_events=expired_events,
            expired_order=expired_order,
            completed_order=completed_order,
            harvested=harvested,
        )

    # ---------- stratagems ----------

    def use_stratagem(
        self, faction_id: str, stratagem_id: str, target_planet_id: Optional[str] = None
    ) -> ActionResult:
        result = self.stratagems.use(faction_id, stratagem_id, target_planet_id)
        if result.ok:
            self.touch()
        return result

    def is_stratagem_on_cooldown(self, faction_id: str, stratagem_id: str) -> bool:
        return self.stratagems.is_on_cooldown(faction_id, stratagem_id)

    # ---------- fleets ----------

    def add_ship(self, faction_id: str, planet_id: str, name: str = "Fleet") -> Ship:
        ship = self.fleet.add_ship(faction_id, planet_id, name)
        self.touch()
        return ship

    def move_ship(self, ship_id: str, target_planet_id: str) -> ActionResult:
        result = self.fleet.move_ship(ship_id, target_planet_id)
        if result.ok:
            self.touch()
        return result

    def get_valid_move_targets(self, ship_id: str) -> List[str]:
        return self.fleet.get_valid_move_targets(ship_id)

    # ---------- galactic orders ----------

    def generate_galactic_order(self) -> GalacticOrder:
        order = self.orders.generate()
        self.touch()
        return order

    def generate_specific_galactic_order(self, order_type: object) -> Optional[GalacticOrder]:
        order = self.orders.generate_specific(order_type)
        if order is not None:
            self.touch()
        return order

    def delete_galactic_order(self) -> bool:
        deleted = self.orders.delete()
        if deleted:
            self.touch()
        return deleted

    def get_available_galactic_order_types(self) -> List[Dict[str, str]]:
        return self.orders.available_order_types()

    def track_order_progress(self, order_type: object, amount: int = 1) -> bool:
        tracked = self.orders.track_progress(order_type, amount)
        if tracked:
            self.touch()
        return tracked

    def grant_order_reward(self, completion: OrderCompletion, faction_id: str) -> None:
        add_resources(self.player_resources, faction_id, completion.reward)
        self.touch()

    # ---------- economy ----------

    def set_auto_distribution(self, enabled: bool, mode: Optional[str] = None) -> None:
        self.economy.set_auto_distribution(enabled, mode)
        self.touch()

    def set_manual_allocation(self, allocation: Dict[str, Dict[str, float]]) -> None:
        self.economy.set_manual_allocation(allocation)
        self.touch()

    def add_custom_distribution_mode(
        self, name: str, allocation: Dict[str, Dict[str, float]], description: str = ""
    ) -> CustomDistributionMode:
        mode = self.economy.add_custom_mode(name, allocation, description)
        self.touch()
        return mode

    def remove_custom_distribution_mode(self, name: str) -> bool:
        removed = self.economy.remove_custom_mode(name)
        if removed:
            self.touch()
        return removed

    # ---------- events ----------

    def add_event(
        self, type: str, planet_id: Optional[str], duration: int = 3, start_turn: int = 0
    ) -> CampaignEvent:
        event = build_event(
            self.rng, type, planet_id, duration=duration, start_turn=start_turn, now=self.clock()
        )
        self.events.add(event)
        self.touch()
        return event

    def add_wormhole(
        self, planet_id1: str, planet_id2: str, duration: int = 5, start_turn: int = 0
    ) -> CampaignEvent:
        event = build_event(
            self.rng,
            "WORMHOLE",
            planet_id1,
            target_planet_id=planet_id2,
            duration=duration,
            start_turn=start_turn,
            now=self.clock(),
        )
        self.events.add(event)
        self.touch()
        return event

    # ---------- galaxy centre ----------

    def set_galaxy_center_type(self, type: str) -> bool:
        if type not in GALAXY_CENTER_TYPES:
            return False
        self.galaxy_center.type = type
        self.touch()
        return True

    def set_crusade_info(
        self,
        name: str,
        description: str,
        custom_fields: List[Dict[str, Any]],
        links: Optional[List[Dict[str, Any]]] = None,
    ) -> bool:
        self.galaxy_center.crusade_name = name
        self.galaxy_center.crusade_description = description
        self.galaxy_center.custom_fields = list(custom_fields)
        if links is not None:
            self.galaxy_center.links = list(links)
        self.touch()
        return True

    def get_galaxy_center_info(self) -> Dict[str, Any]:
        center = self.galaxy_center
        center_type = GALAXY_CENTER_TYPES.get(center.type) or GALAXY_CENTER_TYPES["EMPTY"]
        return {
            "type": center.type,
            "name": center_type.name,
            "crusade_name": center.crusade_name or center_type.name,
            "crusade_description": center.crusade_description,
            "custom_fields": list(center.custom_fields),
            "links": list(center.links),
        }

    # ---------- persistence ----------

    def save(self, store: Any) -> bool:
        try:
            ok = bool(store.save(state_utils.record_from_galaxy(self)))
        except Exception as exc:
            print(f"[crusade] failed to save campaign {self.id}: {exc}")
            return False
        if ok:
            print(f"[crusade] campaign saved: id={self.id} turn={self.turn}")
        return ok

    @classmethod
    def load(
        cls,
        store: Any,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        resource_ids: Optional[List[str]] = None,
    ) -> Optional["Galaxy"]:
        try:
            data = store.load()
        except Exception as exc:
            print(f"[crusade] failed to load campaign: {exc}")
            return None
        if data is None:
            return None
        try:
            record = state_utils.parse_record(data)
        except ValidationError as exc:
            print(f"[crusade] stored campaign is invalid: {exc.error_count()} errors")
            return None

        galaxy = cls(rng=rng, clock=clock, resource_ids=resource_ids)
        state_utils.apply_record(galaxy, record)
        print(
            f"[crusade] campaign loaded: id={galaxy.id} turn={galaxy.turn} "
            f"planets={len(galaxy.planets)}"
        )
        return galaxy
