#!/usr/bin/env python3
"""
Planet connectivity: nearest-neighbour lanes built from 3D positions,
followed by repair passes that leave every planet reachable.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Set, Tuple

import numpy as np
from scipy.spatial.distance import cdist  # type: ignore

from crusade.models import CAMPAIGN_CONFIG, Planet

CONNECTION_MAX_PER_PLANET: int = CAMPAIGN_CONFIG.galaxy_modifiers.connection_max_per_planet
CONNECTION_DISTANCE: float = CAMPAIGN_CONFIG.galaxy_modifiers.connection_distance


class ConnectivityGraph:
    """Undirected adjacency stored on the planets themselves (``Planet.connections``)."""

    def __init__(
        self,
        planets: Dict[str, Planet],
        max_per_planet: int = CONNECTION_MAX_PER_PLANET,
        max_distance: float = CONNECTION_DISTANCE,
    ) -> None:
        self.planets = planets
        self.max_per_planet = max_per_planet
        self.max_distance = max_distance

    # ---------- primitives ----------

    def add_connection(self, id1: str, id2: str) -> bool:
        if id1 == id2:
            return False
        p1 = self.planets.get(id1)
        p2 = self.planets.get(id2)
        if p1 is None or p2 is None:
            return False
        p1.add_connection(id2)
        p2.add_connection(id1)
        return True

    def remove_connection(self, id1: str, id2: str) -> bool:
        if id1 == id2:
            return False
        p1 = self.planets.get(id1)
        p2 = self.planets.get(id2)
        if p1 is None or p2 is None:
            return False
        p1.remove_connection(id2)
        p2.remove_connection(id1)
        return True

    def toggle_connection(self, id1: str, id2: str) -> Optional[str]:
        """Returns 'added' or 'removed', or None when nothing could change."""
        if id1 == id2:
            return None
        p1 = self.planets.get(id1)
        if p1 is None or id2 not in self.planets:
            return None
        if p1.has_connection(id2):
            self.remove_connection(id1, id2)
            return "removed"
        self.add_connection(id1, id2)
        return "added"

    def edges(self) -> List[Tuple[str, str]]:
        lanes: Set[Tuple[str, str]] = set()
        for planet in self.planets.values():
            for other in planet.connections:
                edge = (planet.id, other) if planet.id < other else (other, planet.id)
                lanes.add(edge)
        return sorted(lanes)

    # ---------- generation ----------

    def generate(self) -> None:
        """
        Rebuild all lanes. Each planet links to up to ``max_per_planet`` of its
        nearest neighbours closer than ``max_distance``; isolated planets and
        unreachable planets are then patched in.
        """
        planets = list(self.planets.values())
        for planet in planets:
            planet.connections.clear()
        if len(planets) < 2:
            return

        dist = self._distance_matrix(planets)

        for i, planet in enumerate(planets):
            order = [j for j in np.argsort(dist[i], kind="stable") if j != i]
            for j in order[: self.max_per_planet]:
                if dist[i, j] < self.max_distance:
                    self.add_connection(planet.id, planets[j].id)

        self._repair_isolated(planets)
        self._repair_connectivity(planets, dist)

        print(
            f"[crusade] lanes generated: planets={len(planets)} lanes={len(self.edges())}"
        )

    def _distance_matrix(self, planets: List[Planet]) -> np.ndarray:
        points = np.array([p.position.as_tuple() for p in planets], dtype=float)
        dist = cdist(points, points)
        np.fill_diagonal(dist, np.inf)
        return dist

    def _repair_isolated(self, planets: List[Planet]) -> None:
        for planet in planets:
            if not planet.connections:
                self._link_to_nearest(planet, planets)

    def _repair_connectivity(self, planets: List[Planet], dist: np.ndarray) -> None:
        index = {p.id: i for i, p in enumerate(planets)}
        visited = self.reachable_from(planets[0].id)
        if len(visited) == len(planets):
            return

        # every unreached planet links to its nearest planet overall
        for planet in planets:
            if planet.id not in visited:
                self._link_to_nearest(planet, planets)

        # nearest-neighbour links can still form islands; bridge each one
        # to the reached set through the shortest available lane
        visited = self.reachable_from(planets[0].id)
        while len(visited) < len(planets):
            reached = [index[pid] for pid in visited]
            unreached = [i for i in range(len(planets)) if planets[i].id not in visited]
            sub = dist[np.ix_(unreached, reached)]
            u, r = np.unravel_index(int(np.argmin(sub)), sub.shape)
            self.add_connection(planets[unreached[u]].id, planets[reached[r]].id)
            visited = self.reachable_from(planets[0].id)

    def _link_to_nearest(self, planet: Planet, candidates: List[Planet]) -> None:
        nearest = self.nearest_planet(planet, candidates)
        if nearest is not None:
            self.add_connection(planet.id, nearest.id)

    # ---------- queries ----------

    def reachable_from(self, start_id: str) -> Set[str]:
        if start_id not in self.planets:
            return set()
        visited = {start_id}
        queue = deque([start_id])
        while queue:
            current = queue.popleft()
            for neigh in self.planets[current].connections:
                if neigh in visited or neigh not in self.planets:
                    continue
                visited.add(neigh)
                queue.append(neigh)
        return visited

    def is_connected(self) -> bool:
        if not self.planets:
            return True
        start = next(iter(self.planets))
        return len(self.reachable_from(start)) == len(self.planets)

    def nearest_planet(self, planet: Planet, candidates: List[Planet]) -> Optional[Planet]:
        others = [c for c in candidates if c.id != planet.id]
        if not others:
            return None
        points = np.array([c.position.as_tuple() for c in others], dtype=float)
        dist = cdist(np.array([planet.position.as_tuple()], dtype=float), points)[0]
        return others[int(np.argmin(dist))]
