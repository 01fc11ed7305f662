#!/usr/bin/env python3
"""
Per-turn economy: harvesting owned planets and auto-distributing the
faction pools.
"""
from __future__ import annotations

import random
from typing import Any, Dict, List, Optional

import numpy as np

from crusade.helper.resource_helpers import (
    PlayerResources,
    add_resources,
    total_by_resource,
    wallet_for,
)
from crusade.models import (
    CAMPAIGN_CONFIG,
    AutoDistributionConfig,
    CustomDistributionMode,
    DistributionMode,
    Planet,
)

HARVEST_CFG = CAMPAIGN_CONFIG.harvest_modifiers
TRADE_HUB_MULTIPLIER: float = HARVEST_CFG.trade_hub_multiplier
MINING_UPGRADE_BONUS: float = HARVEST_CFG.mining_upgrade_bonus

PlanetModifiers = Dict[str, Dict[str, Any]]  # planet id -> modifier key -> value


class ResourceDistributionEngine:
    def __init__(
        self,
        planets: Dict[str, Planet],
        player_resources: PlayerResources,
        planet_modifiers: Optional[PlanetModifiers] = None,
        config: Optional[AutoDistributionConfig] = None,
        custom_modes: Optional[Dict[str, CustomDistributionMode]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.planets = planets
        self.player_resources = player_resources
        self.planet_modifiers: PlanetModifiers = (
            planet_modifiers if planet_modifiers is not None else {}
        )
        self.config = config or AutoDistributionConfig()
        self.custom_modes: Dict[str, CustomDistributionMode] = (
            custom_modes if custom_modes is not None else {}
        )
        self.rng = rng or random.Random()

    # ---------- configuration ----------

    def set_auto_distribution(self, enabled: bool, mode: Optional[str] = None) -> None:
        self.config.enabled = enabled
        if mode is not None:
            self.config.mode = getattr(mode, "value", mode)

    def set_manual_allocation(self, allocation: Dict[str, Dict[str, float]]) -> None:
        self.config.manual_allocation = {
            faction: dict(amounts) for faction, amounts in allocation.items()
        }

    def add_custom_mode(
        self, name: str, allocation: Dict[str, Dict[str, float]], description: str = ""
    ) -> CustomDistributionMode:
        mode = CustomDistributionMode(
            name=name,
            allocation={faction: dict(amounts) for faction, amounts in allocation.items()},
            description=description,
        )
        self.custom_modes[name] = mode
        return mode

    def remove_custom_mode(self, name: str) -> bool:
        if name not in self.custom_modes:
            return False
        del self.custom_modes[name]
        if self.config.mode == name:
            self.config.mode = DistributionMode.EQUAL.value
        return True

    def get_planet_modifier(self, planet_id: str, key: str) -> Any:
        return self.planet_modifiers.get(planet_id, {}).get(key)

    # ---------- harvest ----------

    def harvest(self) -> Dict[str, Dict[str, float]]:
        """Add every owned planet's yield to its owner's pool; returns what was added."""
        harvested: Dict[str, Dict[str, float]] = {}
        for planet in self.planets.values():
            if not planet.owner or not planet.resources:
                continue
            trade_hub = bool(self.get_planet_modifier(planet.id, "trade_hub"))
            mining = bool(self.get_planet_modifier(planet.id, "mining_upgrade"))

            gained: Dict[str, float] = {}
            for resource, amount in planet.resources.items():
                final = amount
                if trade_hub:
                    final *= TRADE_HUB_MULTIPLIER
                if mining:
                    final += MINING_UPGRADE_BONUS
                gained[resource] = final

            add_resources(self.player_resources, planet.owner, gained)
            add_resources(harvested, planet.owner, gained)
        return harvested

    # ---------- distribution ----------

    def distribute(self) -> None:
        cfg = self.config
        if not cfg.enabled:
            return

        custom = self.custom_modes.get(cfg.mode)
        if custom is not None:
            self._apply_allocation(custom.allocation)
            return

        if cfg.manual_allocation:
            self._apply_allocation(cfg.manual_allocation)

        if cfg.mode == DistributionMode.MANUAL.value:
            return

        factions = list(self.player_resources.keys())
        if not factions:
            return
        totals = total_by_resource(self.player_resources)

        mode = cfg.mode
        if mode == DistributionMode.EQUAL.value:
            self._distribute_weighted(totals, factions, np.ones(len(factions)))
        elif mode == DistributionMode.STRATEGIC_VALUE.value:
            self._distribute_weighted(totals, factions, self._strategic_values(factions))
        elif mode == DistributionMode.TERRITORY_BASED.value:
            self._distribute_weighted(totals, factions, self._planet_counts(factions))
        elif mode == DistributionMode.RANDOM.value:
            self._distribute_randomly(totals, factions)
        elif mode == DistributionMode.NEED_BASED.value:
            counts = self._planet_counts(factions)
            self._distribute_weighted(totals, factions, counts.max() - counts + 1)
        else:
            print(f"[crusade] unknown distribution mode: {mode}")

    def _apply_allocation(self, allocation: Dict[str, Dict[str, float]]) -> None:
        for faction, amounts in allocation.items():
            add_resources(self.player_resources, faction, amounts)

    def _strategic_values(self, factions: List[str]) -> np.ndarray:
        values = {f: 0.0 for f in factions}
        for planet in self.planets.values():
            if planet.owner in values:
                values[planet.owner] += planet.strategic_value
        return np.array([values[f] for f in factions], dtype=float)

    def _planet_counts(self, factions: List[str]) -> np.ndarray:
        counts = {f: 0 for f in factions}
        for planet in self.planets.values():
            if planet.owner in counts:
                counts[planet.owner] += 1
        return np.array([counts[f] for f in factions], dtype=float)

    def _distribute_weighted(
        self, totals: Dict[str, float], factions: List[str], weights: np.ndarray
    ) -> None:
        """Overwrite each pool with floor(total * weight / sum(weights)); zero weight falls back to EQUAL."""
        weight_sum = float(weights.sum())
        if weight_sum == 0:
            weights = np.ones(len(factions))
            weight_sum = float(len(factions))

        resources = list(totals.keys())
        amounts = np.array([totals[r] for r in resources], dtype=float)
        shares = np.floor(np.outer(weights, amounts) / weight_sum)

        for i, faction in enumerate(factions):
            wallet = wallet_for(self.player_resources, faction)
            for j, resource in enumerate(resources):
                wallet[resource] = int(shares[i, j])

    def _distribute_randomly(self, totals: Dict[str, float], factions: List[str]) -> None:
        """Not a partition: the sum handed out can exceed or fall short of the total."""
        n = len(factions)
        for faction in factions:
            wallet = wallet_for(self.player_resources, faction)
            for resource, amount in totals.items():
                wallet[resource] = int(
                    np.floor(self.rng.random() * amount * 0.5) + np.floor(amount / (n * 2))
                )
