#!/usr/bin/env python3
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from crusade.helper.galaxy_helpers import DEFAULT_RESOURCE_IDS
from crusade.helper.resource_helpers import (
    PlayerResources,
    add_resources,
    can_afford,
    spend_resources,
)
from crusade.models import (
    CAMPAIGN_CONFIG,
    ActionResult,
    Planet,
    StratagemDefinition,
    StratagemEffect,
)

TUNING = CAMPAIGN_CONFIG.stratagem_tuning
BOMBARDMENT_DAMAGE: int = TUNING.bombardment_damage
REINFORCEMENT_BONUS: int = TUNING.reinforcement_bonus
SUPPLY_DROP_AMOUNT: int = TUNING.supply_drop_amount

CooldownKey = Tuple[str, str]  # (faction id, stratagem id)

# effects that act on a planet whatever the catalog says about targeting
TARGETED_EFFECTS = {StratagemEffect.ORBITAL_BOMBARDMENT, StratagemEffect.REINFORCEMENT}


def load_catalog() -> Dict[str, StratagemDefinition]:
    return {
        sid: StratagemDefinition(
            id=sid,
            name=cfg.name,
            cost=dict(cfg.cost),
            cooldown=cfg.cooldown,
            target_required=cfg.target_required,
            effect=cfg.effect,
            description=cfg.description,
            category=cfg.category,
        )
        for sid, cfg in CAMPAIGN_CONFIG.stratagems.items()
    }


class StratagemResolver:
    """Validates and applies stratagems; owns the per-faction cooldown table."""

    def __init__(
        self,
        planets: Dict[str, Planet],
        player_resources: PlayerResources,
        resource_ids: Optional[List[str]] = None,
        catalog: Optional[Dict[str, StratagemDefinition]] = None,
        cooldowns: Optional[Dict[CooldownKey, int]] = None,
    ) -> None:
        self.planets = planets
        self.player_resources = player_resources
        self.resource_ids = resource_ids
        self.catalog = catalog if catalog is not None else load_catalog()
        self.cooldowns: Dict[CooldownKey, int] = dict(cooldowns or {})

        self._handlers: Dict[
            StratagemEffect, Callable[[str, StratagemDefinition, Optional[Planet]], str]
        ] = {
            StratagemEffect.ORBITAL_BOMBARDMENT: self._orbital_bombardment,
            StratagemEffect.REINFORCEMENT: self._reinforcement,
            StratagemEffect.SUPPLY_DROP: self._supply_drop,
            StratagemEffect.TABLETOP: self._tabletop,
        }

    # ---------- catalog / cooldowns ----------

    def all(self) -> List[StratagemDefinition]:
        return list(self.catalog.values())

    def get_cooldown(self, faction_id: str, stratagem_id: str) -> int:
        return self.cooldowns.get((faction_id, stratagem_id), 0)

    def is_on_cooldown(self, faction_id: str, stratagem_id: str) -> bool:
        return self.get_cooldown(faction_id, stratagem_id) > 0

    def advance_turn(self) -> None:
        for key, remaining in self.cooldowns.items():
            self.cooldowns[key] = max(0, remaining - 1)

    def clear_cooldowns(self) -> None:
        self.cooldowns.clear()

    # ---------- use ----------

    def can_use(self, faction_id: str, stratagem_id: str) -> ActionResult:
        stratagem = self.catalog.get(stratagem_id)
        if stratagem is None:
            return ActionResult(False, "Unknown stratagem.")

        cooldown = self.get_cooldown(faction_id, stratagem_id)
        if cooldown > 0:
            return ActionResult(False, f"On cooldown for {cooldown} more turns.")

        if not can_afford(self.player_resources, faction_id, stratagem.cost):
            return ActionResult(False, "Not enough resources.")

        return ActionResult(True, "Ready.")

    def use(
        self, faction_id: str, stratagem_id: str, target_planet_id: Optional[str] = None
    ) -> ActionResult:
        check = self.can_use(faction_id, stratagem_id)
        if not check.ok:
            return check
        stratagem = self.catalog[stratagem_id]

        target: Optional[Planet] = None
        if stratagem.target_required or stratagem.effect in TARGETED_EFFECTS:
            if not target_planet_id:
                return ActionResult(False, "Target planet required.")
            target = self.planets.get(target_planet_id)
            if target is None:
                return ActionResult(False, "Invalid target planet.")
        elif target_planet_id:
            target = self.planets.get(target_planet_id)

        spend_resources(self.player_resources, faction_id, stratagem.cost)
        message = self._handlers[stratagem.effect](faction_id, stratagem, target)
        self.cooldowns[(faction_id, stratagem_id)] = stratagem.cooldown

        print(f"[crusade] stratagem used: {stratagem_id} by {faction_id}")
        return ActionResult(True, message, payload=target)

    # ---------- effects ----------

    def _orbital_bombardment(
        self, faction_id: str, stratagem: StratagemDefinition, target: Planet
    ) -> str:
        target.defense = target.defense - BOMBARDMENT_DAMAGE
        return f"Orbital bombardment on {target.name}! -{BOMBARDMENT_DAMAGE} defense."

    def _reinforcement(
        self, faction_id: str, stratagem: StratagemDefinition, target: Planet
    ) -> str:
        target.defense = target.defense + REINFORCEMENT_BONUS
        return f"Emergency reinforcements to {target.name}! +{REINFORCEMENT_BONUS} defense."

    def _supply_drop(
        self, faction_id: str, stratagem: StratagemDefinition, target: Optional[Planet]
    ) -> str:
        resource_ids = self.resource_ids or DEFAULT_RESOURCE_IDS
        add_resources(
            self.player_resources,
            faction_id,
            {rid: SUPPLY_DROP_AMOUNT for rid in resource_ids},
        )
        return f"Supply drop received! +{SUPPLY_DROP_AMOUNT} of each resource."

    def _tabletop(
        self, faction_id: str, stratagem: StratagemDefinition, target: Optional[Planet]
    ) -> str:
        where = f" on {target.name}" if target is not None else ""
        return f"{stratagem.name} activated{where}. Resolve it at the table."
