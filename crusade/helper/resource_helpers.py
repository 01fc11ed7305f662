#!/usr/bin/env python3
from __future__ import annotations

from typing import Dict, Mapping

PlayerResources = Dict[str, Dict[str, float]]


def wallet_for(player_resources: PlayerResources, faction_id: str) -> Dict[str, float]:
    """Faction pool, created empty on first use."""
    return player_resources.setdefault(faction_id, {})


def can_afford(
    player_resources: PlayerResources, faction_id: str, cost: Mapping[str, float]
) -> bool:
    wallet = player_resources.get(faction_id, {})
    return all(wallet.get(resource, 0) >= amount for resource, amount in cost.items())


def spend_resources(
    player_resources: PlayerResources, faction_id: str, cost: Mapping[str, float]
) -> None:
    wallet = wallet_for(player_resources, faction_id)
    for resource, amount in cost.items():
        wallet[resource] = wallet.get(resource, 0) - amount


def add_resources(
    player_resources: PlayerResources, faction_id: str, amounts: Mapping[str, float]
) -> None:
    """Additive update; negative amounts act as costs."""
    wallet = wallet_for(player_resources, faction_id)
    for resource, amount in amounts.items():
        wallet[resource] = wallet.get(resource, 0) + amount


def total_by_resource(player_resources: PlayerResources) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for wallet in player_resources.values():
        for resource, amount in wallet.items():
            totals[resource] = totals.get(resource, 0) + amount
    return totals
