#!/usr/bin/env python3
"""
Helpers for turning the in-memory campaign into a persistence record and
back. The record shape is defined by ``crusade.models.save_schema``.
"""
from __future__ import annotations

import random
from dataclasses import asdict
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from crusade.helper.galaxy_helpers import generate_id
from crusade.models import (
    AutoDistributionConfig,
    CampaignEvent,
    CampaignRecord,
    CustomDistributionMode,
    GalacticOrder,
    GalaxyCenter,
    LiberationProgress,
    Planet,
    Position,
    ProgressKey,
    Sector,
    Ship,
)
from crusade.models.save_schema import OrderRecord
from crusade.orders import parse_order_type

if TYPE_CHECKING:
    from crusade.galaxy import Galaxy

COOLDOWN_SEPARATOR = ":"


def cooldown_key(faction_id: str, stratagem_id: str) -> str:
    return f"{faction_id}{COOLDOWN_SEPARATOR}{stratagem_id}"


def split_cooldown_key(key: str) -> Optional[Tuple[str, str]]:
    faction_id, sep, stratagem_id = key.rpartition(COOLDOWN_SEPARATOR)
    if not sep or not faction_id or not stratagem_id:
        return None
    return faction_id, stratagem_id


# ---------- galaxy -> record ----------


def _planet_payload(planet: Planet) -> Dict[str, Any]:
    return {
        "id": planet.id,
        "name": planet.name,
        "type": planet.kind,
        "position": asdict(planet.position),
        "owner": planet.owner,
        "connections": list(planet.connections),
        "resources": dict(planet.resources),
        "strategic_value": planet.strategic_value,
        "defense": planet.defense,
        "history": list(planet.history),
    }


def _order_payload(order: GalacticOrder) -> Dict[str, Any]:
    payload = asdict(order)
    payload["type"] = order.type.value
    return payload


def record_from_galaxy(galaxy: "Galaxy") -> dict:
    """
    Build the JSON-ready persistence record (camelCase keys) for a campaign.
    """
    orders = galaxy.orders
    auto = galaxy.auto_distribution
    record = CampaignRecord(
        id=galaxy.id,
        name=galaxy.name,
        turn=galaxy.turn,
        planets=[_planet_payload(p) for p in galaxy.planets.values()],
        events=[asdict(e) for e in galaxy.events.all()],
        galaxy_center=asdict(galaxy.galaxy_center),
        ships=[asdict(s) for s in galaxy.fleet.all()],
        sectors=[asdict(s) for s in galaxy.sectors],
        player_resources=galaxy.player_resources,
        planet_modifiers=galaxy.planet_modifiers,
        galactic_order={
            "current_order": _order_payload(orders.current_order)
            if orders.current_order
            else None,
            "completed_orders": [_order_payload(o) for o in orders.completed_orders],
            "liberation_progress": {k.value: v for k, v in orders.progress.counts.items()},
        },
        stratagem_cooldowns={
            cooldown_key(faction_id, stratagem_id): remaining
            for (faction_id, stratagem_id), remaining in galaxy.stratagems.cooldowns.items()
        },
        auto_distribution=asdict(auto),
        custom_distribution_modes={
            name: asdict(mode) for name, mode in galaxy.custom_distribution_modes.items()
        },
        custom_text=galaxy.custom_text,
        created_at=galaxy.created_at,
        last_modified=galaxy.clock(),
    )
    return record.model_dump(by_alias=True, mode="json")


# ---------- record -> galaxy ----------


def parse_record(data: Mapping[str, Any]) -> CampaignRecord:
    """Validate a stored blob; missing fields fall back to their defaults."""
    return CampaignRecord.model_validate(data)


def _order_from_record(rec: OrderRecord, rng: random.Random) -> Optional[GalacticOrder]:
    kind = parse_order_type(rec.type)
    if kind is None:
        print(f"[crusade] dropping stored order with unknown type: {rec.type}")
        return None
    return GalacticOrder(
        id=rec.id or generate_id(rng),
        type=kind,
        name=rec.name,
        icon=rec.icon,
        description=rec.description,
        target=rec.target,
        progress=rec.progress,
        turns=rec.turns,
        amount=rec.amount,
        sector=rec.sector,
        resource=rec.resource,
        reward=dict(rec.reward),
        created_at=rec.created_at,
        expires_at=rec.expires_at,
        completed=rec.completed,
        completed_at=rec.completed_at,
        expired=rec.expired,
    )


def _progress_from_record(counts: Mapping[str, int]) -> LiberationProgress:
    known = {key.value: key for key in ProgressKey}
    return LiberationProgress(
        counts={known[name]: value for name, value in counts.items() if name in known}
    )


def apply_record(galaxy: "Galaxy", record: CampaignRecord) -> None:
    """
    Load a validated record into an existing galaxy. Shared containers are
    refilled in place so the subsystems keep pointing at them.
    """
    galaxy.id = record.id or galaxy.id
    galaxy.name = record.name
    galaxy.turn = record.turn
    galaxy.created_at = record.created_at or galaxy.created_at
    galaxy.last_modified = record.last_modified or galaxy.last_modified
    galaxy.custom_text = dict(record.custom_text)
    rng = galaxy.rng

    galaxy.planets.clear()
    stored_links: List[Tuple[str, List[str]]] = []
    for rec in record.planets:
        planet_id = rec.id or generate_id(rng)
        stored_links.append((planet_id, rec.connections))
        galaxy.planets[planet_id] = Planet(
            id=planet_id,
            name=rec.name,
            kind=rec.type,
            position=Position(x=rec.position.x, y=rec.position.y, z=rec.position.z),
            owner=rec.owner,
            resources=dict(rec.resources),
            strategic_value=rec.strategic_value,
            defense=rec.defense,
            history=list(rec.history),
        )
    # stored order is kept; self-links and links to planets missing from the
    # record are dropped, then one-sided links are mirrored
    for planet_id, links in stored_links:
        planet = galaxy.planets[planet_id]
        for other_id in links:
            if other_id != planet_id and other_id in galaxy.planets:
                planet.add_connection(other_id)
    for planet_id, _ in stored_links:
        for other_id in list(galaxy.planets[planet_id].connections):
            galaxy.graph.add_connection(planet_id, other_id)

    galaxy.sectors = [
        Sector(
            id=rec.id or generate_id(rng),
            name=rec.name,
            center_angle=rec.center_angle,
            planet_ids=[pid for pid in rec.planet_ids if pid in galaxy.planets],
        )
        for rec in record.sectors
    ]

    galaxy.events.clear()
    for rec in record.events:
        galaxy.events.add(
            CampaignEvent(
                id=rec.id or generate_id(rng),
                type=rec.type,
                name=rec.name,
                description=rec.description,
                planet_id=rec.planet_id,
                target_planet_id=rec.target_planet_id,
                duration=rec.duration,
                turns_remaining=rec.duration
                if rec.turns_remaining is None
                else rec.turns_remaining,
                start_turn=rec.start_turn,
                effect=rec.effect,
                created_at=rec.created_at,
                custom_data=dict(rec.custom_data),
            )
        )

    galaxy.fleet.restore(
        [
            Ship(
                id=rec.id or generate_id(rng),
                faction_id=rec.faction_id,
                planet_id=rec.planet_id,
                name=rec.name,
                created_at=rec.created_at,
            )
            for rec in record.ships
        ]
    )

    center = record.galaxy_center
    galaxy.galaxy_center = GalaxyCenter(
        type=center.type,
        crusade_name=center.crusade_name,
        crusade_description=center.crusade_description,
        custom_fields=list(center.custom_fields),
        links=list(center.links),
    )

    galaxy.player_resources.clear()
    for faction_id, wallet in record.player_resources.items():
        galaxy.player_resources[faction_id] = dict(wallet)

    galaxy.planet_modifiers.clear()
    for planet_id, modifiers in record.planet_modifiers.items():
        galaxy.planet_modifiers[planet_id] = dict(modifiers)

    stored = record.galactic_order
    current = _order_from_record(stored.current_order, rng) if stored.current_order else None
    history: List[GalacticOrder] = []
    for rec in stored.completed_orders:
        order = _order_from_record(rec, rng)
        if order is not None:
            history.append(order)
    galaxy.orders.restore(current, history, _progress_from_record(stored.liberation_progress))

    galaxy.stratagems.cooldowns.clear()
    for key, remaining in record.stratagem_cooldowns.items():
        parts = split_cooldown_key(key)
        if parts is None:
            print(f"[crusade] dropping malformed cooldown key: {key!r}")
            continue
        galaxy.stratagems.cooldowns[parts] = max(0, remaining)

    auto = record.auto_distribution
    galaxy.economy.config = AutoDistributionConfig(
        enabled=auto.enabled,
        mode=auto.mode,
        manual_allocation={f: dict(a) for f, a in auto.manual_allocation.items()},
    )
    galaxy.custom_distribution_modes.clear()
    for name, mode in record.custom_distribution_modes.items():
        galaxy.custom_distribution_modes[name] = CustomDistributionMode(
            name=mode.name or name,
            allocation={f: dict(a) for f, a in mode.allocation.items()},
            description=mode.description,
        )

    custom_modes = len(galaxy.custom_distribution_modes)
    if custom_modes:
        print(f"[crusade] loaded {custom_modes} custom distribution modes")
