#!/usr/bin/env python3
"""
Campaign events: warp storms, wormholes and the rest of the event catalog.

Events may wait a number of turns before starting, last a number of turns
once active, or last forever (``turns_remaining == -1``). Route effects
feed fleet movement through ``has_wormhole`` and ``is_route_blocked``.
"""
from __future__ import annotations

import random
import time
from typing import Any, Dict, List, Optional, Sequence

from crusade.helper.galaxy_helpers import generate_id, random_choice
from crusade.models import CAMPAIGN_CONFIG, CampaignEvent, EventEffect, Planet

EVENT_TYPES = CAMPAIGN_CONFIG.event_types


def build_event(
    rng: random.Random,
    type: str,
    planet_id: Optional[str],
    target_planet_id: Optional[str] = None,
    duration: Optional[int] = None,
    start_turn: int = 0,
    name: Optional[str] = None,
    description: Optional[str] = None,
    effect: Optional[EventEffect] = None,
    custom_data: Optional[Dict[str, Any]] = None,
    now: Optional[float] = None,
) -> CampaignEvent:
    """Create an event, filling unspecified fields from the event catalog."""
    info = EVENT_TYPES.get(type)
    if duration is None:
        duration = info.duration if info else 1
    return CampaignEvent(
        id=generate_id(rng),
        type=type,
        name=name or (info.name if info else "Custom Event"),
        description=description if description is not None else (info.description if info else ""),
        planet_id=planet_id,
        target_planet_id=target_planet_id,
        duration=duration,
        turns_remaining=duration,
        start_turn=start_turn,
        effect=effect or (info.effect if info else EventEffect.NONE),
        created_at=time.time() if now is None else now,
        custom_data=dict(custom_data or {}),
    )


def create_warp_storm(rng: random.Random, planet_id: str, duration: int = 3) -> CampaignEvent:
    return build_event(rng, "WARP_STORM", planet_id, duration=duration)


def create_wormhole(
    rng: random.Random, planet_id1: str, planet_id2: str, duration: int = 5
) -> CampaignEvent:
    return build_event(rng, "WORMHOLE", planet_id1, target_planet_id=planet_id2, duration=duration)


def create_custom(
    rng: random.Random,
    name: str,
    planet_id: Optional[str],
    description: str = "",
    duration: int = 1,
    effect: EventEffect = EventEffect.NONE,
    custom_data: Optional[Dict[str, Any]] = None,
) -> CampaignEvent:
    return build_event(
        rng,
        "CUSTOM",
        planet_id,
        duration=duration,
        name=name,
        description=description,
        effect=effect,
        custom_data=custom_data,
    )


def generate_random(rng: random.Random, planets: Sequence[Planet]) -> Optional[CampaignEvent]:
    if not planets:
        return None
    type = random_choice(rng, list(EVENT_TYPES.keys()))
    planet = random_choice(rng, planets)
    target_id = None
    if type == "WORMHOLE":
        others = [p for p in planets if p.id != planet.id]
        if others:
            target_id = random_choice(rng, others).id
    return build_event(rng, type, planet.id, target_planet_id=target_id)


class EventManager:
    def __init__(self, events: Optional[List[CampaignEvent]] = None) -> None:
        self._events: List[CampaignEvent] = list(events or [])

    def add(self, event: CampaignEvent) -> CampaignEvent:
        self._events.append(event)
        return event

    def remove(self, event_id: str) -> bool:
        for i, event in enumerate(self._events):
            if event.id == event_id:
                del self._events[i]
                return True
        return False

    def get(self, event_id: str) -> Optional[CampaignEvent]:
        return next((e for e in self._events if e.id == event_id), None)

    def all(self) -> List[CampaignEvent]:
        return list(self._events)

    def by_planet(self, planet_id: str) -> List[CampaignEvent]:
        """Events on the planet, including wormholes that end there."""
        return [
            e for e in self._events if planet_id in (e.planet_id, e.target_planet_id)
        ]

    def by_effect(self, effect: EventEffect) -> List[CampaignEvent]:
        return [e for e in self._events if e.effect == effect]

    def clear(self) -> None:
        self._events = []

    def advance_turn(self) -> List[CampaignEvent]:
        """Tick every event; expired ones are removed and returned."""
        expired: List[CampaignEvent] = []
        remaining: List[CampaignEvent] = []
        for event in self._events:
            if event.tick():
                expired.append(event)
            else:
                remaining.append(event)
        self._events = remaining
        return expired

    def _active(self, effect: EventEffect) -> List[CampaignEvent]:
        return [e for e in self._events if e.effect == effect and e.is_active()]

    def is_route_blocked(self, planet_id1: str, planet_id2: str) -> bool:
        return any(
            storm.planet_id in (planet_id1, planet_id2)
            for storm in self._active(EventEffect.BLOCKS_TRAVEL)
        )

    def has_wormhole(self, planet_id1: str, planet_id2: str) -> bool:
        for wormhole in self._active(EventEffect.CREATES_ROUTE):
            ends = (wormhole.planet_id, wormhole.target_planet_id)
            if ends == (planet_id1, planet_id2) or ends == (planet_id2, planet_id1):
                return True
        return False

    def active_wormholes(self) -> List[CampaignEvent]:
        return self._active(EventEffect.CREATES_ROUTE)
