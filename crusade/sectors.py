#!/usr/bin/env python3
from __future__ import annotations

import math
import random
from typing import Iterable, List, Optional

from crusade.helper.galaxy_helpers import generate_id
from crusade.models import CAMPAIGN_CONFIG, Planet, Sector

SECTOR_NAMES: List[str] = CAMPAIGN_CONFIG.sector_names
MIN_SECTORS: int = CAMPAIGN_CONFIG.galaxy_modifiers.minimum_sectors
MAX_SECTORS: int = CAMPAIGN_CONFIG.galaxy_modifiers.maximum_sectors

TWO_PI = math.pi * 2


def sector_count(planet_count: int) -> int:
    return max(MIN_SECTORS, min(MAX_SECTORS, math.ceil(math.sqrt(planet_count))))


def planet_angle(planet: Planet) -> float:
    """Angle of the planet on the x/z plane, normalised into [0, 2*pi)."""
    angle = math.atan2(planet.position.z, planet.position.x)
    return angle + TWO_PI if angle < 0 else angle


def partition(planets: Iterable[Planet], rng: Optional[random.Random] = None) -> List[Sector]:
    """
    Split the galaxy disc into evenly spaced angular slices and drop every
    planet into the slice containing it.
    """
    planets = list(planets)
    if not planets:
        return []
    rng = rng or random.Random()

    count = sector_count(len(planets))
    step = TWO_PI / count
    sectors = [
        Sector(
            id=generate_id(rng),
            name=SECTOR_NAMES[i % len(SECTOR_NAMES)],
            center_angle=i * step,
        )
        for i in range(count)
    ]
    for planet in planets:
        index = int(planet_angle(planet) // step) % count
        sectors[index].planet_ids.append(planet.id)
    return sectors


def sector_for_planet(sectors: Iterable[Sector], planet_id: str) -> Optional[Sector]:
    for sector in sectors:
        if planet_id in sector.planet_ids:
            return sector
    return None
