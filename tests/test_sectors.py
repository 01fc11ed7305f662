# tests/test_sectors.py
"""Angular sector partitioning."""

import math
import random

import pytest

from crusade.helper.galaxy_helpers import generate_random_planet
from crusade.sectors import partition, planet_angle, sector_count, sector_for_planet


class TestSectorCount:
    @pytest.mark.parametrize(
        "planets, expected",
        [(1, 3), (4, 3), (9, 3), (10, 4), (16, 4), (17, 5), (49, 7), (50, 8), (400, 8)],
    )
    def test_clamped_sqrt(self, planets, expected):
        assert sector_count(planets) == expected


class TestPlanetAngle:
    def test_negative_angles_are_wrapped(self, planet_factory):
        planet = planet_factory("P", x=0.0, z=-10.0)
        assert planet_angle(planet) == pytest.approx(1.5 * math.pi)

    def test_positive_x_axis_is_zero(self, planet_factory):
        assert planet_angle(planet_factory("P", x=5.0, z=0.0)) == 0.0


class TestPartition:
    def test_empty(self):
        assert partition([]) == []

    def test_every_planet_in_exactly_one_sector(self):
        rng = random.Random(5)
        planets = [generate_random_planet(rng) for _ in range(30)]
        sectors = partition(planets, rng)

        assert len(sectors) == sector_count(30)
        seen = [pid for s in sectors for pid in s.planet_ids]
        assert sorted(seen) == sorted(p.id for p in planets)
        assert len(seen) == len(set(seen))

    def test_names_and_angles(self, planet_factory):
        planets = [planet_factory(str(i), x=math.cos(i), z=math.sin(i)) for i in range(4)]
        sectors = partition(planets)
        assert [s.name for s in sectors] == ["Sector A", "Sector B", "Sector C"]
        assert [s.center_angle for s in sectors] == pytest.approx(
            [0.0, 2 * math.pi / 3, 4 * math.pi / 3]
        )

    def test_assignment_follows_slice(self, planet_factory):
        east = planet_factory("east", x=10.0, z=1.0)   # ~0 rad -> slice 0
        west = planet_factory("west", x=-10.0, z=0.0)  # pi -> slice 1 of 3
        south = planet_factory("south", x=1.0, z=-10.0)  # ~1.6 pi -> slice 2
        sectors = partition([east, west, south])
        assert sector_for_planet(sectors, "east") is sectors[0]
        assert sector_for_planet(sectors, "west") is sectors[1]
        assert sector_for_planet(sectors, "south") is sectors[2]
        assert sector_for_planet(sectors, "nowhere") is None
