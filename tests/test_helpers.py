# tests/test_helpers.py
"""Seed handling and faction pool arithmetic."""

import pytest

from crusade.helper.galaxy_helpers import SEED_MASK, make_rng, normalize_seed
from crusade.helper.resource_helpers import (
    add_resources,
    can_afford,
    spend_resources,
    total_by_resource,
)


# --- TESTS: SEEDS ---


class TestNormalizeSeed:
    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_means_no_seed(self, value):
        assert normalize_seed(value) is None

    def test_ints_and_numeric_text(self):
        assert normalize_seed(42) == 42
        assert normalize_seed(" 42 ") == 42
        assert normalize_seed("0x2a") == 42

    def test_ints_fit_in_48_bits(self):
        assert normalize_seed(-1) == SEED_MASK
        assert normalize_seed(1 << 60) == 0

    def test_text_is_hashed_stably(self):
        seed = normalize_seed("Night Crusade")
        assert seed == normalize_seed("Night Crusade")
        assert seed != normalize_seed("Dawn Crusade")
        assert 0 <= seed <= SEED_MASK

    def test_bytes_hash_like_their_text(self):
        assert normalize_seed(b"crusade") == normalize_seed("crusade")

    def test_make_rng_is_reproducible(self):
        first, seed = make_rng("crusade")
        second, _ = make_rng("crusade")
        assert seed == normalize_seed("crusade")
        assert first.random() == second.random()


# --- TESTS: POOLS ---


class TestPools:
    def test_spend_and_afford(self):
        pools = {"red": {"ore": 3}}
        assert can_afford(pools, "red", {"ore": 3})
        assert not can_afford(pools, "red", {"ore": 4})
        assert not can_afford(pools, "blue", {"ore": 1})
        spend_resources(pools, "red", {"ore": 2})
        assert pools["red"]["ore"] == 1

    def test_add_creates_pool_and_totals(self):
        pools = {"red": {"ore": 1}}
        add_resources(pools, "blue", {"ore": 2, "gas": -1})
        assert pools["blue"] == {"ore": 2, "gas": -1}
        assert total_by_resource(pools) == {"ore": 3, "gas": -1}
