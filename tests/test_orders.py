# tests/test_orders.py
"""Galactic order generation, progress and expiry."""

import random
from unittest.mock import Mock

import pytest

from crusade.models import OrderType, ProgressKey
from crusade.orders import (
    DAY_SECONDS,
    ORDER_PROGRESS_KEYS,
    GalacticOrderStateMachine,
)


# --- FIXTURES ---


@pytest.fixture
def machine(rng, clock):
    return GalacticOrderStateMachine(rng=rng, clock=clock)


# --- TESTS ---


class TestProgressTable:
    def test_every_order_type_has_a_counter(self):
        assert set(ORDER_PROGRESS_KEYS) == set(OrderType)
        assert ORDER_PROGRESS_KEYS[OrderType.RESOURCE_GATHER] == ProgressKey.RESOURCES_GATHERED


class TestGeneration:
    def test_generate_specific_fills_parameters(self, machine, clock):
        order = machine.generate_specific("CONQUEST")
        assert order is machine.current_order
        assert order.type == OrderType.CONQUEST
        assert 2 <= order.target <= 6
        assert 3 <= order.turns <= 7
        assert 5 <= order.amount <= 14
        assert order.sector.startswith("Sector ")
        assert order.resource in {"resource1", "resource2", "resource3", "resource4"}
        assert order.progress == 0
        assert order.created_at == clock.now
        assert order.expires_at == clock.now + 7 * DAY_SECONDS
        assert f"Conquer {order.target} Planets in the {order.sector} sector" in order.description
        assert "{" not in order.description

    def test_resource_catalog_is_used(self, rng, clock):
        machine = GalacticOrderStateMachine(rng=rng, clock=clock, resource_ids=["ore"])
        order = machine.generate_specific(OrderType.RESOURCE_GATHER)
        assert order.resource == "ore"
        assert "Gather" in order.description and "ore" in order.description

    def test_unknown_type_keeps_current_order(self, machine):
        current = machine.generate_specific("DEFENSE")
        machine.track_progress("CONQUEST")
        assert machine.generate_specific("UNKNOWN") is None
        assert machine.current_order is current
        assert machine.progress.get(ProgressKey.PLANETS_CONQUERED) == 1

    def test_new_order_resets_progress(self, machine):
        machine.generate_specific("CONQUEST")
        machine.track_progress("DEFENSE")
        machine.generate_specific("LIBERATION")
        assert machine.progress.counts == {}

    def test_weighted_pick_walks_catalog_in_order(self, clock):
        rng = Mock(wraps=random.Random(3))
        # total weight 135: 0.3 * 135 = 40.5 -> past CONQUEST (35), inside LIBERATION
        rng.random.side_effect = [0.3] + [0.5] * 10
        machine = GalacticOrderStateMachine(rng=rng, clock=clock)
        assert machine.generate().type == OrderType.LIBERATION

    def test_weighted_pick_lowest_draw(self, clock):
        rng = Mock(wraps=random.Random(3))
        rng.random.side_effect = [0.0] + [0.5] * 10
        machine = GalacticOrderStateMachine(rng=rng, clock=clock)
        assert machine.generate().type == OrderType.CONQUEST

    def test_weighted_pick_top_draw_issues_last_template(self, clock):
        rng = Mock(wraps=random.Random(3))
        rng.random.side_effect = [0.9999] + [0.5] * 10
        machine = GalacticOrderStateMachine(rng=rng, clock=clock)
        machine.track_progress("DIPLOMACY")
        order = machine.generate()
        assert order.type == OrderType.DIPLOMACY
        assert machine.current_order is order
        assert machine.progress.counts == {}

    def test_available_order_types(self, machine):
        listing = machine.available_order_types()
        assert [entry["key"] for entry in listing] == [t.value for t in OrderType]
        assert listing[0] == {"key": "CONQUEST", "name": "Galactic Conquest", "icon": "conquest"}


class TestProgress:
    def test_reaching_target_completes_once(self, machine):
        order = machine.generate_specific("CONQUEST")
        for _ in range(order.target - 1):
            assert machine.track_progress("CONQUEST") is True
        assert machine.current_order is order
        assert order.progress == order.target - 1

        machine.track_progress("CONQUEST")
        assert order.completed is True
        assert machine.current_order is None
        assert machine.history() == [order]
        assert machine.progress.counts == {}

        machine.track_progress("CONQUEST", 10)
        assert machine.history() == [order]

    def test_other_counters_do_not_advance_order(self, machine):
        order = machine.generate_specific("CONQUEST")
        machine.track_progress("DIPLOMACY", 50)
        assert order.progress == 0
        assert machine.current_order is order

    def test_unknown_progress_type(self, machine):
        machine.generate_specific("CONQUEST")
        assert machine.track_progress("RESOURCE_GATHERING") is False
        assert machine.progress.counts == {}

    def test_update_progress_without_order(self, machine):
        assert machine.update_progress() is None


class TestExpiry:
    def test_each_turn_burns_a_day(self, machine):
        order = machine.generate_specific("DEFENSE")
        start = order.expires_at
        assert machine.advance_expiration() is None
        assert order.expires_at == start - DAY_SECONDS

    def test_force_complete_grants_reward(self, machine):
        order = machine.generate_specific("DEFENSE")
        results = [machine.advance_expiration() for _ in range(7)]
        assert results[:6] == [None] * 6
        completion = results[6]
        assert completion.order is order
        assert order.expired and order.completed
        assert completion.reward == {"resource3": 4, "resource2": 2}
        assert machine.current_order is None
        assert machine.history() == [order]

    def test_forfeit_flag_empties_reward(self, rng, clock):
        machine = GalacticOrderStateMachine(rng=rng, clock=clock, forfeit_reward_on_expiry=True)
        machine.generate_specific("DEFENSE")
        for _ in range(6):
            machine.advance_expiration()
        completion = machine.advance_expiration()
        assert completion.reward == {}

    def test_wall_clock_counts_too(self, machine, clock):
        machine.generate_specific("DEFENSE")
        clock.advance(6 * DAY_SECONDS + 1)
        assert machine.advance_expiration() is not None


class TestTermination:
    def test_complete_without_order(self, machine):
        assert machine.complete() is None

    def test_cancel_and_delete_skip_history(self, machine):
        machine.generate_specific("CONQUEST")
        machine.track_progress("CONQUEST")
        machine.cancel()
        assert machine.current_order is None
        assert machine.progress.counts == {}

        assert machine.delete() is False
        machine.generate_specific("CONQUEST")
        assert machine.delete() is True
        assert machine.history() == []
