#!/usr/bin/env python3
"""
Galactic orders: the single campaign-wide objective.

NONE -> ACTIVE -> COMPLETED (progress reached target)
               -> EXPIRED -> COMPLETED (ran out of time)
and back to NONE. Progress counters reset whenever the active order
changes or ends.
"""
from __future__ import annotations

import random
import time
from typing import Callable, Dict, List, Optional

from crusade.helper.galaxy_helpers import DEFAULT_RESOURCE_IDS, generate_id, random_choice
from crusade.models import (
    CAMPAIGN_CONFIG,
    GalacticOrder,
    LiberationProgress,
    OrderCompletion,
    OrderType,
    ProgressKey,
)
from crusade.models.campaign_config import OrderTemplate

ORDER_TEMPLATES = CAMPAIGN_CONFIG.order_templates
TUNING = CAMPAIGN_CONFIG.order_tuning
SECTOR_NAMES: List[str] = CAMPAIGN_CONFIG.sector_names

DAY_SECONDS = 24 * 60 * 60

ORDER_PROGRESS_KEYS: Dict[OrderType, ProgressKey] = {
    OrderType.CONQUEST: ProgressKey.PLANETS_CONQUERED,
    OrderType.LIBERATION: ProgressKey.SECTORS_LIBERATED,
    OrderType.RESOURCE_GATHER: ProgressKey.RESOURCES_GATHERED,
    OrderType.DEFENSE: ProgressKey.TURNS_HELD,
    OrderType.EXPLORATION: ProgressKey.PLANETS_DISCOVERED,
    OrderType.DIPLOMACY: ProgressKey.RELATIONS_ESTABLISHED,
}


def parse_order_type(value: object) -> Optional[OrderType]:
    if isinstance(value, OrderType):
        return value
    try:
        return OrderType(value)
    except ValueError:
        return None


class GalacticOrderStateMachine:
    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.time,
        resource_ids: Optional[List[str]] = None,
        sector_names: Optional[List[str]] = None,
        forfeit_reward_on_expiry: bool = TUNING.forfeit_reward_on_expiry,
    ) -> None:
        self.rng = rng or random.Random()
        self.clock = clock
        self.resource_ids = resource_ids
        self.sector_names = sector_names or SECTOR_NAMES
        self.forfeit_reward_on_expiry = forfeit_reward_on_expiry

        self.current_order: Optional[GalacticOrder] = None
        self.completed_orders: List[GalacticOrder] = []
        self.progress = LiberationProgress()

    def history(self) -> List[GalacticOrder]:
        return list(self.completed_orders)

    def available_order_types(self) -> List[Dict[str, str]]:
        return [
            {"key": key.value, "name": tpl.name, "icon": tpl.icon}
            for key, tpl in ORDER_TEMPLATES.items()
        ]

    # ---------- generation ----------

    def generate(self) -> GalacticOrder:
        """Weighted pick over the template catalog."""
        templates = list(ORDER_TEMPLATES.items())
        total_weight = sum(tpl.weight for _, tpl in templates)
        cursor = self.rng.random() * total_weight

        selected = templates[-1][0]
        for key, tpl in templates:
            cursor -= tpl.weight
            if cursor <= 0:
                selected = key
                break

        return self._issue(selected, ORDER_TEMPLATES[selected])

    def generate_specific(self, order_type: object) -> Optional[GalacticOrder]:
        kind = parse_order_type(order_type)
        template = ORDER_TEMPLATES.get(kind) if kind is not None else None
        if kind is None or template is None:
            print(f"[crusade] unknown order type: {order_type}")
            return None
        return self._issue(kind, template)

    def _issue(self, kind: OrderType, template: OrderTemplate) -> GalacticOrder:
        rng = self.rng
        turns = rng.randint(TUNING.turns_minimum, TUNING.turns_maximum)
        amount = rng.randint(TUNING.amount_minimum, TUNING.amount_maximum)
        sector = random_choice(rng, self.sector_names)
        resource = random_choice(rng, self.resource_ids or DEFAULT_RESOURCE_IDS)
        target = rng.randint(TUNING.target_minimum, TUNING.target_maximum)

        description = (
            template.description.replace("{turns}", str(turns))
            .replace("{amount}", str(amount))
            .replace("{sector}", sector)
            .replace("{resource}", resource)
            .replace("{target}", str(target))
        )

        now = self.clock()
        order = GalacticOrder(
            id=generate_id(rng),
            type=kind,
            name=template.name,
            icon=template.icon,
            description=description,
            reward=dict(template.reward),
            created_at=now,
            expires_at=now + TUNING.expiry_days * DAY_SECONDS,
            target=target,
            turns=turns,
            amount=amount,
            sector=sector,
            resource=resource,
        )
        self.current_order = order
        self.progress.reset()
        print(f"[crusade] galactic order issued: {kind.value} target={target}")
        return order

    # ---------- progress ----------

    def track_progress(self, order_type: object, amount: int = 1) -> bool:
        kind = parse_order_type(order_type)
        if kind is None:
            return False
        self.progress.add(ORDER_PROGRESS_KEYS[kind], amount)
        self.update_progress()
        return True

    def update_progress(self) -> Optional[OrderCompletion]:
        order = self.current_order
        if order is None or order.completed:
            return None
        order.progress = self.progress.get(ORDER_PROGRESS_KEYS[order.type])
        if order.progress >= order.target:
            return self.complete()
        return None

    def advance_expiration(self) -> Optional[OrderCompletion]:
        """Called once per turn: each turn burns one day off the deadline."""
        order = self.current_order
        if order is None or order.completed:
            return None
        order.expires_at -= DAY_SECONDS
        if order.expires_at <= self.clock():
            order.expired = True
            if self.forfeit_reward_on_expiry:
                order.reward = {}
            print(f"[crusade] galactic order expired: {order.type.value}")
            return self.complete()
        return None

    # ---------- termination ----------

    def complete(self) -> Optional[OrderCompletion]:
        order = self.current_order
        if order is None:
            return None
        order.completed = True
        order.completed_at = self.clock()
        self.completed_orders.append(order)

        self.current_order = None
        self.progress.reset()
        return OrderCompletion(order=order, reward=dict(order.reward))

    def cancel(self) -> None:
        self.current_order = None
        self.progress.reset()

    def delete(self) -> bool:
        if self.current_order is None:
            return False
        self.cancel()
        return True

    def restore(
        self,
        current_order: Optional[GalacticOrder],
        completed_orders: List[GalacticOrder],
        progress: LiberationProgress,
    ) -> None:
        self.current_order = current_order
        self.completed_orders = list(completed_orders)
        self.progress = progress
