from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, List, Dict, Tuple


class DistributionMode(str, Enum):
    EQUAL = "EQUAL"
    STRATEGIC_VALUE = "STRATEGIC_VALUE"
    TERRITORY_BASED = "TERRITORY_BASED"
    RANDOM = "RANDOM"
    NEED_BASED = "NEED_BASED"
    MANUAL = "MANUAL"


class OrderType(str, Enum):
    CONQUEST = "CONQUEST"
    LIBERATION = "LIBERATION"
    RESOURCE_GATHER = "RESOURCE_GATHER"
    DEFENSE = "DEFENSE"
    EXPLORATION = "EXPLORATION"
    DIPLOMACY = "DIPLOMACY"


class ProgressKey(str, Enum):
    PLANETS_CONQUERED = "planetsConquered"
    SECTORS_LIBERATED = "sectorsLiberated"
    RESOURCES_GATHERED = "resourcesGathered"
    TURNS_HELD = "turnsHeld"
    PLANETS_DISCOVERED = "planetsDiscovered"
    RELATIONS_ESTABLISHED = "relationsEstablished"


class StratagemEffect(str, Enum):
    ORBITAL_BOMBARDMENT = "orbital_bombardment"
    REINFORCEMENT = "reinforcement"
    SUPPLY_DROP = "supply_drop"
    TABLETOP = "tabletop"  # resolved by the players, no state change


class EventEffect(str, Enum):
    BLOCKS_TRAVEL = "blocks_travel"
    CREATES_ROUTE = "creates_route"
    BONUS_RESOURCES = "bonus_resources"
    DEBUFF = "debuff"
    DESTROY_PLANET = "destroy_planet"
    ATTACK_BONUS = "attack_bonus"
    BONUS_TECH = "bonus_tech"
    ORK_INVASION = "ork_invasion"
    NONE = "none"


@dataclass
class Position:
    x: float
    y: float  # height above the galactic plane
    z: float

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass
class Planet:
    id: str
    name: str
    kind: str  # planet type key, e.g. "HIVE", "FORGE"
    position: Position
    owner: Optional[str] = None  # faction id or None
    connections: List[str] = field(default_factory=list)
    resources: Dict[str, float] = field(default_factory=dict)  # per-turn yield
    strategic_value: int = 0  # scoring stat for STRATEGIC_VALUE distribution
    defense: int = 0  # stat targeted by stratagems
    history: List[Dict[str, Any]] = field(default_factory=list)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in ("strategic_value", "defense"):
            value = max(0, value)
        super().__setattr__(name, value)

    def add_connection(self, planet_id: str) -> None:
        if planet_id not in self.connections:
            self.connections.append(planet_id)

    def remove_connection(self, planet_id: str) -> None:
        if planet_id in self.connections:
            self.connections.remove(planet_id)

    def has_connection(self, planet_id: str) -> bool:
        return planet_id in self.connections

    def set_owner(
        self, faction_id: Optional[str], turn: int = 0, record_history: bool = True
    ) -> None:
        previous = self.owner
        self.owner = faction_id
        if record_history and previous != faction_id:
            self.history.append(
                {"turn": turn, "event": "conquest", "from": previous, "to": faction_id}
            )


@dataclass
class Sector:
    id: str
    name: str
    center_angle: float  # radians, slice starts here
    planet_ids: List[str] = field(default_factory=list)


@dataclass
class Ship:
    id: str
    faction_id: str
    planet_id: str
    name: str = "Fleet"
    created_at: float = 0.0


@dataclass
class CampaignEvent:
    id: str
    type: str
    name: str
    planet_id: Optional[str]
    description: str = ""
    target_planet_id: Optional[str] = None
    duration: int = 1
    turns_remaining: int = 1  # -1 means infinite
    start_turn: int = 0  # turns until the event starts; 0 = active now
    effect: EventEffect = EventEffect.NONE
    created_at: float = 0.0
    custom_data: Dict[str, Any] = field(default_factory=dict)

    def is_infinite(self) -> bool:
        return self.turns_remaining == -1

    def is_expired(self) -> bool:
        return self.turns_remaining == 0

    def is_waiting(self) -> bool:
        return self.start_turn > 0

    def is_active(self) -> bool:
        return self.start_turn == 0 and not self.is_expired()

    def tick(self) -> bool:
        """Advance one turn. Returns True when the event just expired."""
        if self.is_infinite():
            return False
        if self.start_turn > 0:
            self.start_turn -= 1
            return False
        self.turns_remaining -= 1
        return self.turns_remaining <= 0


@dataclass
class AutoDistributionConfig:
    enabled: bool = False
    mode: str = DistributionMode.EQUAL.value  # built-in mode or custom mode name
    manual_allocation: Dict[str, Dict[str, float]] = field(default_factory=dict)


@dataclass
class CustomDistributionMode:
    name: str
    allocation: Dict[str, Dict[str, float]] = field(default_factory=dict)
    description: str = ""


@dataclass
class LiberationProgress:
    counts: Dict[ProgressKey, int] = field(default_factory=dict)

    def get(self, key: ProgressKey) -> int:
        return self.counts.get(key, 0)

    def add(self, key: ProgressKey, amount: int = 1) -> int:
        self.counts[key] = self.counts.get(key, 0) + amount
        return self.counts[key]

    def reset(self) -> None:
        self.counts.clear()


@dataclass
class GalacticOrder:
    id: str
    type: OrderType
    name: str
    description: str
    target: int
    reward: Dict[str, int]
    created_at: float
    expires_at: float  # epoch seconds
    progress: int = 0
    turns: int = 0
    amount: int = 0
    sector: Optional[str] = None
    resource: Optional[str] = None
    icon: str = ""
    completed: bool = False
    completed_at: Optional[float] = None
    expired: bool = False  # completed by running out of time


@dataclass
class OrderCompletion:
    order: GalacticOrder
    reward: Dict[str, int]


@dataclass
class StratagemDefinition:
    id: str
    name: str
    cost: Dict[str, int]
    cooldown: int
    target_required: bool
    effect: StratagemEffect
    description: str = ""
    category: str = ""


@dataclass
class ActionResult:
    """Outcome of a user-initiated action."""

    ok: bool
    message: str
    payload: Any = None


@dataclass
class TurnSummary:
    """What happened during a single turn advance."""

    turn: int
    expired_events: List[CampaignEvent]
    expired_order: Optional[OrderCompletion] = None
    completed_order: Optional[OrderCompletion] = None  # reached its target this turn
    harvested: Dict[str, Dict[str, float]] = field(default_factory=dict)


@dataclass
class GalaxyCenter:
    type: str = "SUN"
    crusade_name: str = "A Great Crusade"
    crusade_description: str = (
        "Campaign info, basic rules and schedules, easily visible to the players."
    )
    custom_fields: List[Dict[str, Any]] = field(
        default_factory=lambda: [
            {"name": "Campaign Status", "value": "No active engagements.", "type": "long-text"}
        ]
    )
    links: List[Dict[str, Any]] = field(default_factory=list)
