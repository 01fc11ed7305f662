import json
from pathlib import Path
from pydantic import BaseModel, PositiveInt, PositiveFloat, NonNegativeInt
from pydantic import Field  # type: ignore
from typing import Annotated, List, Dict

from .galaxy_config import EventEffect, OrderType, StratagemEffect

# # NOTE: The loaded config lives in-process only; every import of this module
# # validates the bundled JSON once.


class GalaxyModifiers(BaseModel):
    default_galaxy_size: PositiveInt
    minimum_planets: PositiveInt
    maximum_planets: PositiveInt
    planet_minimum_distance: PositiveFloat
    placement_nudge_span: PositiveFloat
    connection_max_per_planet: PositiveInt
    connection_distance: PositiveFloat
    ring_inner_radius: PositiveFloat
    ring_outer_radius: PositiveFloat
    height_spread: PositiveFloat
    minimum_sectors: PositiveInt
    maximum_sectors: PositiveInt
    initial_planets_per_faction: NonNegativeInt


class HarvestModifiers(BaseModel):
    trade_hub_multiplier: PositiveFloat
    mining_upgrade_bonus: float


class OrderTuning(BaseModel):
    expiry_days: PositiveInt
    turns_minimum: PositiveInt
    turns_maximum: PositiveInt
    amount_minimum: PositiveInt
    amount_maximum: PositiveInt
    target_minimum: PositiveInt
    target_maximum: PositiveInt
    forfeit_reward_on_expiry: bool = False


class StratagemTuning(BaseModel):
    bombardment_damage: NonNegativeInt
    reinforcement_bonus: NonNegativeInt
    supply_drop_amount: NonNegativeInt


class ResourceType(BaseModel):
    id: Annotated[str, Field(min_length=1)]
    name: str


class PlanetType(BaseModel):
    name: Annotated[str, Field(min_length=1)]
    strategic_value: NonNegativeInt
    defense: NonNegativeInt


class GalaxyCenterType(BaseModel):
    name: str


class EventType(BaseModel):
    name: str
    description: str = ""
    duration: int
    effect: EventEffect = EventEffect.NONE


class StratagemConfig(BaseModel):
    name: Annotated[str, Field(min_length=1)]
    description: str = ""
    cost: Dict[str, NonNegativeInt]
    cooldown: NonNegativeInt
    target_required: bool
    category: str = ""
    effect: StratagemEffect


class OrderTemplate(BaseModel):
    name: str
    icon: str = ""
    description: str
    reward: Dict[str, int]
    weight: PositiveFloat


class CampaignSettings(BaseModel):
    galaxy_seed: int | str | None
    galaxy_modifiers: GalaxyModifiers
    harvest_modifiers: HarvestModifiers
    order_tuning: OrderTuning
    stratagem_tuning: StratagemTuning

    sector_names: Annotated[List[str], Field(min_length=1)]
    default_resources: Annotated[List[ResourceType], Field(min_length=1)]
    planet_types: Dict[str, PlanetType]
    harvest_yields: Dict[str, Dict[str, int]]
    galaxy_center_types: Dict[str, GalaxyCenterType]
    event_types: Dict[str, EventType]
    stratagems: Dict[str, StratagemConfig]
    order_templates: Dict[OrderType, OrderTemplate]

    @classmethod
    def load_json(cls, path: str | Path) -> "CampaignSettings":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls.model_validate(data)


_BASE_DIR = Path(__file__).resolve().parents[1]
_CONFIG_PATH = _BASE_DIR / "config" / "campaign_config.json"

CAMPAIGN_CONFIG = CampaignSettings.load_json(_CONFIG_PATH)
