"""
Versioned persistence record for a campaign.

Every field carries a default so that partial or older saves load into a
usable state; validation happens once here instead of at every read site.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .galaxy_config import EventEffect

SCHEMA_VERSION = 1

Amount = int | float

# Resource ids used by saves made before resources were renamed generically.
LEGACY_RESOURCE_IDS: Dict[str, str] = {
    "promethium": "resource1",
    "adamantium": "resource2",
    "ceramite": "resource3",
    "plasma": "resource4",
}


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # null in a stored blob means "use the default"
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class PositionRecord(_Record):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class PlanetRecord(_Record):
    id: str = ""
    name: str = ""
    type: str = ""
    position: PositionRecord = Field(default_factory=PositionRecord)
    owner: Optional[str] = None
    connections: List[str] = Field(default_factory=list)
    resources: Dict[str, Amount] = Field(default_factory=dict)
    strategic_value: int = 0
    defense: int = 0
    history: List[Dict[str, Any]] = Field(default_factory=list)


class SectorRecord(_Record):
    id: str = ""
    name: str = ""
    center_angle: float = 0.0
    planet_ids: List[str] = Field(default_factory=list)


class ShipRecord(_Record):
    id: str = ""
    faction_id: str = ""
    planet_id: str = ""
    name: str = "Fleet"
    created_at: float = 0.0


class EventRecord(_Record):
    id: str = ""
    type: str = "CUSTOM"
    name: str = "Custom Event"
    description: str = ""
    planet_id: Optional[str] = None
    target_planet_id: Optional[str] = None
    duration: int = 1
    turns_remaining: Optional[int] = None
    start_turn: int = 0
    effect: EventEffect = EventEffect.NONE
    created_at: float = 0.0
    custom_data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("effect", mode="before")
    @classmethod
    def _unknown_effect_is_none(cls, value: Any) -> Any:
        known = {effect.value for effect in EventEffect}
        value = getattr(value, "value", value)
        return value if value in known else EventEffect.NONE.value


class OrderRecord(_Record):
    id: str = ""
    type: str = ""
    name: str = ""
    icon: str = ""
    description: str = ""
    target: int = 0
    progress: int = 0
    turns: int = 0
    amount: int = 0
    sector: Optional[str] = None
    resource: Optional[str] = None
    reward: Dict[str, int] = Field(default_factory=dict)
    created_at: float = 0.0
    expires_at: float = 0.0
    completed: bool = False
    completed_at: Optional[float] = None
    expired: bool = False


class GalacticOrderRecord(_Record):
    current_order: Optional[OrderRecord] = None
    completed_orders: List[OrderRecord] = Field(default_factory=list)
    liberation_progress: Dict[str, int] = Field(default_factory=dict)


class AutoDistributionRecord(_Record):
    enabled: bool = False
    mode: str = "EQUAL"
    manual_allocation: Dict[str, Dict[str, Amount]] = Field(default_factory=dict)


class CustomModeRecord(_Record):
    name: str = ""
    description: str = ""
    allocation: Dict[str, Dict[str, Amount]] = Field(default_factory=dict)


class GalaxyCenterRecord(_Record):
    type: str = "SUN"
    crusade_name: str = "A Great Crusade"
    crusade_description: str = ""
    custom_fields: List[Dict[str, Any]] = Field(default_factory=list)
    links: List[Dict[str, Any]] = Field(default_factory=list)


class CampaignRecord(_Record):
    schema_version: int = SCHEMA_VERSION
    id: str = ""
    name: str = "Crusade Campaign"
    turn: int = 1
    planets: List[PlanetRecord] = Field(default_factory=list)
    events: List[EventRecord] = Field(default_factory=list)
    galaxy_center: GalaxyCenterRecord = Field(default_factory=GalaxyCenterRecord)
    ships: List[ShipRecord] = Field(default_factory=list)
    sectors: List[SectorRecord] = Field(default_factory=list)
    player_resources: Dict[str, Dict[str, Amount]] = Field(default_factory=dict)
    planet_modifiers: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    galactic_order: GalacticOrderRecord = Field(default_factory=GalacticOrderRecord)
    stratagem_cooldowns: Dict[str, int] = Field(default_factory=dict)
    auto_distribution: AutoDistributionRecord = Field(
        default_factory=AutoDistributionRecord
    )
    custom_distribution_modes: Dict[str, CustomModeRecord] = Field(
        default_factory=dict
    )
    custom_text: Dict[str, Any] = Field(default_factory=dict)
    created_at: float = 0.0
    last_modified: float = 0.0

    @field_validator("player_resources", mode="before")
    @classmethod
    def _migrate_resource_ids(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        migrated: Dict[str, Any] = {}
        for faction_id, wallet in value.items():
            if not isinstance(wallet, dict):
                migrated[faction_id] = wallet
                continue
            migrated[faction_id] = {
                LEGACY_RESOURCE_IDS.get(resource_id, resource_id): amount
                for resource_id, amount in wallet.items()
            }
        return migrated
