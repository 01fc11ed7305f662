from .campaign_config import CAMPAIGN_CONFIG, CampaignSettings
from .store_config import STORE_SETTINGS, StoreSettings
from .galaxy_config import (
    ActionResult,
    AutoDistributionConfig,
    CampaignEvent,
    CustomDistributionMode,
    DistributionMode,
    EventEffect,
    GalacticOrder,
    GalaxyCenter,
    LiberationProgress,
    OrderCompletion,
    OrderType,
    Planet,
    Position,
    ProgressKey,
    Sector,
    Ship,
    StratagemDefinition,
    StratagemEffect,
    TurnSummary,
)
from .save_schema import CampaignRecord, SCHEMA_VERSION

# Optional: keep explicit exports here so callers can import from crusade.models.
__all__ = [
    "CAMPAIGN_CONFIG",
    "CampaignSettings",
    "STORE_SETTINGS",
    "StoreSettings",
    "ActionResult",
    "AutoDistributionConfig",
    "CampaignEvent",
    "CustomDistributionMode",
    "DistributionMode",
    "EventEffect",
    "GalacticOrder",
    "GalaxyCenter",
    "LiberationProgress",
    "OrderCompletion",
    "OrderType",
    "Planet",
    "Position",
    "ProgressKey",
    "Sector",
    "Ship",
    "StratagemDefinition",
    "StratagemEffect",
    "TurnSummary",
    "CampaignRecord",
    "SCHEMA_VERSION",
]
