import hashlib
import math
import random
from typing import Optional, Dict, List, Sequence, TypeVar

# campaign config import
from crusade.models import CAMPAIGN_CONFIG
from crusade.models import Planet, Position

# campaign config variable mapping
GALAXY_CFG = CAMPAIGN_CONFIG.galaxy_modifiers
RING_INNER_RADIUS: float = GALAXY_CFG.ring_inner_radius
RING_OUTER_RADIUS: float = GALAXY_CFG.ring_outer_radius
HEIGHT_SPREAD: float = GALAXY_CFG.height_spread
# Optional deterministic seed for galaxy generation
RAW_GALAXY_SEED = CAMPAIGN_CONFIG.galaxy_seed
# Planet catalog from JSON
PLANET_TYPES = CAMPAIGN_CONFIG.planet_types
HARVEST_YIELDS: Dict[str, Dict[str, int]] = CAMPAIGN_CONFIG.harvest_yields
DEFAULT_RESOURCE_IDS: List[str] = [r.id for r in CAMPAIGN_CONFIG.default_resources]

NAME_PREFIXES = ["Primus", "Secundus", "Tertius", "Magnus", "Minoris", "Ultima", "Proxima", "Nova"]
NAME_ROOTS = [
    "Armageddon", "Cadia", "Macragge", "Fenris", "Baal",
    "Nocturne", "Medusa", "Chogoris", "Caliban", "Prospero",
    "Olympia", "Colchis", "Barbarus", "Chemos", "Deliverance",
]
NAME_SUFFIXES = ["Prime", "Secundus", "Tertius", "Major", "Minor", "Extremis", "Ultimata"]

T = TypeVar("T")


# ---------- Randomness ----------

SEED_BITS = 48
SEED_MASK = (1 << SEED_BITS) - 1


def _hash_seed(data: bytes) -> int:
    return int.from_bytes(hashlib.sha256(data).digest()[: SEED_BITS // 8], "big")


def normalize_seed(value: Optional[object]) -> Optional[int]:
    """
    Campaign seeds are 48-bit ints. Ints are masked, numeric text
    ("42", "0x2a") is parsed, any other text or bytes is hashed. A blank
    or missing seed means "no seed".
    """
    if value is None:
        return None
    if isinstance(value, int):
        return value & SEED_MASK
    if isinstance(value, (bytes, bytearray)):
        return _hash_seed(bytes(value))
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text, 0) & SEED_MASK
    except ValueError:
        return _hash_seed(text.encode("utf-8"))


def make_rng(seed: Optional[object] = None) -> tuple[random.Random, int]:
    """
    Build the campaign's random source. When a seed (or campaign_config
    'galaxy_seed') is provided, everything drawn from it is deterministic.
    Returns the generator and the effective seed.
    """
    effective_seed = normalize_seed(seed if seed is not None else RAW_GALAXY_SEED)
    if effective_seed is None:
        effective_seed = random.SystemRandom().randrange(1 << SEED_BITS)
    return random.Random(effective_seed), effective_seed


def generate_id(rng: random.Random) -> str:
    return f"{rng.getrandbits(SEED_BITS):012x}"


def random_choice(rng: random.Random, items: Sequence[T]) -> T:
    return items[int(rng.random() * len(items))]


# ---------- Geometry ----------


def distance(a: Position, b: Position) -> float:
    return math.sqrt((b.x - a.x) ** 2 + (b.y - a.y) ** 2 + (b.z - a.z) ** 2)


# ---------- Planet generation ----------


def generate_planet_name(rng: random.Random) -> str:
    name = random_choice(rng, NAME_ROOTS)
    if rng.random() > 0.5:
        name = f"{random_choice(rng, NAME_PREFIXES)} {name}"
    if rng.random() > 0.5:
        name = f"{name} {random_choice(rng, NAME_SUFFIXES)}"
    return name


def planet_yields(
    kind: str, rng: random.Random, resource_ids: Optional[List[str]] = None
) -> Dict[str, float]:
    """Per-turn yield for a planet type; types without a catalog entry roll 1-3 random piles."""
    if kind == "DESTROYED":
        return {}
    yields = HARVEST_YIELDS.get(kind)
    if yields is not None:
        return dict(yields)
    pool = resource_ids or DEFAULT_RESOURCE_IDS
    resources: Dict[str, float] = {}
    for _ in range(rng.randint(1, 3)):
        rid = random_choice(rng, pool)
        resources[rid] = resources.get(rid, 0) + rng.randint(1, 3)
    return resources


def generate_random_planet(
    rng: random.Random, position: Optional[Position] = None
) -> Planet:
    """
    Random planet placed on a ring around the galaxy centre (radius
    RING_INNER_RADIUS..RING_OUTER_RADIUS, small height variation).
    """
    if position is None:
        angle = rng.random() * math.pi * 2
        radius = RING_INNER_RADIUS + rng.random() * (RING_OUTER_RADIUS - RING_INNER_RADIUS)
        position = Position(
            x=math.cos(angle) * radius,
            y=(rng.random() - 0.5) * HEIGHT_SPREAD,
            z=math.sin(angle) * radius,
        )
    kind = random_choice(rng, list(PLANET_TYPES.keys()))
    planet_type = PLANET_TYPES[kind]
    return Planet(
        id=generate_id(rng),
        name=generate_planet_name(rng),
        kind=kind,
        position=position,
        resources=planet_yields(kind, rng),
        strategic_value=planet_type.strategic_value,
        defense=planet_type.defense,
    )
