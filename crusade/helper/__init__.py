from crusade.helper.galaxy_helpers import (
    normalize_seed,
    make_rng,
    generate_id,
    random_choice,
    distance,
    generate_random_planet,
    planet_yields,
)
from crusade.helper.resource_helpers import (
    can_afford,
    spend_resources,
    add_resources,
    total_by_resource,
)


__all__ = [
    "normalize_seed",
    "make_rng",
    "generate_id",
    "random_choice",
    "distance",
    "generate_random_planet",
    "planet_yields",
    "can_afford",
    "spend_resources",
    "add_resources",
    "total_by_resource",
]
