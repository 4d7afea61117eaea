from typing import Dict, Optional

from diestats.config import MVP_HIT_RATE_WEIGHT, MVP_ON_FIRE_BONUS
from diestats.models import LivePlayerStats


def composite_score(
    stats: LivePlayerStats,
    hit_rate_weight: float = MVP_HIT_RATE_WEIGHT,
    on_fire_bonus: float = MVP_ON_FIRE_BONUS,
) -> float:
    value = stats.score + stats.hit_rate * hit_rate_weight
    if stats.currently_on_fire:
        value += on_fire_bonus
    return value


def rank(
    player_stats: Dict[str, LivePlayerStats],
    hit_rate_weight: float = MVP_HIT_RATE_WEIGHT,
    on_fire_bonus: float = MVP_ON_FIRE_BONUS,
) -> Optional[str]:
    """
    Current MVP, or None before anyone has a scoring throw.

    Always computed from the full aggregate. Equal composites go to the
    lowest player id.
    """
    if not any(s.hits > 0 for s in player_stats.values()):
        return None

    best_id = None
    best_value = None

    for stats in sorted(player_stats.values(), key=lambda s: s.player_id):
        value = composite_score(stats, hit_rate_weight, on_fire_bonus)
        if best_value is None or value > best_value:
            best_id = stats.player_id
            best_value = value

    return best_id
