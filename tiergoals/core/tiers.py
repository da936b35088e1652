from __future__ import annotations

from dataclasses import dataclass

MIN_TIER = 1
MAX_TIER = 5
PRIMARY_LIMIT = 3
# Tiers up to and including this one hold primary goals only.
FORCED_PRIMARY_MAX_TIER = 3


@dataclass(frozen=True, slots=True)
class TierMeta:
    tier: int
    title: str
    description: str
    allow_extras: bool


TIERS: tuple[TierMeta, ...] = (
    TierMeta(
        tier=1,
        title="Yearly Vision",
        description="Set the three outcomes that anchor your year.",
        allow_extras=False,
    ),
    TierMeta(
        tier=2,
        title="Quarterly Milestones",
        description="Break the year into quarterly targets that ladder up to your annual vision.",
        allow_extras=False,
    ),
    TierMeta(
        tier=3,
        title="Monthly Commitments",
        description="Translate quarterly milestones into focused monthly outputs.",
        allow_extras=False,
    ),
    TierMeta(
        tier=4,
        title="Weekly Priorities",
        description="Define your top weekly actions and capture supporting tasks as needed.",
        allow_extras=True,
    ),
    TierMeta(
        tier=5,
        title="Daily Focus",
        description="Choose three daily priorities and log any additional work that emerges.",
        allow_extras=True,
    ),
)


def is_valid_tier(tier: int) -> bool:
    return MIN_TIER <= tier <= MAX_TIER


def tier_meta(tier: int) -> TierMeta:
    if not is_valid_tier(tier):
        raise ValueError(f"Unknown tier: {tier}")
    return TIERS[tier - MIN_TIER]


def normalize_primary(tier: int, is_primary: bool | None) -> bool:
    """
    Resolve the effective primary flag for a goal in `tier`.
    - tiers 1..3: always primary
    - tiers 4..5: unset means extra
    """
    if tier <= FORCED_PRIMARY_MAX_TIER:
        return True
    return bool(is_primary)


def parent_tier(tier: int) -> int | None:
    if tier <= MIN_TIER:
        return None
    return tier - 1
