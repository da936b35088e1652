from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from loguru import logger
from sqlalchemy import and_, func, select
from sqlalchemy.orm import Session, selectinload

from tiergoals.core.errors import GoalNotFound, GoalRuleError
from tiergoals.core.tiers import (
    FORCED_PRIMARY_MAX_TIER,
    PRIMARY_LIMIT,
    TIERS,
    is_valid_tier,
    normalize_primary,
    parent_tier,
)
from tiergoals.db.models import Goal
from tiergoals.db.repositories.users_repo import ensure_user

Direction = Literal["up", "down"]

GOAL_NOT_FOUND = "Goal not found."
PARENT_NOT_FOUND = "Parent goal was not found."
PARENT_WRONG_TIER = "Parent goal must live in the immediately higher tier."
TIER_OUT_OF_RANGE = "Goals can only live between tiers 1 and 5."
PRIMARY_FULL_ON_CREATE = (
    "You already have 3 primary items in this tier. "
    "Mark another goal as extra or complete one before adding a new primary goal."
)
PRIMARY_FULL_ON_UPDATE = (
    "You already have 3 primary items in this tier. Mark another goal as extra before upgrading this one."
)
PRIMARY_FULL_ON_UNCOMPLETE = (
    "You already have 3 active primary goals in this tier. "
    "Mark another goal as extra or complete one before uncompleting this goal."
)
PRIMARY_FULL_ON_MOVE = (
    "You already have 3 primary items in the destination tier. "
    "Mark another goal as extra or complete one before moving this goal."
)
MOVE_UP_FORBIDDEN = "Tier 1 and Tier 2 goals can only move down to lower-focus tiers."
INVALID_DIRECTION = "Direction must be up or down."
ALREADY_AT_TOP = "Goal is already at the top of its group."
ALREADY_AT_BOTTOM = "Goal is already at the bottom of its group."


def _reject(action: str, user_id: str, message: str, **meta) -> GoalRuleError:
    details = " ".join(f"{key}={value}" for key, value in meta.items())
    logger.info("goal_{}_rejected user={} {} reason={!r}", action, user_id, details, message)
    return GoalRuleError(message)


def _check_direction(direction: str) -> None:
    if direction not in {"up", "down"}:
        raise GoalRuleError(INVALID_DIRECTION)


def count_primary_goals(
    session: Session,
    user_id: str,
    tier: int,
    exclude_goal_id: str | None = None,
) -> int:
    """Count active (not completed) primary goals of a user in one tier."""
    conditions = [
        Goal.user_id == user_id,
        Goal.tier == tier,
        Goal.is_primary.is_(True),
        Goal.completed_at.is_(None),
    ]
    if exclude_goal_id:
        conditions.append(Goal.id != exclude_goal_id)
    value = session.scalar(select(func.count()).select_from(Goal).where(and_(*conditions)))
    return int(value or 0)


def next_sort_order(session: Session, user_id: str, tier: int, is_primary: bool) -> int:
    current = session.scalar(
        select(func.max(Goal.sort_order)).where(
            and_(Goal.user_id == user_id, Goal.tier == tier, Goal.is_primary.is_(is_primary))
        )
    )
    if current is None:
        return 0
    return int(current) + 1


def validate_parent_goal(
    session: Session,
    user_id: str,
    tier: int,
    parent_goal_id: str | None,
) -> str | None:
    if not parent_goal_id or parent_tier(tier) is None:
        return None

    parent = session.scalar(select(Goal).where(and_(Goal.id == parent_goal_id, Goal.user_id == user_id)))
    if parent is None:
        raise GoalRuleError(PARENT_NOT_FOUND)
    if parent.tier != tier - 1:
        raise GoalRuleError(PARENT_WRONG_TIER)
    return parent.id


def get_goal(session: Session, user_id: str, goal_id: str) -> Goal:
    goal = session.scalar(select(Goal).where(and_(Goal.id == goal_id, Goal.user_id == user_id)))
    if goal is None:
        raise GoalNotFound(GOAL_NOT_FOUND)
    return goal


def list_goals_for_user(session: Session, user_id: str) -> list[Goal]:
    stmt = (
        select(Goal)
        .where(Goal.user_id == user_id)
        .options(selectinload(Goal.parent), selectinload(Goal.children))
        .order_by(Goal.tier, Goal.is_primary, Goal.sort_order, Goal.created_at)
    )
    return list(session.scalars(stmt).all())


def goals_grouped_by_tier(session: Session, user_id: str) -> list[tuple[int, list[Goal]]]:
    goals = list_goals_for_user(session, user_id)
    return [(meta.tier, [goal for goal in goals if goal.tier == meta.tier]) for meta in TIERS]


def _detach_children(goal: Goal) -> int:
    children = list(goal.children)
    for child in children:
        child.parent_goal_id = None
        child.parent = None
    return len(children)


def create_goal(
    session: Session,
    *,
    user_id: str,
    title: str,
    tier: int,
    notes: str | None = None,
    is_primary: bool | None = None,
    parent_goal_id: str | None = None,
) -> Goal:
    if not is_valid_tier(tier):
        raise _reject("create", user_id, TIER_OUT_OF_RANGE, tier=tier)

    ensure_user(session, user_id)
    primary = normalize_primary(tier, is_primary)

    if primary and count_primary_goals(session, user_id, tier) >= PRIMARY_LIMIT:
        raise _reject("create", user_id, PRIMARY_FULL_ON_CREATE, tier=tier)

    parent_goal_id = validate_parent_goal(session, user_id, tier, parent_goal_id)

    goal = Goal(
        user_id=user_id,
        title=title,
        notes=notes,
        tier=tier,
        is_primary=primary,
        parent_goal_id=parent_goal_id,
        sort_order=next_sort_order(session, user_id, tier, primary),
    )
    session.add(goal)
    session.flush()
    logger.info(
        "goal_created id={} user={} tier={} primary={} parent={}",
        goal.id,
        user_id,
        tier,
        primary,
        parent_goal_id,
    )
    session.commit()
    session.refresh(goal)
    return goal


def update_goal(
    session: Session,
    *,
    user_id: str,
    goal_id: str,
    title: str,
    tier: int,
    notes: str | None = None,
    is_primary: bool | None = None,
    parent_goal_id: str | None = None,
) -> Goal:
    goal = get_goal(session, user_id, goal_id)
    if not is_valid_tier(tier):
        raise _reject("update", user_id, TIER_OUT_OF_RANGE, id=goal.id, tier=tier)

    primary = normalize_primary(tier, is_primary)
    is_active = goal.completed_at is None
    already_counted = goal.is_primary and goal.tier == tier and is_active
    if primary and is_active and not already_counted:
        if count_primary_goals(session, user_id, tier, exclude_goal_id=goal.id) >= PRIMARY_LIMIT:
            raise _reject("update", user_id, PRIMARY_FULL_ON_UPDATE, id=goal.id, tier=tier)

    parent_goal_id = validate_parent_goal(session, user_id, tier, parent_goal_id)

    if (goal.tier, goal.is_primary) != (tier, primary):
        goal.sort_order = next_sort_order(session, user_id, tier, primary)
    if goal.tier != tier:
        _detach_children(goal)

    goal.title = title
    goal.notes = notes
    goal.tier = tier
    goal.is_primary = primary
    goal.parent_goal_id = parent_goal_id
    goal.updated_at = datetime.now(timezone.utc)
    logger.info("goal_updated id={} user={} tier={} primary={}", goal.id, user_id, tier, primary)
    session.commit()
    session.refresh(goal)
    return goal


def delete_goal(session: Session, *, user_id: str, goal_id: str) -> None:
    goal = get_goal(session, user_id, goal_id)
    orphaned = _detach_children(goal)
    session.delete(goal)
    logger.info("goal_deleted id={} user={} orphaned_children={}", goal_id, user_id, orphaned)
    session.commit()


def toggle_complete_goal(session: Session, *, user_id: str, goal_id: str) -> Goal:
    goal = get_goal(session, user_id, goal_id)
    now = datetime.now(timezone.utc)

    if goal.completed_at is None:
        goal.completed_at = now
        event = "goal_completed"
    else:
        if goal.is_primary and count_primary_goals(session, user_id, goal.tier) >= PRIMARY_LIMIT:
            raise _reject("uncomplete", user_id, PRIMARY_FULL_ON_UNCOMPLETE, id=goal.id, tier=goal.tier)
        goal.completed_at = None
        event = "goal_uncompleted"

    goal.updated_at = now
    logger.info("{} id={} user={} tier={}", event, goal.id, user_id, goal.tier)
    session.commit()
    session.refresh(goal)
    return goal


def move_goal_tier(session: Session, *, user_id: str, goal_id: str, direction: Direction) -> Goal:
    """
    Move a goal to the adjacent tier.
    - "up" is refused for tiers 1 and 2
    - parent links of the goal and its children are cleared
    - a primary goal moving down into a full tier 4/5 becomes an extra
    """
    _check_direction(direction)
    goal = get_goal(session, user_id, goal_id)
    moving_up = direction == "up"

    if moving_up and goal.tier <= 2:
        raise _reject("move", user_id, MOVE_UP_FORBIDDEN, id=goal.id, tier=goal.tier)

    new_tier = goal.tier - 1 if moving_up else goal.tier + 1
    if not is_valid_tier(new_tier):
        raise _reject("move", user_id, TIER_OUT_OF_RANGE, id=goal.id, tier=new_tier)

    primary = normalize_primary(new_tier, goal.is_primary)
    if primary and goal.completed_at is None:
        if count_primary_goals(session, user_id, new_tier, exclude_goal_id=goal.id) >= PRIMARY_LIMIT:
            if not moving_up and new_tier > FORCED_PRIMARY_MAX_TIER:
                primary = False
            else:
                raise _reject("move", user_id, PRIMARY_FULL_ON_MOVE, id=goal.id, tier=new_tier)

    sort_order = next_sort_order(session, user_id, new_tier, primary)
    from_tier = goal.tier
    _detach_children(goal)

    goal.tier = new_tier
    goal.is_primary = primary
    goal.parent_goal_id = None
    goal.parent = None
    goal.sort_order = sort_order
    goal.updated_at = datetime.now(timezone.utc)
    logger.info(
        "goal_moved id={} user={} from_tier={} to_tier={} primary={}",
        goal.id,
        user_id,
        from_tier,
        new_tier,
        primary,
    )
    session.commit()
    session.refresh(goal)
    return goal


def reorder_goal(session: Session, *, user_id: str, goal_id: str, direction: Direction) -> Goal:
    _check_direction(direction)
    goal = get_goal(session, user_id, goal_id)

    siblings = list(
        session.scalars(
            select(Goal)
            .where(
                and_(
                    Goal.user_id == user_id,
                    Goal.tier == goal.tier,
                    Goal.is_primary.is_(goal.is_primary),
                )
            )
            .order_by(Goal.sort_order, Goal.created_at, Goal.id)
        ).all()
    )
    index = next(i for i, sibling in enumerate(siblings) if sibling.id == goal.id)
    target = index - 1 if direction == "up" else index + 1
    if target < 0:
        raise _reject("reorder", user_id, ALREADY_AT_TOP, id=goal.id)
    if target >= len(siblings):
        raise _reject("reorder", user_id, ALREADY_AT_BOTTOM, id=goal.id)

    siblings[index], siblings[target] = siblings[target], siblings[index]
    # Renumber the whole group so equal sort_order values cannot block the swap.
    for position, sibling in enumerate(siblings):
        if sibling.sort_order != position:
            sibling.sort_order = position

    goal.updated_at = datetime.now(timezone.utc)
    logger.info("goal_reordered id={} user={} tier={} direction={}", goal.id, user_id, goal.tier, direction)
    session.commit()
    session.refresh(goal)
    return goal
