from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tiergoals.api.auth import get_current_user_id
from tiergoals.api.schemas import DashboardOut, GoalOut, ParentOption, TierMetaOut, TierSectionOut
from tiergoals.core.tiers import PRIMARY_LIMIT, parent_tier, tier_meta
from tiergoals.db.models import Goal
from tiergoals.db.repositories.goals_repo import goals_grouped_by_tier
from tiergoals.db.session import get_db

router = APIRouter(prefix="/api")


def build_tier_section(tier: int, goals: list[Goal], parent_goals: list[Goal]) -> TierSectionOut:
    active = [goal for goal in goals if goal.completed_at is None]
    completed = [goal for goal in goals if goal.completed_at is not None]
    primary = [GoalOut.from_goal(goal) for goal in active if goal.is_primary]

    return TierSectionOut(
        meta=TierMetaOut.model_validate(tier_meta(tier)),
        primary_count=len(primary),
        primary_limit=PRIMARY_LIMIT,
        primary=primary,
        extra=[GoalOut.from_goal(goal) for goal in active if not goal.is_primary],
        completed_primary=[GoalOut.from_goal(goal) for goal in completed if goal.is_primary],
        completed_extra=[GoalOut.from_goal(goal) for goal in completed if not goal.is_primary],
        parent_options=[ParentOption(id=goal.id, title=goal.title, tier=goal.tier) for goal in parent_goals],
    )


@router.get("/dashboard", response_model=DashboardOut)
def dashboard(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> DashboardOut:
    grouped = dict(goals_grouped_by_tier(session, user_id))
    sections = []
    for tier, goals in grouped.items():
        above = parent_tier(tier)
        parent_goals = grouped.get(above, []) if above is not None else []
        sections.append(build_tier_section(tier, goals, parent_goals))
    return DashboardOut(tiers=sections)
