from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from tiergoals.api.auth import get_current_user_id
from tiergoals.api.schemas import DirectionIn, GoalIn, GoalOut, TierMetaOut
from tiergoals.core.errors import GoalNotFound, GoalRuleError
from tiergoals.core.tiers import TIERS
from tiergoals.db.repositories import goals_repo
from tiergoals.db.session import get_db

router = APIRouter(prefix="/api")


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, GoalNotFound):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/tiers", response_model=list[TierMetaOut])
def list_tiers(_user_id: str = Depends(get_current_user_id)) -> list[TierMetaOut]:
    return [TierMetaOut.model_validate(meta) for meta in TIERS]


@router.get("/goals", response_model=list[GoalOut])
def list_goals(
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> list[GoalOut]:
    return [GoalOut.from_goal(goal) for goal in goals_repo.list_goals_for_user(session, user_id)]


@router.get("/goals/{goal_id}", response_model=GoalOut)
def get_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> GoalOut:
    try:
        goal = goals_repo.get_goal(session, user_id, goal_id)
    except GoalNotFound as exc:
        raise _http_error(exc)
    return GoalOut.from_goal(goal)


@router.post("/goals", response_model=GoalOut, status_code=status.HTTP_201_CREATED)
def create_goal(
    payload: GoalIn,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> GoalOut:
    try:
        goal = goals_repo.create_goal(session, user_id=user_id, **payload.model_dump())
    except GoalRuleError as exc:
        raise _http_error(exc)
    return GoalOut.from_goal(goal)


@router.put("/goals/{goal_id}", response_model=GoalOut)
def update_goal(
    goal_id: str,
    payload: GoalIn,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> GoalOut:
    try:
        goal = goals_repo.update_goal(session, user_id=user_id, goal_id=goal_id, **payload.model_dump())
    except (GoalNotFound, GoalRuleError) as exc:
        raise _http_error(exc)
    return GoalOut.from_goal(goal)


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> Response:
    try:
        goals_repo.delete_goal(session, user_id=user_id, goal_id=goal_id)
    except GoalNotFound as exc:
        raise _http_error(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/goals/{goal_id}/complete", response_model=GoalOut)
def toggle_complete(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> GoalOut:
    try:
        goal = goals_repo.toggle_complete_goal(session, user_id=user_id, goal_id=goal_id)
    except (GoalNotFound, GoalRuleError) as exc:
        raise _http_error(exc)
    return GoalOut.from_goal(goal)


@router.post("/goals/{goal_id}/move", response_model=GoalOut)
def move_goal(
    goal_id: str,
    payload: DirectionIn,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> GoalOut:
    try:
        goal = goals_repo.move_goal_tier(session, user_id=user_id, goal_id=goal_id, direction=payload.direction)
    except (GoalNotFound, GoalRuleError) as exc:
        raise _http_error(exc)
    return GoalOut.from_goal(goal)


@router.post("/goals/{goal_id}/reorder", response_model=GoalOut)
def reorder_goal(
    goal_id: str,
    payload: DirectionIn,
    user_id: str = Depends(get_current_user_id),
    session: Session = Depends(get_db),
) -> GoalOut:
    try:
        goal = goals_repo.reorder_goal(session, user_id=user_id, goal_id=goal_id, direction=payload.direction)
    except (GoalNotFound, GoalRuleError) as exc:
        raise _http_error(exc)
    return GoalOut.from_goal(goal)
