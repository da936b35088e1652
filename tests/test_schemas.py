import uuid

import pytest
from pydantic import ValidationError

from tiergoals.api.schemas import DirectionIn, GoalIn


def test_goal_in_trims_and_coerces() -> None:
    parent = str(uuid.uuid4())
    goal = GoalIn.model_validate(
        {"title": "  Run a marathon ", "notes": "\n", "tier": "4", "is_primary": "1", "parent_goal_id": parent}
    )
    assert goal.title == "Run a marathon"
    assert goal.notes is None
    assert goal.tier == 4
    assert goal.is_primary is True
    assert goal.parent_goal_id == parent


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("", None),
        ("true", True),
        ("off", False),
        ("TRUE", False),
        (" on ", False),
        (False, False),
    ],
)
def test_goal_in_primary_flag(raw, expected) -> None:
    goal = GoalIn.model_validate({"title": "t", "tier": 5, "is_primary": raw})
    assert goal.is_primary is expected


def test_goal_in_blank_parent_is_unset() -> None:
    assert GoalIn.model_validate({"title": "t", "tier": 2, "parent_goal_id": ""}).parent_goal_id is None


def test_goal_in_rejects_missing_title() -> None:
    with pytest.raises(ValidationError, match="Title is required"):
        GoalIn.model_validate({"title": None, "tier": 1})


def test_direction_in_rejects_unknown_value() -> None:
    with pytest.raises(ValidationError):
        DirectionIn.model_validate({"direction": "left"})
