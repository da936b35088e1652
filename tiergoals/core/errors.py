class GoalRuleError(ValueError):
    """A goal mutation would break a tier or primary-slot rule."""


class GoalNotFound(LookupError):
    pass
