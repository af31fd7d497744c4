# wellness/achievements/errors.py


class BadgeEngineError(Exception):
    """Base class for badge engine failures."""


class StatsConflictError(BadgeEngineError):
    """The stats row kept changing underneath the aggregator."""

    def __init__(self, user_id: int, attempts: int):
        self.user_id = user_id
        self.attempts = attempts
        super().__init__(
            f"user_stats for user_id={user_id} changed concurrently "
            f"{attempts} times in a row"
        )
