# wellness/achievements/stats.py
import logging
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

from .clock import Clock, start_of_month, start_of_week
from .datastore import Datastore, UserStatsRecord
from .errors import StatsConflictError

logger = logging.getLogger(__name__)


def count_words(text: Optional[str]) -> int:
    return len((text or "").split())


def next_streak(
    current_streak: int,
    longest_streak: int,
    last_entry_date: Optional[date],
    entry_date: date,
):
    """
    Streak transition for one new entry.

    Returns (current_streak, longest_streak, last_entry_date):
      - same calendar day     -> unchanged
      - the day after         -> +1
      - earlier than the last -> ignored (backfill does not move the streak)
      - anything else         -> restart at 1
    """
    if last_entry_date is None:
        current_streak = 1
    elif entry_date == last_entry_date:
        pass
    elif entry_date < last_entry_date:
        return current_streak, longest_streak, last_entry_date
    elif entry_date - last_entry_date == timedelta(days=1):
        current_streak += 1
    else:
        current_streak = 1

    return current_streak, max(longest_streak, current_streak), entry_date


class StatsAggregator:
    """Keeps the per-user `user_stats` row in step with journal writes."""

    def __init__(self, datastore: Datastore, clock: Clock, max_retries: int = 3):
        self.datastore = datastore
        self.clock = clock
        self.max_retries = max(1, int(max_retries))

    def record_entry(
        self,
        user_id: int,
        entry_text: str,
        entry_timestamp: Optional[datetime] = None,
    ) -> UserStatsRecord:
        """Fold one freshly persisted journal entry into the user's stats.

        The write is conditional on the version that was read; when another
        request updated the row in between, the row is reloaded and the entry
        is folded in again.
        """
        entry_timestamp = entry_timestamp or self.clock.now()
        word_count = count_words(entry_text)

        for attempt in range(1, self.max_retries + 1):
            stored = self.datastore.get_user_stats(user_id)
            if stored is None:
                stored = UserStatsRecord(user_id=user_id)

            updated = self._apply_entry(stored, word_count, entry_timestamp)
            if self.datastore.save_user_stats(updated):
                return updated

            logger.warning(
                "user_stats write conflict user_id=%s attempt=%s/%s",
                user_id,
                attempt,
                self.max_retries,
            )

        raise StatsConflictError(user_id, self.max_retries)

    def _apply_entry(
        self, stored: UserStatsRecord, word_count: int, entry_timestamp: datetime
    ) -> UserStatsRecord:
        now = self.clock.now()
        user_id = stored.user_id

        current_streak, longest_streak, last_entry_date = next_streak(
            stored.current_streak,
            stored.longest_streak,
            stored.last_entry_date,
            entry_timestamp.date(),
        )

        # recounted from the source so the weekly/monthly figures never drift
        entries_this_week = self.datastore.count(
            "journal", user_id, since=start_of_week(now)
        )
        entries_this_month = self.datastore.count(
            "journal", user_id, since=start_of_month(now)
        )

        # independent buckets: a 2am entry lands in both early ones
        hour = entry_timestamp.hour
        return replace(
            stored,
            total_entries=stored.total_entries + 1,
            total_words=stored.total_words + word_count,
            current_streak=current_streak,
            longest_streak=longest_streak,
            last_entry_date=last_entry_date,
            entries_this_week=entries_this_week,
            entries_this_month=entries_this_month,
            entries_before_7am=stored.entries_before_7am + (1 if hour < 7 else 0),
            entries_after_10pm=stored.entries_after_10pm + (1 if hour >= 22 else 0),
            entries_after_midnight=stored.entries_after_midnight + (1 if hour < 6 else 0),
            updated_at=now,
        )
