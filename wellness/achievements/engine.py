# wellness/achievements/engine.py
"""
Badge engine entry points.

API handlers call one ``recompute_*`` method after their own write has been
committed. Each method gathers the metrics of one domain and feeds every rule
of that domain through the progress updater. Datastore errors propagate to
the caller; ``recompute_all_badges`` is the exception and keeps going when a
single domain fails.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Optional

from .catalog import CALENDAR, CHAT, DAILY_FOCUS, FRIENDS, JOURNAL, rules_for
from .clock import Clock, start_of_day
from .datastore import Datastore, UserStatsRecord
from .progress import ProgressUpdater
from .stats import StatsAggregator, count_words

logger = logging.getLogger(__name__)


class BadgeEngine:
    def __init__(self, datastore: Datastore, clock: Clock, max_retries: int = 3):
        self.datastore = datastore
        self.clock = clock
        self.stats = StatsAggregator(datastore, clock, max_retries=max_retries)
        self.progress = ProgressUpdater(datastore, clock)

    # ------------------------------
    # Domains
    # ------------------------------
    def recompute_journal_badges(
        self, user_id: int, entry_text: str, entry_date: Optional[datetime] = None
    ) -> None:
        entry_date = entry_date or self.clock.now()
        stats = self.stats.record_entry(user_id, entry_text, entry_date)
        self._award_journal(user_id, stats, entry_text, entry_date)

    def recompute_calendar_badges(self, user_id: int) -> None:
        self._recompute_domain(
            CALENDAR,
            user_id,
            {
                "total_events": self.datastore.count("events", user_id),
                "distinct_event_days": len(self.datastore.distinct_dates("events", user_id)),
            },
        )

    def recompute_friends_badges(self, user_id: int) -> None:
        self._recompute_domain(
            FRIENDS,
            user_id,
            {"total_friends": self.datastore.count("friends", user_id)},
        )

    def recompute_chat_badges(self, user_id: int) -> None:
        self._recompute_domain(
            CHAT,
            user_id,
            {
                "total_chats": self.datastore.count("chats", user_id),
                "total_messages": self.datastore.count("messages", user_id),
            },
        )

    def recompute_daily_focus_badges(self, user_id: int) -> None:
        self._recompute_domain(
            DAILY_FOCUS,
            user_id,
            {"completed_focus": self.datastore.count("focus", user_id, flag=True)},
        )

    # ------------------------------
    # Orchestrator
    # ------------------------------
    def recompute_all_badges(self, user_id: int) -> None:
        """Re-drive every domain for one user. Failed domains are logged and skipped."""
        steps = [
            (JOURNAL, self._repair_journal),
            (CALENDAR, self.recompute_calendar_badges),
            (FRIENDS, self.recompute_friends_badges),
            (CHAT, self.recompute_chat_badges),
            (DAILY_FOCUS, self.recompute_daily_focus_badges),
        ]
        for domain, step in steps:
            try:
                step(user_id)
            except Exception:
                logger.exception(
                    "badge recompute failed for domain=%s user_id=%s", domain, user_id
                )

    def _repair_journal(self, user_id: int) -> None:
        latest = self.datastore.latest_journal_entry(user_id)
        if latest is None:
            return

        stats = self.datastore.get_user_stats(user_id)
        if stats is None:
            # entries predate the stats row: fold the latest one in once
            self.recompute_journal_badges(user_id, latest.text, latest.created_at)
            return

        self._award_journal(user_id, stats, latest.text, latest.created_at)

    # ------------------------------
    # Internals
    # ------------------------------
    def _award_journal(
        self,
        user_id: int,
        stats: UserStatsRecord,
        entry_text: str,
        entry_date: datetime,
    ) -> None:
        day_start = start_of_day(entry_date)
        entries_today = self.datastore.count(
            "journal", user_id, since=day_start, until=day_start + timedelta(days=1)
        )

        self._recompute_domain(
            JOURNAL,
            user_id,
            {
                "total_entries": stats.total_entries,
                "entry_words": count_words(entry_text),
                "total_words": stats.total_words,
                "current_streak": stats.current_streak,
                "entry_before_7am": 1 if entry_date.hour < 7 else 0,
                "entry_after_10pm": 1 if entry_date.hour >= 22 else 0,
                "entries_before_7am": stats.entries_before_7am,
                "entries_after_midnight": stats.entries_after_midnight,
                "entries_this_week": stats.entries_this_week,
                "entries_this_month": stats.entries_this_month,
                "entries_today": entries_today,
            },
        )

    def _recompute_domain(self, domain: str, user_id: int, metrics: Dict[str, int]) -> None:
        for rule in rules_for(domain):
            value = metrics[rule.metric]
            self.progress.update(
                user_id,
                rule.badge_name,
                min(value, rule.threshold),
                rule.threshold,
            )
