# wellness/achievements/datastore.py
"""
Persistence port for the badge engine.

The engine only talks to a ``Datastore``: point reads and conditional writes
keyed by user (and badge), counts with simple filters, and distinct dates.
``SqlAlchemyDatastore`` is the implementation on top of the Flask-SQLAlchemy
models; every write commits on its own because badge bookkeeping always runs
after the request's primary write has been committed.
"""
import functools
from dataclasses import dataclass, fields
from datetime import date, datetime
from typing import Optional, Protocol, Set

from sqlalchemy import Date, func, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..models.badges import Badge, UserBadge, UserStats
from ..models.chat import Chat, ChatMessage
from ..models.event import Event
from ..models.focus import UserDailyFocus
from ..models.journal import JournalEntry
from ..models.social import Friendship


@dataclass
class UserStatsRecord:
    user_id: int
    total_entries: int = 0
    total_words: int = 0
    current_streak: int = 0
    longest_streak: int = 0
    last_entry_date: Optional[date] = None
    entries_this_week: int = 0
    entries_this_month: int = 0
    entries_before_7am: int = 0
    entries_after_10pm: int = 0
    entries_after_midnight: int = 0
    updated_at: Optional[datetime] = None
    # None until the row exists
    version: Optional[int] = None


@dataclass
class BadgeProgressRecord:
    user_id: int
    badge_id: int
    progress: int
    earned: bool
    earned_at: Optional[datetime]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


@dataclass
class JournalEntryRecord:
    id: int
    user_id: int
    text: str
    created_at: datetime


class Datastore(Protocol):
    def get_user_stats(self, user_id: int) -> Optional[UserStatsRecord]:
        ...

    def save_user_stats(self, record: UserStatsRecord) -> bool:
        """Insert (version None) or update conditional on ``record.version``.

        Returns False when another writer got there first.
        """
        ...

    def get_badge_id(self, name: str) -> Optional[int]:
        ...

    def get_badge_progress(self, user_id: int, badge_id: int) -> Optional[BadgeProgressRecord]:
        ...

    def advance_badge_progress(
        self, user_id: int, badge_id: int, progress: int, earned: bool, now: datetime
    ) -> bool:
        """Raise stored progress to ``progress`` if it is lower. Never lowers it,
        never clears ``earned``, never overwrites an existing ``earned_at``."""
        ...

    def count(
        self,
        source: str,
        user_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        flag: Optional[bool] = None,
    ) -> int:
        """Rows owned by ``user_id``; ``since`` inclusive, ``until`` exclusive."""
        ...

    def distinct_dates(self, source: str, user_id: int) -> Set[date]:
        ...

    def latest_journal_entry(self, user_id: int) -> Optional[JournalEntryRecord]:
        ...


_STATS_FIELDS = [f.name for f in fields(UserStatsRecord) if f.name not in ("user_id", "version")]

# source -> (model, owner column, time column, flag column)
_SOURCES = {
    "journal": (JournalEntry, JournalEntry.user_id, JournalEntry.created_at, None),
    "events": (Event, Event.user_id, Event.start_time, None),
    "chats": (Chat, Chat.user_id, Chat.created_at, None),
    "focus": (UserDailyFocus, UserDailyFocus.user_id, UserDailyFocus.created_at, UserDailyFocus.completed),
}


def _rollback_on_error(method):
    """Leave the session usable for the next caller, then re-raise."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except SQLAlchemyError:
            self.session.rollback()
            raise

    return wrapper


class SqlAlchemyDatastore:
    def __init__(self, db):
        self._db = db

    @property
    def session(self):
        return self._db.session

    # ------------------------------
    # user_stats
    # ------------------------------
    @_rollback_on_error
    def get_user_stats(self, user_id: int) -> Optional[UserStatsRecord]:
        row = self.session.execute(
            select(UserStats)
            .where(UserStats.user_id == user_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if row is None:
            return None

        record = UserStatsRecord(user_id=row.user_id, version=row.version)
        for name in _STATS_FIELDS:
            value = getattr(row, name)
            if value is not None:
                setattr(record, name, value)
        return record

    @_rollback_on_error
    def save_user_stats(self, record: UserStatsRecord) -> bool:
        values = {name: getattr(record, name) for name in _STATS_FIELDS}

        if record.version is None:
            # unset columns fall back to the model defaults
            values = {k: v for k, v in values.items() if v is not None}
            stmt = insert(UserStats).values(user_id=record.user_id, version=1, **values)
            try:
                self.session.execute(stmt)
                self.session.commit()
            except IntegrityError:
                # created concurrently
                self.session.rollback()
                return False
            record.version = 1
            return True

        result = self.session.execute(
            update(UserStats)
            .where(
                UserStats.user_id == record.user_id,
                UserStats.version == record.version,
            )
            .values(version=record.version + 1, **values)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        if result.rowcount == 0:
            return False
        record.version += 1
        return True

    # ------------------------------
    # badges / user_badges
    # ------------------------------
    @_rollback_on_error
    def get_badge_id(self, name: str) -> Optional[int]:
        return self.session.execute(
            select(Badge.id).where(Badge.name == name)
        ).scalar_one_or_none()

    @_rollback_on_error
    def get_badge_progress(self, user_id: int, badge_id: int) -> Optional[BadgeProgressRecord]:
        row = self.session.execute(
            select(UserBadge)
            .where(UserBadge.user_id == user_id, UserBadge.badge_id == badge_id)
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if row is None:
            return None
        return BadgeProgressRecord(
            user_id=row.user_id,
            badge_id=row.badge_id,
            progress=row.progress or 0,
            earned=bool(row.earned),
            earned_at=row.earned_at,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    @_rollback_on_error
    def advance_badge_progress(
        self, user_id: int, badge_id: int, progress: int, earned: bool, now: datetime
    ) -> bool:
        exists = self.session.execute(
            select(UserBadge.id).where(
                UserBadge.user_id == user_id, UserBadge.badge_id == badge_id
            )
        ).scalar_one_or_none()

        if exists is None:
            self.session.add(
                UserBadge(
                    user_id=user_id,
                    badge_id=badge_id,
                    progress=progress,
                    earned=earned,
                    earned_at=now if earned else None,
                    created_at=now,
                    updated_at=now,
                )
            )
            try:
                self.session.commit()
                return True
            except IntegrityError:
                # another request created the row first; fall through to the guarded update
                self.session.rollback()

        values = {"progress": progress, "updated_at": now}
        if earned:
            values["earned"] = True
            values["earned_at"] = func.coalesce(UserBadge.earned_at, now)

        result = self.session.execute(
            update(UserBadge)
            .where(
                UserBadge.user_id == user_id,
                UserBadge.badge_id == badge_id,
                UserBadge.progress < progress,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount > 0

    # ------------------------------
    # activity aggregates
    # ------------------------------
    @_rollback_on_error
    def count(
        self,
        source: str,
        user_id: int,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        flag: Optional[bool] = None,
    ) -> int:
        if source == "friends":
            stmt = select(func.count(Friendship.id)).where(
                Friendship.status == "accepted",
                or_(
                    Friendship.requester_id == user_id,
                    Friendship.addressee_id == user_id,
                ),
            )
            if since is not None:
                stmt = stmt.where(Friendship.created_at >= since)
            if until is not None:
                stmt = stmt.where(Friendship.created_at < until)
            return int(self.session.execute(stmt).scalar() or 0)

        if source == "messages":
            stmt = (
                select(func.count(ChatMessage.id))
                .join(Chat, ChatMessage.chat_id == Chat.id)
                .where(Chat.user_id == user_id)
            )
            if since is not None:
                stmt = stmt.where(ChatMessage.created_at >= since)
            if until is not None:
                stmt = stmt.where(ChatMessage.created_at < until)
            return int(self.session.execute(stmt).scalar() or 0)

        try:
            model, owner_col, time_col, flag_col = _SOURCES[source]
        except KeyError:
            raise ValueError(f"unknown count source: {source!r}") from None

        stmt = select(func.count()).select_from(model).where(owner_col == user_id)
        if since is not None:
            stmt = stmt.where(time_col >= since)
        if until is not None:
            stmt = stmt.where(time_col < until)
        if flag is not None:
            if flag_col is None:
                raise ValueError(f"source {source!r} has no flag column")
            stmt = stmt.where(flag_col.is_(flag))
        return int(self.session.execute(stmt).scalar() or 0)

    @_rollback_on_error
    def distinct_dates(self, source: str, user_id: int) -> Set[date]:
        if source != "events":
            raise ValueError(f"distinct dates not supported for {source!r}")
        day = func.date(Event.start_time, type_=Date)
        rows = self.session.execute(
            select(day).where(Event.user_id == user_id).distinct()
        ).scalars()
        return {d for d in rows if d is not None}

    @_rollback_on_error
    def latest_journal_entry(self, user_id: int) -> Optional[JournalEntryRecord]:
        row = self.session.execute(
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.created_at.desc(), JournalEntry.id.desc())
            .limit(1)
        ).scalar_one_or_none()
        if row is None:
            return None
        return JournalEntryRecord(
            id=row.id, user_id=row.user_id, text=row.text, created_at=row.created_at
        )
