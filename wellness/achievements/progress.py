# wellness/achievements/progress.py
import logging

from .clock import Clock
from .datastore import Datastore

logger = logging.getLogger(__name__)


class ProgressUpdater:
    """The only writer of `user_badges` rows."""

    def __init__(self, datastore: Datastore, clock: Clock):
        self.datastore = datastore
        self.clock = clock

    def update(self, user_id: int, badge_name: str, progress: int, threshold: int) -> bool:
        """
        Merge a freshly computed progress value into the stored one.

        Unknown badge names and values that do not beat the stored progress
        are no-ops. Returns True when the stored row changed.
        """
        badge_id = self.datastore.get_badge_id(badge_name)
        if badge_id is None:
            logger.debug("badge %r not in catalog, skipping", badge_name)
            return False

        stored = self.datastore.get_badge_progress(user_id, badge_id)
        stored_progress = stored.progress if stored else 0
        already_earned = bool(stored and stored.earned)

        if progress <= stored_progress:
            return False

        earned = progress >= threshold
        changed = self.datastore.advance_badge_progress(
            user_id, badge_id, progress, earned, self.clock.now()
        )
        if changed and earned and not already_earned:
            logger.info("user_id=%s earned badge %r", user_id, badge_name)
        return changed
