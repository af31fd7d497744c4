# wellness/achievements/catalog.py
from dataclasses import dataclass
from typing import Dict, List

JOURNAL = "journal"
CALENDAR = "calendar"
FRIENDS = "friends"
CHAT = "chat"
DAILY_FOCUS = "daily-focus"

DOMAINS = (JOURNAL, CALENDAR, FRIENDS, CHAT, DAILY_FOCUS)


@dataclass(frozen=True)
class BadgeRule:
    domain: str
    badge_name: str
    metric: str
    threshold: int


# (domain, badge name, metric, threshold)
# Metric names are the keys each domain recompute puts in its metrics dict.
BADGE_RULES: List[BadgeRule] = [
    BadgeRule(JOURNAL, "First Steps", "total_entries", 1),
    BadgeRule(JOURNAL, "Wellness Warrior", "total_entries", 30),
    BadgeRule(JOURNAL, "Reflection Master", "total_entries", 100),
    BadgeRule(JOURNAL, "Journal Journey", "total_entries", 250),
    BadgeRule(JOURNAL, "Deep Thinker", "entry_words", 500),
    BadgeRule(JOURNAL, "Expressive Writer", "entry_words", 1000),
    BadgeRule(JOURNAL, "Word Wizard", "total_words", 50000),
    BadgeRule(JOURNAL, "Consistency King", "current_streak", 7),
    BadgeRule(JOURNAL, "Perfect Week", "current_streak", 7),
    BadgeRule(JOURNAL, "Consistent Contributor", "current_streak", 30),
    BadgeRule(JOURNAL, "Perfect Month", "current_streak", 30),
    BadgeRule(JOURNAL, "Dedication Demon", "current_streak", 90),
    # boolean conditions ride on the same progress mechanism: 0 or 1 against 1
    BadgeRule(JOURNAL, "Early Bird", "entry_before_7am", 1),
    BadgeRule(JOURNAL, "Midnight Owl", "entry_after_10pm", 1),
    BadgeRule(JOURNAL, "Morning Person", "entries_before_7am", 5),
    BadgeRule(JOURNAL, "Night Writer", "entries_after_midnight", 5),
    BadgeRule(JOURNAL, "Week Warrior", "entries_this_week", 7),
    BadgeRule(JOURNAL, "Monthly Champion", "entries_this_month", 20),
    BadgeRule(JOURNAL, "Reflection Ready", "entries_today", 5),

    BadgeRule(CALENDAR, "Organized Mind", "total_events", 5),
    BadgeRule(CALENDAR, "Planner Pro", "total_events", 10),
    BadgeRule(CALENDAR, "Organizer Extraordinaire", "total_events", 50),
    BadgeRule(CALENDAR, "Time Master", "distinct_event_days", 7),

    BadgeRule(FRIENDS, "Social Butterfly", "total_friends", 3),
    BadgeRule(FRIENDS, "Community Builder", "total_friends", 10),
    BadgeRule(FRIENDS, "Networker Extraordinaire", "total_friends", 25),

    BadgeRule(CHAT, "Conversation Starter", "total_chats", 5),
    BadgeRule(CHAT, "Chat Champion", "total_chats", 20),
    BadgeRule(CHAT, "Communication Master", "total_messages", 100),

    BadgeRule(DAILY_FOCUS, "Focus Starter", "completed_focus", 10),
    BadgeRule(DAILY_FOCUS, "Goal Achiever", "completed_focus", 50),
    BadgeRule(DAILY_FOCUS, "Focus Master", "completed_focus", 100),
]


def rules_for(domain: str) -> List[BadgeRule]:
    return [rule for rule in BADGE_RULES if rule.domain == domain]


# Seed data for the `badges` table. Names must match BADGE_RULES.
BADGE_CATALOG: List[Dict[str, str]] = [
    {"name": "First Steps", "icon_name": "footprints",
     "description": "Wrote your very first journal entry",
     "requirement": "Write 1 journal entry"},
    {"name": "Wellness Warrior", "icon_name": "shield",
     "description": "A month's worth of reflection",
     "requirement": "Write 30 journal entries"},
    {"name": "Reflection Master", "icon_name": "mirror",
     "description": "Journaling is part of who you are",
     "requirement": "Write 100 journal entries"},
    {"name": "Journal Journey", "icon_name": "book",
     "description": "A long road of reflection",
     "requirement": "Write 250 journal entries"},
    {"name": "Deep Thinker", "icon_name": "brain",
     "description": "Went deep in a single entry",
     "requirement": "Write 500 words in one entry"},
    {"name": "Expressive Writer", "icon_name": "pen",
     "description": "Poured it all out",
     "requirement": "Write 1000 words in one entry"},
    {"name": "Word Wizard", "icon_name": "wand",
     "description": "Lifetime wordsmith",
     "requirement": "Write 50,000 words in total"},
    {"name": "Consistency King", "icon_name": "crown",
     "description": "Showed up every day for a week",
     "requirement": "Reach a 7 day streak"},
    {"name": "Perfect Week", "icon_name": "calendar-check",
     "description": "Seven days without a miss",
     "requirement": "Reach a 7 day streak"},
    {"name": "Consistent Contributor", "icon_name": "repeat",
     "description": "A month of daily journaling",
     "requirement": "Reach a 30 day streak"},
    {"name": "Perfect Month", "icon_name": "calendar-star",
     "description": "Thirty days without a miss",
     "requirement": "Reach a 30 day streak"},
    {"name": "Dedication Demon", "icon_name": "flame",
     "description": "Unstoppable",
     "requirement": "Reach a 90 day streak"},
    {"name": "Early Bird", "icon_name": "sunrise",
     "description": "Journaled before the day got busy",
     "requirement": "Write an entry before 7am"},
    {"name": "Midnight Owl", "icon_name": "moon",
     "description": "Late night reflection",
     "requirement": "Write an entry after 10pm"},
    {"name": "Morning Person", "icon_name": "sun",
     "description": "Mornings are for reflection",
     "requirement": "Write 5 entries before 7am"},
    {"name": "Night Writer", "icon_name": "stars",
     "description": "Small hours, big thoughts",
     "requirement": "Write 5 entries between midnight and 6am"},
    {"name": "Week Warrior", "icon_name": "swords",
     "description": "A full week of entries",
     "requirement": "Write 7 entries in one week"},
    {"name": "Monthly Champion", "icon_name": "trophy",
     "description": "A busy month of journaling",
     "requirement": "Write 20 entries in one month"},
    {"name": "Reflection Ready", "icon_name": "sparkles",
     "description": "Lots on your mind today",
     "requirement": "Write 5 entries in one day"},
    {"name": "Organized Mind", "icon_name": "list",
     "description": "Started planning ahead",
     "requirement": "Create 5 calendar events"},
    {"name": "Planner Pro", "icon_name": "clipboard",
     "description": "Plans are coming together",
     "requirement": "Create 10 calendar events"},
    {"name": "Organizer Extraordinaire", "icon_name": "folder",
     "description": "Master of the schedule",
     "requirement": "Create 50 calendar events"},
    {"name": "Time Master", "icon_name": "clock",
     "description": "Spread your plans across the week",
     "requirement": "Have events on 7 different days"},
    {"name": "Social Butterfly", "icon_name": "butterfly",
     "description": "Building your support circle",
     "requirement": "Add 3 friends"},
    {"name": "Community Builder", "icon_name": "users",
     "description": "A real community",
     "requirement": "Add 10 friends"},
    {"name": "Networker Extraordinaire", "icon_name": "network",
     "description": "Everyone knows you",
     "requirement": "Add 25 friends"},
    {"name": "Conversation Starter", "icon_name": "message",
     "description": "Opened up to your coach",
     "requirement": "Start 5 coaching chats"},
    {"name": "Chat Champion", "icon_name": "messages",
     "description": "A regular with your coach",
     "requirement": "Start 20 coaching chats"},
    {"name": "Communication Master", "icon_name": "megaphone",
     "description": "Lots of good conversations",
     "requirement": "Exchange 100 chat messages"},
    {"name": "Focus Starter", "icon_name": "target",
     "description": "Following through on your focus",
     "requirement": "Complete 10 daily focus items"},
    {"name": "Goal Achiever", "icon_name": "flag",
     "description": "Goals met, again and again",
     "requirement": "Complete 50 daily focus items"},
    {"name": "Focus Master", "icon_name": "medal",
     "description": "Laser focus",
     "requirement": "Complete 100 daily focus items"},
]
