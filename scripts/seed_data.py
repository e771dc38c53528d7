"""
Seed Data Generator — creates realistic fake study history for development.

Run: python scripts/seed_data.py [days]
"""

import logging
import random
import sys
from datetime import datetime, time, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from study_tracker.config import load_config
from study_tracker.data.models import GoalType
from study_tracker.services.study_service import StudyService, build_repository

# subject -> (weight, typical minutes)
SUBJECTS = {
    "Mathematics": (5, 60),
    "Computer Science": (4, 75),
    "Physics": (3, 50),
    "History": (2, 40),
    "Languages": (2, 25),
}

# preferred start hours; evenings are popular
START_HOURS = [8, 9, 10, 14, 15, 16, 19, 20, 20, 21, 21, 22]


def seed(days: int = 30) -> None:
    config = load_config()
    if config.get("storage") == "memory":
        print("Storage is set to memory; nothing would be kept. Aborting.")
        return
    repo, db = build_repository(config)
    service = StudyService(repo)

    names = list(SUBJECTS)
    weights = [SUBJECTS[n][0] for n in names]
    today = datetime.now().date()
    count = 0

    for offset in range(days, -1, -1):
        # ~25% of days skipped, which breaks streaks now and then
        if offset > 0 and random.random() < 0.25:
            continue
        day = today - timedelta(days=offset)
        for _ in range(random.randint(1, 3)):
            subject = random.choices(names, weights)[0]
            typical = SUBJECTS[subject][1]
            start = datetime.combine(day, time(random.choice(START_HOURS),
                                               random.randint(0, 59)))
            if start > datetime.now():
                continue
            service.log_session(
                subject=subject,
                duration=max(5, int(random.gauss(typical, typical / 3))),
                date=start,
                notes=random.choice([None, None, "Practice problems", "Review notes"]),
            )
            count += 1

    week_start = datetime.combine(today - timedelta(days=today.weekday()), time.min)
    service.create_goal(GoalType.WEEKLY, 10, "Ten hours this week",
                        week_start, week_start + timedelta(days=7) - timedelta(microseconds=1))
    service.create_goal(GoalType.MONTHLY, 30, "Thirty hours this month",
                        datetime.combine(today - timedelta(days=29), time.min),
                        datetime.combine(today, time.max))
    service.create_goal(GoalType.DAILY, 2, "Two hours today",
                        datetime.combine(today, time.min),
                        datetime.combine(today, time.max))

    if db is not None:
        db.close()
    print(f"Seeded {count} sessions over {days} days and 3 goals.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING)
    n_days = int(sys.argv[1]) if len(sys.argv) > 1 else 30
    seed(n_days)


# ---------------------------------------------------------------------------
# Explanation (for interviews)
# ---------------------------------------------------------------------------
# What this script does:
#   Generates a month of plausible study history so the dashboard and the
#   insights charts have something to show on first launch.
#
# Key points:
#   - Goes through StudyService, so seeded data passes the same validation
#     as data typed into the dialogs.
#   - Skipped days and weighted subjects give streak breaks, a clear
#     favorite subject and an evening peak hour.
