"""XP awards and check-in streaks against the database."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import select, update

from moneyglow.db.models import User
from moneyglow.errors import UserNotFound
from moneyglow.gamification.levels import XPAction
from moneyglow.gamification.streak_service import update_streak
from moneyglow.gamification.xp_service import award_xp

# 10:00 in Manila
MORNING = datetime(2026, 3, 10, 2, 0, tzinfo=timezone.utc)


async def _reload(db, user_id: str) -> User:
    result = await db.execute(
        select(User).where(User.id == user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


class TestAwardXP:
    async def test_level_up_from_newbie(self, db_session, make_user):
        user = await make_user(xp=95, level=1)
        award = await award_xp(db_session, user.id, XPAction.LOG_INCOME)
        await db_session.commit()

        assert award.xp == 105
        assert award.level == 2
        assert award.xp_awarded == 10
        assert award.leveled_up is True

        stored = await _reload(db_session, user.id)
        assert (stored.xp, stored.level) == (105, 2)

    async def test_no_level_change(self, db_session, make_user):
        user = await make_user(xp=10, level=1)
        award = await award_xp(db_session, user.id, XPAction.LOG_EXPENSE)
        assert (award.xp, award.level, award.leveled_up) == (15, 1, False)

    async def test_stale_level_is_corrected(self, db_session, make_user):
        user = await make_user(xp=650, level=1)
        award = await award_xp(db_session, user.id, XPAction.DAILY_CHECK_IN)
        assert award.level == 4

    async def test_increments_accumulate(self, db_session, make_user):
        user = await make_user()
        for action in (XPAction.LOG_INCOME, XPAction.SAVE_BUDGET, XPAction.GET_DAILY_ADVICE, XPAction.COMPLETE_QUIZ):
            await award_xp(db_session, user.id, action)
        await db_session.commit()
        stored = await _reload(db_session, user.id)
        assert stored.xp == 70

    async def test_unknown_user(self, db_session):
        with pytest.raises(UserNotFound):
            await award_xp(db_session, "missing-user", XPAction.LOG_INCOME)


class TestUpdateStreak:
    async def test_same_day_twice(self, db_session, make_user):
        user = await make_user()
        first = await update_streak(db_session, user.id, MORNING)
        second = await update_streak(db_session, user.id, MORNING + timedelta(hours=5))
        assert (first.streak_count, first.longest_streak, first.is_new) == (1, 1, True)
        assert (second.streak_count, second.longest_streak, second.is_new) == (1, 1, False)

    async def test_ten_consecutive_days(self, db_session, make_user):
        user = await make_user()
        for day in range(10):
            await update_streak(db_session, user.id, MORNING + timedelta(days=day))
        await db_session.commit()
        stored = await _reload(db_session, user.id)
        assert (stored.streak_count, stored.longest_streak) == (10, 10)

    async def test_three_day_gap_resets(self, db_session, make_user):
        user = await make_user(streak_count=5, longest_streak=5, last_check_in=MORNING)
        result = await update_streak(db_session, user.id, MORNING + timedelta(days=3))
        assert (result.streak_count, result.longest_streak, result.is_new) == (1, 5, True)

    async def test_local_midnight_counts_as_next_day(self, db_session, make_user):
        # 23:50 and 00:10 Manila time
        late = datetime(2026, 3, 10, 15, 50, tzinfo=timezone.utc)
        user = await make_user(streak_count=3, longest_streak=3, last_check_in=late)
        result = await update_streak(db_session, user.id, late + timedelta(minutes=20))
        assert result.streak_count == 4

    async def test_stores_check_in_time(self, db_session, make_user):
        user = await make_user()
        await update_streak(db_session, user.id, MORNING)
        await db_session.commit()
        stored = await _reload(db_session, user.id)
        assert stored.last_check_in == MORNING

    async def test_unknown_user(self, db_session):
        with pytest.raises(UserNotFound):
            await update_streak(db_session, "missing-user", MORNING)

    async def test_lost_race_reports_stored_values(self, db_session, make_user, monkeypatch):
        """A check-in whose guard no longer matches writes nothing."""
        user = await make_user(streak_count=2, longest_streak=2, last_check_in=MORNING)
        original_execute = db_session.execute
        calls = {"n": 0}

        async def execute(stmt, *args, **kwargs):
            calls["n"] += 1
            if calls["n"] == 2:
                # Another check-in lands between the read and the conditional write.
                await original_execute(
                    update(User)
                    .where(User.id == user.id)
                    .values(streak_count=3, longest_streak=3, last_check_in=MORNING + timedelta(hours=30))
                )
            return await original_execute(stmt, *args, **kwargs)

        monkeypatch.setattr(db_session, "execute", execute)
        result = await update_streak(db_session, user.id, MORNING + timedelta(days=1))

        assert result.is_new is False
        assert (result.streak_count, result.longest_streak) == (3, 3)
