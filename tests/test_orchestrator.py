"""Tests for quest and hunt completion, including the mission cascade and rollback"""
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from hunterlog.core.achievements.models import Achievement
from hunterlog.core.activity.models import ActivityLog
from hunterlog.core.auth.models import User
from hunterlog.core.hunts.cycle import as_utc
from hunterlog.core.hunts.models import DailyHunt
from hunterlog.core.hunts.services import reset_expired_hunts
from hunterlog.core.progression import orchestrator
from hunterlog.core.progression.orchestrator import (
    complete_daily_hunt,
    complete_quest,
    grant_achievement,
)
from hunterlog.database.repository import HunterRepository
from hunterlog.response.response import InvalidStateError, NotFoundError


NOW = datetime(2026, 3, 11, 15, 0, tzinfo=timezone.utc)


def _log_actions(db_session, user):
    rows = (
        db_session.query(ActivityLog)
        .filter(ActivityLog.user_id == user.id)
        .order_by(ActivityLog.created_at.asc())
        .all()
    )
    return [row.action for row in rows]


# ============================================================================
# Quest Completion
# ============================================================================

def test_complete_quest_awards_xp_and_logs(db_session, repo, make_user, make_quest):
    user = make_user()
    quest = make_quest(user, rarity="rare")

    outcome = complete_quest(repo, quest.id, user.id, now=NOW)

    assert outcome["quest"].status == "completed"
    assert outcome["user"].total_xp == 35
    assert outcome["user"].current_streak == 1
    assert outcome["mission"] is None
    assert outcome["mission_completed"] is False
    assert outcome["level_up"] is False

    entry = db_session.query(ActivityLog).filter(ActivityLog.user_id == user.id).one()
    assert entry.action == "quest_completed"
    assert entry.xp_gained == 35
    assert entry.details["questId"] == str(quest.id)
    assert entry.details["rarity"] == "rare"


def test_legendary_quest_reports_level_up(repo, make_user, make_quest):
    user = make_user(current_xp=60, total_xp=60)
    quest = make_quest(user, rarity="legendary")

    outcome = complete_quest(repo, quest.id, user.id, now=NOW)

    assert outcome["level_up"] is True
    assert outcome["user"].level == 3
    assert outcome["user"].current_xp == 10
    assert outcome["user"].rank == "E"


def test_completing_twice_awards_xp_once(db_session, repo, make_user, make_quest):
    """A second completion of the same quest is rejected and changes nothing"""
    user = make_user()
    quest = make_quest(user)

    complete_quest(repo, quest.id, user.id, now=NOW)
    with pytest.raises(InvalidStateError) as exc:
        complete_quest(repo, quest.id, user.id, now=NOW + timedelta(minutes=5))

    assert exc.value.code == "QUEST_ALREADY_COMPLETED"
    db_session.refresh(user)
    assert user.total_xp == 15
    assert _log_actions(db_session, user) == ["quest_completed"]


def test_failed_quest_cannot_be_completed(repo, make_user, make_quest):
    user = make_user()
    quest = make_quest(user, status="failed")

    with pytest.raises(InvalidStateError) as exc:
        complete_quest(repo, quest.id, user.id, now=NOW)

    assert exc.value.code == "QUEST_NOT_ACTIVE"


def test_other_hunters_quest_is_not_found(db_session, repo, make_user, make_quest):
    owner = make_user()
    intruder = make_user()
    quest = make_quest(owner)

    with pytest.raises(NotFoundError) as exc:
        complete_quest(repo, quest.id, intruder.id, now=NOW)

    assert exc.value.code == "QUEST_NOT_FOUND"
    db_session.refresh(quest)
    assert quest.status == "active"


def test_missing_quest_is_not_found(repo, make_user):
    user = make_user()

    with pytest.raises(NotFoundError):
        complete_quest(repo, uuid4(), user.id, now=NOW)


def test_unknown_user_is_not_found(repo):
    with pytest.raises(NotFoundError) as exc:
        complete_quest(repo, uuid4(), uuid4(), now=NOW)

    assert exc.value.code == "USER_NOT_FOUND"


# ============================================================================
# Mission Cascade
# ============================================================================

def test_mission_completes_with_its_last_quest(
    db_session, repo, make_user, make_mission, make_quest
):
    user = make_user()
    mission = make_mission(user, total_xp_reward=200)
    quests = [make_quest(user, mission=mission) for _ in range(3)]

    for quest in quests[:2]:
        outcome = complete_quest(repo, quest.id, user.id, now=NOW, apply_mission_bonus=False)
        assert outcome["mission_completed"] is False
    db_session.refresh(mission)
    assert mission.status == "active"

    outcome = complete_quest(repo, quests[2].id, user.id, now=NOW, apply_mission_bonus=False)

    assert outcome["mission_completed"] is True
    assert outcome["mission"].status == "completed"
    assert outcome["mission"].completed_at is not None

    mission_rows = (
        db_session.query(ActivityLog)
        .filter(ActivityLog.user_id == user.id, ActivityLog.action == "mission_completed")
        .all()
    )
    assert len(mission_rows) == 1
    assert mission_rows[0].xp_gained == 200
    assert mission_rows[0].details["missionId"] == str(mission.id)

    # bonus is logged but not applied
    db_session.refresh(user)
    assert user.total_xp == 45


def test_mission_bonus_applied_when_enabled(db_session, repo, make_user, make_mission, make_quest):
    user = make_user()
    mission = make_mission(user, total_xp_reward=100)
    quest = make_quest(user, mission=mission)

    outcome = complete_quest(repo, quest.id, user.id, now=NOW, apply_mission_bonus=True)

    assert outcome["mission_completed"] is True
    assert outcome["user"].total_xp == 115
    assert outcome["user"].level == 2
    assert outcome["level_up"] is True


def test_completed_mission_is_not_completed_again(
    db_session, repo, make_user, make_mission, make_quest
):
    user = make_user()
    mission = make_mission(user, status="completed", completed_at=NOW - timedelta(days=1))
    quest = make_quest(user, mission=mission)

    outcome = complete_quest(repo, quest.id, user.id, now=NOW)

    assert outcome["mission_completed"] is False
    assert "mission_completed" not in _log_actions(db_session, user)


# ============================================================================
# Atomicity
# ============================================================================

def test_failing_step_rolls_back_everything(
    db_session, repo, make_user, make_mission, make_quest, monkeypatch
):
    """An error after XP is awarded leaves quest, user and log untouched"""
    user = make_user()
    mission = make_mission(user)
    quest = make_quest(user, mission=mission)

    def explode(repo, ctx):
        raise RuntimeError("storage went away")

    monkeypatch.setattr(
        orchestrator,
        "QUEST_COMPLETION_STEPS",
        tuple(orchestrator.QUEST_COMPLETION_STEPS) + (explode,),
    )

    with pytest.raises(RuntimeError):
        complete_quest(repo, quest.id, user.id, now=NOW, apply_mission_bonus=True)

    db_session.expire_all()
    assert quest.status == "active"
    assert quest.completed_at is None
    assert mission.status == "active"
    assert user.total_xp == 0
    assert user.current_streak == 0
    assert user.last_active_date is None
    assert _log_actions(db_session, user) == []


# ============================================================================
# Concurrent Sessions
# ============================================================================

def test_completions_from_two_sessions_both_count(
    session_factory, db_session, repo, make_user, make_quest
):
    """
    A request that loaded the hunter before another request committed
    must build on the committed totals, not on its own earlier copy.
    """
    user = make_user()
    first = make_quest(user, rarity="epic")
    second = make_quest(user, rarity="epic", title="Refactor the parser")

    other = session_factory()
    try:
        # the second request authenticates before the first one commits
        assert other.get(User, user.id).total_xp == 0

        complete_quest(repo, first.id, user.id, now=NOW)
        outcome = complete_quest(HunterRepository(other), second.id, user.id, now=NOW)

        assert outcome["user"].total_xp == 150
        assert outcome["user"].level == 2
        assert outcome["user"].current_xp == 50
    finally:
        other.close()

    db_session.refresh(user)
    assert user.total_xp == 150
    assert _log_actions(db_session, user) == ["quest_completed", "quest_completed"]


def test_hunt_seen_open_by_a_slower_session_is_claimed_once(
    session_factory, db_session, repo, make_user, make_hunt
):
    user = make_user()
    hunt = make_hunt(user, xp_reward=20)

    other = session_factory()
    try:
        assert other.get(DailyHunt, hunt.id).is_completed is False

        complete_daily_hunt(repo, hunt.id, user.id, now=NOW)
        with pytest.raises(InvalidStateError) as exc:
            complete_daily_hunt(HunterRepository(other), hunt.id, user.id, now=NOW)
    finally:
        other.close()

    assert exc.value.code == "HUNT_ALREADY_COMPLETED"
    db_session.refresh(user)
    assert user.total_xp == 20


# ============================================================================
# Daily Hunts
# ============================================================================

def test_complete_daily_hunt(db_session, repo, make_user, make_hunt):
    user = make_user()
    hunt = make_hunt(user, xp_reward=20)

    outcome = complete_daily_hunt(repo, hunt.id, user.id, now=NOW)

    assert outcome["hunt"].is_completed is True
    assert outcome["user"].total_xp == 20
    assert outcome["user"].current_streak == 1
    assert _log_actions(db_session, user) == ["daily_hunt_completed"]


def test_weekly_hunt_uses_weekly_action(db_session, repo, make_user, make_hunt):
    user = make_user()
    hunt = make_hunt(user, is_weekly=True, xp_reward=50)

    complete_daily_hunt(repo, hunt.id, user.id, now=NOW)

    assert _log_actions(db_session, user) == ["weekly_hunt_completed"]


def test_hunt_completed_twice_in_one_cycle_is_rejected(db_session, repo, make_user, make_hunt):
    user = make_user()
    hunt = make_hunt(user)

    complete_daily_hunt(repo, hunt.id, user.id, now=NOW)
    with pytest.raises(InvalidStateError) as exc:
        complete_daily_hunt(repo, hunt.id, user.id, now=NOW + timedelta(hours=1))

    assert exc.value.code == "HUNT_ALREADY_COMPLETED"
    db_session.refresh(user)
    assert user.total_xp == 20


def test_streak_carries_across_quests_and_hunts(repo, make_user, make_quest, make_hunt):
    user = make_user()
    quest = make_quest(user)
    hunt = make_hunt(user, reset_date=NOW + timedelta(days=2))

    complete_quest(repo, quest.id, user.id, now=NOW - timedelta(days=1))
    outcome = complete_daily_hunt(repo, hunt.id, user.id, now=NOW)

    assert outcome["user"].current_streak == 2
    assert outcome["user"].longest_streak == 2


def test_hunt_completed_after_its_reset_date_moves_to_next_cycle(
    db_session, repo, make_user, make_hunt
):
    """
    The reset job runs late; a completion made after the boundary belongs
    to the new cycle and must survive the job's next pass.
    """
    user = make_user()
    hunt = make_hunt(user, xp_reward=20, reset_date=NOW - timedelta(minutes=1))

    outcome = complete_daily_hunt(repo, hunt.id, user.id, now=NOW)

    assert outcome["hunt"].is_completed is True
    assert as_utc(outcome["hunt"].reset_date) == datetime(2026, 3, 12, tzinfo=timezone.utc)

    assert reset_expired_hunts(db_session, now=NOW + timedelta(minutes=4)) == 0

    with pytest.raises(InvalidStateError) as exc:
        complete_daily_hunt(repo, hunt.id, user.id, now=NOW + timedelta(minutes=5))

    assert exc.value.code == "HUNT_ALREADY_COMPLETED"
    db_session.refresh(user)
    assert user.total_xp == 20
    assert _log_actions(db_session, user) == ["daily_hunt_completed"]


def test_hunt_left_completed_by_previous_cycle_can_be_claimed(
    db_session, repo, make_user, make_hunt
):
    user = make_user()
    hunt = make_hunt(
        user,
        is_weekly=True,
        xp_reward=50,
        is_completed=True,
        completed_at=NOW - timedelta(days=3),
        reset_date=NOW - timedelta(days=2),
    )

    outcome = complete_daily_hunt(repo, hunt.id, user.id, now=NOW)

    assert outcome["hunt"].is_completed is True
    assert as_utc(outcome["hunt"].completed_at) == NOW
    assert as_utc(outcome["hunt"].reset_date) == datetime(2026, 3, 16, tzinfo=timezone.utc)
    assert outcome["user"].total_xp == 50


# ============================================================================
# Achievements
# ============================================================================

def test_grant_achievement_once(db_session, repo, make_user):
    user = make_user()
    achievement = Achievement(name="First Blood", rarity="common")
    db_session.add(achievement)
    db_session.commit()

    record = grant_achievement(repo, user.id, achievement.id)
    assert record.achievement_id == achievement.id
    assert _log_actions(db_session, user) == ["achievement_unlocked"]

    with pytest.raises(InvalidStateError) as exc:
        grant_achievement(repo, user.id, achievement.id)
    assert exc.value.code == "ACHIEVEMENT_ALREADY_UNLOCKED"
