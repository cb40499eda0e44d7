"""End-to-end tests through the HTTP API"""
from uuid import uuid4

from hunterlog.core.auth.models import User


API = "/api/v1"


def error_code(response):
    return response.json()["error"]["code"]


# ============================================================================
# Auth
# ============================================================================

def test_register_returns_fresh_hunter(auth):
    user, _ = auth

    assert user["level"] == 1
    assert user["rank"] == "E"
    assert user["total_xp"] == 0
    assert user["current_streak"] == 0
    assert user["hunter_class"] == "Fighter"


def test_register_rejects_weak_password(client):
    response = client.post(
        f"{API}/auth/register",
        json={"email": "weak@hunterlog.dev", "password": "short"},
    )

    assert response.status_code == 400
    assert error_code(response) == "AUTH_PASSWORD_TOO_SHORT"


def test_duplicate_email_is_rejected(client, register):
    register(email="dup@hunterlog.dev")
    response = client.post(
        f"{API}/auth/register",
        json={"email": "dup@hunterlog.dev", "password": "hunter2026"},
    )

    assert response.status_code == 400
    assert error_code(response) == "AUTH_EMAIL_ALREADY_EXISTS"


def test_login_with_wrong_password(client, register):
    register(email="login@hunterlog.dev")
    response = client.post(
        f"{API}/auth/login",
        json={"email": "login@hunterlog.dev", "password": "wrong-pass-1"},
    )

    assert response.status_code == 401
    assert error_code(response) == "AUTH_INVALID_CREDENTIALS"


def test_refresh_token_is_single_use(client, register):
    register(email="refresh@hunterlog.dev")
    tokens = client.post(
        f"{API}/auth/login",
        json={"email": "refresh@hunterlog.dev", "password": "hunter2026"},
    ).json()["result"]

    first = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    replay = client.post(f"{API}/auth/refresh", json={"refresh_token": tokens["refresh_token"]})

    assert first.status_code == 200
    assert replay.status_code == 401
    assert error_code(replay) == "AUTH_REFRESH_JTI_MISMATCH"


def test_logout_ends_session(client, auth):
    _, headers = auth

    assert client.post(f"{API}/auth/logout", headers=headers).status_code == 200
    response = client.get(f"{API}/me", headers=headers)

    assert response.status_code == 401
    assert error_code(response) == "AUTH_SESSION_REVOKED"


def test_requests_without_token_are_unauthenticated(client):
    for method, path in [
        ("get", "/quests"),
        ("post", f"/quests/{uuid4()}/complete"),
        ("post", f"/daily-hunts/{uuid4()}/complete"),
        ("post", f"/skills/{uuid4()}/unlock"),
    ]:
        response = getattr(client, method)(f"{API}{path}")
        assert response.status_code == 401, path
        assert error_code(response) == "AUTH_NOT_AUTHENTICATED"


def test_profile_update_validates_time_zone(client, auth):
    _, headers = auth
    response = client.patch(
        f"{API}/me/profile",
        headers=headers,
        json={"hunter_name": "Jinwoo", "hunter_class": "Assassin", "time_zone": "Mars/Olympus"},
    )

    assert response.status_code == 400
    assert error_code(response) == "AUTH_INVALID_TIME_ZONE"

    response = client.patch(
        f"{API}/me/profile",
        headers=headers,
        json={"hunter_name": "Jinwoo", "hunter_class": "Assassin", "time_zone": "Asia/Seoul"},
    )
    user = response.json()["result"]["user"]
    assert user["hunter_class"] == "Assassin"
    assert user["time_zone"] == "Asia/Seoul"


# ============================================================================
# Quests and Missions
# ============================================================================

def test_quest_completion_flow(client, auth):
    _, headers = auth
    created = client.post(
        f"{API}/quests",
        headers=headers,
        json={"title": "Ship the release", "rarity": "rare"},
    )
    assert created.status_code == 201
    quest = created.json()["result"]
    assert quest["xp_reward"] == 35

    response = client.post(f"{API}/quests/{quest['id']}/complete", headers=headers)

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["quest"]["status"] == "completed"
    assert result["user"]["total_xp"] == 35
    assert result["user"]["current_streak"] == 1
    assert result["mission_completed"] is False

    again = client.post(f"{API}/quests/{quest['id']}/complete", headers=headers)
    assert again.status_code == 400
    assert error_code(again) == "QUEST_ALREADY_COMPLETED"

    profile = client.get(f"{API}/progression/profile", headers=headers).json()["result"]
    assert profile["total_xp"] == 35
    assert profile["xp_to_next_level"] == 65
    assert profile["next_rank"] == "D"


def test_completing_unknown_quest_is_404(client, auth):
    _, headers = auth
    response = client.post(f"{API}/quests/{uuid4()}/complete", headers=headers)

    assert response.status_code == 404
    assert error_code(response) == "QUEST_NOT_FOUND"


def test_other_hunters_quest_is_hidden(client, register):
    _, owner_headers = register()
    _, intruder_headers = register()
    quest = client.post(
        f"{API}/quests",
        headers=owner_headers,
        json={"title": "Private errand"},
    ).json()["result"]

    assert client.get(f"{API}/quests/{quest['id']}", headers=intruder_headers).status_code == 404
    response = client.post(f"{API}/quests/{quest['id']}/complete", headers=intruder_headers)
    assert response.status_code == 404


def test_failed_quest_cannot_be_completed(client, auth):
    _, headers = auth
    quest = client.post(f"{API}/quests", headers=headers, json={"title": "Gym"}).json()["result"]

    patched = client.patch(f"{API}/quests/{quest['id']}", headers=headers, json={"status": "failed"})
    assert patched.json()["result"]["status"] == "failed"

    response = client.post(f"{API}/quests/{quest['id']}/complete", headers=headers)
    assert response.status_code == 400
    assert error_code(response) == "QUEST_NOT_ACTIVE"


def test_mission_completes_through_api(client, auth):
    _, headers = auth
    mission = client.post(
        f"{API}/missions",
        headers=headers,
        json={"title": "Launch week", "difficulty": 4, "total_xp_reward": 300},
    ).json()["result"]
    quest_ids = [
        client.post(
            f"{API}/quests",
            headers=headers,
            json={"title": f"Step {n}", "mission_id": mission["id"]},
        ).json()["result"]["id"]
        for n in range(2)
    ]

    first = client.post(f"{API}/quests/{quest_ids[0]}/complete", headers=headers).json()["result"]
    second = client.post(f"{API}/quests/{quest_ids[1]}/complete", headers=headers).json()["result"]

    assert first["mission_completed"] is False
    assert second["mission_completed"] is True
    assert second["mission"]["status"] == "completed"

    detail = client.get(f"{API}/missions/{mission['id']}", headers=headers).json()["result"]
    assert detail["mission"]["status"] == "completed"
    assert {q["status"] for q in detail["quests"]} == {"completed"}

    late = client.post(
        f"{API}/quests",
        headers=headers,
        json={"title": "Too late", "mission_id": mission["id"]},
    )
    assert late.status_code == 400
    assert error_code(late) == "MISSION_ALREADY_COMPLETED"


def test_mission_difficulty_is_validated(client, auth):
    _, headers = auth
    response = client.post(
        f"{API}/missions",
        headers=headers,
        json={"title": "Impossible", "difficulty": 6},
    )

    assert response.status_code == 422


def test_quest_patch_rejects_null_for_required_fields(client, auth):
    """Sending null is not the same as leaving a field out"""
    _, headers = auth
    quest = client.post(
        f"{API}/quests",
        headers=headers,
        json={"title": "Renew passport", "description": "bring photos"},
    ).json()["result"]

    for body in ({"title": None}, {"is_boss_objective": None}, {"status": None}):
        response = client.patch(f"{API}/quests/{quest['id']}", headers=headers, json=body)
        assert response.status_code == 422, body

    cleared = client.patch(
        f"{API}/quests/{quest['id']}",
        headers=headers,
        json={"description": None},
    )
    assert cleared.status_code == 200
    result = cleared.json()["result"]
    assert result["title"] == "Renew passport"
    assert result["is_boss_objective"] is False
    assert result["description"] is None


def test_mission_patch_rejects_null_for_required_fields(client, auth):
    _, headers = auth
    mission = client.post(
        f"{API}/missions",
        headers=headers,
        json={"title": "Move house", "difficulty": 3, "total_xp_reward": 120},
    ).json()["result"]

    for body in ({"title": None}, {"difficulty": None}, {"total_xp_reward": None}):
        response = client.patch(f"{API}/missions/{mission['id']}", headers=headers, json=body)
        assert response.status_code == 422, body

    detail = client.get(f"{API}/missions/{mission['id']}", headers=headers).json()["result"]
    assert detail["mission"]["title"] == "Move house"
    assert detail["mission"]["difficulty"] == 3
    assert detail["mission"]["total_xp_reward"] == 120


# ============================================================================
# Daily Hunts
# ============================================================================

def test_hunt_completion_flow(client, auth):
    _, headers = auth
    hunt = client.post(
        f"{API}/daily-hunts",
        headers=headers,
        json={"title": "Meditate", "xp_reward": 25},
    ).json()["result"]

    response = client.post(f"{API}/daily-hunts/{hunt['id']}/complete", headers=headers)

    assert response.status_code == 200
    result = response.json()["result"]
    assert result["hunt"]["is_completed"] is True
    assert result["user"]["total_xp"] == 25

    again = client.post(f"{API}/daily-hunts/{hunt['id']}/complete", headers=headers)
    assert again.status_code == 400
    assert error_code(again) == "HUNT_ALREADY_COMPLETED"

    log = client.get(f"{API}/activity-log", headers=headers).json()["result"]
    assert log[0]["action"] == "daily_hunt_completed"
    assert log[0]["xp_gained"] == 25


def test_completing_unknown_hunt_is_404(client, auth):
    _, headers = auth
    response = client.post(f"{API}/daily-hunts/{uuid4()}/complete", headers=headers)

    assert response.status_code == 404
    assert error_code(response) == "HUNT_NOT_FOUND"


# ============================================================================
# Skills and Admin
# ============================================================================

def test_skill_unlock_enforces_level(client, auth, make_skill):
    _, headers = auth
    locked = make_skill(name="Ruler's Authority", required_level=10)
    open_skill = make_skill(name="Sprint", required_level=1)

    response = client.post(f"{API}/skills/{locked.id}/unlock", headers=headers)
    assert response.status_code == 400
    assert error_code(response) == "SKILL_LEVEL_TOO_LOW"

    response = client.post(f"{API}/skills/{open_skill.id}/unlock", headers=headers)
    assert response.status_code == 201
    assert response.json()["result"]["user_skill"]["skill_id"] == str(open_skill.id)

    tree = client.get(f"{API}/skills", headers=headers).json()["result"]
    by_name = {item["name"]: item for item in tree}
    assert by_name["Sprint"]["is_unlocked"] is True
    assert by_name["Ruler's Authority"]["can_unlock"] is False


def test_unlocking_unknown_skill_is_404(client, auth):
    _, headers = auth
    response = client.post(f"{API}/skills/{uuid4()}/unlock", headers=headers)

    assert response.status_code == 404


def test_admin_routes_require_superuser(client, auth, db_session):
    user, headers = auth

    response = client.get(f"{API}/admin/stats", headers=headers)
    assert response.status_code == 403
    assert error_code(response) == "AUTH_FORBIDDEN"

    db_session.query(User).filter(User.email == user["email"]).update({"is_superuser": True})
    db_session.commit()

    achievement = client.post(
        f"{API}/admin/achievements",
        headers=headers,
        json={"name": "Arise", "rarity": "legendary"},
    )
    assert achievement.status_code == 201

    granted = client.post(
        f"{API}/admin/users/{user['id']}/achievements/{achievement.json()['result']['id']}",
        headers=headers,
    )
    assert granted.status_code == 201

    earned = client.get(f"{API}/user-achievements", headers=headers).json()["result"]
    assert len(earned) == 1
    stats = client.get(f"{API}/admin/stats", headers=headers).json()["result"]
    assert stats["total_users"] == 1
