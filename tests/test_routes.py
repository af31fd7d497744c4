from datetime import datetime

from helpers import user_badge, user_stats
from wellness import db
from wellness.models.focus import DailyFocus


# ------------------------------
# auth
# ------------------------------
def test_register_login_me(client):
    res = client.post(
        "/api/auth/register",
        json={"email": "Ana@Example.com", "username": "ana", "password": "secret123"},
    )
    assert res.status_code == 201
    assert res.get_json()["user"]["email"] == "ana@example.com"

    res = client.post("/api/auth/login", json={"identifier": "ana", "password": "secret123"})
    assert res.status_code == 200
    token = res.get_json()["token"]

    res = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert res.status_code == 200
    assert res.get_json()["user"]["username"] == "ana"


def test_register_rejects_duplicates_and_short_passwords(client, make_user):
    make_user("taken")

    res = client.post(
        "/api/auth/register",
        json={"email": "new@example.com", "username": "taken", "password": "secret123"},
    )
    assert res.status_code == 400

    res = client.post(
        "/api/auth/register",
        json={"email": "new@example.com", "username": "fresh", "password": "123"},
    )
    assert res.status_code == 400


def test_login_with_wrong_password(client, make_user):
    make_user("bob")
    res = client.post("/api/auth/login", json={"username": "bob", "password": "nope-nope"})
    assert res.status_code == 401


def test_endpoints_require_a_token(client):
    for path in ("/api/journal", "/api/badges", "/api/friends", "/api/calendar"):
        assert client.get(path).status_code == 401, path


# ------------------------------
# journal
# ------------------------------
def test_journal_post_awards_first_steps(app, client, make_user, auth_headers, clock):
    user_id = make_user()
    headers = auth_headers(user_id)

    res = client.post("/api/journal", json={"title": "Day one", "text": "I feel good"}, headers=headers)

    assert res.status_code == 201
    assert res.get_json()["entry"]["created_at"] == clock.now().isoformat()
    with app.app_context():
        assert user_badge(user_id, "First Steps").earned
        assert user_stats(user_id).total_words == 3


def test_journal_post_survives_badge_failure(app, client, make_user, auth_headers, engine, monkeypatch):
    user_id = make_user()

    def broken(*args):
        raise RuntimeError("badge store offline")

    monkeypatch.setattr(engine, "recompute_journal_badges", broken)

    res = client.post(
        "/api/journal", json={"title": "Still here", "text": "entry"}, headers=auth_headers(user_id)
    )

    assert res.status_code == 201
    res = client.get("/api/journal", headers=auth_headers(user_id))
    assert len(res.get_json()["entries"]) == 1
    with app.app_context():
        assert user_badge(user_id, "First Steps") is None


def test_journal_post_requires_text(client, make_user, auth_headers):
    res = client.post("/api/journal", json={"title": "Empty", "text": "   "}, headers=auth_headers(make_user()))
    assert res.status_code == 400


def test_journal_update_and_delete(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    entry_id = client.post("/api/journal", json={"title": "a", "text": "b"}, headers=headers).get_json()["entry"]["id"]

    res = client.put("/api/journal", json={"id": entry_id, "text": "changed"}, headers=headers)
    assert res.get_json()["entry"]["text"] == "changed"

    assert client.delete(f"/api/journal?id={entry_id}", headers=headers).status_code == 200
    assert client.delete(f"/api/journal?id={entry_id}", headers=headers).status_code == 404


# ------------------------------
# badges
# ------------------------------
def test_badges_listing_merges_progress(client, make_user, auth_headers):
    user_id = make_user()
    headers = auth_headers(user_id)
    client.post("/api/journal", json={"title": "t", "text": "hello there"}, headers=headers)

    body = client.get("/api/badges", headers=headers).get_json()

    by_name = {b["name"]: b for b in body["badges"]}
    assert body["summary"]["total_count"] == len(by_name) == 32
    assert by_name["First Steps"]["earned"]
    assert by_name["First Steps"]["earned_at"] is not None
    assert by_name["Wellness Warrior"]["progress"] == 1
    assert not by_name["Focus Master"]["earned"]
    assert by_name["Focus Master"]["progress"] == 0
    assert body["summary"]["earned_count"] == sum(1 for b in body["badges"] if b["earned"])


def test_recompute_endpoint(client, make_user, auth_headers):
    res = client.post("/api/badges/recompute", headers=auth_headers(make_user()))
    assert res.status_code == 200


# ------------------------------
# friends
# ------------------------------
def test_friend_request_accept_updates_both_users(app, client, make_user, auth_headers):
    alice = make_user("alice")
    friends = [make_user(f"friend{i}") for i in range(3)]

    for friend in friends:
        res = client.post("/api/friends/request", json={"user_id": friend}, headers=auth_headers(alice))
        assert res.status_code == 201
        res = client.post(f"/api/friends/{alice}/accept", headers=auth_headers(friend))
        assert res.status_code == 200

    res = client.get("/api/friends", headers=auth_headers(alice))
    assert {f["id"] for f in res.get_json()["friends"]} == set(friends)

    with app.app_context():
        assert user_badge(alice, "Social Butterfly").earned
        assert user_badge(friends[0], "Social Butterfly").progress == 1


def test_friend_request_edge_cases(client, make_user, auth_headers):
    alice = make_user("alice")
    bob = make_user("bob")
    headers = auth_headers(alice)

    assert client.post("/api/friends/request", json={"user_id": alice}, headers=headers).status_code == 400
    assert client.post("/api/friends/request", json={"username": "nobody"}, headers=headers).status_code == 404
    assert client.post("/api/friends/request", json={"username": "bob"}, headers=headers).status_code == 201
    assert client.post("/api/friends/request", json={"username": "bob"}, headers=headers).status_code == 200
    # only the addressee can accept
    assert client.post(f"/api/friends/{bob}/accept", headers=headers).status_code == 404


def test_removing_a_friend_keeps_earned_badges(app, client, make_user, auth_headers):
    alice = make_user("alice")
    friends = [make_user(f"friend{i}") for i in range(3)]
    for friend in friends:
        client.post("/api/friends/request", json={"user_id": friend}, headers=auth_headers(alice))
        client.post(f"/api/friends/{alice}/accept", headers=auth_headers(friend))

    res = client.delete(f"/api/friends/{friends[0]}", headers=auth_headers(alice))
    assert res.status_code == 200
    client.post("/api/badges/recompute", headers=auth_headers(alice))

    with app.app_context():
        badge = user_badge(alice, "Social Butterfly")
        assert badge.earned
        assert badge.progress == 3


# ------------------------------
# calendar
# ------------------------------
def test_calendar_create_validates_times(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    res = client.post("/api/calendar", json={"title": "x"}, headers=headers)
    assert res.status_code == 400

    res = client.post(
        "/api/calendar",
        json={"title": "x", "start_time": "tomorrow", "end_time": "2025-11-21T11:00:00"},
        headers=headers,
    )
    assert res.status_code == 400

    res = client.post(
        "/api/calendar",
        json={"title": "x", "start_time": "2025-11-21T11:00:00", "end_time": "2025-11-21T10:00:00"},
        headers=headers,
    )
    assert res.status_code == 400


def test_calendar_create_and_filter_by_day(app, client, make_user, auth_headers):
    user_id = make_user()
    headers = auth_headers(user_id)
    for day in (20, 21):
        res = client.post(
            "/api/calendar",
            json={
                "title": f"session {day}",
                "start_time": f"2025-11-{day}T10:00:00",
                "end_time": f"2025-11-{day}T11:00:00",
            },
            headers=headers,
        )
        assert res.status_code == 201

    events = client.get("/api/calendar?date=2025-11-21", headers=headers).get_json()["events"]
    assert [e["title"] for e in events] == ["session 21"]
    assert client.get("/api/calendar?date=soon", headers=headers).status_code == 400

    with app.app_context():
        assert user_badge(user_id, "Time Master").progress == 2


# ------------------------------
# chat
# ------------------------------
def test_chat_thread_and_messages(app, client, make_user, auth_headers):
    user_id = make_user()
    headers = auth_headers(user_id)

    thread = client.post("/api/chat/threads", json={"title": "Coach"}, headers=headers).get_json()["thread"]
    for role in ("user", "assistant"):
        res = client.post(
            f"/api/chat/threads/{thread['id']}/messages",
            json={"role": role, "content": "hello"},
            headers=headers,
        )
        assert res.status_code == 201

    res = client.post(
        f"/api/chat/threads/{thread['id']}/messages",
        json={"role": "system", "content": "hello"},
        headers=headers,
    )
    assert res.status_code == 400

    body = client.get(f"/api/chat/threads/{thread['id']}", headers=headers).get_json()
    assert len(body["thread"]["messages"]) == 2

    with app.app_context():
        assert user_badge(user_id, "Conversation Starter").progress == 1
        assert user_badge(user_id, "Communication Master").progress == 2


def test_chat_threads_are_private(client, make_user, auth_headers):
    owner = make_user()
    thread = client.post("/api/chat/threads", json={}, headers=auth_headers(owner)).get_json()["thread"]

    res = client.get(f"/api/chat/threads/{thread['id']}", headers=auth_headers(make_user()))
    assert res.status_code == 404


# ------------------------------
# daily focus
# ------------------------------
def test_daily_focus_upsert_and_complete(app, client, make_user, auth_headers, clock):
    user_id = make_user()
    headers = auth_headers(user_id)
    with app.app_context():
        focus = DailyFocus(title="Hydrate")
        db.session.add(focus)
        db.session.commit()
        focus_id = focus.id

    res = client.post("/api/daily-focus", json={"focus_id": focus_id}, headers=headers)
    assert res.status_code == 201
    selection = res.get_json()["selection"]
    assert selection["selected_date"] == clock.now().date().isoformat()
    assert not selection["completed"]

    res = client.post("/api/daily-focus", json={"focus_id": focus_id, "completed": True}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()["selection"]["id"] == selection["id"]

    with app.app_context():
        assert user_badge(user_id, "Focus Starter").progress == 1

    body = client.get(f"/api/daily-focus?date={clock.now().date().isoformat()}", headers=headers).get_json()
    assert [o["title"] for o in body["options"]] == ["Hydrate"]
    assert body["selections"][0]["completed"]


def test_daily_focus_unknown_option(client, make_user, auth_headers):
    res = client.post("/api/daily-focus", json={"focus_id": 999}, headers=auth_headers(make_user()))
    assert res.status_code == 404


def test_health(client):
    assert client.get("/api/health").get_json() == {"status": "ok"}


def test_entry_time_comes_from_the_engine_clock(app, client, make_user, auth_headers, clock):
    user_id = make_user()
    clock.set(datetime(2025, 11, 19, 23, 30))

    client.post("/api/journal", json={"title": "late", "text": "night"}, headers=auth_headers(user_id))

    with app.app_context():
        assert user_badge(user_id, "Midnight Owl").earned


# ------------------------------
# payload validation
# ------------------------------
def test_non_string_text_is_rejected(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    res = client.post("/api/journal", json={"title": "t", "text": 123}, headers=headers)
    assert res.status_code == 400

    thread = client.post("/api/chat/threads", json={"title": 7}, headers=headers).get_json()["thread"]
    assert thread["title"] is None
    res = client.post(f"/api/chat/threads/{thread['id']}/messages", json={"content": 5}, headers=headers)
    assert res.status_code == 400

    res = client.post("/api/auth/register", json={"email": 1, "username": ["x"], "password": 123456})
    assert res.status_code == 400


def test_journal_update_rejects_blank_title(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    entry_id = client.post("/api/journal", json={"title": "kept", "text": "b"}, headers=headers).get_json()["entry"]["id"]

    assert client.put("/api/journal", json={"id": entry_id, "title": "   "}, headers=headers).status_code == 400
    assert client.put("/api/journal", json={"id": entry_id, "text": 42}, headers=headers).status_code == 400

    entries = client.get("/api/journal", headers=headers).get_json()["entries"]
    assert entries[0]["title"] == "kept"
    assert entries[0]["text"] == "b"


def test_daily_focus_completed_string_values(app, client, make_user, auth_headers):
    user_id = make_user()
    headers = auth_headers(user_id)
    with app.app_context():
        focus = DailyFocus(title="Stretch")
        db.session.add(focus)
        db.session.commit()
        focus_id = focus.id

    res = client.post("/api/daily-focus", json={"focus_id": focus_id, "completed": "false"}, headers=headers)
    assert res.status_code == 201
    selection_id = res.get_json()["selection"]["id"]
    assert res.get_json()["selection"]["completed"] is False

    res = client.patch("/api/daily-focus", json={"selection_id": selection_id, "completed": "maybe"}, headers=headers)
    assert res.status_code == 400

    res = client.patch("/api/daily-focus", json={"selection_id": selection_id, "completed": "false"}, headers=headers)
    assert res.get_json()["selection"]["completed"] is False
    with app.app_context():
        assert user_badge(user_id, "Focus Starter") is None

    res = client.patch("/api/daily-focus", json={"selection_id": selection_id, "completed": True}, headers=headers)
    assert res.get_json()["selection"]["completed"] is True
