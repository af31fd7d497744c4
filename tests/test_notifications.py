def _create(client, headers, **overrides):
    body = {"type": "badge_earned", "title": "New badge", "message": "You earned First Steps"}
    body.update(overrides)
    return client.post("/api/notifications", json=body, headers=headers)


def test_inbox_lifecycle(client, make_user, auth_headers, clock):
    headers = auth_headers(make_user())

    res = _create(client, headers, metadata={"badge": "First Steps"})
    assert res.status_code == 201
    first = res.get_json()["notification"]
    assert first["read"] is False
    assert first["metadata"] == {"badge": "First Steps"}
    assert first["created_at"] == clock.now().isoformat()

    clock.advance(minutes=5)
    second = _create(client, headers, type="friend_request", title="Alice", message="wants to be friends").get_json()[
        "notification"
    ]

    body = client.get("/api/notifications", headers=headers).get_json()
    assert [n["id"] for n in body["notifications"]] == [second["id"], first["id"]]
    assert body["unread_count"] == 2

    res = client.patch("/api/notifications", json={"id": first["id"], "read": True}, headers=headers)
    assert res.status_code == 200
    assert res.get_json()["notification"]["read"] is True
    assert client.get("/api/notifications", headers=headers).get_json()["unread_count"] == 1

    assert client.delete(f"/api/notifications?id={first['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/notifications?id={first['id']}", headers=headers).status_code == 404
    assert len(client.get("/api/notifications", headers=headers).get_json()["notifications"]) == 1


def test_mark_all_read(client, make_user, auth_headers):
    headers = auth_headers(make_user())
    for _ in range(3):
        _create(client, headers)

    res = client.put("/api/notifications", headers=headers)

    assert res.get_json()["updated"] == 3
    assert client.get("/api/notifications", headers=headers).get_json()["unread_count"] == 0


def test_create_validation(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    assert _create(client, headers, type="weather").status_code == 400
    assert _create(client, headers, title="").status_code == 400
    assert _create(client, headers, message=12).status_code == 400
    assert _create(client, headers, metadata=["not", "a", "dict"]).status_code == 400
    assert client.patch("/api/notifications", json={"read": True}, headers=headers).status_code == 400


def test_notifications_are_private(client, make_user, auth_headers):
    owner = auth_headers(make_user())
    other = auth_headers(make_user())
    notification_id = _create(client, owner).get_json()["notification"]["id"]

    assert client.get("/api/notifications", headers=other).get_json()["notifications"] == []
    res = client.patch("/api/notifications", json={"id": notification_id, "read": True}, headers=other)
    assert res.status_code == 404
    assert client.delete(f"/api/notifications?id={notification_id}", headers=other).status_code == 404


def test_preferences_default_on_and_upsert(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    prefs = client.get("/api/notifications/preferences", headers=headers).get_json()["preferences"]
    assert all(p["enabled"] for p in prefs)
    assert {p["type"] for p in prefs} == {
        "friend_request",
        "friend_added",
        "journal_entry",
        "badge_earned",
        "calendar_event",
    }

    res = client.post(
        "/api/notifications/preferences",
        json={"preferences": [{"type": "badge_earned", "enabled": False}, {"type": "journal_entry", "enabled": False}]},
        headers=headers,
    )
    assert res.status_code == 200

    # upsert, not a second row
    res = client.patch("/api/notifications/preferences", json={"type": "badge_earned", "enabled": True}, headers=headers)
    assert res.status_code == 200

    prefs = {
        p["type"]: p["enabled"]
        for p in client.get("/api/notifications/preferences", headers=headers).get_json()["preferences"]
    }
    assert prefs["badge_earned"] is True
    assert prefs["journal_entry"] is False
    assert prefs["friend_added"] is True


def test_preferences_validation(client, make_user, auth_headers):
    headers = auth_headers(make_user())

    assert client.post("/api/notifications/preferences", json={}, headers=headers).status_code == 400
    res = client.post(
        "/api/notifications/preferences",
        json={"preferences": [{"type": "badge_earned", "enabled": "no"}]},
        headers=headers,
    )
    assert res.status_code == 400
    res = client.patch("/api/notifications/preferences", json={"type": "unknown", "enabled": True}, headers=headers)
    assert res.status_code == 400


def test_inbox_requires_a_token(client):
    assert client.get("/api/notifications").status_code == 401
    assert client.get("/api/notifications/preferences").status_code == 401
