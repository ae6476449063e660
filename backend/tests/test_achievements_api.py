async def test_register_login_me(client):
    resp = await client.post("/auth/register", json={
        "email": "new@example.com", "password": "longenough", "name": "New"
    })
    assert resp.status_code == 201

    dup = await client.post("/auth/register", json={
        "email": "new@example.com", "password": "longenough", "name": "New"
    })
    assert dup.status_code == 400

    login = await client.post("/auth/login", data={"username": "new@example.com", "password": "longenough"})
    assert login.status_code == 200
    token = login.json()["access_token"]

    me = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["role"] == "user"

    bad = await client.post("/auth/login", data={"username": "new@example.com", "password": "wrong-one"})
    assert bad.status_code == 401


async def test_catalog_is_public_and_sorted(client, catalog):
    resp = await client.get("/achievements")
    assert resp.status_code == 200
    requirements = [a["requirement"] for a in resp.json()]
    assert requirements == sorted(requirements)


async def test_activity_logging_drives_refresh(client, user_headers, catalog):
    for _ in range(5):
        resp = await client.post("/activity/mood_entries", json={"mood": 3}, headers=user_headers)
        assert resp.status_code == 201
    for rating in (8, 9, 2):
        await client.post("/activity/stress_logs", json={"effectiveness": rating}, headers=user_headers)
    resp = await client.put("/activity/streak", json={"current_streak": 7}, headers=user_headers)
    assert resp.json() == {"currentStreak": 7}

    resp = await client.post("/achievements/my/refresh", headers=user_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["metrics"]["mood_track_days"] == 5
    assert body["metrics"]["good_stress_days"] == 2
    assert body["metrics"]["current_streak"] == 7

    earned = {r["achievement"]["title"]: r["earned"] for r in body["achievements"]}
    assert earned["Mood Tracker"] is True
    assert earned["Stress Buster"] is True
    assert earned["Week Warrior"] is True
    assert earned["Program Graduate"] is False

    mine = await client.get("/achievements/my", headers=user_headers)
    assert len(mine.json()) == len(catalog)


async def test_list_own_entries(client, user_headers):
    await client.post("/activity/gratitude_entries", json={"text": "sunny walk"}, headers=user_headers)
    resp = await client.get("/activity/gratitude_entries", headers=user_headers)
    assert resp.status_code == 200
    assert [e["text"] for e in resp.json()] == ["sunny walk"]


async def test_unknown_activity_log(client, user_headers):
    resp = await client.post("/activity/dreams", json={}, headers=user_headers)
    assert resp.status_code == 404


async def test_achievement_routes_require_login(client):
    assert (await client.get("/achievements/my")).status_code == 401
    assert (await client.post("/achievements/my/refresh")).status_code == 401


async def test_seed_is_admin_only(client, user_headers, admin_headers):
    assert (await client.post("/achievements/seed", headers=user_headers)).status_code == 403

    resp = await client.post("/achievements/seed", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["inserted"] > 0

    again = await client.post("/achievements/seed", headers=admin_headers)
    assert again.json()["inserted"] == 0


async def test_health(client):
    assert (await client.get("/health")).json() == {"ok": True}
    assert (await client.get("/db-health")).json() == {"db": "ok", "result": 1}
