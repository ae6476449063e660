from mindcare.models import Therapy


GENERAL = {
    "title": "CBT Foundations",
    "description": "Reframe unhelpful thoughts in eight short sessions.",
    "duration": "20-30 min",
    "sessions": 10,
    "difficulty": "Intermediate",
    "category": "CBT",
    "icon": "Brain",
    "color": "from-purple-500 to-pink-500",
    "tags": ["anxiety"],
    "status": "Inactive",
}


async def test_load_therapy_settings(client, admin_headers, therapy):
    resp = await client.get("/admin/therapies/cbt", headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["therapy"]["id"] == "cbt"
    assert body["general"]["title"] == "Cognitive Behavioral Therapy"
    assert body["general"]["tags"] == ["anxiety", "depression"]
    assert "id" not in body["general"]


async def test_list_therapies(client, admin_headers, therapy):
    resp = await client.get("/admin/therapies", headers=admin_headers)
    assert resp.status_code == 200
    assert [t["id"] for t in resp.json()] == ["cbt"]


async def test_save_general_settings(client, admin_headers, therapy, session_maker):
    resp = await client.put("/admin/therapies/cbt/general", json=GENERAL, headers=admin_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["message"] == "General settings saved!"
    assert body["back_to"] == "/admin/therapy-management"
    assert body["therapy"]["title"] == "CBT Foundations"
    assert body["therapy"]["status"] == "Inactive"

    async with session_maker() as fresh:
        stored = await fresh.get(Therapy, "cbt")
        assert stored.sessions == 10
        assert stored.difficulty == "Intermediate"
        assert stored.tags == ["anxiety"]


async def test_save_unknown_therapy_has_no_success_message(client, admin_headers, therapy):
    resp = await client.put("/admin/therapies/nope/general", json=GENERAL, headers=admin_headers)
    assert resp.status_code == 404
    assert "message" not in resp.json()


async def test_load_unknown_therapy(client, admin_headers):
    resp = await client.get("/admin/therapies/missing", headers=admin_headers)
    assert resp.status_code == 404


async def test_save_rejects_bad_enum(client, admin_headers, therapy):
    resp = await client.put(
        "/admin/therapies/cbt/general",
        json={**GENERAL, "difficulty": "Expert"},
        headers=admin_headers,
    )
    assert resp.status_code == 422


async def test_editor_requires_admin(client, user_headers, therapy):
    resp = await client.get("/admin/therapies/cbt", headers=user_headers)
    assert resp.status_code == 403

    resp = await client.get("/admin/therapies/cbt")
    assert resp.status_code == 401


async def test_booking_summary(client, admin_headers):
    payload = {
        "month": 0,
        "year": 2025,
        "bookings": [
            {"date": "2025-01-10", "status": "Completed", "amount": "$10"},
            {"date": "2025-01-11", "status": "pending", "amount": "$90"},
            {"createdAt": "2025-02-01", "status": "completed", "amount": "$500"},
            {"amount": "$7", "status": "completed"},
        ],
    }
    resp = await client.post("/admin/bookings/summary", json=payload, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {
        "month": 0,
        "year": 2025,
        "bookings_count": 2,
        "completed_count": 1,
        "revenue": 10.0,
    }


async def test_booking_summary_validates_month(client, admin_headers):
    resp = await client.post(
        "/admin/bookings/summary",
        json={"month": 12, "year": 2025, "bookings": []},
        headers=admin_headers,
    )
    assert resp.status_code == 422
