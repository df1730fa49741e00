from __future__ import annotations


def _mark(client, headers, day, name, completed=True):
    return client.post(
        "/api/prayers",
        json={"date": day, "prayerName": name, "completed": completed},
        headers=headers,
    )


def test_get_requires_date(client, auth_headers) -> None:
    assert client.get("/api/prayers", headers=auth_headers).status_code == 400


def test_mark_and_read_prayers(client, auth_headers) -> None:
    resp = _mark(client, auth_headers, "2025-02-10", "Fajr")
    assert resp.status_code == 200
    prayer = resp.get_json()["prayer"]
    assert prayer["prayer_name"] == "fajr"
    assert prayer["completed"] is True
    assert prayer["completed_at"] is not None

    body = client.get("/api/prayers?date=2025-02-10", headers=auth_headers).get_json()
    assert body["date"] == "2025-02-10"
    assert list(body["prayers"]) == ["fajr"]
    assert body["prayers"]["fajr"]["completed"] is True


def test_unmarking_clears_completed_at(client, auth_headers) -> None:
    _mark(client, auth_headers, "2025-02-10", "maghrib")
    resp = _mark(client, auth_headers, "2025-02-10", "maghrib", completed=False)

    prayer = resp.get_json()["prayer"]
    assert prayer["completed"] is False
    assert prayer["completed_at"] is None

    body = client.get("/api/prayers?date=2025-02-10", headers=auth_headers).get_json()
    assert len(body["prayers"]) == 1


def test_invalid_prayer_name(client, auth_headers) -> None:
    resp = _mark(client, auth_headers, "2025-02-10", "tahajjud")
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid prayer name"

    assert client.post("/api/prayers", json={"prayerName": "fajr"}, headers=auth_headers).status_code == 400


def test_history_groups_by_date(client, auth_headers) -> None:
    _mark(client, auth_headers, "2025-02-10", "fajr")
    _mark(client, auth_headers, "2025-02-10", "isha", completed=False)
    _mark(client, auth_headers, "2025-02-11", "dhuhr")
    _mark(client, auth_headers, "2025-02-11", "asr")

    history = client.get("/api/prayers/history", headers=auth_headers).get_json()["history"]
    assert [h["date"] for h in history] == ["2025-02-11", "2025-02-10"]
    assert [h["completed_count"] for h in history] == [2, 1]
    assert len(history[1]["prayers"]) == 2


def test_completed_must_be_boolean(client, auth_headers) -> None:
    for bad in ("false", "true", 1, 0, None):
        resp = client.post(
            "/api/prayers",
            json={"date": "2025-03-01", "prayerName": "fajr", "completed": bad},
            headers=auth_headers,
        )
        assert resp.status_code == 400, bad

    body = client.get("/api/prayers?date=2025-03-01", headers=auth_headers).get_json()
    assert body["prayers"] == {}


def test_completed_defaults_to_false(client, auth_headers) -> None:
    resp = client.post(
        "/api/prayers",
        json={"date": "2025-03-01", "prayerName": "asr"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.get_json()["prayer"]["completed"] is False
