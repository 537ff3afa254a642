from __future__ import annotations

from tests.fakes import auth


def test_plan_record_and_read_progress(client, signup, make_study):
    _, token = signup("owner@study.up")
    sid = make_study(token)["id"]

    planned = client.post(
        f"/api/studies/{sid}/progress/sessions",
        json={"date": "2024-03-04", "topic": "그래프", "targetProgress": 50},
        headers=auth(token),
    )
    assert planned.status_code == 201
    progress_id = planned.get_json()["id"]

    recorded = client.post(f"/api/studies/{sid}/progress/record", json={"progress": 40}, headers=auth(token))
    assert recorded.status_code == 200
    assert recorded.get_json()["completed"] is True

    none_left = client.post(f"/api/studies/{sid}/progress/record", json={"progress": 40}, headers=auth(token))
    assert none_left.status_code == 409

    edited = client.patch(f"/api/progress/{progress_id}", json={"progress": 55, "notes": "보충"}, headers=auth(token))
    assert edited.get_json()["actualProgress"] == 55

    overview = client.get(f"/api/studies/{sid}/progress", headers=auth(token)).get_json()
    assert overview["summary"]["totalProgress"] == 55
    assert overview["summary"]["onTargetSessions"] == 1
    assert [s["topic"] for s in overview["sessions"]] == ["그래프"]

    assert client.get(f"/api/studies/{sid}").get_json()["progress"] == 55


def test_progress_out_of_range_is_400(client, signup, make_study):
    _, token = signup("owner@study.up")
    sid = make_study(token)["id"]
    client.post(f"/api/studies/{sid}/progress/sessions", json={"topic": "t", "targetProgress": 10}, headers=auth(token))

    res = client.post(f"/api/studies/{sid}/progress/record", json={"progress": 120}, headers=auth(token))
    assert res.status_code == 400
